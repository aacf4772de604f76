# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Tests for the TCP transport's command/response correlation, using in-memory streams."""

import asyncio

import pytest

from aquos_tv import (
    AquosTvClientConfig,
    AquosTvCommandError,
    AquosTvConnectionError,
    AquosTvConnectionClosedError,
    AquosTvLoginRejectedError,
    AquosTvMissingCredentialError,
    TcpAquosTvClientTransport,
    VirtualTimer,
)
from aquos_tv.protocol import AquosCommand

from helpers import RecordingWriter, until


class TransportHarness:
    def __init__(self, username=None, password=None):
        self.timer = VirtualTimer()
        self.reader = asyncio.StreamReader()
        self.writer = RecordingWriter()
        config = AquosTvClientConfig("192.168.1.20", username, password)
        self.transport = TcpAquosTvClientTransport(config=config, timer=self.timer)

    def start(self) -> "asyncio.Task[None]":
        return asyncio.create_task(self.transport.start(self.reader, self.writer))

    async def login_timeout(self) -> None:
        await until(lambda: self.timer.num_waiters == 1)
        self.timer.advance(self.transport.login_timeout_secs)

    async def start_without_login(self) -> None:
        starter = self.start()
        await self.login_timeout()
        await starter

    async def transact(self, command: AquosCommand, response: bytes) -> str:
        """Runs one transaction, answering once the command has been written."""
        n_written = len(self.writer.data)
        transaction = asyncio.create_task(self.transport.transact(command))
        await until(lambda: len(self.writer.data) > n_written)
        self.reader.feed_data(response)
        return await transaction


def test_command_and_response():
    async def _exercise():
        harness = TransportHarness()
        await harness.start_without_login()
        assert harness.writer.data == b""
        assert await harness.transact(AquosCommand.create("VOLM", "?"), b"30\r") == "30"
        assert harness.writer.writes == [b"VOLM?   \r"]
        await harness.transport.aclose()

    asyncio.run(_exercise())


def test_login_then_command():
    async def _exercise():
        harness = TransportHarness(username="user1", password="pass1")
        starter = harness.start()
        harness.reader.feed_data(b"Login:")
        await until(lambda: harness.writer.data == b"user1\r")
        harness.reader.feed_data(b"Password:")
        await until(lambda: harness.writer.data == b"user1\rpass1\r")
        await harness.login_timeout()
        await starter
        assert await harness.transact(AquosCommand.create("TVNM", "1"), b"AQUOS\r") == "AQUOS"
        await harness.transport.aclose()

    asyncio.run(_exercise())


def test_login_rejected_closes_transport():
    async def _exercise():
        harness = TransportHarness(username="user1", password="wrong")
        starter = harness.start()
        harness.reader.feed_data(b"Login:")
        await until(lambda: harness.writer.data == b"user1\r")
        harness.reader.feed_data(b"Password:")
        await until(lambda: harness.writer.data == b"user1\rwrong\r")
        harness.reader.feed_data(b"Login incorrect\r\n")
        with pytest.raises(AquosTvLoginRejectedError):
            await starter
        assert harness.writer.closed
        assert harness.transport.is_shutting_down()
        # closing again is harmless
        await harness.transport.aclose()

    asyncio.run(_exercise())


def test_missing_credential_writes_nothing():
    async def _exercise():
        harness = TransportHarness()
        starter = harness.start()
        harness.reader.feed_data(b"Login:")
        with pytest.raises(AquosTvMissingCredentialError):
            await starter
        assert harness.writer.data == b""
        assert harness.writer.closed

    asyncio.run(_exercise())


def test_err_response_keeps_session_open():
    async def _exercise():
        harness = TransportHarness()
        await harness.start_without_login()
        command = AquosCommand.create("VOLM", 99)
        with pytest.raises(AquosTvCommandError) as exc_info:
            await harness.transact(command, b"ERR\r")
        assert exc_info.value.command == command
        assert not harness.transport.is_shutting_down()
        assert await harness.transact(AquosCommand.create("VOLM", 20), b"OK\r") == "OK"
        await harness.transport.aclose()

    asyncio.run(_exercise())


def test_responses_are_matched_in_order():
    async def _exercise():
        harness = TransportHarness()
        await harness.start_without_login()
        first = asyncio.create_task(harness.transport.transact(AquosCommand.create("TVNM", "1")))
        second = asyncio.create_task(harness.transport.transact(AquosCommand.create("MNRD", "1")))
        await until(lambda: len(harness.writer.writes) == 1)
        # the second command waits for the first response before it is written
        for _ in range(10):
            await asyncio.sleep(0)
        assert harness.writer.writes == [b"TVNM1   \r"]
        harness.reader.feed_data(b"AQUOS\r")
        await until(lambda: len(harness.writer.writes) == 2)
        harness.reader.feed_data(b"LC-60UD20\r")
        assert await first == "AQUOS"
        assert await second == "LC-60UD20"
        await harness.transport.aclose()

    asyncio.run(_exercise())


def test_connection_closed_by_tv():
    async def _exercise():
        harness = TransportHarness()
        await harness.start_without_login()
        transaction = asyncio.create_task(harness.transport.transact(AquosCommand.create("POWR", "1")))
        await until(lambda: len(harness.writer.writes) == 1)
        harness.reader.feed_eof()
        with pytest.raises(AquosTvConnectionClosedError):
            await transaction
        assert harness.transport.is_shutting_down()
        with pytest.raises(AquosTvConnectionClosedError):
            await harness.transport.transact(AquosCommand.create("POWR", "0"))
        await harness.transport.aclose()

    asyncio.run(_exercise())


def test_write_failure_shuts_down():
    async def _exercise():
        harness = TransportHarness()
        await harness.start_without_login()
        harness.writer.fail_writes = True
        with pytest.raises(AquosTvConnectionError) as exc_info:
            await harness.transport.transact(AquosCommand.create("POWR", "1"))
        assert isinstance(exc_info.value.__cause__, ConnectionResetError)
        assert harness.transport.is_shutting_down()
        await harness.transport.aclose()

    asyncio.run(_exercise())


def test_close_twice_is_a_no_op():
    async def _exercise():
        harness = TransportHarness()
        await harness.start_without_login()
        await harness.transport.aclose()
        assert harness.writer.closed
        await harness.transport.aclose()
        with pytest.raises(AquosTvConnectionClosedError):
            await harness.transport.transact(AquosCommand.create("POWR", "1"))

    asyncio.run(_exercise())


def test_context_manager_closes_transport():
    async def _exercise():
        harness = TransportHarness()
        await harness.start_without_login()
        async with harness.transport as transport:
            assert await harness.transact(AquosCommand.create("MUTE", "0"), b"OK\r") == "OK"
        assert transport.is_shutting_down()
        assert harness.writer.closed

    asyncio.run(_exercise())


def test_config_is_copied():
    async def _exercise():
        config = AquosTvClientConfig("192.168.1.20", login_timeout_secs=0.5)
        transport = TcpAquosTvClientTransport(config=config)
        config.login_timeout_secs = 5.0
        assert transport.login_timeout_secs == 0.5
        assert transport.host == "192.168.1.20"
        assert transport.port == 10002

    asyncio.run(_exercise())
