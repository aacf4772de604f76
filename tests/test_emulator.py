# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""End-to-end tests against the bundled TV emulator on the loopback interface."""

import asyncio

import pytest

from aquos_tv import (
    AquosTvClientConfig,
    AquosTvCommandError,
    AquosTvConnectionError,
    AquosTvConnectionClosedError,
    AquosTvLoginRejectedError,
    AquosTvMissingCredentialError,
    aquos_tv_connect,
    aquos_tv_transport_connect,
)
from aquos_tv.emulator import AquosTvEmulator
from aquos_tv.protocol import AquosCommand

from helpers import eventually

LOGIN_TIMEOUT = 0.05


def _config(emulator: AquosTvEmulator, username=None, password=None) -> AquosTvClientConfig:
    return AquosTvClientConfig(
        f"127.0.0.1:{emulator.port}",
        username,
        password,
        login_timeout_secs=LOGIN_TIMEOUT,
      )


def test_connect_without_login_fetches_identity():
    async def _exercise():
        async with AquosTvEmulator(bind_addr="127.0.0.1", port=0) as emulator:
            assert emulator.port != 0
            async with await aquos_tv_connect(config=_config(emulator)) as client:
                assert client.name == "AQUOS"
                assert client.model_name == "LC-60UD20"
                assert client.software_version == "1.10"
                assert client.ip_protocol_version == "1"
            assert [c.code for c in emulator.received_commands] == ["TVNM", "MNRD", "SWVN", "IPPV"]

    asyncio.run(_exercise())


def test_connect_with_login():
    async def _exercise():
        async with AquosTvEmulator("user1", "pass1", bind_addr="127.0.0.1", port=0) as emulator:
            async with await aquos_tv_connect(config=_config(emulator, "user1", "pass1")) as client:
                assert client.name == "AQUOS"
                assert await client.volume() == 30

    asyncio.run(_exercise())


def test_bad_password_is_rejected():
    async def _exercise():
        async with AquosTvEmulator("user1", "pass1", bind_addr="127.0.0.1", port=0) as emulator:
            with pytest.raises(AquosTvLoginRejectedError) as exc_info:
                await aquos_tv_connect(config=_config(emulator, "user1", "wrong"))
            assert exc_info.value.response_text == "Login incorrect"
            assert emulator.received_commands == []

    asyncio.run(_exercise())


def test_login_required_but_not_configured():
    async def _exercise():
        async with AquosTvEmulator("user1", "pass1", bind_addr="127.0.0.1", port=0) as emulator:
            with pytest.raises(AquosTvMissingCredentialError):
                await aquos_tv_connect(config=_config(emulator))

    asyncio.run(_exercise())


def test_commands_change_emulator_state():
    async def _exercise():
        async with AquosTvEmulator(bind_addr="127.0.0.1", port=0) as emulator:
            async with await aquos_tv_connect(config=_config(emulator)) as client:
                assert await client.set_volume(25) == "OK"
                assert await client.volume() == 25
                assert emulator.volume == 25
                await client.toggle_mute()
                assert emulator.muted
                await client.change_input(3)
                assert emulator.input_source == 3
                await client.change_input_tv()
                assert emulator.input_source == 0
                await client.play()
                assert emulator.received_commands[-1] == AquosCommand("RCKY", "16")
                await client.power_off()
                assert not emulator.power_on

    asyncio.run(_exercise())


def test_err_does_not_end_session():
    async def _exercise():
        async with AquosTvEmulator(bind_addr="127.0.0.1", port=0) as emulator:
            async with await aquos_tv_connect(config=_config(emulator)) as client:
                with pytest.raises(AquosTvCommandError):
                    await client.set_volume(99)
                with pytest.raises(AquosTvCommandError):
                    await client.send_command("ZZZZ", "1")
                assert await client.volume() == 30

    asyncio.run(_exercise())


def test_err_during_identity_fetch_closes_connection():
    class NamelessEmulator(AquosTvEmulator):
        async def handle_command(self, session, command):
            if command.code == "MNRD":
                return "ERR"
            return await super().handle_command(session, command)

    async def _exercise():
        async with NamelessEmulator(bind_addr="127.0.0.1", port=0) as emulator:
            with pytest.raises(AquosTvCommandError):
                await aquos_tv_connect(config=_config(emulator))
            await eventually(lambda: len(emulator.sessions) == 0)

    asyncio.run(_exercise())


def test_emulator_going_away_ends_session():
    async def _exercise():
        emulator = AquosTvEmulator(bind_addr="127.0.0.1", port=0)
        await emulator.start()
        transport = await aquos_tv_transport_connect(config=_config(emulator))
        try:
            await emulator.close_and_wait()
            with pytest.raises(AquosTvConnectionError):
                await transport.transact(AquosCommand.create("VOLM", "?"))
            with pytest.raises(AquosTvConnectionClosedError):
                await transport.transact(AquosCommand.create("VOLM", "?"))
        finally:
            await transport.aclose()
        await transport.aclose()

    asyncio.run(_exercise())


def test_connection_refused():
    async def _exercise():
        emulator = AquosTvEmulator(bind_addr="127.0.0.1", port=0)
        await emulator.start()
        config = _config(emulator)
        await emulator.close_and_wait()
        with pytest.raises(OSError):
            await aquos_tv_transport_connect(config=config)

    asyncio.run(_exercise())
