# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Tests for the background reader that feeds the response channel."""

import asyncio

import pytest

from aquos_tv import AquosTvConnectionError, AquosTvConnectionClosedError
from aquos_tv.protocol_impl import AsyncLineReader


def test_lines_are_delivered_in_order():
    async def _exercise():
        stream = asyncio.StreamReader()
        reader = AsyncLineReader(stream)
        stream.feed_data(b"Login:Password:\r\nOK\r")
        assert (await reader.receive()).text == "Login"
        assert (await reader.receive()).text == "Password"
        assert (await reader.receive()).text == "OK"
        await reader.aclose()

    asyncio.run(_exercise())


def test_line_split_across_reads():
    async def _exercise():
        stream = asyncio.StreamReader()
        reader = AsyncLineReader(stream)
        stream.feed_data(b"LC-6")
        receiver = asyncio.create_task(reader.receive())
        await asyncio.sleep(0)
        assert not receiver.done()
        stream.feed_data(b"0UD20\r")
        assert (await receiver).text == "LC-60UD20"
        await reader.aclose()

    asyncio.run(_exercise())


def test_clean_close_is_reported_once_then_closed():
    async def _exercise():
        stream = asyncio.StreamReader()
        reader = AsyncLineReader(stream)
        stream.feed_data(b"30\r")
        stream.feed_eof()
        assert (await reader.receive()).text == "30"
        final = await reader.receive()
        assert final.text is None
        assert isinstance(final.error, AquosTvConnectionClosedError)
        assert reader.is_channel_closed
        for _ in range(2):
            with pytest.raises(AquosTvConnectionClosedError):
                await reader.receive()
        await reader.aclose()

    asyncio.run(_exercise())


def test_unterminated_line_before_close():
    async def _exercise():
        stream = asyncio.StreamReader()
        reader = AsyncLineReader(stream)
        stream.feed_data(b"ERR")
        stream.feed_eof()
        assert (await reader.receive()).text == "ERR"
        assert (await reader.receive()).is_error

    asyncio.run(_exercise())


def test_close_wakes_a_waiting_consumer():
    async def _exercise():
        stream = asyncio.StreamReader()
        reader = AsyncLineReader(stream)
        receiver = asyncio.create_task(reader.receive())
        await asyncio.sleep(0)
        stream.feed_eof()
        record = await receiver
        assert isinstance(record.error, AquosTvConnectionClosedError)
        with pytest.raises(AquosTvConnectionClosedError):
            await reader.receive()

    asyncio.run(_exercise())


def test_read_error_is_wrapped():
    async def _exercise():
        stream = asyncio.StreamReader()
        reader = AsyncLineReader(stream)
        cause = ConnectionResetError("reset")
        stream.set_exception(cause)
        record = await reader.receive()
        assert isinstance(record.error, AquosTvConnectionError)
        assert not isinstance(record.error, AquosTvConnectionClosedError)
        assert record.error.__cause__ is cause
        with pytest.raises(AquosTvConnectionClosedError):
            await reader.receive()

    asyncio.run(_exercise())


def test_undecodable_bytes_are_replaced():
    async def _exercise():
        stream = asyncio.StreamReader()
        reader = AsyncLineReader(stream)
        stream.feed_data(b"\xffAQUOS\r")
        assert (await reader.receive()).text == "\ufffdAQUOS"
        await reader.aclose()

    asyncio.run(_exercise())


def test_aclose_is_idempotent():
    async def _exercise():
        stream = asyncio.StreamReader()
        reader = AsyncLineReader(stream)
        await asyncio.sleep(0)
        await reader.aclose()
        await reader.aclose()
        assert reader.is_channel_closed

    asyncio.run(_exercise())
