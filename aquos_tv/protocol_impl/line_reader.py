# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Background reader that turns the byte stream received from the TV into
a channel of ResponseRecords.
"""

from __future__ import annotations

import asyncio
from asyncio import StreamReader

from ..internal_types import *
from ..exceptions import AquosTvConnectionError, AquosTvConnectionClosedError
from ..pkg_logging import logger
from ..util import decode_line
from ..protocol.line_framer import scan_line
from ..protocol.response import ResponseRecord

READ_CHUNK_SIZE = 2048
"""Maximum number of bytes requested from the StreamReader per read."""

class AsyncLineReader:
    """
    Owns the read side of the connection to the TV.

    A background task reads from the StreamReader, splits the data into lines,
    and publishes each line as a ResponseRecord into a single-slot queue, in
    the order received. When the stream ends or fails, one final
    ResponseRecord carrying an AquosTvConnectionError is published and the
    channel is closed. Nothing is published after the channel is closed.

    There is exactly one consumer, which calls receive().
    """

    stream_reader: StreamReader

    _queue: asyncio.Queue[Optional[ResponseRecord]]
    """Single-slot handoff to the consumer. None marks the closed channel."""

    _channel_closed: bool = False
    """Set by the reader task, once, when it will publish nothing further."""

    _reader_task: Optional[asyncio.Task[None]] = None

    def __init__(self, stream_reader: StreamReader) -> None:
        """Creates the reader and starts the background task. Must be called
           with a running event loop."""
        self.stream_reader = stream_reader
        self._queue = asyncio.Queue(maxsize=1)
        self._reader_task = asyncio.create_task(self._read_lines())

    @property
    def is_channel_closed(self) -> bool:
        """True if the reader task has closed the channel. Records already
           published may still be waiting to be received."""
        return self._channel_closed

    async def _read_lines(self) -> None:
        """Task function. Reads and frames lines until the stream ends or fails."""
        buffer = bytearray()
        at_eof = False
        try:
            try:
                while True:
                    n_consumed, line = scan_line(buffer, at_eof)
                    del buffer[:n_consumed]
                    if line is not None:
                        record = ResponseRecord(text=decode_line(line))
                        logger.debug(f"Read line: {record.text!r}")
                        await self._queue.put(record)
                    elif at_eof:
                        break
                    else:
                        data = await self.stream_reader.read(READ_CHUNK_SIZE)
                        if len(data) == 0:
                            logger.debug("End of stream from TV")
                            at_eof = True
                        else:
                            logger.debug(f"Read {len(data)} bytes: {data.hex(' ')}")
                            buffer.extend(data)
                final_record = ResponseRecord(
                    error=AquosTvConnectionClosedError("Connection closed by TV"))
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.debug("Exception while reading from TV", exc_info=True)
                error = AquosTvConnectionError(f"Error reading from TV: {e}")
                error.__cause__ = e
                final_record = ResponseRecord(error=error)
            await self._queue.put(final_record)
        finally:
            self._channel_closed = True
            if not self._queue.full():
                # wake up a consumer blocked in receive()
                self._queue.put_nowait(None)
            logger.debug("Line reader exiting; channel closed")

    async def receive(self) -> ResponseRecord:
        """Returns the next ResponseRecord, waiting as long as necessary.

        The final record published by the reader carries the error that ended
        the stream. After that, raises AquosTvConnectionClosedError.
        """
        if self._channel_closed and self._queue.empty():
            raise AquosTvConnectionClosedError("Connection already closed")
        record = await self._queue.get()
        if record is None:
            raise AquosTvConnectionClosedError("Connection already closed")
        return record

    async def aclose(self) -> None:
        """Stops the reader task, discarding anything not yet received.

        Does not close the underlying stream. Repeated calls have no effect.
        """
        reader_task = self._reader_task
        self._reader_task = None
        if reader_task is not None:
            if not reader_task.done():
                reader_task.cancel()
            try:
                await reader_task
            except asyncio.CancelledError:
                pass

    def __str__(self) -> str:
        return f"AsyncLineReader(closed={self._channel_closed})"

    def __repr__(self) -> str:
        return str(self)
