# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV TCP/IP client transport.

Provides an implementation of AquosTvClientTransport over a TCP/IP
socket.
"""

from __future__ import annotations

import asyncio
from asyncio import Future

from ..internal_types import *
from ..exceptions import (
    AquosTvConnectionError,
    AquosTvConnectionClosedError,
    AquosTvCommandError,
  )
from ..pkg_logging import logger
from ..protocol import (
    AquosCommand,
    ERR_RESPONSE,
    END_OF_COMMAND_BYTES,
    LoginHandshake,
    run_login_handshake,
  )
from ..protocol_impl import AsyncLineReader
from ..timer import Timer, AsyncioTimer

from .client_config import AquosTvClientConfig
from .client_transport import AquosTvClientTransport
from .resolve_host import resolve_tv_tcp_host

class TcpAquosTvClientTransport(AquosTvClientTransport):
    """AQUOS TV TCP/IP client transport."""

    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    line_reader: Optional[AsyncLineReader] = None
    config: AquosTvClientConfig
    timer: Timer
    resolved_host: Optional[str]
    resolved_port: int
    final_status: Future[None]
    reader_closed: bool = False
    writer_closed: bool = False
    closed: bool = False

    _transaction_lock: asyncio.Lock
    """A mutex to ensure that only one command is outstanding at a time. The
    protocol has no request IDs, so responses can only be matched to commands
    by arrival order."""

    def __init__(
            self,
            host: Optional[str]=None,
            username: Optional[str]=None,
            password: Optional[str]=None,
            *,
            config: Optional[AquosTvClientConfig]=None,
            timer: Optional[Timer]=None,
          ) -> None:
        """Initializes the transport. Must be called with a running event loop.

        The configuration is copied; later changes to config are not seen by
        this transport.
        """
        super().__init__()
        self.config = AquosTvClientConfig(
            default_host=host,
            username=username,
            password=password,
            base_config=config
        )
        self.timer = AsyncioTimer() if timer is None else timer
        self.resolved_host = self.config.default_host
        self.resolved_port = self.config.default_port
        self.final_status = asyncio.get_event_loop().create_future()
        self._transaction_lock = asyncio.Lock()

    @property
    def host(self) -> Optional[str]:
        """Returns the resolved TCP/IP host. Before connect() this will be the host string."""
        return self.resolved_host

    @property
    def port(self) -> int:
        """Returns the resolved TCP/IP port. Before connect() this will be the default port."""
        return self.resolved_port

    @property
    def login_timeout_secs(self) -> float:
        return self.config.login_timeout_secs

    # @abstractmethod
    def is_shutting_down(self) -> bool:
        """Returns True if the transport is shutting down or closed."""
        return self.final_status.done()

    # @abstractmethod
    async def begin_transaction(self) -> None:
        """Acquires the transaction lock.
        """
        await self._transaction_lock.acquire()

    # @abstractmethod
    async def end_transaction(self) -> None:
        """Releases the transaction lock.
        """
        self._transaction_lock.release()

    async def _write_line(self, data: bytes) -> None:
        """Writes one complete line to the TV (nonlocking).

        On error, the transport will be shut down, and no further interaction is possible.
        """
        if self.writer is None or self.is_shutting_down():
            raise AquosTvConnectionClosedError("Connection already closed")
        try:
            self.writer.write(data)
            await self.writer.drain()
        except Exception as e:
            error = AquosTvConnectionError(f"Error writing to TV: {e}")
            error.__cause__ = e
            await self.shutdown()
            raise error

    async def _send_text(self, text: str) -> None:
        """Sends a handshake line (username or password) to the TV."""
        logger.debug("Handshake: writing credential line")
        await self._write_line(text.encode('utf-8') + END_OF_COMMAND_BYTES)

    async def _receive_record_text(self) -> str:
        """Waits, without timeout, for the next response line (nonlocking).

        A connection error ends the session; the transport is shut down and
        the error is raised.
        """
        assert self.line_reader is not None
        try:
            record = await self.line_reader.receive()
        except AquosTvConnectionError:
            await self.shutdown()
            raise
        if record.error is not None:
            await self.shutdown()
            raise record.error
        assert record.text is not None
        return record.text

    # @abstractmethod
    async def transact_no_lock(
            self,
            command: AquosCommand,
          ) -> str:
        """Sends a command and reads the single response line.

        Returns the response text. Raises AquosTvCommandError if the TV
        responds with "ERR"; the session remains usable in that case.

        The caller must be holding the transaction lock. Ordinary users
        should use the transaction() context manager or call transact()
        instead.
        """
        raw_data = command.raw_data
        logger.debug(f"Sending command {command}: {raw_data.hex(' ')}")
        await self._write_line(raw_data)
        text = await self._receive_record_text()
        logger.debug(f"Response to {command}: {text!r}")
        if text == ERR_RESPONSE:
            raise AquosTvCommandError(f"TV returned {ERR_RESPONSE} for command {command}", command)
        return text

    # @abstractmethod
    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down. Does not wait for the transport to finish
           closing. Safe to call from a callback or with transaction lock.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already shutting down or closed.

        Does not raise an exception based on final status.
        """
        if not self.final_status.done():
            if exc is not None:
                self.final_status.set_exception(exc)
            else:
                self.final_status.set_result(None)
        try:
            if not self.reader_closed:
                self.reader_closed = True
                if self.reader is not None:
                    # unblocks the line reader, which closes the response channel
                    self.reader.feed_eof()
        except Exception as e:
            logger.debug("Exception while closing reader", exc_info=True)
        finally:
            try:
                if not self.writer_closed:
                    self.writer_closed = True
                    if self.writer is not None:
                        self.writer.close()
            except Exception as e:
                logger.debug("Exception while closing writer", exc_info=True)

    # @abstractmethod
    async def wait(self) -> None:
        """Waits for complete shutdown/cleanup. Does not initiate shutdown.
        Not safe to call from a callback.

        Returns immediately if the transport is already closed.
        Raises an exception if the final status of the transport is an exception.
        """
        try:
            if self.writer is not None:
                await self.writer.wait_closed()
        except Exception as e:
            logger.debug("Exception while waiting for writer to close", exc_info=True)
        finally:
            if not self.final_status.done():
                await self.shutdown()
            if self.line_reader is not None:
                await self.line_reader.aclose()
        await self.final_status

    # @override
    async def aclose(self, exc: Optional[BaseException] = None) -> None:
        """Closes the transport and waits for complete shutdown/cleanup.

        A second call has no effect and raises nothing.
        """
        if self.closed:
            return
        self.closed = True
        await self.shutdown(exc)
        await self.wait()

    # @override
    async def __aenter__(self) -> TcpAquosTvClientTransport:
        """Enters a context that will close the transport on exit."""
        return self

    async def connect(self) -> None:
        """Opens the TCP/IP connection to the TV and performs the login handshake.

        Opening the connection is bounded by config.connect_timeout_secs and is
        not retried. Cancelling the calling task aborts the attempt.
        """
        try:
            assert self.reader is None and self.writer is None
            self.resolved_host, self.resolved_port = await resolve_tv_tcp_host(
                config=self.config)
            logger.debug(f"Connecting to TV at {self.host}:{self.port}")
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.config.connect_timeout_secs)
        except BaseException as e:
            await self.aclose(e)
            raise
        await self.start(reader, writer)

    async def start(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Takes ownership of an open stream and performs the login handshake.

        On failure the transport is closed and the error is raised.
        """
        try:
            async with self._transaction_lock:
                try:
                    assert self.reader is None and self.writer is None
                    self.reader = reader
                    self.writer = writer
                    self.line_reader = AsyncLineReader(reader)
                    logger.debug(f"TV TCP connection established; Handshake: waiting for login prompt")
                    handshake = LoginHandshake(
                        self.config.username,
                        self.config.password,
                        silent_outcome_is_success=self.config.silent_login_outcome_is_success)
                    await run_login_handshake(
                        handshake,
                        self.line_reader.receive,
                        self._send_text,
                        self.timer,
                        self.login_timeout_secs)
                    logger.info(f"Handshake: {self} connected")
                except BaseException as e:
                    await self.shutdown(e)
                    raise
        except BaseException as e:
            await self.aclose(e)
            raise

    def __str__(self) -> str:
        return f"TcpAquosTvClientTransport({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
