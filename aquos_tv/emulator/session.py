# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV emulator session.

One session per accepted TCP/IP connection. Performs the device side of the
login handshake, then passes each received command line to the emulator.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..pkg_logging import logger
from ..util import decode_line
from ..protocol import (
    scan_line,
    END_OF_COMMAND_BYTES,
    LOGIN_PROMPT,
    PASSWORD_PROMPT,
  )

if TYPE_CHECKING:
    from .emulator_impl import AquosTvEmulator

LOGIN_REJECTED_TEXT = "Login incorrect"
"""Sent before disconnecting a client that supplied bad credentials."""

IDLE_TIMEOUT = 30.0
"""Timeout for idle connections, including during login."""

class EmulatorSessionState(Enum):
    UNCONNECTED = 0
    READING_USERNAME = 1
    READING_PASSWORD = 2
    READING_COMMAND = 3
    SHUTTING_DOWN = 4
    CLOSED = 5

class AquosTvEmulatorSession(asyncio.Protocol):
    session_id: int = -1
    emulator: AquosTvEmulator
    transport: Optional[asyncio.Transport] = None
    peer_name: str = "<unconnected>"
    description: str = "EmulatorSession(<unconnected>)"
    state: EmulatorSessionState = EmulatorSessionState.UNCONNECTED
    partial_data: bytearray
    received_username: Optional[str] = None
    transport_closed: bool = True
    idle_timer: Optional[asyncio.TimerHandle] = None

    def __init__(self, emulator: AquosTvEmulator):
        self.emulator = emulator
        self.partial_data = bytearray()
        self.session_id = emulator.alloc_session_id(self)
        self.description = f"EmulatorSession(id={self.session_id}, from=<unconnected>)"

    def write(self, data: Union[bytes, bytearray, memoryview]) -> None:
        if self.transport is None or self.transport_closed:
            logger.debug(f"EmulatorSession: Attempt to write to closed session {self.description}; ignored")
            return
        self.transport.write(data)

    def write_line(self, text: str) -> None:
        self.write(text.encode('utf-8') + END_OF_COMMAND_BYTES)

    def connection_made(self, transport: asyncio.BaseTransport):
        """Called when a connection is made.

        Sends the login prompt if the emulator requires login; otherwise
        stays silent and waits for commands.
        """
        assert isinstance(transport, asyncio.Transport)
        assert self.state == EmulatorSessionState.UNCONNECTED
        self.transport = transport
        self.transport_closed = False
        self.peer_name = str(transport.get_extra_info('peername'))
        self.description = f"EmulatorSession(id={self.session_id}, from='{self.peer_name}')"
        logger.debug(f"EmulatorSession: Connection from {self.peer_name}")
        if self.emulator.login_required:
            self.state = EmulatorSessionState.READING_USERNAME
            self.write(f"{LOGIN_PROMPT}:".encode('ascii'))
        else:
            self.state = EmulatorSessionState.READING_COMMAND
        self._restart_idle_timer()

    def close(self) -> None:
        if not self.state in (EmulatorSessionState.CLOSED, EmulatorSessionState.SHUTTING_DOWN):
            self.state = EmulatorSessionState.SHUTTING_DOWN
            if self.idle_timer is not None:
                self.idle_timer.cancel()
                self.idle_timer = None
            if not self.transport_closed and not self.transport is None:
                self.transport_closed = True
                self.transport.close()
            self.state = EmulatorSessionState.CLOSED
            self.emulator.free_session_id(self.session_id)

    def _restart_idle_timer(self) -> None:
        if self.idle_timer is not None:
            self.idle_timer.cancel()
        self.idle_timer = asyncio.get_running_loop().call_later(
            IDLE_TIMEOUT,
            lambda: self._on_idle_read_timeout())

    def _on_idle_read_timeout(self) -> None:
        self.idle_timer = None
        logger.debug(f"{self}: Idle timeout")
        self.close()

    def _on_line(self, line: str) -> None:
        if self.state == EmulatorSessionState.READING_USERNAME:
            logger.debug(f"{self}: Received username {line!r}")
            self.received_username = line
            self.state = EmulatorSessionState.READING_PASSWORD
            self.write(f"{PASSWORD_PROMPT}:".encode('ascii'))
        elif self.state == EmulatorSessionState.READING_PASSWORD:
            if self.emulator.check_credentials(self.received_username, line):
                # a successful login is not acknowledged
                logger.debug(f"{self}: Login successful")
                self.state = EmulatorSessionState.READING_COMMAND
            else:
                logger.debug(f"{self}: Login failed")
                self.write_line(LOGIN_REJECTED_TEXT)
                self.close()
        elif self.state == EmulatorSessionState.READING_COMMAND:
            self.emulator.on_command_line_received(self, line)

    def data_received(self, data: bytes) -> None:
        """Called when some data is received."""
        try:
            self.partial_data.extend(data)
            self._restart_idle_timer()
            while not self.transport_closed:
                n_consumed, line = scan_line(self.partial_data)
                del self.partial_data[:n_consumed]
                if line is None:
                    break
                self._on_line(decode_line(line))
        except BaseException as e:
            logger.exception(f"{self}: Exception while processing data: {e}")
            self.close()
            raise

    def connection_lost(self, exc: Optional[BaseException]) -> None:
        """Called when the connection is lost or closed.

        The argument is an exception object or None (the latter
        meaning a regular EOF is received or the connection was
        aborted or closed).
        """
        logger.debug(f"{self}: Connection lost, exception={exc}; closing connection")
        self.transport_closed = True
        self.close()

    def eof_received(self) -> bool:
        """Called when the other end calls write_eof() or equivalent."""
        logger.debug(f"{self}: EOF received; closing connection")
        self.close()
        return True

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return str(self)
