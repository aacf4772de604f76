# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV emulator.

Provides a simple emulation of an AQUOS TV on TCP/IP, including the optional
login handshake.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    AquosCommand,
    RemoteKey,
    ERR_RESPONSE,
    ARG_NONE,
    ARG_QUERY,
  )
from ..constants import DEFAULT_PORT

from .session import AquosTvEmulatorSession

OK_RESPONSE = "OK"
"""Response text for commands that were accepted."""

MAX_VOLUME = 60
MAX_INPUT_SOURCE = 9

class AquosTvEmulator(AsyncContextManager['AquosTvEmulator']):
    username: Optional[str]
    password: Optional[str]
    bind_addr: str
    port: int
    sessions: Dict[int, AquosTvEmulatorSession]
    next_session_id: int = 0
    requests: asyncio.Queue[Optional[Tuple[AquosTvEmulatorSession, str]]]
    server: Optional[asyncio.Server] = None
    handler_task: Optional[asyncio.Task[None]] = None
    final_result: asyncio.Future[None]

    name: str
    model_name: str
    software_version: str
    ip_protocol_version: str
    power_on: bool
    input_source: int
    volume: int
    muted: bool

    received_commands: List[AquosCommand]
    """Every well-formed command received, in order, across all sessions."""

    def __init__(
            self,
            username: Optional[str] = None,
            password: Optional[str] = None,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            name: str = "AQUOS",
            model_name: str = "LC-60UD20",
            software_version: str = "1.10",
            ip_protocol_version: str = "1",
            initial_power_on: bool = True,
            initial_volume: int = 30,
          ):
        """Creates an emulator.

        If username is not None or empty, clients must log in with username and
        password. A port of 0 binds an ephemeral port; the bound port is
        available as self.port once started.
        """
        self.username = username
        self.password = password
        self.bind_addr = '0.0.0.0' if bind_addr is None else bind_addr
        self.port = port
        self.sessions = {}
        self.requests = asyncio.Queue()
        self.final_result = asyncio.get_event_loop().create_future()
        self.name = name
        self.model_name = model_name
        self.software_version = software_version
        self.ip_protocol_version = ip_protocol_version
        self.power_on = initial_power_on
        self.input_source = 0
        self.volume = initial_volume
        self.muted = False
        self.received_commands = []

    @property
    def login_required(self) -> bool:
        return self.username is not None and self.username != ''

    def check_credentials(self, username: Optional[str], password: Optional[str]) -> bool:
        return username == self.username and (password or '') == (self.password or '')

    def alloc_session_id(self, session: AquosTvEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_command_line_received(self, session: AquosTvEmulatorSession, line: str) -> None:
        """Called when a command line is received from a logged-in session."""
        self.requests.put_nowait((session, line))

    def _handle_power(self, argument: str) -> str:
        if argument == ARG_QUERY:
            return "1" if self.power_on else "0"
        if argument not in ("0", "1"):
            return ERR_RESPONSE
        self.power_on = argument == "1"
        logger.debug(f"Emulator: power is now {'on' if self.power_on else 'off'}")
        return OK_RESPONSE

    def _handle_input(self, argument: str) -> str:
        if argument == ARG_QUERY:
            return str(self.input_source)
        if not argument.isdigit() or not 1 <= int(argument) <= MAX_INPUT_SOURCE:
            return ERR_RESPONSE
        self.input_source = int(argument)
        return OK_RESPONSE

    def _handle_volume(self, argument: str) -> str:
        if argument == ARG_QUERY:
            return str(self.volume)
        if not argument.isdigit() or int(argument) > MAX_VOLUME:
            return ERR_RESPONSE
        self.volume = int(argument)
        return OK_RESPONSE

    def _handle_mute(self, argument: str) -> str:
        if argument == ARG_QUERY:
            return "1" if self.muted else "2"
        if argument == "0":
            self.muted = not self.muted
        elif argument == "1":
            self.muted = True
        elif argument == "2":
            self.muted = False
        else:
            return ERR_RESPONSE
        return OK_RESPONSE

    def _handle_remote_key(self, argument: str) -> str:
        if not argument.isdigit():
            return ERR_RESPONSE
        try:
            key = RemoteKey(int(argument))
        except ValueError:
            return ERR_RESPONSE
        logger.debug(f"Emulator: remote key {key.name}")
        return OK_RESPONSE

    async def handle_command(
            self,
            session: AquosTvEmulatorSession,
            command: AquosCommand
          ) -> str:
        """Handle a single command, and return the response text."""
        code = command.code
        argument = command.argument
        result: str
        if code == "TVNM" and argument == "1":
            result = self.name
        elif code == "MNRD" and argument == "1":
            result = self.model_name
        elif code == "SWVN" and argument == "1":
            result = self.software_version
        elif code == "IPPV" and argument == "1":
            result = self.ip_protocol_version
        elif code == "POWR":
            result = self._handle_power(argument)
        elif not self.power_on:
            # only power commands work in standby
            result = ERR_RESPONSE
        elif code == "ITGD" and argument == ARG_NONE:
            self.input_source = self.input_source % MAX_INPUT_SOURCE + 1
            result = OK_RESPONSE
        elif code == "ITVD" and argument == ARG_NONE:
            self.input_source = 0
            result = OK_RESPONSE
        elif code == "IAVD":
            result = self._handle_input(argument)
        elif code in ("CHUP", "CHDW") and argument == ARG_NONE:
            result = OK_RESPONSE
        elif code == "VOLM":
            result = self._handle_volume(argument)
        elif code == "MUTE":
            result = self._handle_mute(argument)
        elif code == "RCKY":
            result = self._handle_remote_key(argument)
        else:
            result = ERR_RESPONSE
        return result

    async def handle_command_line(
            self,
            session: AquosTvEmulatorSession,
            line: str
          ) -> str:
        """Parse a single command line, handle it, and return the response text."""
        try:
            command = AquosCommand.create(line[:4], line[4:].strip())
        except Exception as e:
            logger.debug(f"{session}: Malformed command line {line!r}: {e}")
            return ERR_RESPONSE
        logger.debug(f"{session}: Received command: {command}")
        self.received_commands.append(command)
        return await self.handle_command(session, command)

    async def handle_requests(self) -> None:
        """Handle requests from sessions."""
        while True:
            session_and_line = await self.requests.get()
            try:
                if session_and_line is None:
                    logger.debug("Emulator handler: Received EOF; exiting")
                    break
                session, line = session_and_line
                try:
                    response = await self.handle_command_line(session, line)
                    logger.debug(f"{session}: Emulator handler: Sending response {response!r}")
                    session.write_line(response)
                except asyncio.CancelledError as e:
                    logger.debug(f"{session}: Handler task cancelled; exiting")
                    break
                except Exception as e:
                    logger.exception(f"{session}: Handler task: Exception while handling request; killing session: {e}")
                    session.close()
            finally:
                self.requests.task_done()

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.wait_closed()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            self.handler_task = asyncio.create_task(self.handle_requests())
            self.server = await loop.create_server(
                lambda: AquosTvEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            if self.port == 0:
                self.port = self.server.sockets[0].getsockname()[1]
            logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.port}")
            await self.server.start_serving()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException:
                pass
            raise

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown."""
        try:
            await self.final_result
        finally:
            try:
                if self.server is not None:
                    try:
                        self.server.close()
                        for session in list(self.sessions.values()):
                            session.close()
                    finally:
                        await self.server.wait_closed()
            finally:
                self.server = None
                if self.handler_task is not None:
                    try:
                        await self.handler_task
                    finally:
                        self.handler_task = None

    async def close_and_wait(self, exc: Optional[BaseException]=None) -> None:
        self.close(exc)
        await self.wait_closed()

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)
            self.requests.put_nowait(None)
            if self.server is not None:
                self.server.close()

    async def __aenter__(self) -> AquosTvEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result(exc)
        try:
            # ensure that final_result has been awaited
            await self.wait_closed()
        except Exception:
            pass

    def __str__(self) -> str:
        return f"AquosTvEmulator({self.bind_addr}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
