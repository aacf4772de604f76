# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV client.

Provides semantic operations (power, input, channel, volume, remote keys)
on top of an AquosTvClientTransport, and caches the TV's identity.
"""

from __future__ import annotations

import re

from ..internal_types import *
from ..exceptions import AquosTvError, AquosTvResponseParseError
from ..pkg_logging import logger
from ..protocol import (
    AquosCommand,
    RemoteKey,
  )

from .client_transport import AquosTvClientTransport

_VOLUME_RE = re.compile(r"[+-]?[0-9]+")
"""A volume response: optionally signed ASCII decimal digits, nothing else."""

class AquosTvClient:
    """AQUOS TV client.

    Every operation is a single command/response round trip. Argument values
    are passed to the TV without range checking; the TV answers "ERR" for
    values it does not accept, which is raised as AquosTvCommandError.
    """

    transport: AquosTvClientTransport

    _name: Optional[str] = None
    _model_name: Optional[str] = None
    _software_version: Optional[str] = None
    _ip_protocol_version: Optional[str] = None

    def __init__(
            self,
            transport: AquosTvClientTransport,
          ):
        """Initialize an AQUOS TV client on a connected transport. Connection
           settings are owned by the transport."""
        self.transport = transport

    async def transact(
            self,
            command: AquosCommand,
          ) -> str:
        """Sends a command and returns the response text."""
        return await self.transport.transact(command)

    async def send_command(self, code: str, argument: Union[str, int]) -> str:
        """Sends an arbitrary command code and argument and returns the response text."""
        return await self.transact(AquosCommand.create(code, argument))

    async def transact_by_name(
            self,
            command_name: str,
            argument: Optional[Union[str, int]]=None,
          ) -> str:
        """Sends a named command and returns the response text."""
        command = AquosCommand.create_from_name(command_name, argument)
        return await self.transact(command)

    async def fetch_identity(self) -> None:
        """Queries and caches the TV name, model name, software version and
           IP protocol version, in that order.

        Any failure, including an "ERR" response, is raised; the cached values
        fetched before the failure are kept.
        """
        self._name = await self.transact_by_name("identity.name")
        self._model_name = await self.transact_by_name("identity.model_name")
        self._software_version = await self.transact_by_name("identity.software_version")
        self._ip_protocol_version = await self.transact_by_name("identity.ip_protocol_version")
        logger.debug(
            f"{self}: identity name={self._name!r}, model={self._model_name!r}, "
            f"software={self._software_version!r}, protocol={self._ip_protocol_version!r}")

    def _require_identity(self, value: Optional[str], what: str) -> str:
        if value is None:
            raise AquosTvError(f"{self}: {what} has not been fetched; call fetch_identity()")
        return value

    @property
    def name(self) -> str:
        """The TV's device name."""
        return self._require_identity(self._name, "TV name")

    @property
    def model_name(self) -> str:
        return self._require_identity(self._model_name, "Model name")

    @property
    def software_version(self) -> str:
        return self._require_identity(self._software_version, "Software version")

    @property
    def ip_protocol_version(self) -> str:
        return self._require_identity(self._ip_protocol_version, "IP protocol version")

    def identity_jsonable(self) -> JsonableDict:
        """Returns the cached identity as a JSON-serializable dict. Values not
           yet fetched are None."""
        return dict(
            name=self._name,
            model_name=self._model_name,
            software_version=self._software_version,
            ip_protocol_version=self._ip_protocol_version,
          )

    async def _async_dispose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> AquosTvClient:
        logger.debug(f"{self}: Entering async context manager")
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
          ) -> None:
        logger.debug(f"{self}: Exiting async context manager, exc={exc_val}")
        await self._async_dispose()

    async def power_on(self) -> str:
        """Turns the TV on."""
        return await self.transact_by_name("power.on")

    async def power_off(self) -> str:
        """Turns the TV off (standby)."""
        return await self.transact_by_name("power.off")

    async def set_power(self, on: bool) -> str:
        if on:
            return await self.power_on()
        return await self.power_off()

    async def toggle_input(self) -> str:
        """Steps to the next input source."""
        return await self.transact_by_name("input.toggle")

    async def change_input_tv(self) -> str:
        """Switches to the TV tuner."""
        return await self.transact_by_name("input.tv")

    async def change_input(self, source: int) -> str:
        """Switches to input source number <source>."""
        return await self.transact_by_name("input.select", source)

    async def channel_up(self) -> str:
        return await self.transact_by_name("channel.up")

    async def channel_down(self) -> str:
        return await self.transact_by_name("channel.down")

    async def set_volume(self, level: int) -> str:
        """Sets the volume level. Out-of-range levels are rejected by the TV, not here."""
        return await self.transact_by_name("volume.set", level)

    async def volume(self) -> int:
        """Returns the current volume level.

        Raises AquosTvResponseParseError if the TV's answer is not a number.
        """
        text = await self.transact_by_name("volume.query")
        if _VOLUME_RE.fullmatch(text) is None:
            raise AquosTvResponseParseError(f"{self}: Invalid volume response: {text!r}", text)
        return int(text)

    async def toggle_mute(self) -> str:
        return await self.transact_by_name("mute.toggle")

    async def send_remote_key(self, key: Union[RemoteKey, int]) -> str:
        """Emulates a press of a remote control key."""
        return await self.transact_by_name("remote_key.send", int(key))

    async def play(self) -> str:
        return await self.send_remote_key(RemoteKey.PLAY)

    async def pause(self) -> str:
        return await self.send_remote_key(RemoteKey.PAUSE)

    async def stop(self) -> str:
        return await self.send_remote_key(RemoteKey.STOP)

    async def rewind(self) -> str:
        return await self.send_remote_key(RemoteKey.REWIND)

    async def fast_forward(self) -> str:
        return await self.send_remote_key(RemoteKey.FAST_FORWARD)

    async def skip_back(self) -> str:
        return await self.send_remote_key(RemoteKey.SKIP_BACK)

    async def skip_forward(self) -> str:
        return await self.send_remote_key(RemoteKey.SKIP_FORWARD)

    async def menu(self) -> str:
        return await self.send_remote_key(RemoteKey.MENU)

    async def enter(self) -> str:
        return await self.send_remote_key(RemoteKey.ENTER)

    async def cursor_up(self) -> str:
        return await self.send_remote_key(RemoteKey.UP)

    async def cursor_down(self) -> str:
        return await self.send_remote_key(RemoteKey.DOWN)

    async def cursor_left(self) -> str:
        return await self.send_remote_key(RemoteKey.LEFT)

    async def cursor_right(self) -> str:
        return await self.send_remote_key(RemoteKey.RIGHT)

    async def return_(self) -> str:
        """Sends the RETURN key. Named with a trailing underscore since return is a keyword."""
        return await self.send_remote_key(RemoteKey.RETURN)

    async def exit(self) -> str:
        return await self.send_remote_key(RemoteKey.EXIT)

    def __str__(self) -> str:
        return f"AquosTvClient(transport={self.transport})"

    def __repr__(self) -> str:
       return str(self)

    async def aclose(self) -> None:
       await self._async_dispose()
