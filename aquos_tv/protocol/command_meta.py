# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Metadata for the named commands understood by AQUOS TVs.

Every command is a 4-character command code followed by an argument. Some
commands take a fixed argument ("-" for actions, "?" for queries, or a fixed
value); others take an argument supplied by the caller.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import AquosTvError
from .constants import ARG_NONE, ARG_QUERY
from .remote_key import RemoteKey

class CommandMeta:
    """Metadata for a single named command"""

    name: str
    """The full dotted name of the command; e.g., "power.on"."""

    code: str
    """The 4-character command code; e.g., "POWR"."""

    argument: Optional[str]
    """The fixed argument sent with the command, or None if the caller
       must supply the argument."""

    description: Optional[str]
    """A description of the command, if known."""

    def __init__(
            self,
            name: str,
            code: str,
            argument: Optional[str]=None,
            description: Optional[str]=None,
          ):
        self.name = name
        self.code = code
        self.argument = argument
        self.description = description

    @property
    def takes_argument(self) -> bool:
        """True if the caller must supply the argument."""
        return self.argument is None

    def __str__(self) -> str:
        return f"CommandMeta(name={self.name!r}, code={self.code!r}, argument={self.argument!r})"

    def __repr__(self) -> str:
        return str(self)

_C = CommandMeta

_command_meta_list: List[CommandMeta] = [
    _C("power.on", "POWR", "1", "Turn the TV on"),
    _C("power.off", "POWR", "0", "Turn the TV off (standby)"),
    _C("input.toggle", "ITGD", ARG_NONE, "Step to the next input"),
    _C("input.tv", "ITVD", ARG_NONE, "Switch to the TV tuner input"),
    _C("input.select", "IAVD", None, "Switch to input <source number>"),
    _C("channel.up", "CHUP", ARG_NONE, "Next channel"),
    _C("channel.down", "CHDW", ARG_NONE, "Previous channel"),
    _C("volume.set", "VOLM", None, "Set volume to <level>"),
    _C("volume.query", "VOLM", ARG_QUERY, "Query the current volume"),
    _C("mute.toggle", "MUTE", "0", "Toggle audio mute"),
    _C("remote_key.send", "RCKY", None, "Emulate remote control key <key code>"),
    _C("identity.name", "TVNM", "1", "Query the TV name"),
    _C("identity.model_name", "MNRD", "1", "Query the model name"),
    _C("identity.software_version", "SWVN", "1", "Query the software version"),
    _C("identity.ip_protocol_version", "IPPV", "1", "Query the IP control protocol version"),
  ]

for _key in RemoteKey:
    _command_meta_list.append(
        _C(_key.command_name, "RCKY", str(_key.value), f"Emulate the {_key.name} remote control key"))

_command_metas: Dict[str, CommandMeta] = {}
"""A dictionary of all command metas, keyed by dotted command name."""

for _command in _command_meta_list:
    assert not _command.name in _command_metas
    _command_metas[_command.name] = _command

def name_to_command_meta(name: str) -> CommandMeta:
    """Returns the command meta for the given dotted command name; e.g., "volume.query"."""
    result = _command_metas.get(name, None)
    if result is None:
        raise AquosTvError(f"Unknown command name: {name}")
    return result

def get_all_commands() -> Dict[str, CommandMeta]:
    """Returns a dictionary of all command metas, keyed by dotted command name."""
    return _command_metas
