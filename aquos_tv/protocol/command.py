# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A single command sent to an AQUOS TV.

On the wire, a command is the 4-character command code, immediately followed by
the argument left-justified and space-padded to 4 characters, followed by '\\r':

    b"VOLM30  \\r"
    b"POWR1   \\r"
    b"RCKY16  \\r"
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import AquosTvError
from .constants import (
    COMMAND_CODE_LENGTH,
    MIN_ARGUMENT_LENGTH,
    END_OF_COMMAND_BYTES,
  )
from .command_meta import CommandMeta, name_to_command_meta

class AquosCommand(NamedTuple):
    """An immutable (code, argument) pair."""

    code: str
    """The 4-character command code; e.g., "VOLM"."""

    argument: str
    """The argument; e.g., "30", "?", or "-". Padded to 4 characters when sent."""

    @classmethod
    def create(cls, code: str, argument: Union[str, int]) -> AquosCommand:
        """Creates a validated command.

        An int argument is converted to a decimal string. Arguments longer than
        4 characters are allowed and are sent unchanged.
        """
        if isinstance(argument, bool) or not isinstance(argument, (str, int)):
            raise AquosTvError(f"Invalid command argument type {type(argument)}: {argument!r}")
        if isinstance(argument, int):
            argument = str(argument)
        if len(code) != COMMAND_CODE_LENGTH or not code.isascii() or not code.isprintable():
            raise AquosTvError(f"Command code must be exactly {COMMAND_CODE_LENGTH} printable ASCII characters: {code!r}")
        if not argument.isascii() or '\r' in argument or '\n' in argument:
            raise AquosTvError(f"Command argument must be ASCII with no line terminators: {argument!r}")
        return cls(code, argument)

    @classmethod
    def create_from_meta(
            cls,
            command_meta: CommandMeta,
            argument: Optional[Union[str, int]]=None,
          ) -> AquosCommand:
        """Creates a command from a named command's metadata.

        argument must be provided if and only if the command does not have a fixed argument.
        """
        if command_meta.argument is None:
            if argument is None:
                raise AquosTvError(f"Command {command_meta.name} requires an argument")
            return cls.create(command_meta.code, argument)
        if argument is not None:
            raise AquosTvError(f"Command {command_meta.name} does not accept an argument")
        return cls.create(command_meta.code, command_meta.argument)

    @classmethod
    def create_from_name(
            cls,
            name: str,
            argument: Optional[Union[str, int]]=None,
          ) -> AquosCommand:
        """Creates a command from a dotted command name; e.g., "volume.set"."""
        return cls.create_from_meta(name_to_command_meta(name), argument)

    @property
    def line(self) -> str:
        """The command as sent, without the terminating '\\r'."""
        return f"{self.code}{self.argument:<{MIN_ARGUMENT_LENGTH}}"

    @property
    def raw_data(self) -> bytes:
        """The exact bytes written to the TV, including the terminating '\\r'."""
        return self.line.encode('ascii') + END_OF_COMMAND_BYTES

    def __str__(self) -> str:
        return f"AquosCommand({self.line!r})"
