# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Protocol-specific constants
"""

from __future__ import annotations

END_OF_COMMAND = ord('\r')
"""The terminating byte value for every line sent to the TV, as an int."""

END_OF_COMMAND_BYTES = bytes([END_OF_COMMAND])
"""The terminating byte for every line sent to the TV, as a bytes object."""

IGNORABLE_BYTES = frozenset(b'\r\n:')
"""Byte values that separate lines received from the TV. The ':' is sent after
   the login prompts ("Login:", "Password:") and is dropped like a line terminator."""

COMMAND_CODE_LENGTH = 4
"""Every command code is exactly this many ASCII characters."""

MIN_ARGUMENT_LENGTH = 4
"""Arguments are left-justified and space-padded to at least this many characters."""

ERR_RESPONSE = "ERR"
"""Response text sent by the TV when it rejects a command."""

LOGIN_PROMPT = "Login"
"""Substring expected in the first line sent by a TV that requires login."""

PASSWORD_PROMPT = "Password"
"""Substring expected in the line that follows the username."""

ARG_NONE = "-"
"""Argument for commands that take no parameter."""

ARG_QUERY = "?"
"""Argument that turns a setting command into a query."""
