# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for AQUOS TVs.

This module defines the line-oriented protocol used by AQUOS TVs for TCP/IP
control: line framing, command encoding, the named command table and the
login handshake state machine. It does not perform any network I/O.
"""

from .constants import (
    END_OF_COMMAND,
    END_OF_COMMAND_BYTES,
    IGNORABLE_BYTES,
    ERR_RESPONSE,
    LOGIN_PROMPT,
    PASSWORD_PROMPT,
    ARG_NONE,
    ARG_QUERY,
  )

from .line_framer import scan_line
from .response import ResponseRecord
from .remote_key import RemoteKey
from .command_meta import CommandMeta, name_to_command_meta, get_all_commands
from .command import AquosCommand
from .handshake import LoginState, LoginHandshake, run_login_handshake
