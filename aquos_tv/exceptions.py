#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .protocol.command import AquosCommand

class AquosTvError(Exception):
    """Base class for all error exceptions defined by this package."""
    pass

class AquosTvConnectionError(AquosTvError):
    """The connection to the TV failed. Fatal to the session."""
    pass

class AquosTvConnectionClosedError(AquosTvConnectionError):
    """The connection to the TV has been closed, either by the TV or locally."""
    pass

class AquosTvHandshakeError(AquosTvError):
    """The login handshake failed. The session is closed."""
    pass

class AquosTvInvalidResponseError(AquosTvHandshakeError):
    """The TV sent something other than the expected login prompt."""
    response_text: str

    def __init__(self, msg: str, response_text: str):
        super().__init__(msg)
        self.response_text = response_text

class AquosTvMissingCredentialError(AquosTvHandshakeError):
    """The TV asked for a username or password that was not configured."""
    pass

class AquosTvUnresponsiveError(AquosTvHandshakeError):
    """The TV stopped responding during the login handshake."""
    pass

class AquosTvLoginRejectedError(AquosTvHandshakeError):
    """The TV rejected the configured credentials."""
    response_text: str

    def __init__(self, msg: str, response_text: str):
        super().__init__(msg)
        self.response_text = response_text

class AquosTvCommandError(AquosTvError):
    """The TV answered a command with "ERR". The session remains usable."""
    command: Optional[AquosCommand]

    def __init__(self, msg: str, command: Optional[AquosCommand]=None):
        super().__init__(msg)
        self.command = command

class AquosTvResponseParseError(AquosTvError):
    """A response could not be interpreted (e.g., a non-numeric volume)."""
    response_text: str

    def __init__(self, msg: str, response_text: str):
        super().__init__(msg)
        self.response_text = response_text
