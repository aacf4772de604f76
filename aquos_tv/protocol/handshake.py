# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Login handshake.

TVs with login enabled prompt immediately after the connection is accepted;
TVs without login stay silent. The TV never acknowledges a successful login,
it only reports a rejection. Each step is therefore a race between the next
line from the TV and a short timeout:

    TV:     "Login:"         (or silence: login not required)
    Client: "<username>\\r"
    TV:     "Password:"      (silence here is an error)
    Client: "<password>\\r"
    TV:     <rejection text> (or silence: login succeeded)
    <Normal command/response session begins>
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..pkg_logging import logger
from ..exceptions import (
    AquosTvConnectionError,
    AquosTvInvalidResponseError,
    AquosTvMissingCredentialError,
    AquosTvUnresponsiveError,
    AquosTvLoginRejectedError,
  )
from ..timer import Timer
from .constants import LOGIN_PROMPT, PASSWORD_PROMPT
from .response import ResponseRecord

class LoginState(Enum):
    AWAIT_LOGIN_PROMPT = 0
    AWAIT_PASSWORD_PROMPT = 1
    AWAIT_OUTCOME = 2
    DONE = 3
    FAILED = 4

class LoginHandshake:
    """The login handshake state machine. Performs no I/O.

    Each event handler returns the text that must be sent to the TV next
    (without line terminator), or None if nothing is to be sent. Failures are
    raised, after which the machine is in the FAILED state.
    """

    username: Optional[str]
    password: Optional[str]
    silent_outcome_is_success: bool
    state: LoginState = LoginState.AWAIT_LOGIN_PROMPT

    def __init__(
            self,
            username: Optional[str]=None,
            password: Optional[str]=None,
            silent_outcome_is_success: bool=True,
          ) -> None:
        """
        Args:
            username: The login username, or None/empty if not configured.
            password: The login password, or None/empty if not configured.
            silent_outcome_is_success:
                If True, silence after the password is sent is taken as a
                successful login. If False, it is reported as an unresponsive TV.
        """
        self.username = username
        self.password = password
        self.silent_outcome_is_success = silent_outcome_is_success

    @property
    def is_done(self) -> bool:
        """True if the handshake completed successfully."""
        return self.state == LoginState.DONE

    @property
    def is_finished(self) -> bool:
        """True if the handshake completed, successfully or not."""
        return self.state in (LoginState.DONE, LoginState.FAILED)

    def _fail(self, exc: BaseException) -> NoReturn:
        logger.debug(f"Handshake: failed in state {self.state.name}: {exc}")
        self.state = LoginState.FAILED
        raise exc

    def _check_record(self, record: ResponseRecord) -> str:
        if record.error is not None:
            exc = AquosTvConnectionError(f"Handshake: connection failed: {record.error}")
            exc.__cause__ = record.error
            self._fail(exc)
        assert record.text is not None
        return record.text

    def _check_prompt(self, text: str, prompt: str, credential: Optional[str], credential_name: str) -> str:
        if not prompt in text:
            self._fail(AquosTvInvalidResponseError(
                f"Handshake: failed to login (invalid response, expected {prompt!r}): {text!r}", text))
        if credential is None or credential == '':
            self._fail(AquosTvMissingCredentialError(
                f"Handshake: TV requires login, but {credential_name} is not specified"))
        return credential

    def on_timeout(self) -> Optional[str]:
        """Handles expiry of the timeout for the current state."""
        if self.state == LoginState.AWAIT_LOGIN_PROMPT:
            logger.debug("Handshake: no login prompt; login not required")
            self.state = LoginState.DONE
        elif self.state == LoginState.AWAIT_PASSWORD_PROMPT:
            self._fail(AquosTvUnresponsiveError("Handshake: failed to login (TV does not respond)"))
        elif self.state == LoginState.AWAIT_OUTCOME:
            if not self.silent_outcome_is_success:
                self._fail(AquosTvUnresponsiveError("Handshake: no response to password"))
            logger.debug("Handshake: no rejection; login succeeded")
            self.state = LoginState.DONE
        else:
            raise RuntimeError(f"Handshake: timeout in finished state {self.state.name}")
        return None

    def on_record(self, record: ResponseRecord) -> Optional[str]:
        """Handles a line (or stream error) received from the TV."""
        result: Optional[str] = None
        if self.state == LoginState.AWAIT_LOGIN_PROMPT:
            text = self._check_record(record)
            result = self._check_prompt(text, LOGIN_PROMPT, self.username, "username")
            logger.debug(f"Handshake: received login prompt {text!r}; sending username")
            self.state = LoginState.AWAIT_PASSWORD_PROMPT
        elif self.state == LoginState.AWAIT_PASSWORD_PROMPT:
            text = self._check_record(record)
            result = self._check_prompt(text, PASSWORD_PROMPT, self.password, "password")
            logger.debug(f"Handshake: received password prompt {text!r}; sending password")
            self.state = LoginState.AWAIT_OUTCOME
        elif self.state == LoginState.AWAIT_OUTCOME:
            text = self._check_record(record)
            self._fail(AquosTvLoginRejectedError(f"Handshake: failed to login ({text})", text))
        else:
            raise RuntimeError(f"Handshake: unexpected {record} in finished state {self.state.name}")
        return result

async def run_login_handshake(
        handshake: LoginHandshake,
        receive: Callable[[], Awaitable[ResponseRecord]],
        send: Callable[[str], Awaitable[None]],
        timer: Timer,
        timeout_secs: float,
      ) -> None:
    """Drives a LoginHandshake to completion.

    Args:
        handshake: The state machine to drive.
        receive:   Returns the next record received from the TV.
        send:      Sends one line of text to the TV.
        timer:     Source of timeouts.
        timeout_secs: The timeout for each step.

    Raises an AquosTvHandshakeError or AquosTvConnectionError on failure.
    """
    while not handshake.is_finished:
        reply: Optional[str]
        try:
            record = await timer.wait_for(receive(), timeout_secs)
        except asyncio.TimeoutError:
            reply = handshake.on_timeout()
        else:
            reply = handshake.on_record(record)
        if reply is not None:
            await send(reply)
