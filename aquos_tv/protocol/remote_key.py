# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Remote control key codes, sent as the argument of the RCKY command.
"""

from __future__ import annotations

from enum import IntEnum

class RemoteKey(IntEnum):
    """Numeric codes for emulated remote control keys."""
    DIGIT_0 = 0
    DIGIT_1 = 1
    DIGIT_2 = 2
    DIGIT_3 = 3
    DIGIT_4 = 4
    DIGIT_5 = 5
    DIGIT_6 = 6
    DIGIT_7 = 7
    DIGIT_8 = 8
    DIGIT_9 = 9
    REWIND = 15
    PLAY = 16
    FAST_FORWARD = 17
    PAUSE = 18
    SKIP_BACK = 19
    STOP = 20
    SKIP_FORWARD = 21
    MENU = 38
    ENTER = 40
    UP = 41
    DOWN = 42
    LEFT = 43
    RIGHT = 44
    RETURN = 45
    EXIT = 46

    @property
    def command_name(self) -> str:
        """The name of the corresponding entry in the named command table; e.g., "remote_key.play"."""
        return f"remote_key.{self.name.lower()}"
