# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A single line (or terminal error) received from the TV.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import AquosTvError

class ResponseRecord(NamedTuple):
    """One framed line received from the TV, or the terminal failure of the
       stream. Exactly one of text and error is set."""

    text: Optional[str] = None
    """The decoded line, without its terminator."""

    error: Optional[AquosTvError] = None
    """The error that ended the stream, if this is the final record."""

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def __str__(self) -> str:
        if self.error is not None:
            return f"ResponseRecord(error={self.error!r})"
        return f"ResponseRecord({self.text!r})"
