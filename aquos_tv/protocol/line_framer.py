# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Splits the byte stream received from the TV into lines.
"""

from __future__ import annotations

from ..internal_types import *
from .constants import IGNORABLE_BYTES

def scan_line(
        buffer: Union[bytes, bytearray],
        at_eof: bool=False,
      ) -> Tuple[int, Optional[bytes]]:
    """Finds the next line in a buffer of bytes received from the TV.

    Leading '\\r', '\\n' and ':' bytes are skipped; the line runs up to (not
    including) the next such byte.

    Args:
        buffer: The bytes received so far and not yet consumed.
        at_eof: True if no more bytes will ever be appended to buffer.

    Returns:
        A tuple (n_consumed, line) where:
            n_consumed: The number of bytes at the front of buffer that
                        should be discarded.
            line:       The next line, or None if buffer does not yet
                        contain a complete line.
    """
    n = len(buffer)
    start = 0
    while start < n and buffer[start] in IGNORABLE_BYTES:
        start += 1

    for i in range(start, n):
        if buffer[i] in IGNORABLE_BYTES:
            return i + 1, bytes(buffer[start:i])

    if at_eof:
        if n > start:
            # trailing unterminated line
            return n, bytes(buffer[start:])
        return n, None

    return 0, None
