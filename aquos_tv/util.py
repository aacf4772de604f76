# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
General utility functions
"""
from __future__ import annotations

from .internal_types import *

def full_class_name(o: object) -> str:
    """Return the full name of an object's class, including the module name."""
    cls = o.__class__
    module = cls.__module__
    if module == 'builtins':
        return cls.__qualname__
    return f"{module}.{cls.__qualname__}"

def exception_description(exc: BaseException) -> str:
    """Returns str(exc), or the class name of exc if str(exc) is empty."""
    result = str(exc)
    if result == '':
        result = exc.__class__.__name__
    return result

def decode_line(raw_data: Union[bytes, bytearray]) -> str:
    """Decodes one line of protocol text. Undecodable bytes are replaced
       rather than raising, so a garbled line still reaches the caller."""
    return bytes(raw_data).decode('utf-8', errors='replace')
