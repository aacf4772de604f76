# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Type hints used throughout the package. Intended to be imported with
"from .internal_types import *".
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    AsyncContextManager,
    AsyncIterator,
    Awaitable,
    Callable,
    Coroutine,
    Dict,
    Iterable,
    List,
    Mapping,
    NamedTuple,
    NoReturn,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
    cast,
  )

from types import TracebackType

Jsonable = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
"""A type that can be serialized to JSON."""

JsonableDict = Dict[str, Jsonable]
"""A JSON-serializable dictionary."""

HostAndPort = Tuple[str, int]
"""A resolved (hostname, port) pair."""

T = TypeVar('T')
