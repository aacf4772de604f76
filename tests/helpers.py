# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Helpers shared by the aquos_tv tests."""

from __future__ import annotations

import asyncio
from typing import Callable, List


async def until(predicate: Callable[[], bool], max_iterations: int = 1000) -> None:
    """Yields to the event loop until predicate() is true."""
    for _ in range(max_iterations):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition was never reached")


async def eventually(predicate: Callable[[], bool], timeout_secs: float = 2.0) -> None:
    """Polls with real delays until predicate() is true, for socket-level effects."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_secs
    while not predicate():
        if loop.time() >= deadline:
            raise AssertionError("condition was never reached")
        await asyncio.sleep(0.01)


class RecordingWriter:
    """Stands in for an asyncio.StreamWriter and records everything written."""

    def __init__(self) -> None:
        self.data = bytearray()
        self.writes: List[bytes] = []
        self.closed = False
        self.fail_writes = False

    def write(self, data: bytes) -> None:
        if self.fail_writes:
            raise ConnectionResetError("connection reset by peer")
        self.writes.append(bytes(data))
        self.data.extend(data)

    async def drain(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True

    def is_closing(self) -> bool:
        return self.closed

    async def wait_closed(self) -> None:
        pass
