# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Timeout sources.

The login handshake races each read against a short timeout. The race is
performed through a Timer so that tests can substitute a VirtualTimer and
advance time explicitly instead of sleeping.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from .internal_types import *

class Timer(ABC):
    """Abstract source of timeouts."""

    @abstractmethod
    async def wait_for(self, aw: Awaitable[T], timeout_secs: float) -> T:
        """Waits for aw to complete, with timeout.

        Returns the result of aw. If the timeout expires first, aw is cancelled
        and asyncio.TimeoutError is raised.
        """
        raise NotImplementedError()

class AsyncioTimer(Timer):
    """Wall-clock timer backed by the running event loop."""

    async def wait_for(self, aw: Awaitable[T], timeout_secs: float) -> T:
        return await asyncio.wait_for(aw, timeout_secs)

class VirtualTimer(Timer):
    """A timer whose clock only moves when advance() is called.

    Example:

        timer = VirtualTimer()
        waiter = asyncio.create_task(timer.wait_for(queue.get(), 0.2))
        await asyncio.sleep(0)
        timer.advance(0.2)      # waiter now raises asyncio.TimeoutError
    """

    now: float
    _deadlines: List[Tuple[float, asyncio.Future[None]]]

    def __init__(self, now: float=0.0) -> None:
        self.now = now
        self._deadlines = []

    @property
    def num_waiters(self) -> int:
        """The number of wait_for() calls currently waiting."""
        return sum(1 for _, expired in self._deadlines if not expired.done())

    def advance(self, secs: float) -> None:
        """Moves the clock forward, expiring every waiter whose deadline has passed."""
        self.now += secs
        remaining: List[Tuple[float, asyncio.Future[None]]] = []
        for deadline, expired in self._deadlines:
            if expired.done():
                continue
            if deadline <= self.now:
                expired.set_result(None)
            else:
                remaining.append((deadline, expired))
        self._deadlines = remaining

    async def wait_for(self, aw: Awaitable[T], timeout_secs: float) -> T:
        task = asyncio.ensure_future(aw)
        expired: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._deadlines.append((self.now + timeout_secs, expired))
        try:
            await asyncio.wait([task, expired], return_when=asyncio.FIRST_COMPLETED)
        except BaseException:
            task.cancel()
            raise
        finally:
            if not expired.done():
                expired.cancel()
        if task.done():
            return task.result()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        raise asyncio.TimeoutError()
