# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV client abstract transport interface.

Provides a low-level abstract interface for sending a command to an AQUOS TV
and receiving its single response line. Does not provide session
establishment, handshake or authentication. Does not provide any higher-level
abstractions such as semantic commands or responses.

This abstraction allows for the implementation of proxies and alternate
transports.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from ..internal_types import *
from ..protocol import AquosCommand

from .client_transport_transaction import AquosTvClientTransportTransaction

class AquosTvClientTransport(ABC):
    """Abstract base class for AQUOS TV client transports."""

    @abstractmethod
    async def begin_transaction(self) -> None:
        """Acquires the transaction lock.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    async def end_transaction(self) -> None:
        """Releases the transaction lock.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    def transaction(self) -> AquosTvClientTransportTransaction:
        """Returns an async context manager that while entered will
           hold the transaction lock for this transport and provide
           a safe transact() method.

        Example:

           async with transport.transaction() as transaction:
               volume_text = await transaction.transact(AquosCommand.create("VOLM", "?"))
               await transaction.transact(AquosCommand.create("VOLM", int(volume_text) + 1))
        """
        return AquosTvClientTransportTransaction(self)

    @abstractmethod
    async def transact_no_lock(
            self,
            command: AquosCommand,
          ) -> str:
        """Sends a command and reads the single response line.

        Returns the response text. Raises AquosTvCommandError if the TV
        responds with "ERR".

        The caller must be holding the transaction lock. Ordinary users
        should use the transaction() context manager or call transact()
        instead.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    async def transact(
            self,
            command: AquosCommand,
          ) -> str:
        """Sends a command and reads the single response line.

        A transaction lock is held during the transaction to ensure that only one command
        is outstanding at a time. The protocol has no request IDs; responses are matched
        to commands purely by arrival order.
        """
        async with self.transaction() as transaction:
            return await transaction.transact(command)

    @abstractmethod
    def is_shutting_down(self) -> bool:
        """Returns True if the transport is shutting down or closed."""
        raise NotImplementedError()

    @abstractmethod
    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down. Does not wait for the transport to finish
           closing. Safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already shutting down or closed.

        Does not raise an exception based on final status.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    async def wait(self) -> None:
        """Waits for complete shutdown/cleanup. Does not initiate shutdown
        Not safe to call from a callback.

        Returns immediately if the transport is already closed.
        Raises an exception if the final status of the transport is an exception.

        Must be implemented by a subclass.
        """
        raise NotImplementedError()

    # @overridable
    async def aclose(self, exc: Optional[BaseException] = None) -> None:
        """Closes the transport and waits for complete shutdown/cleanup.
        Not safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already closed.

        Raises an exception if the final status of the transport is an exception.

        May be overridden by subclasses. The default implementation simply calls
        shutdown() and then wait().
        """
        await self.shutdown(exc)
        await self.wait()

    async def __aenter__(self) -> AquosTvClientTransport:
        """Enters a context that will close the transport on exit."""
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        """Exits the context, closes the transport, and waits for complete shutdown/cleanup."""
        # Close the transport without raising an exception
        closer: asyncio.Task[None] = asyncio.ensure_future(self.aclose(exc))
        assert isinstance(closer, asyncio.Task)
        done, pending = await asyncio.wait([closer])
        assert len(done) == 1 and len(pending) == 0
        if exc is None:
            # raise the exception from the transport if there is one
            closer.result()
