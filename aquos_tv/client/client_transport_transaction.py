# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV client transport transaction context manager.
"""

from __future__ import annotations

from ..internal_types import *
from ..protocol import AquosCommand
if TYPE_CHECKING:
    from .client_transport import AquosTvClientTransport

class AquosTvClientTransportTransaction():
    """A context manager that holds the transaction lock on a transport and allows one or
       more transact() calls to be made with the lock held."""
    transport: AquosTvClientTransport
    context_entered: bool = False

    def __init__(self, transport: AquosTvClientTransport) -> None:
        self.transport = transport

    async def __aenter__(self) -> AquosTvClientTransportTransaction:
        """Enters a context that will release the transaction lock on exit."""
        assert not self.context_entered
        await self.transport.begin_transaction()
        self.context_entered = True
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        """Exits the context, releases the transaction lock."""
        assert self.context_entered
        self.context_entered = False
        await self.transport.end_transaction()

    async def transact(self, command: AquosCommand) -> str:
        """Sends a command and reads the single response line.

        If the context has not been entered, the transaction lock is held
        for the duration of this call only.
        """
        if not self.context_entered:
            async with self:
                return await self.transport.transact_no_lock(command)
        else:
            return await self.transport.transact_no_lock(command)
