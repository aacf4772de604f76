# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV client abstract transport connector interface.

Provides a low-level abstract interface for objects that can create
transport connections (including the login handshake) to an AQUOS TV.
This abstraction allows for the implementation of proxies and alternate
transports.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..internal_types import *
from .client_transport import AquosTvClientTransport

class AquosTvConnector(ABC):
    """Abstract base class for AQUOS TV client transport connectors."""

    @abstractmethod
    async def connect(self) -> AquosTvClientTransport:
        """Create and initialize (including the login handshake)
           a client transport for the TV associated with this
           connector.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()
