# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV simple client connection API.

Provides a simple API for connecting to a TV and fetching its identity.
"""

from __future__ import annotations

from ..internal_types import *
from ..timer import Timer
from .client_transport import AquosTvClientTransport

from .tcp_connector import TcpAquosTvConnector
from .client_config import AquosTvClientConfig
from .client_impl import AquosTvClient

async def aquos_tv_transport_connect(
        host: Optional[str]=None,
        username: Optional[str]=None,
        password: Optional[str]=None,
        config: Optional[AquosTvClientConfig]=None,
        timer: Optional[Timer]=None,
      ) -> AquosTvClientTransport:
    """Create and initialize (including the login handshake)
       a transport for an AQUOS TV from a configuration.

    Args:
        host: The hostname or IPV4 address of the TV.
                may optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port.
                If None, the host will be taken from the
                AQUOS_TV_HOST environment variable.
        username:
                The login username. If None, the username will be taken
                from the config.
        password:
                The login password. If None, the password will be taken
                from the config.
        config: An AquosTvClientConfig object that specifies
                the default host, port, and credentials to use.
                If None, a default config will be created.
        timer:  The source of login handshake timeouts. If None, the event
                loop clock is used.
    """
    connector = TcpAquosTvConnector(
        host=host,
        username=username,
        password=password,
        config=config,
        timer=timer,
      )
    transport = await connector.connect()
    return transport

async def aquos_tv_connect(
        host: Optional[str]=None,
        username: Optional[str]=None,
        password: Optional[str]=None,
        config: Optional[AquosTvClientConfig]=None,
        timer: Optional[Timer]=None,
      ) -> AquosTvClient:
    """Create and initialize (including the login handshake and identity fetch)
       an AQUOS TV client from a configuration.

    If the identity cannot be fetched, the connection is closed and the error
    is raised.

    Args:
        host: The hostname or IPV4 address of the TV.
                may optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port.
                If None, the host will be taken from the
                AQUOS_TV_HOST environment variable.
        username:
                The login username. If None, the username will be taken
                from the config.
        password:
                The login password. If None, the password will be taken
                from the config.
        config: An AquosTvClientConfig object that specifies
                the default host, port, credentials, etc. to use.
                If None, a default config will be created.
        timer:  The source of login handshake timeouts.
    """
    config = AquosTvClientConfig(
        default_host=host,
        username=username,
        password=password,
        base_config=config
      )
    transport = await aquos_tv_transport_connect(
        config=config,
        timer=timer,
      )
    try:
        client = AquosTvClient(transport=transport)
        await client.fetch_identity()
    except BaseException:
        await transport.aclose()
        raise

    return client
