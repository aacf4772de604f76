# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV client.

Provides a client for controlling an AQUOS TV over TCP/IP.
"""

from .resolve_host import resolve_tv_tcp_host
from .client_config import AquosTvClientConfig
from .client_transport import AquosTvClientTransport
from .tcp_client_transport import TcpAquosTvClientTransport
from .connector import AquosTvConnector
from .tcp_connector import TcpAquosTvConnector
from .simple import aquos_tv_transport_connect, aquos_tv_connect
from .client_impl import (
    AquosTvClient,
  )
