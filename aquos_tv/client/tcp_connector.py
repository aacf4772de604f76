# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV TCP/IP client connector.

Provides a connector for an AquosTvClientTransport over a TCP/IP
socket.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import AquosTvError
from ..timer import Timer
from .connector import AquosTvConnector
from .client_transport import AquosTvClientTransport
from .client_config import AquosTvClientConfig

from .tcp_client_transport import TcpAquosTvClientTransport

class TcpAquosTvConnector(AquosTvConnector):
    """AQUOS TV TCP/IP client transport connector."""

    config: AquosTvClientConfig
    timer: Optional[Timer]

    def __init__(
            self,
            host: Optional[str]=None,
            username: Optional[str]=None,
            password: Optional[str]=None,
            port: Optional[int]=None,
            login_timeout_secs: Optional[float]=None,
            config: Optional[AquosTvClientConfig]=None,
            timer: Optional[Timer]=None,
          ) -> None:
        """Creates a connector that can create transports to
           an AQUOS TV that is reachable over TCP/IP.

              Args:
                host: The hostname or IPV4 address of the TV.
                      may optionally be prefixed with "tcp://".
                      May be suffixed with ":<port>" to specify a
                      non-default port, which will override the port argument.
                      If None, the host will be taken from the
                        AQUOS_TV_HOST environment variable.
                username:
                      The login username. If None, the username
                      will be taken from the AQUOS_TV_USERNAME
                      environment variable.
                password:
                      The login password. If None, the password
                      will be taken from the AQUOS_TV_PASSWORD
                      environment variable.
                port: The default TCP/IP port number to use. If None, the port
                      will be taken from AQUOS_TV_PORT. If that
                      environment variable is not found, the default AQUOS
                      control port (10002) will be used.
                login_timeout_secs: How long to wait for each login prompt.
                        If not provided, DEFAULT_LOGIN_TIMEOUT (0.2 seconds)
                        is used.
                config: An AquosTvClientConfig object that specifies
                        the default host, port, credentials, etc to use.
                        If None, a default config will be created.
                timer:  The source of login handshake timeouts. If None,
                        the event loop clock is used.
        """
        super().__init__()
        self.config = AquosTvClientConfig(
            default_host=host,
            default_port=port,
            login_timeout_secs=login_timeout_secs,
            username=username,
            password=password,
            base_config=config
          )
        self.timer = timer
        host = self.config.default_host
        if host is not None and '://' in host and not host.startswith('tcp://'):
            raise AquosTvError(f"Invalid host protocol specifier for TCP transport: '{host}'")

    # @abstractmethod
    async def connect(self) -> AquosTvClientTransport:
        """Create and initialize (including the login handshake)
           a TCP/IP client transport for the TV associated with this
           connector.
        """
        transport = TcpAquosTvClientTransport(config=self.config, timer=self.timer)
        # on error, the transport is closed before the error is raised
        await transport.connect()
        return transport

    def __str__(self) -> str:
        return f"TcpAquosTvConnector(host='{self.config.default_host}', port={self.config.default_port})"

    def __repr__(self) -> str:
        return str(self)
