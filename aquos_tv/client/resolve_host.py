# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV host IP/Port resolver.

Resolves host strings such as "192.168.1.20", "tv.local:10002" or
"tcp://192.168.1.20:10002" into a TV hostname and port.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import AquosTvError
from .client_config import AquosTvClientConfig

async def resolve_tv_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
        config: Optional[AquosTvClientConfig]=None,
      ) -> HostAndPort:
    """Resolves a TV host string into a TCP/IP hostname and port.

        Args:
            host: The hostname or IPV4 address of the TV.
                    may optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    If None, the default host in config is used.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from the config.
            config: The configuration providing defaults. If None, a default
                    configuration is created.

        Returns:
            A tuple of (hostname: str, port: int).
    """
    config = AquosTvClientConfig(
        default_host=host,
        default_port=default_port,
        base_config=config
    )
    host = config.default_host
    if host is None or host == '':
        raise AquosTvError("No TV host specified (set AQUOS_TV_HOST or provide a host)")
    port = config.default_port

    if host.startswith('tcp://'):
        host = host[6:]
    elif '://' in host or '/' in host:
        raise AquosTvError(f"Invalid host specifier for TCP transport: '{host}'")

    if host.startswith('['):
        # bracketed IPv6 literal, with optional port
        i_close = host.find(']')
        if i_close < 0:
            raise AquosTvError(f"Invalid IPv6 host specifier: '{host}'")
        rest = host[i_close + 1:]
        host = host[1:i_close]
        if rest.startswith(':'):
            port = _parse_port(rest[1:], host)
        elif rest != '':
            raise AquosTvError(f"Invalid IPv6 host specifier: '{host}'")
    elif host.count(':') == 1:
        host, port_str = host.rsplit(':', 1)
        port = _parse_port(port_str, host)

    if host == '':
        raise AquosTvError("Empty host name in host specifier")

    return (host, port)

def _parse_port(port_str: str, host: str) -> int:
    try:
        port = int(port_str)
    except ValueError as e:
        raise AquosTvError(f"Invalid port number {port_str!r} for host '{host}'") from e
    if not 0 < port < 65536:
        raise AquosTvError(f"Port number {port} out of range for host '{host}'")
    return port
