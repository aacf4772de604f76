# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package aquos_tv provides a command-line tool and API for controlling
Sharp AQUOS TVs via their line-oriented TCP/IP control protocol.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    AquosTvError,
    AquosTvConnectionError,
    AquosTvConnectionClosedError,
    AquosTvHandshakeError,
    AquosTvInvalidResponseError,
    AquosTvMissingCredentialError,
    AquosTvUnresponsiveError,
    AquosTvLoginRejectedError,
    AquosTvCommandError,
    AquosTvResponseParseError,
  )

from .constants import DEFAULT_PORT, DEFAULT_LOGIN_TIMEOUT, CONNECT_TIMEOUT

from .timer import Timer, AsyncioTimer, VirtualTimer

from .client import (
    AquosTvClient,
    resolve_tv_tcp_host,
    AquosTvClientTransport,
    TcpAquosTvClientTransport,
    AquosTvConnector,
    TcpAquosTvConnector,
    aquos_tv_transport_connect,
    aquos_tv_connect,
    AquosTvClientConfig,
  )

from .protocol import (
    AquosCommand,
    CommandMeta,
    RemoteKey,
    ResponseRecord,
    LoginHandshake,
    LoginState,
    get_all_commands,
    name_to_command_meta,
  )

from .util import (
    full_class_name,
    exception_description,
)
