# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by aquos_tv"""

DEFAULT_PORT = 10002
"""The listen port number used by the TV for TCP/IP control."""

DEFAULT_LOGIN_TIMEOUT = 0.2
"""How long to wait for each login prompt or login outcome, in seconds. Also
   the window in which a TV that does not require login must stay silent."""

CONNECT_TIMEOUT = 30.0
"""The timeout for opening the TCP/IP connection to the TV, in seconds."""
