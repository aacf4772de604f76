# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV client configuration.

Provides a general config object for AQUOS TV client transports and clients.
"""

from __future__ import annotations

import os
import json

from ..internal_types import *
from ..exceptions import AquosTvError
from ..constants import (
    DEFAULT_PORT,
    DEFAULT_LOGIN_TIMEOUT,
    CONNECT_TIMEOUT,
  )

class AquosTvClientConfig:
    """AQUOS TV client configuration."""
    default_host: Optional[str]
    default_port: int
    username: str
    password: str
    login_timeout_secs: float
    connect_timeout_secs: float
    silent_login_outcome_is_success: bool

    def __init__(
            self,
            default_host: Optional[str]=None,
            username: Optional[str]=None,
            password: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            login_timeout_secs: Optional[float]=None,
            connect_timeout_secs: Optional[float]=None,
            silent_login_outcome_is_success: Optional[bool]=None,
            base_config: Optional[AquosTvClientConfig]=None,
            use_config_file: bool = True,
          ) -> None:
        """Creates a configuration for an AQUOS TV client.

           Args:
             default_host: The default hostname or IPV4 address of the TV.
                   may optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   If None, the default host will be taken from the
                     AQUOS_TV_HOST environment variable.
             username:
                   The login username. If None, the username will be taken
                   from the AQUOS_TV_USERNAME environment variable. If an empty
                   string or the environment variable is not found, no username
                   is configured, and connecting to a TV that requires login
                   will fail.
             password:
                   The login password. If None, the password will be taken
                   from the AQUOS_TV_PASSWORD environment variable.
             default_port: For TCP/IP transports, the default TCP/IP port number to use.
                    If None, the default port will be taken from the AQUOS_TV_PORT
                    environment variable. If that environment variable is not
                    found, DEFAULT_PORT (10002) will be used.
             login_timeout_secs:
                   How long to wait for each login prompt, and for a login
                   rejection, in seconds. If None or not positive, the
                   AQUOS_TV_LOGIN_TIMEOUT environment variable or
                   DEFAULT_LOGIN_TIMEOUT (0.2 seconds) is used.
             connect_timeout_secs:
                    The timeout for opening the TCP/IP connection, in seconds.
                    If None, the base configuration is used. If no base
                    configuration is provided, CONNECT_TIMEOUT is used.
             silent_login_outcome_is_success:
                    If True (the default), a TV that stays silent after the
                    password is sent is assumed to have accepted the login.
                    If False, the silence is reported as an error.
             base_config:
                     An optional base configuration to use.
             use_config_file:
                     If True and no base_config is provided, the JSON file named
                     by the AQUOS_TV_CONFIG_FILE environment variable, if any,
                     is loaded before environment variables are applied.
        """
        if base_config is None:
            self.init_from_defaults(use_config_file=use_config_file)
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if username is not None:
            self.username = username

        if password is not None:
            self.password = password

        if login_timeout_secs is not None and login_timeout_secs > 0:
            self.login_timeout_secs = login_timeout_secs

        if connect_timeout_secs is not None:
            self.connect_timeout_secs = connect_timeout_secs

        if silent_login_outcome_is_success is not None:
            self.silent_login_outcome_is_success = silent_login_outcome_is_success

    def init_from_defaults(self, use_config_file: bool=True) -> None:
        """Initializes the configuration from defaults."""
        self.default_host = None
        self.default_port = DEFAULT_PORT
        self.username = ''
        self.password = ''
        self.login_timeout_secs = DEFAULT_LOGIN_TIMEOUT
        self.connect_timeout_secs = CONNECT_TIMEOUT
        self.silent_login_outcome_is_success = True

        if use_config_file:
            config_file = os.environ.get('AQUOS_TV_CONFIG_FILE')
            if config_file is not None and config_file != '':
                with open(config_file, 'r') as f:
                    config_jsonable = json.load(f)
                self.update_from_jsonable(config_jsonable)

        default_host = os.environ.get('AQUOS_TV_HOST')
        if default_host is not None and default_host != '':
            self.default_host = default_host
        default_port_str = os.environ.get('AQUOS_TV_PORT')
        if default_port_str is not None and default_port_str != '':
            self.default_port = _parse_int(default_port_str, 'AQUOS_TV_PORT')
        username = os.environ.get('AQUOS_TV_USERNAME')
        if username is not None and username != '':
            self.username = username
        password = os.environ.get('AQUOS_TV_PASSWORD')
        if password is not None and password != '':
            self.password = password
        login_timeout_str = os.environ.get('AQUOS_TV_LOGIN_TIMEOUT')
        if login_timeout_str is not None and login_timeout_str != '':
            login_timeout_secs = _parse_float(login_timeout_str, 'AQUOS_TV_LOGIN_TIMEOUT')
            if login_timeout_secs > 0:
                self.login_timeout_secs = login_timeout_secs

    def init_from_base_config(self, base_config: AquosTvClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.username = base_config.username
        self.password = base_config.password
        self.login_timeout_secs = base_config.login_timeout_secs
        self.connect_timeout_secs = base_config.connect_timeout_secs
        self.silent_login_outcome_is_success = base_config.silent_login_outcome_is_success

    def to_jsonable(self) -> JsonableDict:
        """Returns a JSON-serializable representation of the configuration."""
        result: JsonableDict = dict(
            default_host=self.default_host,
            default_port=self.default_port,
            username=self.username,
            password=self.password,
            login_timeout_secs=self.login_timeout_secs,
            connect_timeout_secs=self.connect_timeout_secs,
            silent_login_outcome_is_success=self.silent_login_outcome_is_success,
          )
        return result

    def to_json(self) -> str:
        """Returns a JSON representation of the configuration."""
        return json.dumps(self.to_jsonable())

    def update_from_jsonable(self, jsonable: JsonableDict) -> None:
        """Updates the configuration from a JSON-serializable representation.
           Missing, null or empty values are ignored."""
        default_host = jsonable.get('default_host')
        if default_host is not None and default_host != '':
            self.default_host = str(default_host)
        default_port = jsonable.get('default_port')
        if default_port is not None and default_port != '':
            self.default_port = _parse_int(default_port, 'default_port')
        username = jsonable.get('username')
        if username is not None and username != '':
            self.username = str(username)
        password = jsonable.get('password')
        if password is not None and password != '':
            self.password = str(password)
        login_timeout_secs = jsonable.get('login_timeout_secs')
        if login_timeout_secs is not None and login_timeout_secs != '':
            self.login_timeout_secs = _parse_float(login_timeout_secs, 'login_timeout_secs')
        connect_timeout_secs = jsonable.get('connect_timeout_secs')
        if connect_timeout_secs is not None and connect_timeout_secs != '':
            self.connect_timeout_secs = _parse_float(connect_timeout_secs, 'connect_timeout_secs')
        silent_login_outcome_is_success = jsonable.get('silent_login_outcome_is_success')
        if silent_login_outcome_is_success is not None and silent_login_outcome_is_success != '':
            self.silent_login_outcome_is_success = bool(silent_login_outcome_is_success)

    @classmethod
    def from_jsonable(cls, jsonable: JsonableDict, use_config_file: bool=True) -> AquosTvClientConfig:
        """Creates a configuration from a JSON-serializable representation."""
        result = cls(use_config_file=use_config_file)
        result.update_from_jsonable(jsonable)
        return result

    @classmethod
    def from_json(cls, json_str: str, use_config_file: bool=True) -> AquosTvClientConfig:
        """Creates a configuration from a JSON representation."""
        jsonable = json.loads(json_str)
        return cls.from_jsonable(jsonable, use_config_file=use_config_file)

    @classmethod
    def from_config_file(cls, filename: str) -> AquosTvClientConfig:
        """Creates a configuration from a JSON-serialized config file."""
        with open(filename, 'r') as f:
            jsonable: JsonableDict = json.load(f)

        result = cls.from_jsonable(jsonable, use_config_file=False)
        return result

    def __str__(self) -> str:
        # password is not included
        return (
            f"AquosTvClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"username={self.username!r}, "
            f"login_timeout_secs={self.login_timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)

def _parse_int(value: Jsonable, name: str) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise AquosTvError(f"Invalid integer value for {name}: {value!r}") from e

def _parse_float(value: Jsonable, name: str) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise AquosTvError(f"Invalid numeric value for {name}: {value!r}") from e
