# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Tests for layered client configuration."""

import json

import pytest

from aquos_tv import AquosTvClientConfig, AquosTvError
from aquos_tv.constants import DEFAULT_PORT, DEFAULT_LOGIN_TIMEOUT, CONNECT_TIMEOUT


def test_defaults():
    config = AquosTvClientConfig()
    assert config.default_host is None
    assert config.default_port == DEFAULT_PORT == 10002
    assert config.username == ''
    assert config.password == ''
    assert config.login_timeout_secs == DEFAULT_LOGIN_TIMEOUT == 0.2
    assert config.connect_timeout_secs == CONNECT_TIMEOUT
    assert config.silent_login_outcome_is_success


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("AQUOS_TV_HOST", "tv.local")
    monkeypatch.setenv("AQUOS_TV_PORT", "10123")
    monkeypatch.setenv("AQUOS_TV_USERNAME", "admin")
    monkeypatch.setenv("AQUOS_TV_PASSWORD", "secret")
    monkeypatch.setenv("AQUOS_TV_LOGIN_TIMEOUT", "0.5")
    config = AquosTvClientConfig()
    assert config.default_host == "tv.local"
    assert config.default_port == 10123
    assert config.username == "admin"
    assert config.password == "secret"
    assert config.login_timeout_secs == 0.5


def test_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("AQUOS_TV_HOST", "tv.local")
    monkeypatch.setenv("AQUOS_TV_USERNAME", "admin")
    config = AquosTvClientConfig("192.168.1.20", "user1", "pass1", default_port=10003)
    assert config.default_host == "192.168.1.20"
    assert config.username == "user1"
    assert config.password == "pass1"
    assert config.default_port == 10003


def test_non_positive_login_timeout_uses_default(monkeypatch):
    assert AquosTvClientConfig(login_timeout_secs=0).login_timeout_secs == DEFAULT_LOGIN_TIMEOUT
    assert AquosTvClientConfig(login_timeout_secs=-1.0).login_timeout_secs == DEFAULT_LOGIN_TIMEOUT
    monkeypatch.setenv("AQUOS_TV_LOGIN_TIMEOUT", "0")
    assert AquosTvClientConfig().login_timeout_secs == DEFAULT_LOGIN_TIMEOUT


def test_invalid_port_environment_variable(monkeypatch):
    monkeypatch.setenv("AQUOS_TV_PORT", "tv")
    with pytest.raises(AquosTvError):
        AquosTvClientConfig()


def test_base_config_is_copied():
    base = AquosTvClientConfig("tv.local", "user1", "pass1", login_timeout_secs=0.3)
    config = AquosTvClientConfig(password="pass2", base_config=base)
    base.default_host = "other.local"
    assert config.default_host == "tv.local"
    assert config.username == "user1"
    assert config.password == "pass2"
    assert config.login_timeout_secs == 0.3


def test_json_round_trip_keeps_every_field():
    config = AquosTvClientConfig(
        "tv.local", "user1", "pass1",
        default_port=10004,
        login_timeout_secs=0.4,
        connect_timeout_secs=5.0,
        silent_login_outcome_is_success=False,
      )
    restored = AquosTvClientConfig.from_json(config.to_json(), use_config_file=False)
    assert restored.to_jsonable() == config.to_jsonable()


def test_config_file(tmp_path, monkeypatch):
    config_file = tmp_path / "aquos.json"
    config_file.write_text(json.dumps(dict(default_host="file.local", username="fileuser", default_port=10005)))
    monkeypatch.setenv("AQUOS_TV_CONFIG_FILE", str(config_file))
    monkeypatch.setenv("AQUOS_TV_USERNAME", "envuser")
    config = AquosTvClientConfig()
    assert config.default_host == "file.local"
    assert config.default_port == 10005
    # environment variables are applied after the config file
    assert config.username == "envuser"

    direct = AquosTvClientConfig.from_config_file(str(config_file))
    assert direct.username == "fileuser"


def test_str_does_not_reveal_password():
    config = AquosTvClientConfig("tv.local", "user1", "hunter2")
    assert "hunter2" not in str(config)
    assert "user1" in str(config)
