# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Tests for resolving TV host strings."""

import asyncio

import pytest

from aquos_tv import AquosTvClientConfig, AquosTvError, resolve_tv_tcp_host


def _resolve(host, default_port=None, config=None):
    return asyncio.run(resolve_tv_tcp_host(host, default_port=default_port, config=config))


@pytest.mark.parametrize("host, expected", [
    ("192.168.1.20", ("192.168.1.20", 10002)),
    ("tv.local:10003", ("tv.local", 10003)),
    ("tcp://tv.local", ("tv.local", 10002)),
    ("tcp://192.168.1.20:10004", ("192.168.1.20", 10004)),
    ("[fe80::1]:10005", ("fe80::1", 10005)),
    ("[fe80::1]", ("fe80::1", 10002)),
    ("fe80::1", ("fe80::1", 10002)),
])
def test_host_forms(host, expected):
    assert _resolve(host) == expected


def test_default_port_argument():
    assert _resolve("tv.local", default_port=10010) == ("tv.local", 10010)
    assert _resolve("tv.local:10011", default_port=10010) == ("tv.local", 10011)


def test_host_from_config():
    config = AquosTvClientConfig("tv.local:10012")
    assert _resolve(None, config=config) == ("tv.local", 10012)


def test_host_from_environment(monkeypatch):
    monkeypatch.setenv("AQUOS_TV_HOST", "env.local")
    assert _resolve(None) == ("env.local", 10002)


@pytest.mark.parametrize("host", [
    "http://tv.local",
    "tv.local/path",
    "tv.local:port",
    "tv.local:70000",
    "tv.local:0",
    "[fe80::1",
    "[fe80::1]x",
    ":10002",
])
def test_invalid_host_strings(host):
    with pytest.raises(AquosTvError):
        _resolve(host)


def test_no_host():
    with pytest.raises(AquosTvError):
        _resolve(None)
