# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import pytest

ENV_VARS = (
    "AQUOS_TV_HOST",
    "AQUOS_TV_PORT",
    "AQUOS_TV_USERNAME",
    "AQUOS_TV_PASSWORD",
    "AQUOS_TV_LOGIN_TIMEOUT",
    "AQUOS_TV_CONFIG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own TV settings out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
