from __future__ import annotations

import pytest

SETTINGS_ENV = (
    "CONFIG_DIR",
    "NODEBB_INIT_VERB",
    "START_BUILD",
    "SETUP",
    "PACKAGE_MANAGER",
    "OVERRIDE_UPDATE_LOCK",
    "CONTAINER_USER",
    "CONTAINER_USER_ID",
    "CONTAINER_GRP_ID",
    "UID",
    "GID",
    "APP_DIR",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> None:
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
