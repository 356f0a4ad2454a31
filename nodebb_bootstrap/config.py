from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError
from .packages import PackageManager

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Container configuration read from the environment once per start."""

    config_dir: Path = Path("/opt/config")
    nodebb_init_verb: str = "install"
    start_build: bool = False
    setup: str = ""
    package_manager: PackageManager = PackageManager.NPM
    override_update_lock: str = "false"  # passed through untouched, unused

    container_user: str = "nodebb"
    container_user_id: int = 1001
    container_grp_id: int = 1001
    uid: int | None = Field(default=None, ge=0)
    gid: int | None = Field(default=None, ge=0)

    app_dir: Path = Path("/usr/src/app")
    log_level: str = "DEBUG"

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("start_build", mode="before")
    @classmethod
    def _parse_start_build(cls, value: bool | str) -> bool:
        # only the literal "true" enables a build, anything else means no build
        if isinstance(value, bool):
            return value
        return value == "true"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"expected one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def config_path(self) -> Path:
        return self.config_dir / "config.json"

    @property
    def home_dir(self) -> Path:
        return Path("/home") / self.container_user

    @property
    def log_dir(self) -> Path:
        return self.app_dir / "logs"

    @property
    def nodebb_binary(self) -> Path:
        return self.app_dir / "nodebb"

    @property
    def identity_overridden(self) -> bool:
        return self.uid is not None or self.gid is not None

    def child_environment(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """Environment for child processes, with every resolved default exported."""

        environment = dict(os.environ if base is None else base)
        environment.update(
            {
                "CONFIG_DIR": str(self.config_dir),
                "CONFIG": str(self.config_path),
                "NODEBB_INIT_VERB": self.nodebb_init_verb,
                "START_BUILD": _flag(self.start_build),
                "SETUP": self.setup,
                "PACKAGE_MANAGER": self.package_manager.value,
                "OVERRIDE_UPDATE_LOCK": self.override_update_lock,
                "DEFAULT_USER": self.container_user,
                "DEFAULT_USER_ID": str(self.container_user_id),
                "DEFAULT_GROUP_ID": str(self.container_grp_id),
                "HOME_DIR": str(self.home_dir),
                "APP_DIR": str(self.app_dir),
                "HOME": str(self.home_dir),
                "LOG_DIR": str(self.log_dir),
            }
        )
        return environment


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _describe_error(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "settings"
        value = error.get("input")
        if field == "package_manager":
            messages.append(f"Unknown package manager: {value}")
        else:
            messages.append(f"Invalid value for {field.upper()}: {value!r} ({error['msg']})")
    return "; ".join(messages)


def load_settings(**overrides: object) -> Settings:
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        raise ConfigurationError(_describe_error(exc)) from exc
