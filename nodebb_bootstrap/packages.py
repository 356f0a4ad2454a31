from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import ConfigurationError
from .process import Command

MANIFEST = "package.json"


@dataclass(frozen=True, slots=True)
class ManagerProfile:
    lockfile: str
    start_separator: bool


class PackageManager(str, Enum):
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"

    @classmethod
    def parse(cls, value: PackageManager | str) -> PackageManager:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown package manager: {value}") from None

    @property
    def profile(self) -> ManagerProfile:
        return _PROFILES[self]

    @property
    def lockfile(self) -> str:
        return self.profile.lockfile

    def install_command(self, cwd: Path | None = None) -> Command:
        return Command(
            argv=(self.value, "install"),
            failure_message=f"Failed to install dependencies with {self.value}",
            cwd=cwd,
        )

    def start_command(self, config: Path, cwd: Path | None = None) -> Command:
        # yarn forwards unknown flags to the script itself, npm and pnpm need "--"
        argv = [self.value, "start"]
        if self.profile.start_separator:
            argv.append("--")
        argv.extend([f"--config={config}", "--no-silent", "--no-daemon"])
        return Command(
            argv=tuple(argv),
            failure_message=f"Failed to start forum with {self.value}",
            cwd=cwd,
        )


_PROFILES: dict[PackageManager, ManagerProfile] = {
    PackageManager.NPM: ManagerProfile(lockfile="package-lock.json", start_separator=True),
    PackageManager.YARN: ManagerProfile(lockfile="yarn.lock", start_separator=False),
    PackageManager.PNPM: ManagerProfile(lockfile="pnpm-lock.yaml", start_separator=True),
}

LOCKFILES: tuple[str, ...] = tuple(profile.lockfile for profile in _PROFILES.values())
