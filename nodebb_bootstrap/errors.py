from __future__ import annotations


class BootstrapError(Exception):
    """Fatal error that stops the container bootstrap."""


class ConfigurationError(BootstrapError):
    pass


class FilesystemError(BootstrapError):
    pass


class SubprocessError(BootstrapError):
    pass


class IdentityError(BootstrapError):
    pass
