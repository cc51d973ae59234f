"""StrEnum definitions for type-safe constants."""

from enum import StrEnum


class BackendKind(StrEnum):
    """Persistence backends."""

    AUTO = "auto"
    REGISTRY = "registry"
    RC_FILE = "rc_file"


class ShellKind(StrEnum):
    """Shells whose startup file we know how to edit."""

    ZSH = "zsh"
    BASH = "bash"
