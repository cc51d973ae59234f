"""Globally set or unset environment variables (not just for the current process).

Example::

    from globalenv import set_var, unset_var

    set_var("ENVTEST", "TESTVALUE")
    unset_var("ENVTEST")
"""

from __future__ import annotations

from .config import GlobalEnvConfig
from .errors import (
    EnvError,
    EnvVarError,
    InvalidAssignmentError,
    PersistenceIOError,
    UnsupportedShellError,
)
from .models import EnvironmentAssignment, ShellProfile
from .store import PersistentEnvStore


def set_var(name: str, value: str, *, config: GlobalEnvConfig | None = None) -> None:
    """Set a variable persistently and in the current process."""
    PersistentEnvStore(config=config).set(name, value)


def unset_var(name: str, *, config: GlobalEnvConfig | None = None) -> None:
    """Unset a variable persistently and in the current process."""
    PersistentEnvStore(config=config).unset(name)


def get_var(name: str, *, config: GlobalEnvConfig | None = None) -> str | None:
    """Return the persisted value of a variable, or None."""
    return PersistentEnvStore(config=config).get(name)


__all__ = [
    "EnvError",
    "EnvVarError",
    "EnvironmentAssignment",
    "GlobalEnvConfig",
    "InvalidAssignmentError",
    "PersistenceIOError",
    "PersistentEnvStore",
    "ShellProfile",
    "UnsupportedShellError",
    "get_var",
    "set_var",
    "unset_var",
]
