"""Persistence backends."""

from .base import EnvPersistenceBackend
from .rc_file import RcFileBackend, detect_shell, resolve_shell_profile
from .registry import RegistryBackend

__all__ = [
    "EnvPersistenceBackend",
    "RcFileBackend",
    "RegistryBackend",
    "detect_shell",
    "resolve_shell_profile",
]
