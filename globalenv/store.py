"""Persistent environment store.

``PersistentEnvStore`` makes a variable visible both to the running process
and to processes started later:

- Windows: HKEY_CURRENT_USER\\Environment (RegistryBackend)
- Unix-like: ``export`` lines in ~/.zshenv or ~/.bashrc (RcFileBackend)

Order of operations for every call:
1. validate input
2. resolve the backend/profile
3. persist
4. mirror into the process environment

A failure in steps 1-3 leaves the process environment untouched.

Concurrent calls from several processes are not synchronized; the rc-file
read-modify-write can lose updates.
"""

from __future__ import annotations

import logging
import sys

from globalenv.backends.base import EnvPersistenceBackend
from globalenv.backends.rc_file import RcFileBackend
from globalenv.backends.registry import RegistryBackend
from globalenv.config import GlobalEnvConfig
from globalenv.enums import BackendKind
from globalenv.models import EnvironmentAssignment, validate_name
from globalenv.observability.redaction import redact_value
from globalenv.services.runtime_env_service import RuntimeEnvService

logger = logging.getLogger(__name__)


def select_backend_kind(config: GlobalEnvConfig, platform: str | None = None) -> BackendKind:
    """Resolve ``auto`` to a concrete backend for *platform*."""
    if config.backend != BackendKind.AUTO:
        return config.backend
    platform = platform or sys.platform
    return BackendKind.REGISTRY if platform == "win32" else BackendKind.RC_FILE


def create_backend(
    config: GlobalEnvConfig,
    runtime_env: RuntimeEnvService,
    *,
    platform: str | None = None,
) -> EnvPersistenceBackend:
    """Build the backend for the current platform and configuration."""
    kind = select_backend_kind(config, platform)
    if kind == BackendKind.REGISTRY:
        return RegistryBackend(config.registry_key)
    return RcFileBackend.from_config(config, runtime_env)


class PersistentEnvStore:
    """Set and unset variables beyond the lifetime of the current process.

    Args:
        config: Settings; defaults to ``GlobalEnvConfig()``.
        runtime_env: Process environment collaborator.
        backend: Fixed backend. When omitted a fresh one is built for every
            call, so changes to $SHELL/$HOME are always honoured.
    """

    def __init__(
        self,
        config: GlobalEnvConfig | None = None,
        runtime_env: RuntimeEnvService | None = None,
        backend: EnvPersistenceBackend | None = None,
    ) -> None:
        self.config = config or GlobalEnvConfig()
        self.runtime_env = runtime_env if runtime_env is not None else RuntimeEnvService()
        self._backend = backend

    def backend(self) -> EnvPersistenceBackend:
        if self._backend is not None:
            return self._backend
        return create_backend(self.config, self.runtime_env)

    def _loggable(self, name: str, value: str) -> str:
        if self.config.redact_values:
            return redact_value(name, value)
        return value

    def set(self, name: str, value: str) -> None:
        """Persist ``name=value`` and set it in the current process.

        Raises:
            InvalidAssignmentError: Bad name or value.
            UnsupportedShellError: $SHELL is not zsh/bash.
            EnvVarError: $SHELL or $HOME is unset.
            PersistenceIOError: The registry or rc file could not be written.
        """
        assignment = EnvironmentAssignment.build(name, value)
        backend = self.backend()

        written = backend.set(assignment)
        self.runtime_env.set(assignment.name, assignment.value)

        logger.info(
            "Set %s=%s (%s%s)",
            assignment.name,
            self._loggable(assignment.name, assignment.value),
            backend.profile.describe(),
            "" if written else ", already persisted",
        )

    def unset(self, name: str) -> None:
        """Remove *name* from the persisted store and the current process.

        Raises:
            InvalidAssignmentError: Bad name.
            UnsupportedShellError: $SHELL is not zsh/bash.
            EnvVarError: $SHELL or $HOME is unset.
            PersistenceIOError: The registry value is missing, or the store
                could not be rewritten.
        """
        validate_name(name)
        backend = self.backend()

        removed = backend.unset(name)
        self.runtime_env.unset(name)

        logger.info(
            "Unset %s (%s%s)",
            name,
            backend.profile.describe(),
            "" if removed else ", was not persisted",
        )

    def get(self, name: str) -> str | None:
        """Return the persisted value of *name* (not the process value)."""
        validate_name(name)
        return self.backend().get(name)
