"""Persistence backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from globalenv.models import EnvironmentAssignment, ShellProfile


class EnvPersistenceBackend(ABC):
    """A store that outlives the current process.

    Implementations open the store, mutate it and close it on every call;
    no state is cached between calls.
    """

    @property
    @abstractmethod
    def profile(self) -> ShellProfile:
        """Where this backend persists variables."""

    @abstractmethod
    def set(self, assignment: EnvironmentAssignment) -> bool:
        """Persist *assignment*. Returns False when it was already present."""

    @abstractmethod
    def unset(self, name: str) -> bool:
        """Remove *name*. Returns False when there was nothing to remove."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Return the persisted value of *name*, or None."""
