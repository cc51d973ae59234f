"""Windows registry backend.

Per-user variables live under ``HKEY_CURRENT_USER\\Environment`` as string
values. New processes started by Explorer pick them up; the current process
sees them through the runtime mirror done by the store.
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Any

from globalenv.backends.base import EnvPersistenceBackend
from globalenv.errors import PersistenceIOError
from globalenv.models import EnvironmentAssignment, ShellProfile

logger = logging.getLogger(__name__)


def _load_winreg() -> ModuleType:
    try:
        return importlib.import_module("winreg")
    except ImportError as e:
        raise PersistenceIOError("The Windows registry is not available on this platform") from e


class RegistryBackend(EnvPersistenceBackend):
    """Persist variables in the current user's Environment key.

    Args:
        registry_key: Subkey of HKEY_CURRENT_USER.
        registry: Module exposing the ``winreg`` API. Defaults to ``winreg``
            itself; tests pass an in-memory stand-in.
    """

    def __init__(self, registry_key: str = "Environment", registry: Any | None = None) -> None:
        self._registry_key = registry_key
        self._winreg = registry if registry is not None else _load_winreg()

    @property
    def profile(self) -> ShellProfile:
        return ShellProfile(registry_key=self._registry_key)

    def _open(self, access: int) -> Any:
        w = self._winreg
        try:
            return w.OpenKey(w.HKEY_CURRENT_USER, self._registry_key, 0, access)
        except OSError as e:
            raise PersistenceIOError(
                f"Cannot open HKEY_CURRENT_USER\\{self._registry_key}: {e}"
            ) from e

    def _value_type(self, value: str) -> int:
        # %VAR% references only expand when stored as REG_EXPAND_SZ.
        if value.count("%") >= 2:
            return self._winreg.REG_EXPAND_SZ
        return self._winreg.REG_SZ

    def set(self, assignment: EnvironmentAssignment) -> bool:
        w = self._winreg
        with self._open(w.KEY_SET_VALUE) as key:
            try:
                w.SetValueEx(key, assignment.name, 0, self._value_type(assignment.value), assignment.value)
            except OSError as e:
                raise PersistenceIOError(f"Cannot write registry value {assignment.name}: {e}") from e

        logger.info("Wrote %s to HKEY_CURRENT_USER\\%s", assignment.name, self._registry_key)
        return True

    def unset(self, name: str) -> bool:
        w = self._winreg
        with self._open(w.KEY_SET_VALUE) as key:
            try:
                w.DeleteValue(key, name)
            except OSError as e:
                # Includes FileNotFoundError for a value that is already gone.
                raise PersistenceIOError(f"Cannot delete registry value {name}: {e}") from e

        logger.info("Deleted %s from HKEY_CURRENT_USER\\%s", name, self._registry_key)
        return True

    def get(self, name: str) -> str | None:
        w = self._winreg
        with self._open(w.KEY_READ) as key:
            try:
                value, _value_type = w.QueryValueEx(key, name)
            except FileNotFoundError:
                return None
            except OSError as e:
                raise PersistenceIOError(f"Cannot read registry value {name}: {e}") from e
        return str(value)
