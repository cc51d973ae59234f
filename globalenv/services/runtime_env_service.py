"""Runtime environment variable service.

This service centralizes reads/writes to the process environment.

Why it exists:
- Backends and the store should avoid touching os.environ directly.
- Tests pass a plain dict instead of the real environment, so nothing
  leaks into the test process.

Note: This is intentionally small and synchronous.
"""

from __future__ import annotations

import os
from collections.abc import MutableMapping


class RuntimeEnvService:
    """Small wrapper around os.environ for runtime env mutation."""

    def __init__(self, environ: MutableMapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._environ.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._environ[str(key)] = str(value)

    def unset(self, key: str) -> None:
        self._environ.pop(str(key), None)

    def __contains__(self, key: object) -> bool:
        return key in self._environ
