"""Process-facing services package."""

from .runtime_env_service import RuntimeEnvService

__all__ = [
    "RuntimeEnvService",
]
