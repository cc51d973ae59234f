"""Exceptions raised by globalenv.

Every failure surfaces to the caller as an ``EnvError`` subclass. Nothing is
retried or recovered internally.
"""


class EnvError(Exception):
    """Base class for all globalenv failures."""

    pass


class UnsupportedShellError(EnvError):
    """Raised when the user's shell is not zsh or bash."""

    def __init__(self, shell: str) -> None:
        self.shell = shell
        super().__init__(f"Unsupported shell: {shell!r} (expected zsh or bash)")


class PersistenceIOError(EnvError):
    """Raised when reading or writing the registry or rc file fails."""

    pass


class EnvVarError(EnvError):
    """Raised when a required process variable ($HOME, $SHELL) is missing."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Environment variable {name} is not set")


class InvalidAssignmentError(EnvError, ValueError):
    """Raised when a variable name or value cannot be persisted safely."""

    pass
