"""Domain models for environment assignments and resolved profiles."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from globalenv.errors import InvalidAssignmentError

_FORBIDDEN_NAME_CHARS = ("=", "\x00", "\n", "\r")
_FORBIDDEN_VALUE_CHARS = ("\x00", "\n", "\r")


def validate_name(name: str) -> str:
    """Return *name* if it can be used as a variable name.

    Raises:
        InvalidAssignmentError: If the name is empty or contains '=', NUL or
            a line break.
    """
    if not isinstance(name, str) or not name:
        raise InvalidAssignmentError("Variable name must be a non-empty string")
    for ch in _FORBIDDEN_NAME_CHARS:
        if ch in name:
            raise InvalidAssignmentError(f"Variable name {name!r} contains {ch!r}")
    return name


class EnvironmentAssignment(BaseModel):
    """A single ``name=value`` pair to persist.

    Names follow the process environment's rules (no '='). Values may hold
    anything except line breaks, which would split the rc-file line.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        try:
            return validate_name(v)
        except InvalidAssignmentError as e:
            raise ValueError(str(e)) from e

    @field_validator("value")
    @classmethod
    def check_value(cls, v: str) -> str:
        for ch in _FORBIDDEN_VALUE_CHARS:
            if ch in v:
                raise ValueError(f"Variable value contains {ch!r}")
        return v

    @classmethod
    def build(cls, name: str, value: str) -> EnvironmentAssignment:
        """Create an assignment, mapping validation failures to InvalidAssignmentError."""
        try:
            return cls(name=name, value=value)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise InvalidAssignmentError(messages) from e

    def export_line(self) -> str:
        """Return the rc-file statement, newline included."""
        return f"export {self.name}={self.value}\n"


class ShellProfile(BaseModel):
    """Resolved backing store for persisted variables.

    Exactly one of ``registry_key`` / ``rc_file`` is set.
    """

    model_config = ConfigDict(frozen=True)

    registry_key: str | None = None
    rc_file: Path | None = None
    shell: str | None = None

    def describe(self) -> str:
        if self.rc_file is not None:
            return str(self.rc_file)
        return f"HKEY_CURRENT_USER\\{self.registry_key}"
