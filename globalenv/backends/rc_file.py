"""Shell startup file backend (zsh / bash).

Variables are persisted as ``export NAME=VALUE`` lines:

- zsh:  ~/.zshenv
- bash: ~/.bashrc

The file is treated as a flat list of lines. Lines we did not write are
never touched.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path, PurePath

from globalenv.backends.base import EnvPersistenceBackend
from globalenv.config import GlobalEnvConfig
from globalenv.enums import ShellKind
from globalenv.errors import EnvVarError, PersistenceIOError, UnsupportedShellError
from globalenv.models import EnvironmentAssignment, ShellProfile
from globalenv.services.runtime_env_service import RuntimeEnvService

logger = logging.getLogger(__name__)

PROFILE_FILES: dict[ShellKind, str] = {
    ShellKind.ZSH: ".zshenv",
    ShellKind.BASH: ".bashrc",
}


def _require(runtime_env: RuntimeEnvService, key: str) -> str:
    value = runtime_env.get(key)
    if not value:
        raise EnvVarError(key)
    return value


def detect_shell(shell: str) -> ShellKind:
    """Map a shell path or name (``/bin/zsh``, ``bash``) to a ShellKind."""
    name = PurePath(shell.strip()).name
    try:
        return ShellKind(name)
    except ValueError:
        raise UnsupportedShellError(shell) from None


def resolve_shell_profile(
    runtime_env: RuntimeEnvService,
    *,
    shell: str | None = None,
) -> ShellProfile:
    """Resolve the rc file for the user's shell.

    Args:
        runtime_env: Source of $SHELL and $HOME.
        shell: Optional override for $SHELL.

    Raises:
        EnvVarError: $SHELL (without override) or $HOME is unset.
        UnsupportedShellError: The shell is neither zsh nor bash.
    """
    shell_value = shell or _require(runtime_env, "SHELL")
    kind = detect_shell(shell_value)
    home = _require(runtime_env, "HOME")
    path = Path(home).expanduser() / PROFILE_FILES[kind]
    logger.debug("Resolved %s profile to %s", kind.value, path)
    return ShellProfile(rc_file=path, shell=kind.value)


def _split_lines(text: str) -> list[str]:
    """Split on '\\n' only, keeping line endings."""
    parts = text.split("\n")
    lines = [p + "\n" for p in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _last_export_value(lines: list[str], name: str) -> str | None:
    """Value of the last `export NAME=` line; the one a sourcing shell keeps."""
    prefix = f"export {name}="
    value: str | None = None
    for line in lines:
        if line.startswith(prefix):
            value = _strip_eol(line)[len(prefix):]
    return value


class RcFileBackend(EnvPersistenceBackend):
    """Persist variables as export lines in a shell startup file."""

    def __init__(self, profile: ShellProfile) -> None:
        if profile.rc_file is None:
            raise ValueError("RcFileBackend requires a profile with an rc_file")
        self._profile = profile

    @classmethod
    def from_config(
        cls,
        config: GlobalEnvConfig,
        runtime_env: RuntimeEnvService,
    ) -> RcFileBackend:
        """Build a backend, resolving the profile up front.

        Resolution errors surface here, before anything is mutated.
        """
        explicit = config.rc_file_path()
        if explicit is not None:
            return cls(ShellProfile(rc_file=explicit, shell=config.shell))
        return cls(resolve_shell_profile(runtime_env, shell=config.shell))

    @property
    def profile(self) -> ShellProfile:
        return self._profile

    @property
    def path(self) -> Path:
        assert self._profile.rc_file is not None
        return self._profile.rc_file

    def _read_lines(self) -> list[str]:
        # surrogateescape lets non-UTF-8 bytes in the user's profile round-trip.
        try:
            with self.path.open("r", encoding="utf-8", errors="surrogateescape", newline="") as f:
                return _split_lines(f.read())
        except FileNotFoundError:
            return []
        except OSError as e:
            raise PersistenceIOError(f"Cannot read {self.path}: {e}") from e

    def _write_atomic(self, text: str) -> None:
        """Replace the profile with *text* without truncating it in place.

        Symlinked profiles (dotfile managers) are written through to their target.
        """
        target = self.path.resolve()
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                f.write(text)
            os.chmod(tmp, stat.S_IMODE(target.stat().st_mode))
            os.replace(tmp, target)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def set(self, assignment: EnvironmentAssignment) -> bool:
        line = assignment.export_line()
        lines = self._read_lines()

        # Only the last definition counts when the file is sourced.
        if _last_export_value(lines, assignment.name) == assignment.value:
            logger.debug("%s already exported in %s; skipping write", assignment.name, self.path)
            return False

        # Don't glue our export onto an unterminated last line.
        if lines and not lines[-1].endswith("\n"):
            line = "\n" + line

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8", errors="surrogateescape", newline="") as f:
                f.write(line)
        except OSError as e:
            raise PersistenceIOError(f"Cannot append to {self.path}: {e}") from e

        logger.info("Appended export for %s to %s", assignment.name, self.path)
        return True

    def unset(self, name: str) -> bool:
        prefix = f"export {name}="
        lines = self._read_lines()
        kept = [line for line in lines if not line.startswith(prefix)]

        if len(kept) == len(lines):
            logger.debug("No export for %s in %s; skipping rewrite", name, self.path)
            return False

        try:
            self._write_atomic("".join(kept))
        except OSError as e:
            raise PersistenceIOError(f"Cannot rewrite {self.path}: {e}") from e

        logger.info("Removed %d export line(s) for %s from %s", len(lines) - len(kept), name, self.path)
        return True

    def get(self, name: str) -> str | None:
        return _last_export_value(self._read_lines(), name)
