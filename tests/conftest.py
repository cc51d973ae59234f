"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from globalenv.config import ENV_PREFIX, GlobalEnvConfig
from globalenv.services.runtime_env_service import RuntimeEnvService


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep GLOBALENV_* variables and any stray .env file out of tests."""
    for field in GlobalEnvConfig.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{field.upper()}", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def home(tmp_path) -> Path:
    d = tmp_path / "home"
    d.mkdir()
    return d


@pytest.fixture
def environ(home) -> dict[str, str]:
    """A fake process environment for a zsh user."""
    return {"HOME": str(home), "SHELL": "/bin/zsh", "PATH": "/usr/bin:/bin"}


@pytest.fixture
def runtime_env(environ) -> RuntimeEnvService:
    return RuntimeEnvService(environ)


class FakeRegistryKey:
    def __init__(self, registry: "FakeWinreg", path: str, access: int) -> None:
        self.registry = registry
        self.path = path
        self.access = access
        self.closed = False

    def __enter__(self) -> "FakeRegistryKey":
        return self

    def __exit__(self, *exc) -> None:
        self.closed = True


class FakeWinreg:
    """In-memory stand-in exposing the subset of the winreg API we call."""

    HKEY_CURRENT_USER = 0x80000001
    KEY_READ = 0x20019
    KEY_SET_VALUE = 0x0002
    REG_SZ = 1
    REG_EXPAND_SZ = 2

    def __init__(self) -> None:
        self.keys: dict[str, dict[str, tuple[str, int]]] = {"Environment": {}}
        self.fail_writes = False
        self.opened: list[FakeRegistryKey] = []

    def OpenKey(self, root, sub_key, reserved=0, access=KEY_READ):  # noqa: N802
        assert root == self.HKEY_CURRENT_USER
        if sub_key not in self.keys:
            raise FileNotFoundError(2, "The system cannot find the file specified")
        key = FakeRegistryKey(self, sub_key, access)
        self.opened.append(key)
        return key

    def SetValueEx(self, key, value_name, reserved, value_type, value):  # noqa: N802
        if self.fail_writes or not key.access & self.KEY_SET_VALUE:
            raise PermissionError(5, "Access is denied")
        self.keys[key.path][value_name] = (value, value_type)

    def DeleteValue(self, key, value_name):  # noqa: N802
        if self.fail_writes or not key.access & self.KEY_SET_VALUE:
            raise PermissionError(5, "Access is denied")
        values = self.keys[key.path]
        if value_name not in values:
            raise FileNotFoundError(2, "The system cannot find the file specified")
        del values[value_name]

    def QueryValueEx(self, key, value_name):  # noqa: N802
        values = self.keys[key.path]
        if value_name not in values:
            raise FileNotFoundError(2, "The system cannot find the file specified")
        return values[value_name]


@pytest.fixture
def fake_winreg() -> FakeWinreg:
    return FakeWinreg()
