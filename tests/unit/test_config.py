"""Unit tests for GlobalEnvConfig configuration system."""

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from globalenv.config import GlobalEnvConfig
from globalenv.enums import BackendKind


class TestGlobalEnvConfigDefaults:
    """Tests for GlobalEnvConfig default values."""

    def test_default_backend(self):
        """Default backend is chosen from the platform."""
        assert GlobalEnvConfig().backend == BackendKind.AUTO

    def test_default_registry_key(self):
        assert GlobalEnvConfig().registry_key == "Environment"

    def test_default_shell_and_rc_file_unset(self):
        config = GlobalEnvConfig()
        assert config.shell is None
        assert config.rc_file is None
        assert config.rc_file_path() is None

    def test_default_logging(self):
        config = GlobalEnvConfig()
        assert config.log_level == "WARNING"
        assert config.redact_values is True


class TestGlobalEnvConfigEnvOverrides:
    """Tests for environment variable overrides."""

    def test_backend_override(self, monkeypatch):
        monkeypatch.setenv("GLOBALENV_BACKEND", "rc_file")
        assert GlobalEnvConfig().backend == BackendKind.RC_FILE

    def test_invalid_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("GLOBALENV_BACKEND", "dotenv")
        with pytest.raises(ValidationError):
            GlobalEnvConfig()

    def test_rc_file_override_expands_user(self, monkeypatch):
        monkeypatch.setenv("GLOBALENV_RC_FILE", "~/custom_profile")
        path = GlobalEnvConfig().rc_file_path()
        assert path is not None
        assert path == Path("~/custom_profile").expanduser()

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("GLOBALENV_LOG_LEVEL", "debug")
        assert GlobalEnvConfig().log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("GLOBALENV_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            GlobalEnvConfig()

    def test_dotenv_file_is_read(self, tmp_path):
        """The autouse fixture chdirs into tmp_path, where .env is looked up."""
        (tmp_path / ".env").write_text("GLOBALENV_SHELL=bash\n", encoding="utf-8")
        assert GlobalEnvConfig().shell == "bash"


class TestGlobalEnvConfigValidation:
    def test_registry_key_strips_backslashes(self):
        assert GlobalEnvConfig(registry_key="\\Environment\\").registry_key == "Environment"

    def test_empty_registry_key_rejected(self):
        with pytest.raises(ValidationError):
            GlobalEnvConfig(registry_key="  ")


class TestGlobalEnvConfigFromFile:
    """Tests for loading configuration from JSON/YAML files."""

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "globalenv.yml"
        path.write_text(yaml.safe_dump({"backend": "registry", "registry_key": "Custom"}))
        config = GlobalEnvConfig.from_file(path)
        assert config.backend == BackendKind.REGISTRY
        assert config.registry_key == "Custom"

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "globalenv.json"
        path.write_text(json.dumps({"shell": "bash", "redact_values": False}))
        config = GlobalEnvConfig.from_file(path)
        assert config.shell == "bash"
        assert config.redact_values is False

    def test_missing_file_uses_defaults(self, tmp_path):
        config = GlobalEnvConfig.from_file(tmp_path / "nope.yml")
        assert config.backend == BackendKind.AUTO

    def test_env_var_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "globalenv.yml"
        path.write_text(yaml.safe_dump({"shell": "zsh"}))
        monkeypatch.setenv("GLOBALENV_SHELL", "bash")
        assert GlobalEnvConfig.from_file(path).shell == "bash"

    def test_non_mapping_file_rejected(self, tmp_path):
        path = tmp_path / "globalenv.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            GlobalEnvConfig.from_file(path)
