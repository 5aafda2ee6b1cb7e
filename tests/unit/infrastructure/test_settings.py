"""
Unit tests for settings loading.
"""

import pytest
from pydantic import ValidationError

from huissier.config.settings import Settings, load_config


class TestSettings:
    """Unit tests for Settings validation."""

    def test_log_level_is_normalized(self):
        """Test log level is upper-cased."""
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_invalid_log_level(self):
        """Test unknown log level is rejected."""
        with pytest.raises(ValidationError):
            Settings(LOG_LEVEL="LOUD")

    def test_invalid_identity_backend(self):
        """Test unknown identity backend is rejected."""
        with pytest.raises(ValidationError):
            Settings(IDENTITY_BACKEND="ldap")

    def test_short_nonce_length(self):
        """Test nonce length below 8 is rejected."""
        with pytest.raises(ValidationError):
            Settings(NONCE_LENGTH=6)

    def test_cors_defaults_are_explicit(self):
        """Test default CORS origins never contain a wildcard."""
        assert "*" not in Settings().CORS_ORIGINS


class TestLoadConfig:
    """Unit tests for YAML and environment layering."""

    @pytest.fixture
    def project_root(self, tmp_path, monkeypatch):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "default.yaml").write_text(
            "NONCE_TTL_SECONDS: 120\nLOG_LEVEL: INFO\n"
        )
        (config_dir / "test.yaml").write_text("LOG_LEVEL: WARNING\n")
        monkeypatch.setenv("HUISSIER_ROOT", str(tmp_path))
        for name in ("ENV", "LOG_LEVEL", "NONCE_TTL_SECONDS"):
            monkeypatch.delenv(name, raising=False)
        return tmp_path

    def test_environment_yaml_overrides_default(self, project_root):
        """Test environment file wins over default.yaml."""
        settings = load_config(env="test")

        assert settings.LOG_LEVEL == "WARNING"
        assert settings.NONCE_TTL_SECONDS == 120

    def test_environment_variable_wins(self, project_root, monkeypatch):
        """Test environment variables win over YAML."""
        monkeypatch.setenv("NONCE_TTL_SECONDS", "600")

        settings = load_config(env="test")

        assert settings.NONCE_TTL_SECONDS == 600
