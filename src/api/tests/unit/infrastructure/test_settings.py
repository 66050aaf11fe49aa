"""Unit tests for the pydantic settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from infrastructure.settings import AuthSettings, DatabaseSettings, Settings


class TestSettings:
    """Tests for the main settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WIT_API_BASE_URL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.api_base_url == "http://localhost:8080"
        assert settings.number_allocation_max_attempts == 5
        assert settings.cache_control_max_age == 300

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("WIT_API_BASE_URL", "https://wit.example.com/")
        monkeypatch.setenv("WIT_NUMBER_ALLOCATION_MAX_ATTEMPTS", "9")

        settings = Settings(_env_file=None)

        assert settings.api_base_url == "https://wit.example.com"
        assert settings.number_allocation_max_attempts == 9

    def test_max_attempts_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, number_allocation_max_attempts=0)


class TestDatabaseSettings:
    """Tests for database settings validation."""

    def test_pool_max_below_min_is_invalid(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(
                _env_file=None, pool_min_connections=5, pool_max_connections=2
            )

    def test_connection_string_hides_password(self):
        settings = DatabaseSettings(_env_file=None, password="s3cret")

        assert "s3cret" not in settings.connection_string


class TestAuthSettings:
    """Tests for key resolution."""

    def test_inline_key_wins_over_path(self, tmp_path):
        key_file = tmp_path / "public.pem"
        key_file.write_text("FROM FILE")

        settings = AuthSettings(
            _env_file=None, public_key="INLINE", public_key_path=key_file
        )

        assert settings.resolve_public_key_pem() == "INLINE"

    def test_key_is_read_from_path(self, tmp_path):
        key_file = tmp_path / "private.pem"
        key_file.write_text("FROM FILE")

        settings = AuthSettings(_env_file=None, private_key_path=key_file)

        assert settings.resolve_private_key_pem() == "FROM FILE"
        assert settings.resolve_public_key_pem() is None
