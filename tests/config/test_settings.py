"""Tests for settings models and the settings loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from movievault.config.loader import SettingsLoader, load_settings, require_api_key
from movievault.config.models.api_settings import RetrySettings, TMDBSettings
from movievault.config.models.app_settings import LoggingSettings
from movievault.config.models.cache_settings import CacheSettings
from movievault.config.models.settings import Settings
from movievault.shared.errors import ApplicationError, ErrorCode, SecurityError


class TestSettingsDefaults:
    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.tmdb.language == "en-US"
        assert settings.tmdb.timeout == 30
        assert settings.tmdb.force_refresh is False
        assert settings.retry.max_attempts == 3
        assert settings.retry.initial_backoff == pytest.approx(1.0)
        assert settings.cache.enabled is True
        assert settings.cache.path == "./data/cache.db"
        assert settings.cache.ttl.days == 30
        assert settings.logging.level == "INFO"

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: RetrySettings(max_attempts=0),
            lambda: RetrySettings(initial_backoff_ms=0),
            lambda: CacheSettings(ttl_days=0),
            lambda: LoggingSettings(level="LOUD"),
        ],
    )
    def test_invalid_values_rejected(self, factory) -> None:
        with pytest.raises(ValidationError):
            factory()

    def test_log_level_is_normalized(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_api_key_masked_in_repr(self) -> None:
        settings = TMDBSettings(api_key="super-secret-key")  # pragma: allowlist secret

        assert "super-secret-key" not in repr(settings)
        assert "****" in repr(settings)


class TestEnvironmentOverrides:
    def test_nested_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MOVIEVAULT_TMDB__LANGUAGE", "ja-JP")
        monkeypatch.setenv("MOVIEVAULT_CACHE__TTL_DAYS", "7")
        monkeypatch.setenv("MOVIEVAULT_CACHE__ENABLED", "false")

        settings = Settings()

        assert settings.tmdb.language == "ja-JP"
        assert settings.cache.ttl_days == 7
        assert settings.cache.enabled is False


class TestTomlLoading:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_toml_file(tmp_path / "missing.toml")

    def test_expands_variables_and_home(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Given
        monkeypatch.setenv("MOVIE_KEY", "from-env")
        monkeypatch.setenv("HOME", str(tmp_path))
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            '[tmdb]\napi_key = "${MOVIE_KEY}"\nrate_limit_delay_ms = 100\n\n'
            '[cache]\npath = "~/movies/cache.db"\nttl_days = 14\n',
            encoding="utf-8",
        )

        # When
        settings = Settings.from_toml_file(config_file)

        # Then
        assert settings.tmdb.api_key == "from-env"
        assert settings.tmdb.rate_limit_delay_ms == 100
        assert settings.cache.path == str(tmp_path / "movies" / "cache.db")
        assert settings.cache.ttl_days == 14


class TestLoader:
    def test_load_settings_falls_back_to_tmdb_api_key(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("TMDB_API_KEY", "fallback-key")

        settings = load_settings()

        assert settings.tmdb.api_key == "fallback-key"

    def test_explicit_file_wins_over_fallback(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("TMDB_API_KEY", "fallback-key")
        config_file = tmp_path / "movievault.toml"
        config_file.write_text('[tmdb]\napi_key = "file-key"\n', encoding="utf-8")

        assert load_settings(config_file).tmdb.api_key == "file-key"

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            load_settings(tmp_path / "nope.toml")
        assert exc_info.value.code == ErrorCode.CONFIG_ERROR

    def test_invalid_values_become_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[retry]\nmax_attempts = -1\n", encoding="utf-8")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(config_file)
        assert exc_info.value.code == ErrorCode.CONFIG_ERROR

    def test_config_file_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        config_file = tmp_path / "env.toml"
        config_file.write_text('[tmdb]\nlanguage = "es-ES"\n', encoding="utf-8")
        monkeypatch.setenv("MOVIEVAULT_CONFIG_FILE", str(config_file))

        assert load_settings().tmdb.language == "es-ES"

    def test_require_api_key(self) -> None:
        settings = Settings()

        with pytest.raises(SecurityError) as exc_info:
            require_api_key(settings)
        assert exc_info.value.code == ErrorCode.MISSING_CONFIG

        settings.tmdb.api_key = " key "  # pragma: allowlist secret
        assert require_api_key(settings) == "key"

    def test_singleton_loads_dotenv_once(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        # Given a .env file in the working directory
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("TMDB_API_KEY=dotenv-key\n", encoding="utf-8")
        loader = SettingsLoader()

        # When
        first = loader.get_config()
        second = loader.get_config()

        # Then
        assert first is second
        assert first.tmdb.api_key == "dotenv-key"
