"""Unit tests for client settings configuration."""

from pathlib import Path

from catalog_client.config import Settings


def test_settings_uses_project_env_file_independent_of_cwd():
    """Settings should always include the project's .env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_project_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_project_env in normalized
    assert str(Path(".env")) in normalized


def test_defaults_match_the_catalog_api():
    settings = Settings(_env_file=None)
    assert settings.api_base_url == "http://localhost:4000/api"
    assert settings.request_timeout == 10.0
    assert settings.propagation_timeout == 30.0


def test_env_prefix_and_trailing_slash(monkeypatch):
    monkeypatch.setenv("CATALOG_API_BASE_URL", "https://catalog.example.com/api/")
    monkeypatch.setenv("CATALOG_LOG_LEVEL_CACHE", "DEBUG")
    settings = Settings(_env_file=None)
    assert settings.api_base_url == "https://catalog.example.com/api"
    assert settings.log_level_cache == "DEBUG"
