"""Unit tests for application settings configuration."""

from pathlib import Path

from service_portal.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_staff_default_filter_defaults_to_pending():
    settings = Settings(_env_file=None)
    assert settings.staff_default_filter == "pending"


def test_unknown_staff_default_filter_falls_back_to_all():
    settings = Settings(_env_file=None, staff_default_filter="archived")
    assert settings.staff_default_filter == "all"


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("IDENTITY_BASE_URL", "https://auth.example.test")
    monkeypatch.setenv("LOG_LEVEL_SYNC", "DEBUG")

    settings = Settings(_env_file=None)

    assert settings.identity_base_url == "https://auth.example.test"
    assert settings.log_level_sync == "DEBUG"
