"""Test settings loading."""

import pytest
from pathlib import Path
from pydantic import ValidationError as PydanticValidationError

from session_sync.core.exceptions import ConfigurationError
from session_sync.core.settings import Settings, load_settings, get_settings, reload_settings


def test_defaults():
    settings = Settings()
    assert settings.session_count == 12
    assert settings.videos_per_session == 6
    assert settings.export.mode == "api"
    assert settings.export.row_window == 73
    assert settings.api.base_url == "http://localhost:3000"
    assert settings.storage_dir == Path("data") / "local_storage"
    assert settings.log_dir == Path("data") / "logs"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("SESSIONSYNC_SESSION_COUNT", "13")
    monkeypatch.setenv("SESSIONSYNC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SESSIONSYNC_API__BASE_URL", "https://sync.example.com/")

    settings = Settings()

    assert settings.session_count == 13
    assert settings.storage_dir == tmp_path / "local_storage"
    assert settings.api.base_url == "https://sync.example.com"


def test_yaml_config(tmp_path):
    config_path = tmp_path / "session_sync.yaml"
    config_path.write_text(f"""
data_dir: {tmp_path / 'data'}
session_count: 11
export:
  mode: direct
  spreadsheet_id: sheet-123
""")

    settings = load_settings(config_path)

    assert settings.session_count == 11
    assert settings.export.mode == "direct"
    assert settings.export.spreadsheet_id == "sheet-123"


def test_missing_config_file_uses_environment(tmp_path):
    assert load_settings(tmp_path / "absent.yaml").session_count == 12


def test_invalid_yaml(tmp_path):
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("session_count: [12\n")
    with pytest.raises(ConfigurationError):
        load_settings(config_path)


def test_non_mapping_yaml(tmp_path):
    config_path = tmp_path / "list.yaml"
    config_path.write_text("- 1\n- 2\n")
    with pytest.raises(ConfigurationError):
        load_settings(config_path)


@pytest.mark.parametrize("overrides", [
    {"session_count": 0},
    {"videos_per_session": -1},
    {"log_level": "LOUD"},
    {"export": {"mode": "email"}},
])
def test_invalid_values(overrides):
    with pytest.raises(PydanticValidationError):
        Settings(**overrides)


def test_get_settings_caches_and_creates_directories(monkeypatch, tmp_path):
    monkeypatch.setenv("SESSIONSYNC_DATA_DIR", str(tmp_path / "data"))

    first = reload_settings()
    assert get_settings() is first
    assert (tmp_path / "data" / "local_storage").is_dir()
    assert (tmp_path / "data" / "logs").is_dir()
