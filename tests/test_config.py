"""Tests for environment-driven settings."""

from pathlib import Path

import pytest

from prepdrill.classroom import DEFAULT_PROGRESS_DB
from prepdrill.utils import load_settings


ENV_VARS = ["PREPDRILL_DATA_DIR", "PREPDRILL_CATALOG", "PREPDRILL_PROGRESS_DB", "PREPDRILL_LOG_LEVEL"]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        # Recorded as unset so values loaded from .env files are removed on undo
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestLoadSettings:

    def test_defaults(self, clean_env, tmp_path):
        settings = load_settings(tmp_path / "missing.env")
        assert settings.data_dir == Path("data")
        assert settings.catalog_path == Path("data") / "datasets.yaml"
        assert settings.progress_db == DEFAULT_PROGRESS_DB
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, clean_env, tmp_path):
        clean_env.setenv("PREPDRILL_DATA_DIR", str(tmp_path))
        clean_env.setenv("PREPDRILL_PROGRESS_DB", str(tmp_path / "p.db"))
        clean_env.setenv("PREPDRILL_LOG_LEVEL", "debug")
        settings = load_settings(tmp_path / "missing.env")
        assert settings.catalog_path == tmp_path / "datasets.yaml"
        assert settings.progress_db == tmp_path / "p.db"
        assert settings.log_level == "DEBUG"

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("PREPDRILL_CATALOG=catalogs/mine.yaml\n", encoding="utf-8")
        settings = load_settings(env_file)
        assert settings.catalog_path == Path("catalogs/mine.yaml")
