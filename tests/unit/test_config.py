"""
Unit tests for settings loading.
"""

import pytest
import yaml

from sysnav.config import (
    DEFAULT_ROOT_ID,
    ENV_OVERRIDES,
    Settings,
    load_settings,
    write_settings,
)
from sysnav.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for names in ENV_OVERRIDES.values():
        for name in names:
            monkeypatch.delenv(name, raising=False)


class TestLoadSettings:

    def test_defaults_without_file(self, tmp_path):
        settings = load_settings(tmp_path / "missing.yaml")
        assert settings.backend == "rest"
        assert settings.url is None
        assert settings.root_id == DEFAULT_ROOT_ID
        assert settings.root_name == "Root System"
        assert settings.timeout == 10.0

    def test_file_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"store": {"url": "https://a.example.co", "timeout": 3}}))

        settings = load_settings(path)
        assert settings.url == "https://a.example.co"
        assert settings.timeout == 3.0

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"store": {"url": "https://file.example.co"}}))
        monkeypatch.setenv("SYSNAV_URL", "https://env.example.co")

        assert load_settings(path).url == "https://env.example.co"

    def test_supabase_names_are_fallbacks(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://sb.example.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")

        settings = load_settings(tmp_path / "missing.yaml")
        assert settings.url == "https://sb.example.co"
        assert settings.api_key == "anon"

    def test_sysnav_name_wins_over_supabase(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://sb.example.co")
        monkeypatch.setenv("SYSNAV_URL", "https://sn.example.co")
        assert load_settings(tmp_path / "missing.yaml").url == "https://sn.example.co"

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("store: [unclosed")
        with pytest.raises(ConfigError, match="Malformed"):
            load_settings(path)

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_settings(path)

    def test_invalid_backend(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SYSNAV_BACKEND", "sqlite")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(tmp_path / "missing.yaml")


class TestWriteSettings:

    def test_round_trip(self, tmp_path):
        path = tmp_path / ".sysnav" / "config.yaml"
        written = write_settings(Settings(url="https://a.example.co", api_key="k"), path)

        assert written == path
        data = yaml.safe_load(path.read_text())
        assert data["version"] == "1.0"
        assert data["store"]["url"] == "https://a.example.co"
        assert load_settings(path).api_key == "k"
