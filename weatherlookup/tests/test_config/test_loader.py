"""Tests for config loading, env overrides, hashing and dotted access."""

from pathlib import Path

import pytest

from weatherlookup.config.loader import (
    API_KEY_ENV,
    config_hash,
    get_config_value,
    load_config,
)
from weatherlookup.config.schema import AppConfig


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        config = load_config(config_yaml_path)
        assert config.upstream.api_key == "file-key"
        assert config.cache.ttl_minutes == 15
        assert config.store.record_ttl_minutes == 30

    def test_empty_yaml_uses_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == AppConfig()

    def test_missing_file_uses_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        assert load_config(tmp_path / "nope.yaml") == AppConfig()

    def test_env_api_key_wins(self, config_yaml_path: Path, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        config = load_config(config_yaml_path)
        assert config.upstream.api_key == "env-key"
        assert config.upstream.base_url == "https://test-accuweather.example.com"


class TestConfigHash:
    def test_deterministic(self):
        assert config_hash(AppConfig()) == config_hash(AppConfig())

    def test_different_config_different_hash(self):
        c1 = AppConfig()
        c2 = AppConfig(cache={"ttl_minutes": 5})
        assert config_hash(c1) != config_hash(c2)

    def test_api_key_not_part_of_hash(self):
        c1 = AppConfig(upstream={"api_key": "a"})
        c2 = AppConfig(upstream={"api_key": "b"})
        assert config_hash(c1) == config_hash(c2)


class TestGetConfigValue:
    def test_dotted_key(self):
        assert get_config_value(AppConfig(), "cache.ttl_minutes") == 30

    def test_top_level(self):
        val = get_config_value(AppConfig(), "store")
        assert val.coordinate_tolerance == 0.01

    def test_invalid_key(self):
        with pytest.raises(KeyError):
            get_config_value(AppConfig(), "nonexistent.key")
