"""Tests for configuration loading and saving."""
from __future__ import annotations

import json
from unittest.mock import patch

from daily_buzzword.config import DEFAULTS, Settings, load_settings, save_settings


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.source_url == DEFAULTS["source_url"]
        assert s.archive_date == ""
        assert s.fetch_timeout == 20.0
        assert s.tts_provider == "edge-tts"

    def test_to_dict(self):
        d = Settings().to_dict()
        assert d["app_id"] == ""
        assert len(d) == 9  # all fields present

    def test_to_dict_roundtrip(self):
        s = Settings(archive_date="2016-04-15", app_id="amzn1.ask.skill.test")
        s2 = Settings(**s.to_dict())
        assert s2 == s

    def test_audio_cache_under_project_root(self):
        s = Settings(audio_cache_dir="cache")
        assert s.audio_cache_full_path == s.project_root / "cache"


class TestLoadSaveSettings:
    def test_load_from_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"archive_date": "2016-04-15", "fetch_timeout": 5}))

        with patch("daily_buzzword.config.CONFIG_PATH", config_path):
            s = load_settings()
        assert s.archive_date == "2016-04-15"
        assert s.fetch_timeout == 5
        # Defaults for unspecified fields
        assert s.tts_voice == "en-US-GuyNeural"

    def test_load_missing_file(self, tmp_path):
        with patch("daily_buzzword.config.CONFIG_PATH", tmp_path / "nonexistent.json"):
            s = load_settings()
        assert s == Settings()

    def test_save_creates_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        with patch("daily_buzzword.config.CONFIG_PATH", config_path):
            save_settings(Settings(app_id="amzn1.ask.skill.test"))

        data = json.loads(config_path.read_text())
        assert data["app_id"] == "amzn1.ask.skill.test"

    def test_unknown_keys_ignored(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"tts_rate": "+10%", "llm_provider": "ollama"}))

        with patch("daily_buzzword.config.CONFIG_PATH", config_path):
            s = load_settings()
        assert s.tts_rate == "+10%"
        assert not hasattr(s, "llm_provider")
