from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "source_url": "http://www.wordcentral.com/buzzword/buzzword.php",
    "archive_date": "",
    "fetch_timeout": 20.0,
    "user_agent": "Mozilla/5.0 (compatible; DailyBuzzword/1.0)",
    "app_id": "",
    "tts_provider": "edge-tts",
    "tts_voice": "en-US-GuyNeural",
    "tts_rate": "+0%",
    "audio_cache_dir": "audio_cache",
}


@dataclass
class Settings:
    source_url: str = DEFAULTS["source_url"]
    archive_date: str = DEFAULTS["archive_date"]  # YYYY-MM-DD, empty for today
    fetch_timeout: float = DEFAULTS["fetch_timeout"]
    user_agent: str = DEFAULTS["user_agent"]
    app_id: str = DEFAULTS["app_id"]  # empty disables application id checks
    tts_provider: str = DEFAULTS["tts_provider"]
    tts_voice: str = DEFAULTS["tts_voice"]
    tts_rate: str = DEFAULTS["tts_rate"]
    audio_cache_dir: str = DEFAULTS["audio_cache_dir"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def audio_cache_full_path(self) -> Path:
        return self.project_root / self.audio_cache_dir

    def to_dict(self) -> dict:
        return {
            "source_url": self.source_url,
            "archive_date": self.archive_date,
            "fetch_timeout": self.fetch_timeout,
            "user_agent": self.user_agent,
            "app_id": self.app_id,
            "tts_provider": self.tts_provider,
            "tts_voice": self.tts_voice,
            "tts_rate": self.tts_rate,
            "audio_cache_dir": self.audio_cache_dir,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
