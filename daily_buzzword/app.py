"""FastAPI application with all routes."""
from __future__ import annotations

import logging
from dataclasses import replace

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse

from daily_buzzword.audio import get_or_create_audio, sentence_hash, ssml_to_text
from daily_buzzword.config import Settings, load_settings, save_settings
from daily_buzzword.parsers.wordcentral_parser import WordCentralExtractor
from daily_buzzword.providers.base import SourceUnavailableError
from daily_buzzword.providers.source_wordcentral import WordCentralSource
from daily_buzzword.skill import SkillHandlers, build_skill, dispatch

app = FastAPI(title="Daily Buzzword")

# Global state (initialized in startup)
_settings: Settings | None = None
_skill: SkillHandlers | None = None

log = logging.getLogger("daily_buzzword.app")


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_skill() -> SkillHandlers:
    assert _skill is not None
    return _skill


def _get_source() -> WordCentralSource:
    return _source_for(get_settings())


def _source_for(s: Settings) -> WordCentralSource:
    return WordCentralSource(
        url=s.source_url,
        timeout=s.fetch_timeout,
        user_agent=s.user_agent,
        archive_date=s.archive_date,
    )


def _get_tts():
    s = get_settings()
    if s.tts_provider == "edge-tts":
        from daily_buzzword.providers.tts_edge import EdgeTTSProvider
        return EdgeTTSProvider(voice=s.tts_voice, rate=s.tts_rate)
    raise ValueError(f"Unknown TTS provider: {s.tts_provider}")


@app.on_event("startup")
async def startup():
    global _settings, _skill
    if _skill is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _skill = build_skill(_get_source())
    log.info("Skill ready, source %s", _settings.source_url)


# ── Skill endpoint ────────────────────────────────────────────────────────

@app.post("/skill")
async def skill_request(request: Request):
    envelope = await request.json()
    try:
        return await dispatch(get_skill(), envelope, app_id=get_settings().app_id)
    except ValueError as e:
        log.warning("Rejected skill request: %s", e)
        raise HTTPException(400, str(e))


# ── API: Entry preview ────────────────────────────────────────────────────

@app.get("/api/entry")
async def api_entry():
    try:
        raw = await _get_source().fetch()
    except SourceUnavailableError as e:
        raise HTTPException(502, str(e))
    entry = WordCentralExtractor().extract(raw)
    return {
        "headword": entry.headword,
        "available": entry.is_available,
        "tokens": list(entry.tokens),
    }


# ── API: Speech audio ─────────────────────────────────────────────────────

@app.post("/api/speech")
async def api_speech(request: Request):
    """Synthesize a turn's SSML speech. Returns the audio hash."""
    body = await request.json()
    text = ssml_to_text(body.get("ssml", ""))
    if not text:
        raise HTTPException(400, "No speech provided")

    try:
        tts = _get_tts()
    except ValueError as e:
        raise HTTPException(500, f"TTS error: {e}")
    audio_path = await get_or_create_audio(text, tts, get_settings().audio_cache_full_path)
    if audio_path is None:
        raise HTTPException(500, "TTS generation failed")
    return {"audio_hash": sentence_hash(text), "text": text}


@app.get("/api/audio/{audio_hash}.mp3")
async def api_audio(audio_hash: str):
    audio_path = get_settings().audio_cache_full_path / f"{audio_hash}.mp3"
    if not audio_path.exists():
        raise HTTPException(404, "Audio not found")
    return FileResponse(audio_path, media_type="audio/mpeg")


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    global _settings, _skill
    body = await request.json()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    s = replace(get_settings(), **{k: v for k, v in body.items() if k in known})
    # Source settings may have changed, rebuild before committing
    try:
        source = _source_for(s)
    except ValueError as e:
        raise HTTPException(400, f"Invalid settings: {e}")
    _settings = s
    _skill = build_skill(source)
    save_settings(s)
    return s.to_dict()
