"""Render a turn's SSML speech to cached mp3 audio."""
from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from daily_buzzword.providers.base import TTSProvider

log = logging.getLogger("daily_buzzword.audio")

_SPELL_OUT = re.compile(r'<say-as interpret-as="spell-out">(.*?)</say-as>')
_PAUSE = re.compile(r"<break[^>]*/>|</?p>")
_TAG = re.compile(r"<[^>]+>")


def sentence_hash(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()[:16]


def ssml_to_text(ssml: str) -> str:
    """Flatten speech markup into plain text a generic TTS engine can read."""
    text = _SPELL_OUT.sub(lambda m: " ".join(m.group(1).upper()), ssml)
    text = _PAUSE.sub(" ", text)
    text = _TAG.sub("", text)
    return re.sub(r"\s{2,}", " ", text).strip()


async def get_or_create_audio(
    text: str,
    tts: TTSProvider,
    cache_dir: Path,
) -> Path | None:
    """Get cached audio or generate new TTS audio."""
    cache_dir.mkdir(parents=True, exist_ok=True)
    output_path = cache_dir / f"{sentence_hash(text)}.mp3"
    if output_path.exists():
        return output_path

    try:
        await tts.synthesize(text, output_path)
    except Exception as e:
        log.warning("TTS error (%s): %s", tts.name(), e)
        return None
    return output_path
