from __future__ import annotations

from pathlib import Path

from daily_buzzword.providers.base import TTSProvider

DEFAULT_VOICE = "en-US-GuyNeural"


class EdgeTTSProvider(TTSProvider):
    """Reads a flattened buzzword turn aloud with an Edge neural voice.

    The rate is an edge-tts percentage such as "-10%", so spelled-out
    headwords can be slowed down without changing the voice.
    """

    def __init__(self, voice: str = DEFAULT_VOICE, rate: str = "+0%"):
        self.voice = voice
        self.rate = rate

    async def synthesize(self, text: str, output_path: Path) -> Path:
        import edge_tts

        speaker = edge_tts.Communicate(text, self.voice, rate=self.rate)
        await speaker.save(str(output_path))
        return output_path

    def name(self) -> str:
        # The rate changes the audio, so cached clips are told apart by it
        if self.rate == "+0%":
            return f"buzzword-edge-tts/{self.voice}"
        return f"buzzword-edge-tts/{self.voice}@{self.rate}"
