"""Shared test fixtures."""
from __future__ import annotations

from pathlib import Path

import pytest

from daily_buzzword.models import BuzzwordEntry
from daily_buzzword.providers.base import SourceProvider

SINGLE_SENSE_HTML = """\
<html><head><title>Word Central Daily Buzzword</title></head>
<body>
<div class="nav"><strong>Menu</strong> Home | Games</div>
<dl class="buzzword">
<dt class="hw">ebullient (<em>adjective</em>)</dt>
<dd class="def"><strong>:</strong> full of enthusiasm<br/><strong>:</strong> boiling over with excitement</dd>
<dd class="usage">&quot;Our team was ebullient after the win&#8212;even the coach danced,&quot; said Jos&#233;.</dd>
</dl>
<div class="quiz">
<div class="inst">Which word is a <em>synonym</em> of ebullient?</div>
<div class="q"><input type="radio" name="q1" correct="no" id="input_1"/><label for="input_1">A. gloomy</label></div>
<div class="q"><input type="radio" name="q1" correct="yes" id="input_2"/><label for="input_2">B. exuberant</label></div>
<div class="q"><input type="radio" name="q1" correct="no" id="input_3"/><label for="input_3">C. tired</label></div>
<div class="q"><input type="radio" name="q1" correct="no" id="input_4"/><label for="input_4">D. calm</label></div>
<div class="oncomplete">The answer is <strong>B</strong>. <em>Exuberant</em> means joyously unrestrained.</div>
</div>
<div class="creative"><strong>Write</strong> a story using today's word.</div>
</body></html>
"""

MULTI_SENSE_HTML = """\
<html><body>
<dt class="hw">clarion (<em>noun</em>)</dt>
<dd class="def">
<span class="sense"><span class="sn">1</span> <span class="dt"><strong>:</strong> a medieval trumpet</span></span>
<span class="sense"><span class="sn">2 a</span> <span class="dt"><strong>:</strong> the sound of a trumpet<br/><strong>:</strong> a sound like that of a trumpet</span></span>
<span class="sense"><span class="sn">3</span> <span class="dt"><strong>:</strong> a loud clear call</span></span>
</dd>
<dd class="usage">The speech was a clarion call to action.</dd>
<div class="inst">Fill in the blank: The bugle gave a ____ call.</div>
<div class="q"><input correct="no" id="input_1"/><label for="input_1">a. muted</label></div>
<div class="q"><input correct="no" id="input_2"/><label for="input_2">b. faint</label></div>
<div class="q"><input correct="yes" id="input_3"/><label for="input_3">c. clarion</label></div>
<div class="oncomplete">A clarion call is loud and clear.</div>
<div class="creative"></div>
</body></html>
"""

NO_QUIZ_HTML = """\
<dt class="hw">hubris (<em>noun</em>)</dt>
<dd class="def"><strong>:</strong> exaggerated pride or self-confidence</dd>
<dd class="usage">His hubris led to his downfall.</dd>
<div class="inst"></div>
<div class="oncomplete"></div>
<div class="creative"></div>
"""

SAMPLE_TOKENS = (
    "ebullient",
    ", as an adjective, means",
    "full of enthusiasm,",
    "boiling over with excitement,",
    "#USAGE#",
    "&quot;Our team was ebullient after the win&#8212;even the coach danced,&quot; said Jos&#233;.",
    "Which word is a <em>synonym</em> of ebullient?",
    "A. gloomy",
    "B. exuberant",
    "C. tired",
    "D. calm",
    "#ANSWER#",
    "b",
    "4",
    "The answer is <strong>B</strong>. <em>Exuberant</em> means joyously unrestrained.",
)


class FakeSource(SourceProvider):
    """Returns canned markup, or raises the given error."""

    def __init__(self, markup: str = "", error: Exception | None = None):
        self.markup = markup
        self.error = error
        self.fetch_count = 0

    async def fetch(self) -> str:
        self.fetch_count += 1
        if self.error is not None:
            raise self.error
        return self.markup

    def name(self) -> str:
        return "fake-source"


@pytest.fixture
def sample_entry():
    """An entry with two meanings, a usage example and a four-option quiz (answer b)."""
    return BuzzwordEntry(SAMPLE_TOKENS)


@pytest.fixture
def no_quiz_entry():
    return BuzzwordEntry((
        "hubris",
        ", as a noun, means",
        "exaggerated pride or self-confidence,",
        "#USAGE#",
        "His hubris led to his downfall.",
        "",
        "#ANSWER#",
        "",
        "0",
        "",
    ))


@pytest.fixture
def fake_source():
    return FakeSource(SINGLE_SENSE_HTML)


class FakeTTS:
    """Simple fake TTS that avoids AsyncMock's `name` attribute issue."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.synthesize_called = 0

    async def synthesize(self, text: str, output_path: Path) -> Path:
        self.synthesize_called += 1
        if self.error is not None:
            raise self.error
        output_path.write_bytes(b"fake mp3 data")
        return output_path

    def name(self) -> str:
        return "fake-tts"
