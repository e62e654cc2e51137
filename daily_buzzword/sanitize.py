"""Text clean-up for the two kinds of raw text an entry carries.

Usage examples arrive entity-encoded and are normalised for speech; quiz and
explanation text arrive with inline markup and are stripped down to a small
set of characters that read cleanly on a card and through TTS.
"""
from __future__ import annotations

import re

_FOUR_DIGIT_REF = re.compile(r"&#[0-9]{4};")
# 100-299 covers the Latin-1 and Latin Extended-A letters used in loan words
_THREE_DIGIT_REF = re.compile(r"&#([1-2][0-9][0-9]);")

_OPEN_TAG = re.compile(r"<[a-z]*>")
_CLOSE_TAG = re.compile(r"</[a-z]*>")
_DISALLOWED = re.compile(r"[^a-zA-Z0-9 ,.\-!?:'\"]")


def normalize_for_speech(text: str) -> str:
    """Clean a usage example so it reads naturally when spoken."""
    text = text.replace("&quot;", "")
    text = text.replace("&#8212;", ",")
    text = text.replace("&#8216;", "'")
    text = text.replace("--", ", ")
    text = _FOUR_DIGIT_REF.sub("", text)
    # Only a dash followed by a space, hyphenated words stay intact
    text = text.replace("- ", ", ")
    text = text.replace(",,", ",")
    text = text.replace("_", "")

    m = _THREE_DIGIT_REF.search(text)
    while m:
        text = text[:m.start()] + chr(int(m.group(1))) + text[m.end():]
        m = _THREE_DIGIT_REF.search(text)
    return text


def strip_markup(text: str) -> str:
    """Remove simple tags and replace unexpected characters with spaces."""
    text = _OPEN_TAG.sub("", text)
    text = _CLOSE_TAG.sub("", text)
    return _DISALLOWED.sub(" ", text)
