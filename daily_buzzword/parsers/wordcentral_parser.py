"""Extract the daily buzzword from a Word Central buzzword page.

The page has no structured data, so the entry is recovered by scanning for
the site's markup conventions inside the entry block:

  <dt class="hw">word (<em>part of speech</em>)</dt>
  <strong>:</strong> meaning<br/>...                 (single sense)
  <span class="sn">2 a</span> ... <strong>:</strong> meaning ...</span></span>
  <dd class="usage">...</dd>
  <div class="inst">...</div>
  <div class="q"> ... correct="yes" ... <label for="input_1">A. option</label>
  <div class="oncomplete">...</div>

The result is a flat token list (see BuzzwordEntry) with #USAGE# and
#ANSWER# sentinels between the sections.
"""
from __future__ import annotations

import logging

from daily_buzzword.models import ANSWER_MARKER, USAGE_MARKER, BuzzwordEntry
from daily_buzzword.parsers.base import EntryExtractor

log = logging.getLogger("daily_buzzword.extract")

HEADWORD_MARKER = '<dt class="hw">'
REGION_END_MARKER = '<div class="creative">'
POS_END_MARKER = "</em>"
MEANING_MARKER = "</strong> "
SENSE_MARKER = '<span class="sn">'
SENSE_NUMBER_END = "</span>"
SENSE_END_MARKER = "</span></span>"
USAGE_OPEN = '<dd class="usage">'
USAGE_CLOSE = "</dd>"
INSTRUCTIONS_OPEN = '<div class="inst">'
DIV_CLOSE = "</div>"
QUESTION_MARKER = '<div class="q">'
CORRECT_ATTR = 'correct="'
LABEL_OPEN = '<label for="input_'
LABEL_TEXT_START = '">'
LABEL_CLOSE = "</label>"
EXPLANATION_OPEN = '<div class="oncomplete">'


class MarkerNotFound(Exception):
    pass


class WordCentralExtractor(EntryExtractor):
    def extract(self, raw_markup: str) -> BuzzwordEntry:
        start = raw_markup.find(HEADWORD_MARKER)
        if start == -1:
            log.warning("No headword marker found, source unavailable")
            return BuzzwordEntry()
        start += len(HEADWORD_MARKER)
        end = raw_markup.find(REGION_END_MARKER, start)
        region = raw_markup[start:end] if end != -1 else raw_markup[start:]

        tokens: list[str] = []
        try:
            _scan_entry(region, tokens)
        except MarkerNotFound as e:
            log.warning("Entry markup incomplete (%s), keeping %d tokens", e, len(tokens))

        if tokens:
            log.info("Extracted '%s' as %d tokens", tokens[0], len(tokens))
        return BuzzwordEntry(tuple(tokens))

    def name(self) -> str:
        return "wordcentral"


def extract(raw_markup: str) -> BuzzwordEntry:
    return WordCentralExtractor().extract(raw_markup)


def _find(text: str, marker: str, start: int, end: int | None = None) -> int:
    at = text.find(marker, start) if end is None else text.find(marker, start, end)
    if at == -1:
        raise MarkerNotFound(marker)
    return at


def _between(text: str, open_marker: str, close_marker: str, start: int) -> tuple[str, int]:
    """Return the text inside the next open/close pair and the close position."""
    inner = _find(text, open_marker, start) + len(open_marker)
    close = _find(text, close_marker, inner)
    return text[inner:close].strip(), close


def _scan_entry(region: str, tokens: list[str]) -> None:
    paren = region.find("(")
    headword = region[:paren].strip() if paren != -1 else ""
    if not headword:
        raise MarkerNotFound("(")
    tokens.append(headword)

    pos_start = _find(region, ">", paren) + 1
    pos_end = _find(region, POS_END_MARKER, pos_start)
    part_of_speech = region[pos_start:pos_end].strip()
    article = "an" if part_of_speech[:1].lower() in tuple("aeiouh") else "a"
    tokens.append(f", as {article} {part_of_speech}, means")

    defs_end = region.find(USAGE_OPEN, pos_end)
    if defs_end == -1:
        defs_end = len(region)

    if region.rfind(SENSE_MARKER, pos_end, defs_end) == -1:
        tokens.extend(_meanings(region, pos_end, defs_end))
    else:
        tokens.extend(_senses(region, pos_end, defs_end))

    tokens.append(USAGE_MARKER)
    usage, cursor = _between(region, USAGE_OPEN, USAGE_CLOSE, pos_end)
    tokens.append(usage)

    instructions, cursor = _between(region, INSTRUCTIONS_OPEN, DIV_CLOSE, cursor)
    tokens.append(instructions)

    count = 0
    correct_position = 0
    answer_letter = ""
    question = region.find(QUESTION_MARKER, cursor)
    while question != -1:
        count += 1
        flag_start = _find(region, CORRECT_ATTR, question) + len(CORRECT_ATTR)
        flag_end = _find(region, '"', flag_start)
        if region[flag_start:flag_end] == "yes":
            correct_position = count

        label = _find(region, LABEL_OPEN, flag_end)
        text_start = _find(region, LABEL_TEXT_START, label) + len(LABEL_TEXT_START)
        text_end = _find(region, LABEL_CLOSE, text_start)
        option = region[text_start:text_end].strip()
        if correct_position == count:
            answer_letter = option[:1].lower()
        tokens.append(option)

        cursor = text_end
        question = region.find(QUESTION_MARKER, cursor)

    tokens.extend([ANSWER_MARKER, answer_letter, str(count)])

    explanation, _ = _between(region, EXPLANATION_OPEN, DIV_CLOSE, cursor)
    tokens.append(explanation)


def _meanings(region: str, start: int, end: int) -> list[str]:
    """Meanings introduced by a closing <strong> between start and end."""
    found: list[str] = []
    at = region.find(MEANING_MARKER, start, end)
    while at != -1:
        text_start = at + len(MEANING_MARKER)
        text_end = region.find("<", text_start, end)
        if text_end == -1:
            text_end = end
        found.append(region[text_start:text_end].strip() + ",")
        at = region.find(MEANING_MARKER, text_end, end)
    return found


def _senses(region: str, start: int, end: int) -> list[str]:
    found: list[str] = []
    sense = region.find(SENSE_MARKER, start, end)
    while sense != -1:
        number_start = sense + len(SENSE_MARKER)
        number_end = _find(region, SENSE_NUMBER_END, number_start, end)
        # "2 a" -> "2"
        number = region[number_start:number_end].strip().split(" ")[0]
        found.append(f"in sense {number},")

        next_sense = region.find(SENSE_MARKER, number_end, end)
        block_end = region.find(SENSE_END_MARKER, number_end + 1, end)
        if block_end == -1:
            block_end = end
        if next_sense != -1:
            block_end = min(block_end, next_sense)
        found.extend(_meanings(region, number_end, block_end))

        sense = next_sense
    return found
