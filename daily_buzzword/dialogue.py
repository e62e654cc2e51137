"""Six-stage dialogue engine for the daily buzzword.

Stages:
  1  word announced, waiting for yes/no on the usage example
  2  usage read or skipped, waiting for yes/no on the quiz
  3  quiz read, waiting for a letter or "pass"
  4  answer given, waiting for yes/no on the explanation
  5  explanation spoken (terminal)
  6  explanation written to the card only (terminal)

All state lives in SessionState, which the host carries between turns. The
cursor (state.index) always points at the next token not yet consumed.
"""
from __future__ import annotations

import logging
from collections.abc import Callable

from daily_buzzword.models import (
    ANSWER_MARKER,
    HELP,
    NEW_ENTRY,
    NO,
    PASS,
    QUIZ_ANSWER,
    REPEAT,
    STOP,
    TRIGGER_KINDS,
    USAGE_MARKER,
    YES,
    BuzzwordEntry,
    SessionState,
    Trigger,
    TurnResult,
)
from daily_buzzword.sanitize import normalize_for_speech, strip_markup

log = logging.getLogger("daily_buzzword.dialogue")

PREFIX = "The Daily Buzzword from Merriam-Webster. "
FAREWELL = "See you later alligator."
UNAVAILABLE = "There is a problem connecting to Merriam-Webster at this time. Please try again later."
LOST_PLACE = "Sorry, I lost my place. Say get the buzzword to start again or say exit to quit."
LOST_PLACE_REPROMPT = "Say get the buzzword to start again or say exit to quit."
WHICH_LETTER = "Which letter is the answer?"
EXPLANATION_QUESTION = "Do you want to hear the explanation?"
NO_USAGE = "There is no usage example for this word."
NO_QUIZ = "There is no quiz for this word."
NO_EXPLANATION = "There is no explanation for this answer."

YES_NO_EXIT = "Answer yes, no or exit?"
HELP_TEXTS: dict[int | None, tuple[str, str]] = {
    1: (
        "Answer yes to hear the example usage or no to skip it. Say exit to quit. "
        "Do you want to hear the example usage?",
        YES_NO_EXIT,
    ),
    2: (
        "Answer yes to hear the quiz or no to skip it. Say exit to quit. "
        "Do you want to hear the quiz?",
        YES_NO_EXIT,
    ),
    3: (
        "For example you can say the answer is A, or say pass to give up. Say exit to quit. "
        "Which letter is the answer?",
        "Which letter is the answer, or say pass?",
    ),
    4: (
        "Answer yes to hear the often long explanation of the answer, or no to skip hearing it - "
        "it will be on a card anyway. Say exit to quit. Do you want to hear the explanation?",
        YES_NO_EXIT,
    ),
}
GENERIC_HELP = (
    "Say get the buzzword to hear today's word, or say exit to quit.",
    "Say get the buzzword or exit?",
)


def _ssml(text: str) -> str:
    return f"<speak>{text}</speak>"


def handle_turn(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None = None) -> TurnResult:
    """Advance the dialogue by one turn.

    entry is only consulted for NEW_ENTRY; every other trigger works from the
    tokens already stored in state. Raises ValueError for an unknown trigger.
    """
    if trigger.kind not in TRIGGER_KINDS:
        raise ValueError(f"Unknown trigger: {trigger.kind}")
    handler = _HANDLERS[trigger.kind]
    log.info("Trigger %s at stage %s", trigger.kind, state.stage)
    return handler(trigger, state, entry)


# ── Trigger handlers ──────────────────────────────────────────────────────

def _on_new_entry(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None) -> TurnResult:
    if entry is None or not entry.is_available:
        state.clear()
        log.warning("No buzzword entry available")
        return TurnResult(speech=_ssml(UNAVAILABLE))

    state.start(entry)
    state.index = entry.find(USAGE_MARKER) + 1
    state.usage_index = state.index
    log.info("stage set to 1 for '%s'", entry.headword)
    return announce_word(state)


def _on_yes(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None) -> TurnResult:
    if state.stage == 1:
        return read_usage(state)
    if state.stage == 2:
        return read_quiz(state)
    if state.stage == 3:
        return help_for(state)
    if state.stage == 4:
        return read_explanation(state)
    return lost_place()


def _on_no(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None) -> TurnResult:
    if state.stage == 1:
        state.stage = 2
        log.info("stage set to 2 (usage skipped)")
        question = f"Do you want a quiz for {state.entry.headword}?"
        return TurnResult(speech=_ssml(question), reprompt_speech=question)
    if state.stage == 2:
        return farewell()
    if state.stage == 3:
        return help_for(state)
    if state.stage == 4:
        return write_explanation(state)
    return lost_place()


def _on_quiz_answer(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None) -> TurnResult:
    if state.stage == 3:
        return score_quiz(state, trigger.answer)
    return help_for(state)


def _on_pass(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None) -> TurnResult:
    if state.stage == 3:
        return pass_quiz(state)
    return help_for(state)


def _on_help(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None) -> TurnResult:
    return help_for(state)


def _on_repeat(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None) -> TurnResult:
    if state.stage == 1:
        return announce_word(state)
    if state.stage == 2:
        return read_usage(state)
    if state.stage == 3:
        return read_quiz(state)
    return help_for(state)


def _on_stop(trigger: Trigger, state: SessionState, entry: BuzzwordEntry | None) -> TurnResult:
    return farewell()


_HANDLERS: dict[str, Callable[[Trigger, SessionState, BuzzwordEntry | None], TurnResult]] = {
    NEW_ENTRY: _on_new_entry,
    YES: _on_yes,
    NO: _on_no,
    QUIZ_ANSWER: _on_quiz_answer,
    PASS: _on_pass,
    HELP: _on_help,
    REPEAT: _on_repeat,
    STOP: _on_stop,
}


# ── Stage renderers ───────────────────────────────────────────────────────

def announce_word(state: SessionState) -> TurnResult:
    """Headword, part of speech and meanings, then the word spelled out."""
    entry = state.entry
    word = entry.headword
    clauses = entry.tokens[1:entry.find(USAGE_MARKER)]

    body = "".join(f"{c} " for c in clauses)
    card = word[:1].upper() + word[1:] + body
    # Card grammar: the last meaning ends with a full stop, not a comma
    if "," in card:
        card = card[:card.rindex(",")]
    card += "."

    question = f"Do you want an example of how to use {word}?"
    speech = (
        PREFIX + word + body
        + f'<break time="500ms"/>{word} is spelt <say-as interpret-as="spell-out">{word}</say-as>'
        + f" <p>{question}</p>"
    )
    return TurnResult(
        speech=_ssml(speech),
        reprompt_speech=question,
        card_title=f"Daily Buzzword: {word}.",
        card_body=card,
    )


def read_usage(state: SessionState) -> TurnResult:
    entry = state.entry
    word = entry.headword
    state.stage = 2
    log.info("stage set to 2")

    if state.usage_index is None:
        state.usage_index = state.index
    else:
        state.index = state.usage_index

    question = f"Do you want a quiz for {word}?"
    raw = entry.token(state.index)
    if not raw or raw in (USAGE_MARKER, ANSWER_MARKER):
        speech = f'{NO_USAGE}<break time="500ms"/>{question}'
        card = NO_USAGE
    else:
        card = normalize_for_speech(raw)
        speech = f'<p>{card}</p><break time="500ms"/>{question}'

    return TurnResult(
        speech=_ssml(speech),
        reprompt_speech=question,
        card_title=f"Example usage of {word}.",
        card_body=card,
    )


def read_quiz(state: SessionState) -> TurnResult:
    entry = state.entry
    word = entry.headword
    state.stage = 3
    log.info("stage set to 3")

    if state.quiz_index is None:
        # The usage text sits at usage_index whether it was read or skipped
        state.index = (state.usage_index if state.usage_index is not None else state.index) + 1
        state.quiz_index = state.index
    else:
        state.index = state.quiz_index

    title = f"Quiz for {word}."
    instructions = entry.token(state.index)
    answer_at = entry.find(ANSWER_MARKER, state.index + 1)
    options = list(entry.tokens[state.index + 1:answer_at]) if answer_at != -1 else []
    if not instructions or not options:
        # Nothing to answer, so leave the quiz stage and offer a new word
        state.stage = None
        state.valid_answers = []
        log.info("No quiz for '%s', stage cleared", word)
        return TurnResult(
            speech=_ssml(f'{NO_QUIZ}<break time="500ms"/>{LOST_PLACE_REPROMPT}'),
            reprompt_speech=LOST_PLACE_REPROMPT,
            card_title=title,
            card_body=NO_QUIZ,
        )

    speech = strip_markup(instructions)
    card = speech
    state.valid_answers = []
    for option in options:
        state.valid_answers.append(option.lower()[:1])
        cleaned = strip_markup(option)
        # The full stop gives a pause between options
        speech += f" {cleaned}."
        card += f"\n{cleaned}"
    log.info("Valid answers: %s", "".join(state.valid_answers))

    # Land on the answer letter
    state.index = answer_at + 1

    return TurnResult(
        speech=_ssml(f'<p>{speech}</p><break time="300ms"/>{WHICH_LETTER}'),
        reprompt_speech="Which letter is the answer? Say pass to give up.",
        card_title=title,
        card_body=card,
    )


def _option_count(entry: BuzzwordEntry, index: int) -> int:
    try:
        return int(entry.token(index))
    except ValueError:
        return 0


def score_quiz(state: SessionState, user_answer: str) -> TurnResult:
    """Score one spoken answer against the recorded answer letter."""
    entry = state.entry
    title = f"Answer for {entry.headword}."
    quiz_answer = entry.token(state.index).lower()
    answer = (user_answer or "").strip().lower()[:1]
    total = _option_count(entry, state.index + 1)
    log.info("User answer %r, quiz answer %r, %d options", answer, quiz_answer, total)

    if answer and answer == quiz_answer:
        state.guesses += 1
        state.stage = 4
        log.info("Correct, guesses now %d", state.guesses)
        praise = "Excellent, correct first try!" if state.guesses == 1 else "Well done!"
        return TurnResult(
            speech=_ssml(f"{praise} Do you want to hear why?"),
            reprompt_speech=EXPLANATION_QUESTION,
            card_title=title,
            card_body=f"{praise} The answer is {quiz_answer.upper()}.",
        )

    if not answer or answer not in state.valid_answers:
        log.info("Invalid choice, guesses still %d", state.guesses)
        choice = f"{answer} is" if answer else "That is"
        return TurnResult(
            speech=_ssml(f"{choice} not a valid choice. {WHICH_LETTER}"),
            reprompt_speech=WHICH_LETTER,
        )

    # guesses only counts earlier valid answers, hence the + 2
    if state.guesses + 2 >= total:
        state.stage = 4
        log.info("Bad luck, revealing after %d guesses", state.guesses + 1)
        return TurnResult(
            speech=_ssml(f"Bad luck, the answer is {quiz_answer}. Do you want to hear why?"),
            reprompt_speech=EXPLANATION_QUESTION,
            card_title=title,
            card_body=f"Bad luck, the answer is {quiz_answer.upper()}.",
        )

    state.guesses += 1
    log.info("Incorrect, guesses now %d", state.guesses)
    return TurnResult(
        speech=_ssml(f"Incorrect. {WHICH_LETTER}"),
        reprompt_speech=WHICH_LETTER,
    )


def pass_quiz(state: SessionState) -> TurnResult:
    entry = state.entry
    quiz_answer = entry.token(state.index).lower()
    state.stage = 4
    log.info("stage set to 4 (pass)")
    return TurnResult(
        speech=_ssml(f"The answer is {quiz_answer}. Do you want to hear why?"),
        reprompt_speech=EXPLANATION_QUESTION,
        card_title=f"Answer for {entry.headword}.",
        card_body=f"The answer is {quiz_answer.upper()}.",
    )


def _explanation(state: SessionState) -> str:
    # Skip the answer letter and the option count
    state.index += 2
    raw = state.entry.token(state.index)
    return strip_markup(raw) if raw else ""


def read_explanation(state: SessionState) -> TurnResult:
    state.stage = 5
    log.info("stage set to 5")
    explanation = _explanation(state) or NO_EXPLANATION
    return TurnResult(
        speech=_ssml(f'{explanation}<break time="500ms"/>{FAREWELL}'),
        card_title=f"Explanation of the answer for {state.entry.headword}.",
        card_body=explanation,
        session_ended=True,
    )


def write_explanation(state: SessionState) -> TurnResult:
    state.stage = 6
    log.info("stage set to 6")
    explanation = _explanation(state) or NO_EXPLANATION
    return TurnResult(
        speech=_ssml(f'See the card for the explanation.<break time="500ms"/>{FAREWELL}'),
        card_title=f"Explanation of the answer for {state.entry.headword}.",
        card_body=explanation,
        session_ended=True,
    )


def help_for(state: SessionState) -> TurnResult:
    speech, reprompt = HELP_TEXTS.get(state.stage, GENERIC_HELP)
    return TurnResult(speech=_ssml(speech), reprompt_speech=reprompt)


def lost_place() -> TurnResult:
    return TurnResult(speech=_ssml(LOST_PLACE), reprompt_speech=LOST_PLACE_REPROMPT)


def farewell() -> TurnResult:
    return TurnResult(speech=_ssml(FAREWELL), session_ended=True)
