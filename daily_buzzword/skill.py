"""Voice-platform wiring around the dialogue engine.

A skill is a plain bundle of handler functions. The host hands each request
envelope to dispatch(), which maps it to a Trigger, rebuilds SessionState from
the session attributes, runs one engine turn and wraps the TurnResult back
into a response envelope carrying the updated attributes.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from daily_buzzword.dialogue import handle_turn
from daily_buzzword.models import (
    HELP,
    NEW_ENTRY,
    NO,
    PASS,
    QUIZ_ANSWER,
    REPEAT,
    STOP,
    YES,
    BuzzwordEntry,
    SessionState,
    Trigger,
    TurnResult,
)
from daily_buzzword.parsers.base import EntryExtractor
from daily_buzzword.parsers.wordcentral_parser import WordCentralExtractor
from daily_buzzword.providers.base import SourceProvider, SourceUnavailableError

log = logging.getLogger("daily_buzzword.skill")

INTENT_TRIGGERS = {
    "GetBuzzwordIntent": NEW_ENTRY,
    "AMAZON.YesIntent": YES,
    "AMAZON.NoIntent": NO,
    "GetQuizAnswerIntent": QUIZ_ANSWER,
    "GetPassIntent": PASS,
    "AMAZON.HelpIntent": HELP,
    "AMAZON.RepeatIntent": REPEAT,
    "AMAZON.StopIntent": STOP,
    "AMAZON.CancelIntent": STOP,
}
ANSWER_SLOT = "QuizAnswer"

TurnOutcome = tuple[TurnResult, dict]


@dataclass
class SkillHandlers:
    on_session_started: Callable[[dict, dict], None]
    on_launch: Callable[[dict, dict], Awaitable[TurnOutcome]]
    on_intent: Callable[[dict, dict], Awaitable[TurnOutcome]]
    on_session_ended: Callable[[dict, dict], None]
    turn: Callable[[Trigger, dict | None], Awaitable[TurnOutcome]]


def build_skill(source: SourceProvider, extractor: EntryExtractor | None = None) -> SkillHandlers:
    extractor = extractor or WordCentralExtractor()

    async def load_entry() -> BuzzwordEntry:
        try:
            raw = await source.fetch()
        except SourceUnavailableError as e:
            log.warning("Source %s unavailable: %s", source.name(), e)
            return BuzzwordEntry()
        return extractor.extract(raw)

    async def turn(trigger: Trigger, attributes: dict | None) -> TurnOutcome:
        state = SessionState.from_attributes(attributes)
        # Only a new-entry request fetches, later turns reuse the stored tokens
        entry = await load_entry() if trigger.kind == NEW_ENTRY else None
        result = handle_turn(trigger, state, entry)
        return result, state.to_attributes()

    def on_session_started(request: dict, session: dict) -> None:
        log.info("Session started requestId=%s sessionId=%s",
                 request.get("requestId"), session.get("sessionId"))

    async def on_launch(request: dict, session: dict) -> TurnOutcome:
        log.info("Launch requestId=%s sessionId=%s", request.get("requestId"), session.get("sessionId"))
        return await turn(Trigger(NEW_ENTRY), session.get("attributes"))

    async def on_intent(request: dict, session: dict) -> TurnOutcome:
        return await turn(intent_trigger(request.get("intent") or {}), session.get("attributes"))

    def on_session_ended(request: dict, session: dict) -> None:
        log.info("Session ended requestId=%s sessionId=%s reason=%s",
                 request.get("requestId"), session.get("sessionId"), request.get("reason"))

    return SkillHandlers(
        on_session_started=on_session_started,
        on_launch=on_launch,
        on_intent=on_intent,
        on_session_ended=on_session_ended,
        turn=turn,
    )


def intent_trigger(intent: dict) -> Trigger:
    name = intent.get("name", "")
    kind = INTENT_TRIGGERS.get(name)
    if kind is None:
        raise ValueError(f"Unknown intent: {name}")
    answer = ""
    if kind == QUIZ_ANSWER:
        slot = (intent.get("slots") or {}).get(ANSWER_SLOT) or {}
        answer = slot.get("value") or ""
    return Trigger(kind, answer)


async def dispatch(skill: SkillHandlers, envelope: dict, app_id: str = "") -> dict:
    """Handle one request envelope and return the response envelope."""
    session = envelope.get("session") or {}
    request = envelope.get("request") or {}

    if app_id:
        received = (session.get("application") or {}).get("applicationId", "")
        if received != app_id:
            raise ValueError(f"Invalid applicationId: {received}")

    if session.get("new"):
        session["attributes"] = {}
        skill.on_session_started(request, session)

    request_type = request.get("type")
    if request_type == "LaunchRequest":
        result, attributes = await skill.on_launch(request, session)
    elif request_type == "IntentRequest":
        result, attributes = await skill.on_intent(request, session)
    elif request_type == "SessionEndedRequest":
        skill.on_session_ended(request, session)
        return build_response(None, {})
    else:
        raise ValueError(f"Unsupported request type: {request_type}")
    return build_response(result, attributes)


def build_response(result: TurnResult | None, attributes: dict) -> dict:
    response: dict = {"shouldEndSession": True}
    if result is not None:
        response["outputSpeech"] = {"type": "SSML", "ssml": result.speech}
        if result.reprompt_speech is not None:
            response["reprompt"] = {
                "outputSpeech": {"type": "PlainText", "text": result.reprompt_speech},
            }
        if result.card_title is not None:
            response["card"] = {
                "type": "Simple",
                "title": result.card_title,
                "content": result.card_body or "",
            }
        response["shouldEndSession"] = result.session_ended
    return {"version": "1.0", "sessionAttributes": attributes, "response": response}
