from __future__ import annotations

from dataclasses import dataclass, field

USAGE_MARKER = "#USAGE#"
ANSWER_MARKER = "#ANSWER#"

# Trigger kinds
NEW_ENTRY = "new_entry"
YES = "yes"
NO = "no"
QUIZ_ANSWER = "quiz_answer"
PASS = "pass"
HELP = "help"
REPEAT = "repeat"
STOP = "stop"

TRIGGER_KINDS = (NEW_ENTRY, YES, NO, QUIZ_ANSWER, PASS, HELP, REPEAT, STOP)


@dataclass(frozen=True)
class BuzzwordEntry:
    """The day's word as an ordered token sequence with in-band sentinels."""

    tokens: tuple[str, ...] = ()

    @property
    def headword(self) -> str:
        return self.token(0)

    @property
    def is_available(self) -> bool:
        return bool(self.headword) and USAGE_MARKER in self.tokens

    def token(self, index: int) -> str:
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return ""

    def find(self, marker: str, start: int = 0) -> int:
        for i in range(max(start, 0), len(self.tokens)):
            if self.tokens[i] == marker:
                return i
        return -1

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass
class SessionState:
    entry: BuzzwordEntry = field(default_factory=BuzzwordEntry)
    stage: int | None = None  # 1-6, None = no active entry
    index: int = 0
    usage_index: int | None = None
    quiz_index: int | None = None
    guesses: int = 0
    valid_answers: list[str] = field(default_factory=list)

    def start(self, entry: BuzzwordEntry) -> None:
        self.entry = entry
        self.stage = 1
        self.index = 0
        self.usage_index = None
        self.quiz_index = None
        self.guesses = 0
        self.valid_answers = []

    def clear(self) -> None:
        self.start(BuzzwordEntry())
        self.stage = None

    def to_attributes(self) -> dict:
        return {
            "entry": list(self.entry.tokens),
            "stage": self.stage,
            "index": self.index,
            "usageIndex": self.usage_index,
            "quizIndex": self.quiz_index,
            "guesses": self.guesses,
            "validAnswers": list(self.valid_answers),
        }

    @classmethod
    def from_attributes(cls, attributes: dict | None) -> SessionState:
        raw = attributes or {}
        return cls(
            entry=BuzzwordEntry(tuple(str(t) for t in raw.get("entry") or ())),
            stage=raw.get("stage") or None,
            index=raw.get("index") or 0,
            usage_index=raw.get("usageIndex"),
            quiz_index=raw.get("quizIndex"),
            guesses=raw.get("guesses") or 0,
            valid_answers=list(raw.get("validAnswers") or ()),
        )


@dataclass
class Trigger:
    kind: str  # one of TRIGGER_KINDS
    answer: str = ""  # spoken quiz answer, quiz_answer only


@dataclass
class TurnResult:
    speech: str  # SSML, wrapped in <speak>
    reprompt_speech: str | None = None  # plain text
    card_title: str | None = None
    card_body: str | None = None
    session_ended: bool = False
