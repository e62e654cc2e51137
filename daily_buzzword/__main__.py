"""CLI entry point for daily-buzzword.

Usage:
  python -m daily_buzzword serve [--port PORT] [--host HOST]
  python -m daily_buzzword stop
  python -m daily_buzzword restart [--port PORT]
  python -m daily_buzzword status
  python -m daily_buzzword fetch [--date YYYY-MM-DD]
  python -m daily_buzzword chat [--date YYYY-MM-DD]
"""
from __future__ import annotations

import asyncio
import os
import re
import signal
import sys
from pathlib import Path

from daily_buzzword.models import HELP, NEW_ENTRY, NO, PASS, QUIZ_ANSWER, REPEAT, STOP, YES, Trigger

PID_FILE = Path(__file__).resolve().parent.parent / ".server.pid"

# Spoken phrases for the terminal dialogue, checked in order
UTTERANCES = [
    (re.compile(r"^(stop|cancel|exit|quit)\b"), STOP),
    (re.compile(r"^(get the buzzword|new word|buzzword|start)\b"), NEW_ENTRY),
    (re.compile(r"^(yes|yeah|yep|sure)\b"), YES),
    (re.compile(r"^(no|nope)\b"), NO),
    (re.compile(r"^(pass|give up)\b"), PASS),
    (re.compile(r"^help\b"), HELP),
    (re.compile(r"^(repeat|say that again|again)\b"), REPEAT),
]
_ANSWER = re.compile(r"^(?:(?:the )?answer is |it'?s )?([a-z])\.?$")


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "stop":
        _stop()
    elif command == "restart":
        _restart(args[1:])
    elif command == "status":
        _status()
    elif command == "fetch":
        _fetch(args[1:])
    elif command == "chat":
        _chat(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, stop, restart, status, fetch, chat")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def utterance_trigger(text: str) -> Trigger | None:
    """Map a typed utterance to a trigger, or None when it is not understood."""
    said = text.strip().lower()
    for pattern, kind in UTTERANCES:
        if pattern.match(said):
            return Trigger(kind)
    m = _ANSWER.match(said)
    if m:
        return Trigger(QUIZ_ANSWER, m.group(1))
    return None


def _read_pid() -> int | None:
    """Read PID from file, return None if stale or missing."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
        os.kill(pid, 0)
        return pid
    except (ValueError, ProcessLookupError, PermissionError):
        PID_FILE.unlink(missing_ok=True)
        return None


def _stop() -> bool:
    """Stop a running server. Returns True if a server was stopped."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return False
    try:
        os.kill(pid, signal.SIGTERM)
        print(f"Stopped server (PID {pid}).")
        PID_FILE.unlink(missing_ok=True)
        return True
    except ProcessLookupError:
        print("Server was not running (stale PID file removed).")
        PID_FILE.unlink(missing_ok=True)
        return False


def _status():
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
    else:
        print(f"Server is running (PID {pid}).")


def _restart(args: list[str]):
    import time
    _stop()
    time.sleep(1)
    _serve(args)


def _serve(args: list[str]):
    import uvicorn

    existing = _read_pid()
    if existing is not None:
        print(f"Server already running (PID {existing}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    port = int(_parse_flag(args, "--port", "8765"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    PID_FILE.write_text(str(os.getpid()))

    print(f"Starting Daily Buzzword skill on http://{host}:{port}/skill")
    print("Press Ctrl+C to stop\n")
    try:
        uvicorn.run(
            "daily_buzzword.app:app",
            host=host,
            port=port,
            reload=False,
            timeout_graceful_shutdown=5,
        )
    finally:
        PID_FILE.unlink(missing_ok=True)


def _source(args: list[str]):
    from daily_buzzword.config import load_settings
    from daily_buzzword.providers.source_wordcentral import WordCentralSource

    settings = load_settings()
    try:
        return WordCentralSource(
            url=settings.source_url,
            timeout=settings.fetch_timeout,
            user_agent=settings.user_agent,
            archive_date=_parse_flag(args, "--date", settings.archive_date),
        )
    except ValueError as e:
        print(f"Invalid date: {e}")
        sys.exit(1)


def _fetch(args: list[str]):
    from daily_buzzword.parsers.wordcentral_parser import extract
    from daily_buzzword.providers.base import SourceUnavailableError

    source = _source(args)
    try:
        raw = asyncio.run(source.fetch())
    except SourceUnavailableError as e:
        print(f"Source unavailable: {e}")
        sys.exit(1)

    entry = extract(raw)
    if not entry.is_available:
        print("No buzzword found on the page.")
        sys.exit(1)
    print(f"Buzzword from {source.name()}")
    print("=" * 40)
    for i, token in enumerate(entry.tokens):
        print(f"[{i:2d}] {token}")


def _chat(args: list[str]):
    from daily_buzzword.audio import ssml_to_text
    from daily_buzzword.skill import build_skill

    skill = build_skill(_source(args))
    attributes: dict = {}
    trigger: Trigger | None = Trigger(NEW_ENTRY)

    while True:
        if trigger is not None:
            result, attributes = asyncio.run(skill.turn(trigger, attributes))
            print(f"\n{ssml_to_text(result.speech)}")
            if result.card_title:
                print(f"\n  [{result.card_title}]")
                for line in (result.card_body or "").splitlines():
                    print(f"  {line}")
            if result.session_ended:
                return
        else:
            print("Sorry, I didn't catch that. Say help for options.")

        try:
            said = input("\n> ")
        except (EOFError, KeyboardInterrupt):
            print()
            return
        trigger = utterance_trigger(said)


if __name__ == "__main__":
    main()
