"""Tests for the FastAPI application routes."""
from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from conftest import SINGLE_SENSE_HTML, FakeSource, FakeTTS
from daily_buzzword import app as app_module
from daily_buzzword.app import app
from daily_buzzword.audio import sentence_hash
from daily_buzzword.config import Settings
from daily_buzzword.providers.base import SourceUnavailableError
from daily_buzzword.skill import build_skill


@pytest.fixture
def test_app(tmp_path):
    """Set up test app with a canned page source and settings."""
    settings = Settings(audio_cache_dir=str(tmp_path / "audio"))
    source = FakeSource(SINGLE_SENSE_HTML)
    tts = FakeTTS()

    # Set globals BEFORE creating TestClient so startup() is a no-op
    app_module._settings = settings
    app_module._skill = build_skill(source)

    # Patch save_settings and providers so tests never hit real config/network
    with patch("daily_buzzword.app.save_settings") as save, \
         patch("daily_buzzword.app._get_source", return_value=source), \
         patch("daily_buzzword.app._get_tts", return_value=tts):
        client = TestClient(app, raise_server_exceptions=False)
        yield client, source, tts, save
        client.close()

    app_module._settings = None
    app_module._skill = None


def _launch(new: bool = True, attributes: dict | None = None, app_id: str = "") -> dict:
    return {
        "version": "1.0",
        "session": {
            "new": new,
            "sessionId": "s1",
            "application": {"applicationId": app_id},
            "attributes": attributes or {},
        },
        "request": {"type": "LaunchRequest", "requestId": "r1"},
    }


class TestSkillEndpoint:
    def test_launch(self, test_app):
        client, source, _, _ = test_app
        resp = client.post("/skill", json=_launch())
        assert resp.status_code == 200
        data = resp.json()
        assert data["sessionAttributes"]["stage"] == 1
        assert data["response"]["card"]["title"] == "Daily Buzzword: ebullient."
        assert source.fetch_count == 1

    def test_follow_up_turn(self, test_app):
        client, _, _, _ = test_app
        first = client.post("/skill", json=_launch()).json()
        envelope = _launch(new=False, attributes=first["sessionAttributes"])
        envelope["request"] = {"type": "IntentRequest", "requestId": "r2",
                               "intent": {"name": "AMAZON.YesIntent"}}
        data = client.post("/skill", json=envelope).json()
        assert data["sessionAttributes"]["stage"] == 2
        assert data["response"]["card"]["title"] == "Example usage of ebullient."

    def test_unknown_intent_rejected(self, test_app):
        client, _, _, _ = test_app
        envelope = _launch()
        envelope["request"] = {"type": "IntentRequest", "intent": {"name": "OrderPizzaIntent"}}
        resp = client.post("/skill", json=envelope)
        assert resp.status_code == 400

    def test_application_id_mismatch(self, test_app):
        client, _, _, _ = test_app
        app_module._settings.app_id = "amzn1.ask.skill.mine"
        assert client.post("/skill", json=_launch(app_id="amzn1.ask.skill.other")).status_code == 400
        assert client.post("/skill", json=_launch(app_id="amzn1.ask.skill.mine")).status_code == 200


class TestEntryPreview:
    def test_entry(self, test_app):
        client, _, _, _ = test_app
        data = client.get("/api/entry").json()
        assert data["headword"] == "ebullient"
        assert data["available"] is True
        assert data["tokens"][4] == "#USAGE#"

    def test_source_unavailable(self, test_app):
        client, source, _, _ = test_app
        source.error = SourceUnavailableError("down")
        resp = client.get("/api/entry")
        assert resp.status_code == 502


class TestSpeech:
    def test_synthesize_and_fetch_audio(self, test_app):
        client, _, tts, _ = test_app
        ssml = '<speak>cat is spelt <say-as interpret-as="spell-out">cat</say-as></speak>'
        data = client.post("/api/speech", json={"ssml": ssml}).json()
        assert data["text"] == "cat is spelt C A T"
        assert data["audio_hash"] == sentence_hash("cat is spelt C A T")
        assert tts.synthesize_called == 1

        resp = client.get(f"/api/audio/{data['audio_hash']}.mp3")
        assert resp.status_code == 200
        assert resp.content == b"fake mp3 data"

    def test_empty_speech(self, test_app):
        client, _, _, _ = test_app
        assert client.post("/api/speech", json={"ssml": "<speak></speak>"}).status_code == 400

    def test_tts_failure(self, test_app):
        client, _, tts, _ = test_app
        tts.error = RuntimeError("TTS unavailable")
        assert client.post("/api/speech", json={"ssml": "<speak>Hi</speak>"}).status_code == 500

    def test_unknown_tts_provider(self, test_app):
        client, _, _, _ = test_app
        with patch("daily_buzzword.app._get_tts", side_effect=ValueError("Unknown TTS provider: x")):
            resp = client.post("/api/speech", json={"ssml": "<speak>Hi</speak>"})
        assert resp.status_code == 500

    def test_missing_audio(self, test_app):
        client, _, _, _ = test_app
        assert client.get("/api/audio/0000000000000000.mp3").status_code == 404


class TestSettingsRoutes:
    def test_get_settings(self, test_app):
        client, _, _, _ = test_app
        data = client.get("/api/settings").json()
        assert data["tts_provider"] == "edge-tts"
        assert len(data) == 9

    def test_update_settings(self, test_app):
        client, _, _, save = test_app
        resp = client.put("/api/settings", json={"archive_date": "2016-04-15", "bogus": 1})
        assert resp.status_code == 200
        assert resp.json()["archive_date"] == "2016-04-15"
        assert "bogus" not in resp.json()
        assert app_module._settings.archive_date == "2016-04-15"
        save.assert_called_once()

    def test_invalid_archive_date_rejected(self, test_app):
        client, _, _, save = test_app
        skill = app_module._skill
        resp = client.put("/api/settings", json={"archive_date": "April 15"})
        assert resp.status_code == 400
        assert app_module._settings.archive_date == ""
        assert app_module._skill is skill
        save.assert_not_called()
