"""Tests for the Gemini client wrapper with the SDK stubbed out."""

import pytest

from dataclysm.llm import gemini_client


class FakeModel:
    def __init__(self, name, outcome):
        self.name = name
        self.outcome = outcome
        self.calls = []

    def generate_content(self, prompt, generation_config=None):
        self.calls.append((prompt, generation_config))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return type("Response", (), {"text": self.outcome})()


class FakeGenAI:
    def __init__(self, outcome):
        self.outcome = outcome
        self.api_key = None
        self.models = []

    def configure(self, api_key=None):
        self.api_key = api_key

    def GenerativeModel(self, name):
        model = FakeModel(name, self.outcome)
        self.models.append(model)
        return model


@pytest.fixture
def no_dotenv(monkeypatch):
    monkeypatch.setattr(gemini_client, "load_dotenv", lambda: None)


class TestCallGeminiApi:

    def test_missing_key(self, monkeypatch, no_dotenv, capsys):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        assert gemini_client.call_gemini_api("hi", verbose=True) is None
        assert "GOOGLE_API_KEY not set" in capsys.readouterr().out

    def test_success(self, monkeypatch, no_dotenv):
        fake = FakeGenAI('{"ok": true}')
        monkeypatch.setattr(gemini_client, "genai", fake)
        monkeypatch.setenv("GOOGLE_API_KEY", "k")

        text = gemini_client.call_gemini_api("prompt", model_name="gemini-test")

        assert text == '{"ok": true}'
        assert fake.api_key == "k"
        model = fake.models[0]
        assert model.name == "gemini-test"
        assert model.calls == [("prompt", {"response_mime_type": "application/json"})]

    def test_api_error_returns_none(self, monkeypatch, no_dotenv):
        monkeypatch.setattr(gemini_client, "genai", FakeGenAI(RuntimeError("quota")))
        monkeypatch.setenv("GOOGLE_API_KEY", "k")
        assert gemini_client.call_gemini_api("prompt", verbose=False) is None
