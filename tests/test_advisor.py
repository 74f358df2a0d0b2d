import httpx

from siap.config.settings import get_settings
from siap.ingestion.advisor import AdvisorClient


def _settings_with_key(key):
    settings = get_settings()
    advisor = settings.advisor.model_copy(update={"api_key": key})
    return settings.model_copy(update={"advisor": advisor})


def test_missing_api_key_returns_fallback_without_network(monkeypatch):
    def boom(*_a, **_k):
        raise AssertionError("network must not be used")

    monkeypatch.setattr("siap.ingestion.advisor.post_json", boom)
    settings = _settings_with_key(None)
    text = AdvisorClient(settings).empathetic_advice(["a"], ["b"])
    assert text == settings.advisor.empathy_fallback


def test_transport_error_returns_fallback(monkeypatch):
    def fail(*_a, **_k):
        raise httpx.ConnectError("offline")

    monkeypatch.setattr("siap.ingestion.advisor.post_json", fail)
    settings = _settings_with_key("k")
    assert AdvisorClient(settings).leadership_quote("Bu Ani", "Jakarta Pusat") == settings.advisor.leadership_fallback


def test_generated_text_is_extracted(monkeypatch):
    seen = {}

    def fake_post_json(url, *, payload, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        seen["url"] = url
        seen["headers"] = headers
        seen["prompt"] = payload["contents"][0]["parts"][0]["text"]
        return {"candidates": [{"content": {"parts": [{"text": "Saran 1. "}, {"text": "Saran 2."}]}}]}

    monkeypatch.setattr("siap.ingestion.advisor.post_json", fake_post_json)
    text = AdvisorClient(_settings_with_key("k")).empathetic_advice(["Guru aktif"], ["Susun modul"])

    assert text == "Saran 1. Saran 2."
    assert seen["url"].endswith(":generateContent")
    assert seen["headers"] == {"x-goog-api-key": "k"}
    assert "Guru aktif" in seen["prompt"]
