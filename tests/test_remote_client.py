import pytest

from siap.config.settings import get_settings
from siap.domain.decode import decode_visit
from siap.ingestion.remote_client import RemoteDataClient, RemoteServiceError


def test_get_schools_sends_action_and_decodes(monkeypatch):
    calls = []

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        calls.append(params)
        return {"status": "success", "data": [{"id": "s1", "npsn": "201", "name": "SDN 1", "latitude": "", "longitude": ""}, "junk"]}

    monkeypatch.setattr("siap.ingestion.remote_client.get_json", fake_get_json)
    schools = RemoteDataClient(get_settings()).get_schools("P-01")

    assert calls == [{"action": "getSchools", "inspectorId": "P-01"}]
    assert len(schools) == 1
    assert not schools[0].has_coordinate


def test_error_envelope_raises_remote_service_error(monkeypatch):
    monkeypatch.setattr(
        "siap.ingestion.remote_client.get_json",
        lambda *_a, **_k: {"status": "error", "message": "inspector not found"},
    )
    with pytest.raises(RemoteServiceError, match="getVisits: inspector not found"):
        RemoteDataClient(get_settings()).get_visits("P-404")


def test_save_visit_posts_wire_payload(monkeypatch):
    sent = {}

    def fake_post_json(url, *, payload, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        sent.update(payload)
        return {"status": "success", "data": {"row": 7}}

    monkeypatch.setattr("siap.ingestion.remote_client.post_json", fake_post_json)
    visit = decode_visit({"id": "VK-1", "schoolName": "SDN 1", "date": "2026-03-02", "type": "Akademik", "agreedActions": ["x"]})

    assert RemoteDataClient(get_settings()).save_visit(visit) == {"row": 7}
    assert sent["action"] == "saveVisit"
    assert sent["data"]["schoolName"] == "SDN 1"
    assert sent["data"]["agreedActions"] == ["x"]
