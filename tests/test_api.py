from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect

from dependencies import (
    get_cache_service,
    get_db_engine,
    get_issue_source,
    get_notification_hub,
    get_orchestrator,
    get_title_service,
)
from main import app
from models.domain import ContentKind, LanguageCode, ProviderResult
from services.fallback import FallbackChain, ProviderGroup
from services.notifications import NotificationHub
from services.orchestrator import IssueSummaryOrchestrator
from services.title_translation import TitleTranslationService
from tests.fakes import ScriptedSummarizer, ScriptedTranslator


@pytest.fixture
def hub() -> NotificationHub:
    return NotificationHub()


@pytest.fixture
def summarizer() -> ScriptedSummarizer:
    return ScriptedSummarizer(ProviderResult.ok("Summary X", provider="providerA"))


@pytest.fixture
def client(issue_source, cache_service, hub, summarizer):
    chain = FallbackChain([ProviderGroup("providerB", (ScriptedTranslator("providerB", text="Shrnutí X"),))])
    orchestrator = IssueSummaryOrchestrator(issue_source, cache_service, summarizer, chain, hub)
    titles = TitleTranslationService(issue_source, cache_service, chain, hub)

    app.dependency_overrides[get_issue_source] = lambda: issue_source
    app.dependency_overrides[get_cache_service] = lambda: cache_service
    app.dependency_overrides[get_notification_hub] = lambda: hub
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_title_service] = lambda: titles
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert "X-Process-Time" in resp.headers


def test_summary_request_is_accepted_and_runs(client, summarizer, seeded_issue):
    resp = client.post(f"/api/issues/{seeded_issue.id}/summary", params={"language": "both", "kind": "detail"})

    assert resp.status_code == 202
    assert resp.json() == {"issue_id": seeded_issue.id, "language": "both", "status": "accepted"}
    assert summarizer.calls == [(seeded_issue.body, ContentKind.DETAIL_SUMMARY)]


@pytest.mark.parametrize("params", [{"language": "fr"}, {"kind": "huge"}])
def test_summary_request_rejects_bad_parameters(client, seeded_issue, params):
    assert client.post(f"/api/issues/{seeded_issue.id}/summary", params=params).status_code == 400


def test_unknown_issue_is_404(client):
    assert client.post("/api/issues/999/summary").status_code == 404
    assert client.post("/api/issues/999/title-translation").status_code == 404


def test_websocket_receives_generated_texts(client, seeded_issue):
    with client.websocket_connect(f"/ws/issues/{seeded_issue.id}") as websocket:
        client.post(f"/api/issues/{seeded_issue.id}/summary", params={"language": "both"})
        first = websocket.receive_json()
        second = websocket.receive_json()

    assert (first["language"], first["content"], first["provider"]) == ("en", "Summary X", "providerA")
    assert (second["language"], second["content"], second["provider"]) == ("cs", "Shrnutí X", "providerB")


def test_title_translation_request(client, seeded_issue):
    with client.websocket_connect(f"/ws/issues/{seeded_issue.id}") as websocket:
        resp = client.post(f"/api/issues/{seeded_issue.id}/title-translation", params={"language": "cs"})
        message = websocket.receive_json()

    assert resp.status_code == 202
    assert message["event"] == "title"
    assert message["content"] == "Shrnutí X"


def test_cache_admin_endpoints(client, seeded_issue):
    client.post(f"/api/issues/{seeded_issue.id}/summary", params={"language": "both"})

    stats = client.get("/api/cache/stats").json()
    assert stats == {"total": 2, "by_language": {"en": 1, "cs": 1}, "by_kind": {"list_summary": 2}}

    assert client.delete(f"/api/cache/issues/{seeded_issue.id}/title").json() == {"deleted": 0}
    assert client.delete(f"/api/cache/issues/{seeded_issue.id}/list").json() == {"deleted": 2}
    assert client.delete(f"/api/cache/issues/{seeded_issue.id}/bogus").status_code == 400
    assert client.delete("/api/cache").json() == {"deleted": 0}


def test_cache_invalidation_by_repository(client, cache_repository, clock, seeded_issue):
    cache_repository.replace(seeded_issue.id, int(LanguageCode.EN_US), int(ContentKind.TITLE), "t", clock.now())

    resp = client.delete("/api/cache", params={"repository": "octo/widgets"})

    assert resp.json() == {"deleted": 1}


def test_startup_creates_tables(client):
    assert {"issues", "cached_texts"} <= set(inspect(get_db_engine()).get_table_names())
