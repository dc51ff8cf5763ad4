"""Unit tests for the REST API routes."""

from __future__ import annotations

import random
from datetime import timedelta
from pathlib import Path

from fastapi.testclient import TestClient

from pipewatch.api.app import create_app
from pipewatch.dashboard import Dashboard
from pipewatch.generator import EventGenerator
from pipewatch.models.events import PIPELINES, BuildStatus
from pipewatch.persistence import JsonFileKeyValueStore, SnapshotPersister
from pipewatch.store import EventStore

from .conftest import BASE_TIME, make_event

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_dashboard(seed_count: int = 30) -> Dashboard:
    dashboard = Dashboard(
        generator=EventGenerator(rng=random.Random(99), clock=lambda: BASE_TIME),
        store=EventStore(capacity=40),
    )
    dashboard.seed(count=seed_count, spacing=timedelta(minutes=5), now=BASE_TIME)
    return dashboard


def _make_client(dashboard: Dashboard | None = None, persister: SnapshotPersister | None = None) -> TestClient:
    app = create_app(dashboard=dashboard or _make_dashboard(), persister=persister)
    return TestClient(app, raise_server_exceptions=False)


# ---------------------------------------------------------------------------
# Health / summary / views
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health_reports_version_and_size(self) -> None:
        resp = _make_client().get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["events"] == 30
        assert body["version"]


class TestSummary:
    def test_summary_matches_dashboard(self) -> None:
        dashboard = _make_dashboard()
        expected = dashboard.summary()
        body = _make_client(dashboard).get("/api/v1/summary").json()
        assert body["total"] == expected.total == 30
        assert body["successes"] == expected.successes
        assert body["failures"] == expected.failures
        assert body["deployment_rate"] == expected.deployment_rate
        assert 0 <= body["deployment_rate"] <= 100

    def test_empty_dashboard_summary_is_zero(self) -> None:
        body = _make_client(_make_dashboard(seed_count=0)).get("/api/v1/summary").json()
        assert body["total"] == 0
        assert body["deployment_rate"] == 0


class TestTimeSeries:
    def test_default_bucket_count(self) -> None:
        body = _make_client().get("/api/v1/timeseries").json()
        assert body["bucket_count"] == 20
        assert len(body["labels"]) == 20

    def test_explicit_bucket_count(self) -> None:
        body = _make_client().get("/api/v1/timeseries", params={"buckets": 5}).json()
        assert body["bucket_count"] == 5

    def test_invalid_bucket_count_returns_400(self) -> None:
        resp = _make_client().get("/api/v1/timeseries", params={"buckets": 0})
        assert resp.status_code == 400
        assert resp.json()["error"] == "INVALID_BUCKET_COUNT"

    def test_empty_store_has_no_buckets(self) -> None:
        body = _make_client(_make_dashboard(seed_count=0)).get("/api/v1/timeseries").json()
        assert body["bucket_count"] == 0
        assert body["labels"] == []


class TestPipelinesAndDeployments:
    def test_pipeline_counts_cover_catalogue(self) -> None:
        body = _make_client().get("/api/v1/pipelines").json()
        assert [c["pipeline_id"] for c in body] == [p.id for p in PIPELINES]
        assert sum(c["count"] for c in body) == 30

    def test_deployment_outcomes(self) -> None:
        dashboard = Dashboard(store=EventStore())
        dashboard.store.extend(
            [
                make_event(1, status=BuildStatus.SUCCESS, is_deployment=True),
                make_event(2, status=BuildStatus.FAILED, is_deployment=True),
            ]
        )
        body = _make_client(dashboard).get("/api/v1/deployments").json()
        assert body == {"success": 1, "failed": 1}


# ---------------------------------------------------------------------------
# Events and filters
# ---------------------------------------------------------------------------


class TestEvents:
    def test_events_newest_first(self) -> None:
        body = _make_client().get("/api/v1/events").json()
        timestamps = [e["timestamp"] for e in body["events"]]
        assert body["count"] == 30
        assert timestamps == sorted(timestamps, reverse=True)

    def test_event_payload_shape(self) -> None:
        event = _make_client().get("/api/v1/events").json()["events"][0]
        assert event["id"].startswith("#")
        assert event["duration"]
        assert event["timestamp_display"]

    def test_query_params_filter(self) -> None:
        body = _make_client().get("/api/v1/events", params={"environment": "staging"}).json()
        assert all(e["environment"] == "staging" for e in body["events"])
        assert body["filters"]["environment"] == "staging"

    def test_unknown_pipeline_returns_400(self) -> None:
        resp = _make_client().get("/api/v1/events", params={"pipeline": "pipeline-nope"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "INVALID_FILTER"

    def test_empty_store_returns_empty_list(self) -> None:
        body = _make_client(_make_dashboard(seed_count=0)).get("/api/v1/events").json()
        assert body == {
            "filters": {"pipeline": "all", "environment": "all", "search": ""},
            "count": 0,
            "events": [],
        }


class TestFilters:
    def test_default_filters(self) -> None:
        body = _make_client().get("/api/v1/filters").json()
        assert body == {"pipeline": "all", "environment": "all", "search": ""}

    def test_put_filters_applies_to_events(self) -> None:
        client = _make_client()
        resp = client.put("/api/v1/filters", json={"pipeline": "pipeline-core-api", "search": ""})
        assert resp.status_code == 200

        body = client.get("/api/v1/events").json()
        assert all(e["pipeline_id"] == "pipeline-core-api" for e in body["events"])
        assert client.get("/api/v1/filters").json()["pipeline"] == "pipeline-core-api"

    def test_query_params_override_current_filters(self) -> None:
        client = _make_client()
        client.put("/api/v1/filters", json={"pipeline": "pipeline-core-api"})
        body = client.get("/api/v1/events", params={"pipeline": "all"}).json()
        assert body["count"] == 30

    def test_put_unknown_environment_returns_400(self) -> None:
        client = _make_client()
        resp = client.put("/api/v1/filters", json={"environment": "qa"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "INVALID_FILTER"
        assert client.get("/api/v1/filters").json()["environment"] == "all"


# ---------------------------------------------------------------------------
# History and metrics
# ---------------------------------------------------------------------------


class TestHistory:
    def test_history_empty_without_persister(self) -> None:
        assert _make_client().get("/api/v1/history").json() == []

    def test_history_lists_snapshot_records(self, tmp_path: Path) -> None:
        dashboard = _make_dashboard(seed_count=3)
        persister = SnapshotPersister(dashboard, JsonFileKeyValueStore(tmp_path / "kv.json"), max_records=40)
        persister.restore()

        body = _make_client(dashboard, persister).get("/api/v1/history").json()

        assert [r["buildNumber"] for r in body] == [3, 2, 1]
        assert {r["buildStatus"] for r in body} <= {"Success", "Failure"}


class TestMetrics:
    def test_metrics_exposition(self) -> None:
        resp = _make_client().get("/api/v1/metrics")
        assert resp.status_code == 200
        assert "pipewatch_events_generated_total" in resp.text
