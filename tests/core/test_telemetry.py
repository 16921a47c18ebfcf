"""Tests for core/telemetry.py (bounded attempt log)."""

from __future__ import annotations

import threading
from unittest.mock import patch

import pytest

from cascadefetch.config.settings import Config, TelemetryConfig
from cascadefetch.core import telemetry
from cascadefetch.core.telemetry import (
    TelemetryRecorder,
    build_metric,
    endpoint_host,
    get_recorder,
    list_metrics,
    new_metric_id,
    record_metric,
    reset_metrics,
)


class TestTelemetryRecorder:
    def test_starts_empty(self):
        recorder = TelemetryRecorder()

        assert recorder.list() == []
        assert len(recorder) == 0
        assert recorder.max_entries == 1000

    def test_rejects_non_positive_cap(self):
        with pytest.raises(ValueError):
            TelemetryRecorder(max_entries=0)

    def test_keeps_insertion_order(self, make_metric):
        recorder = TelemetryRecorder()
        for n in range(5):
            recorder.record(make_metric(n))

        assert [m.id for m in recorder.list()] == [f"m-{n}" for n in range(5)]

    def test_evicts_oldest_beyond_cap(self, make_metric):
        recorder = TelemetryRecorder()
        for n in range(1500):
            recorder.record(make_metric(n))

        metrics = recorder.list()
        assert len(metrics) == 1000
        assert metrics[0].id == "m-500"
        assert metrics[-1].id == "m-1499"

    def test_custom_cap(self, make_metric):
        recorder = TelemetryRecorder(max_entries=3)
        for n in range(5):
            recorder.record(make_metric(n))

        assert [m.id for m in recorder.list()] == ["m-2", "m-3", "m-4"]

    def test_snapshot_is_idempotent(self, make_metric):
        recorder = TelemetryRecorder()
        recorder.record(make_metric(1))

        assert recorder.list() == recorder.list()

    def test_snapshot_is_not_live(self, make_metric):
        recorder = TelemetryRecorder()
        recorder.record(make_metric(1))
        snapshot = recorder.list()

        recorder.record(make_metric(2))
        snapshot.clear()

        assert len(snapshot) == 0
        assert len(recorder.list()) == 2

    def test_reset(self, make_metric):
        recorder = TelemetryRecorder()
        recorder.record(make_metric(1))

        recorder.reset()

        assert recorder.list() == []

    def test_concurrent_recording(self, make_metric):
        recorder = TelemetryRecorder(max_entries=10_000)

        def worker(offset):
            for n in range(500):
                recorder.record(make_metric(offset + n))

        threads = [threading.Thread(target=worker, args=(i * 500,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(recorder) == 4000
        assert len({m.id for m in recorder.list()}) == 4000


class TestEndpointHost:
    @pytest.mark.parametrize(
        "address,expected",
        [
            ("https://dns.google/resolve?name=example.com", "dns.google"),
            ("http://api.example.com:8080/path", "api.example.com"),
            ("https://1.1.1.1/dns-query", "1.1.1.1"),
        ],
    )
    def test_valid_addresses(self, address, expected):
        assert endpoint_host(address) == expected

    @pytest.mark.parametrize("address", ["", "not a url", "/relative/path"])
    def test_malformed_addresses(self, address):
        assert endpoint_host(address) is None


class TestBuildMetric:
    def test_builds_metric(self):
        metric = build_metric(
            "https://api.example.com/v1",
            latency_ms=120,
            status_code=200,
            is_fallback=True,
            method="GET",
        )

        assert metric is not None
        assert metric.endpoint_host == "api.example.com"
        assert metric.latency_ms == 120
        assert metric.status_code == 200
        assert metric.is_fallback is True
        assert metric.method == "GET"
        assert metric.timestamp.tzinfo is not None

    def test_no_metric_without_host(self):
        assert (
            build_metric("nowhere", latency_ms=0, status_code=0, is_fallback=False, method="GET")
            is None
        )

    def test_ids_are_unique(self):
        ids = {new_metric_id() for _ in range(200)}

        assert len(ids) == 200
        assert all(i.startswith("m-") for i in ids)


class TestProcessRecorder:
    def test_get_recorder_is_singleton(self):
        assert get_recorder() is get_recorder()

    def test_cap_comes_from_config(self):
        config = Config(telemetry=TelemetryConfig(max_entries=5))
        with patch("cascadefetch.config.settings._config", config):
            recorder = get_recorder()

        assert recorder.max_entries == 5

    def test_module_helpers(self, make_metric):
        record_metric(make_metric(1))
        record_metric(make_metric(2))

        assert [m.id for m in list_metrics()] == ["m-1", "m-2"]

        reset_metrics()

        assert list_metrics() == []
        assert telemetry._recorder is not None
