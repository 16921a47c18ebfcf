"""Tests for core/benchmark.py (telemetry aggregation and baseline latency)."""

from __future__ import annotations

from datetime import timedelta

import pytest

from cascadefetch.core.benchmark import (
    BaselineLatency,
    MetricsSummary,
    measure_baseline_latency,
    summarize_metrics,
)


class TestSummarizeMetrics:
    def test_empty(self):
        assert summarize_metrics([]) == MetricsSummary()

    def test_basic_statistics(self, make_metric):
        metrics = [
            make_metric(0, seconds=0, latency_ms=100),
            make_metric(1, seconds=1, latency_ms=200, is_fallback=True),
            make_metric(2, seconds=2, latency_ms=300),
            make_metric(3, seconds=4, latency_ms=401),
        ]

        summary = summarize_metrics(metrics)

        assert summary.total_requests == 4
        assert summary.avg_latency_ms == 250
        assert summary.requests_per_second == 1.0
        assert summary.fallback_usage_percent == 25.0

    def test_single_metric_has_zero_rate(self, make_metric):
        summary = summarize_metrics([make_metric(0)])

        assert summary.total_requests == 1
        assert summary.requests_per_second == 0.0

    def test_window_bounds(self, make_metric, utc_now):
        metrics = [make_metric(n, seconds=n) for n in range(10)]

        summary = summarize_metrics(
            metrics,
            start=utc_now + timedelta(seconds=2),
            end=utc_now + timedelta(seconds=5),
        )

        assert summary.total_requests == 4
        assert summary.requests_per_second == round(4 / 3, 2)

    def test_window_without_matches(self, make_metric, utc_now):
        summary = summarize_metrics(
            [make_metric(0)], start=utc_now + timedelta(hours=1)
        )

        assert summary == MetricsSummary()

    def test_fallback_percent_rounded(self, make_metric):
        metrics = [
            make_metric(0, is_fallback=True),
            make_metric(1),
            make_metric(2),
        ]

        assert summarize_metrics(metrics).fallback_usage_percent == 33.3


class TestBaselineLatency:
    def test_measured(self):
        assert BaselineLatency(latency_ms=12, source="a.example").measured is True
        assert BaselineLatency(latency_ms=0, source="none").measured is False


class TestMeasureBaselineLatency:
    @pytest.mark.asyncio
    async def test_first_reachable_endpoint(self, upstream, client, recorder, no_backoff):
        upstream.add("a.example", upstream.status(500))
        upstream.add("b.example", upstream.text("pong"))

        baseline = await measure_baseline_latency(
            ["https://a.example/ping", "https://b.example/ping"],
            client=client,
            recorder=recorder,
            policy=no_backoff,
        )

        assert baseline.source == "b.example"
        assert baseline.latency_ms >= 0
        assert baseline.measured is True

    @pytest.mark.asyncio
    async def test_empty_body_does_not_count(self, upstream, client, recorder, no_backoff):
        upstream.add("a.example", upstream.text("   "))

        baseline = await measure_baseline_latency(
            ["https://a.example/ping"],
            client=client,
            recorder=recorder,
            policy=no_backoff,
        )

        assert baseline == BaselineLatency(latency_ms=0, source="none")

    @pytest.mark.asyncio
    async def test_uses_short_timeout(self, upstream, client, recorder):
        upstream.add("a.example", upstream.slow(2.0))

        baseline = await measure_baseline_latency(
            ["https://a.example/ping"],
            timeout_ms=50,
            client=client,
            recorder=recorder,
        )

        assert baseline.measured is False
        assert upstream.calls["a.example"] == 1
