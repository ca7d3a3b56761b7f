"""
Semantic test: run metrics publishing.

Invariant:
Metrics are only pushed when a Pushgateway is configured, and a malformed
grouping key never breaks the client.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from split_audio.runtime import prometheus_metrics
from split_audio.runtime.prometheus_metrics import RUN_JOB, PrometheusMetricsClient
from split_audio.runtime.summary import summarize_run


def _summary():
    return summarize_run(outcomes=[], input_dir=Path("."), output_folder=Path("SOUND"))


def test_disabled_without_pushgateway(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PROMETHEUS_PUSHGATEWAY_URL", raising=False)

    def fail_push(**kwargs):  # pragma: no cover - must not be called
        raise AssertionError("push_to_gateway called while disabled")

    monkeypatch.setattr(prometheus_metrics, "push_to_gateway", fail_push)

    client = PrometheusMetricsClient()
    assert not client.is_enabled()
    client.push_run_summary(_summary())


def test_run_summary_is_pushed_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROMETHEUS_PUSHGATEWAY_URL", "http://localhost:9091")
    monkeypatch.setenv("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON", '{"host": "rec-01"}')
    pushes: list[dict] = []

    monkeypatch.setattr(
        prometheus_metrics,
        "push_to_gateway",
        lambda **kwargs: pushes.append(kwargs),
    )

    PrometheusMetricsClient().push_run_summary(_summary())

    assert len(pushes) == 1
    assert pushes[0]["job"] == RUN_JOB
    assert pushes[0]["grouping_key"] == {"host": "rec-01"}

    names = {metric.name for metric in pushes[0]["registry"].collect()}
    assert "split_audio_segments_created" in names


def test_malformed_grouping_key_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON", "{not json")

    assert PrometheusMetricsClient._load_grouping_key() == {}
