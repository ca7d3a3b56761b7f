from __future__ import annotations

import json
import logging
import os

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

from split_audio.runtime.summary import RunSummary

LOGGER = logging.getLogger(__name__)

RUN_JOB = "split_audio_run"


class PrometheusMetricsClient:
    """Minimal Prometheus Pushgateway client for one-shot runs.

    Expected environment:
    - PROMETHEUS_PUSHGATEWAY_URL: URL to the Pushgateway.
      Example: http://pushgateway.local:9091

    Optional:
    - PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: JSON object used as grouping key.
      Example:
        {"host": "recorder-01"}

    Metrics delivery is a side-effect: callers must never fail a run
    because of it.
    """

    def __init__(self) -> None:
        self._pushgateway_url = os.environ.get("PROMETHEUS_PUSHGATEWAY_URL")
        self._grouping_key = self._load_grouping_key()
        self._registry = CollectorRegistry()

    def is_enabled(self) -> bool:
        return self._pushgateway_url is not None

    @staticmethod
    def _load_grouping_key() -> dict[str, str]:
        raw = os.environ.get("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON")
        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning(
                "Invalid PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON; ignoring"
            )
            return {}

        if not isinstance(data, dict):
            return {}

        grouping: dict[str, str] = {}
        for key, value in data.items():
            if isinstance(key, str) and isinstance(value, str):
                grouping[key] = value
        return grouping

    def push_gauge(
        self,
        *,
        name: str,
        value: float,
        labels: dict[str, str],
    ) -> None:
        if not self._pushgateway_url:
            return

        gauge = Gauge(
            name,
            documentation=name,
            labelnames=list(labels.keys()),
            registry=self._registry,
        )

        gauge.labels(**labels).set(value)

    def push_all(self, *, job: str) -> None:
        if not self._pushgateway_url:
            return

        push_to_gateway(
            gateway=self._pushgateway_url,
            job=job,
            registry=self._registry,
            grouping_key=self._grouping_key,
        )

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": job, "grouping_key": self._grouping_key},
        )

    def push_run_summary(self, summary: RunSummary) -> None:
        """Publish the counters of a finished run."""
        if not self.is_enabled():
            return

        labels = {"output_folder": str(summary.output_folder)}

        self.push_gauge(
            name="split_audio_files_processed",
            value=float(summary.processed),
            labels=labels,
        )
        self.push_gauge(
            name="split_audio_files_skipped",
            value=float(summary.skipped),
            labels=labels,
        )
        self.push_gauge(
            name="split_audio_files_aborted",
            value=float(summary.aborted),
            labels=labels,
        )
        self.push_gauge(
            name="split_audio_segments_created",
            value=float(summary.segments_created),
            labels=labels,
        )

        self.push_all(job=RUN_JOB)
