"""Simple in-process metrics collection for the portal.

Counters and histograms live in memory and are exported through the
``/api/metrics`` endpoint in Prometheus text format or returned as a summary
dictionary for logging.
"""

from __future__ import annotations

import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Mapping

LabelKey = tuple[tuple[str, str | None], ...]


def _labels_to_key(labels: Mapping[str, str | None] | None) -> LabelKey:
    if labels is None:
        return ()
    return tuple(sorted(labels.items()))


@dataclass
class Counter:
    """A monotonically increasing counter."""

    name: str
    help_text: str = ""
    _values: dict[LabelKey, float] = field(default_factory=lambda: defaultdict(float))
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def inc(
        self, value: float = 1.0, labels: Mapping[str, str | None] | None = None
    ) -> None:
        key = _labels_to_key(labels)
        with self._lock:
            self._values[key] += value

    def get(self, labels: Mapping[str, str | None] | None = None) -> float:
        key = _labels_to_key(labels)
        with self._lock:
            return self._values.get(key, 0.0)


@dataclass
class Histogram:
    """Running count and sum of observations per label set."""

    name: str
    help_text: str = ""
    _totals: dict[LabelKey, list[float]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def observe(
        self, value: float, labels: Mapping[str, str | None] | None = None
    ) -> None:
        key = _labels_to_key(labels)
        with self._lock:
            totals = self._totals.setdefault(key, [0, 0.0])
            totals[0] += 1
            totals[1] += value

    def get_stats(
        self, labels: Mapping[str, str | None] | None = None
    ) -> dict[str, float]:
        key = _labels_to_key(labels)
        with self._lock:
            count, total = self._totals.get(key, (0, 0.0))
        return {
            "count": count,
            "sum": total,
            "avg": total / count if count else 0.0,
        }

    def label_keys(self) -> list[LabelKey]:
        with self._lock:
            return list(self._totals)


class MetricRegistry:
    """Global registry for all metrics."""

    def __init__(self) -> None:
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}
        self._lock = threading.Lock()

    def counter(self, name: str, help_text: str = "") -> Counter:
        with self._lock:
            if name not in self._counters:
                self._counters[name] = Counter(name=name, help_text=help_text)
            elif help_text and not self._counters[name].help_text:
                self._counters[name].help_text = help_text
            return self._counters[name]

    def histogram(self, name: str, help_text: str = "") -> Histogram:
        with self._lock:
            if name not in self._histograms:
                self._histograms[name] = Histogram(name=name, help_text=help_text)
            return self._histograms[name]

    def all_counters(self) -> dict[str, Counter]:
        with self._lock:
            return dict(self._counters)

    def all_histograms(self) -> dict[str, Histogram]:
        with self._lock:
            return dict(self._histograms)


_registry = MetricRegistry()


def increment_counter(
    name: str,
    value: float = 1.0,
    labels: Mapping[str, str | None] | None = None,
    help_text: str = "",
) -> None:
    """Increment a counter by name, creating it on first use."""
    _registry.counter(name, help_text).inc(value, labels)


def observe_histogram(
    name: str,
    value: float,
    labels: Mapping[str, str | None] | None = None,
    help_text: str = "",
) -> None:
    """Record an observation in a histogram, creating it on first use."""
    _registry.histogram(name, help_text).observe(value, labels)


def get_counter_value(
    name: str, labels: Mapping[str, str | None] | None = None
) -> float:
    return _registry.counter(name).get(labels)


class Timer:
    """Context manager for timing operations and recording to a histogram."""

    def __init__(
        self,
        histogram_name: str,
        labels: Mapping[str, str | None] | None = None,
        help_text: str = "",
    ) -> None:
        self.histogram_name = histogram_name
        self.labels = labels
        self.help_text = help_text
        self._start: float = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        duration = time.perf_counter() - self._start
        observe_histogram(self.histogram_name, duration, self.labels, self.help_text)


# ---------------------------------------------------------------------------
# Portal metrics
# ---------------------------------------------------------------------------

GATEWAY_DECISIONS = "gateway_decisions_total"
LOGIN_ATTEMPTS = "login_attempts_total"
CONFIG_SAVES = "portal_config_saves_total"
PAGE_RENDER_DURATION = "portal_page_render_seconds"


def record_gateway_decision(reason: str, allowed: bool) -> None:
    """Record how the gateway handled a request (e.g. ``iframe``, ``missing-session``)."""
    increment_counter(
        GATEWAY_DECISIONS,
        labels={"reason": reason, "outcome": "allow" if allowed else "redirect"},
        help_text="Requests evaluated by the portal gateway",
    )


def record_login_attempt(outcome: str) -> None:
    """Record a login attempt: ``success``, ``invalid`` or ``not_configured``."""
    increment_counter(
        LOGIN_ATTEMPTS, labels={"outcome": outcome}, help_text="Access-code logins"
    )


def record_config_save(success: bool) -> None:
    increment_counter(
        CONFIG_SAVES,
        labels={"status": "success" if success else "failed"},
        help_text="Portal ordering saves",
    )


# ---------------------------------------------------------------------------
# Export utilities
# ---------------------------------------------------------------------------


def _label_str(key: LabelKey, quoted: bool = False) -> str:
    if quoted:
        return ",".join(f'{k}="{v}"' for k, v in key)
    return ",".join(f"{k}={v}" for k, v in key) if key else "default"


def get_metrics_summary() -> dict[str, object]:
    """Return a summary of all metrics for logging or API response."""
    counters: dict[str, dict[str, float]] = {}
    histograms: dict[str, dict[str, dict[str, float]]] = {}

    for name, counter in _registry.all_counters().items():
        counters[name] = {
            _label_str(key): value for key, value in list(counter._values.items())
        }

    for name, histogram in _registry.all_histograms().items():
        histograms[name] = {
            _label_str(key): histogram.get_stats(dict(key) if key else None)
            for key in histogram.label_keys()
        }

    return {"counters": counters, "histograms": histograms}


def format_prometheus() -> str:
    """Format metrics in Prometheus text exposition format."""
    lines: list[str] = []

    for name, counter in _registry.all_counters().items():
        if counter.help_text:
            lines.append(f"# HELP {name} {counter.help_text}")
        lines.append(f"# TYPE {name} counter")
        for key, value in list(counter._values.items()):
            if key:
                lines.append(f"{name}{{{_label_str(key, quoted=True)}}} {value}")
            else:
                lines.append(f"{name} {value}")

    for name, histogram in _registry.all_histograms().items():
        if histogram.help_text:
            lines.append(f"# HELP {name} {histogram.help_text}")
        lines.append(f"# TYPE {name} summary")
        for key in histogram.label_keys():
            stats = histogram.get_stats(dict(key) if key else None)
            suffix = f"{{{_label_str(key, quoted=True)}}}" if key else ""
            lines.append(f"{name}_count{suffix} {stats['count']}")
            lines.append(f"{name}_sum{suffix} {stats['sum']}")

    return "\n".join(lines) + "\n"
