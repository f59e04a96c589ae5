from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import wraps
from math import sqrt
from time import perf_counter
from typing import Any, Callable, Dict, Mapping, TypeVar, cast

from gearx.core.config import settings

_F = TypeVar("_F", bound=Callable[..., Any])


@dataclass(slots=True)
class TimingStats:
    """Running aggregates (Welford) for one timing label."""

    count: float = 0.0
    total_ms: float = 0.0
    max_ms: float = 0.0
    avg_ms: float = 0.0
    stddev_ms: float = 0.0
    _mean_ms: float = 0.0
    _m2: float = 0.0

    def update(self, elapsed_ms: float) -> None:
        value = float(elapsed_ms)
        self.count += 1.0
        self.total_ms += value
        self.max_ms = max(self.max_ms, value)

        delta = value - self._mean_ms
        self._mean_ms += delta / self.count
        self._m2 += delta * (value - self._mean_ms)

        variance = self._m2 / (self.count - 1.0) if self.count > 1.0 else 0.0
        self.stddev_ms = sqrt(variance) if variance > 0.0 else 0.0
        self.avg_ms = self._mean_ms

    def snapshot(self) -> Dict[str, float]:
        return {
            "count": self.count,
            "total_ms": self.total_ms,
            "max_ms": self.max_ms,
            "avg_ms": self.avg_ms,
            "stddev_ms": self.stddev_ms,
        }


@dataclass(slots=True)
class LastRunMetadata:
    timestamp: str
    duration_ms: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    def snapshot(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"timestamp": self.timestamp, "duration_ms": self.duration_ms}
        data.update(self.metadata)
        return data


class _MetricsRegistry:
    """Thread-safe in-process store for timings, counters and last runs."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timings: Dict[str, TimingStats] = {}
        self._counters: Dict[str, float] = {}
        self._last_runs: Dict[str, LastRunMetadata] = {}

    def record(self, label: str, elapsed_ms: float) -> None:
        if not label:
            return
        with self._lock:
            self._timings.setdefault(label, TimingStats()).update(elapsed_ms)

    def inc(self, label: str, amount: float = 1.0) -> None:
        if not label:
            return
        with self._lock:
            self._counters[label] = self._counters.get(label, 0.0) + float(amount)

    def set_last_run(
        self,
        label: str,
        duration_ms: float,
        *,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        if not label:
            return
        with self._lock:
            self._last_runs[label] = LastRunMetadata(
                timestamp=datetime.now(timezone.utc).isoformat(),
                duration_ms=float(duration_ms),
                metadata=dict(metadata or {}),
            )

    def snapshot(self, reset: bool = False) -> Dict[str, Dict[str, float]]:
        with self._lock:
            data = {label: stats.snapshot() for label, stats in self._timings.items()}
            if reset:
                self._timings.clear()
            return data

    def counters_snapshot(self, reset: bool = False) -> Dict[str, float]:
        with self._lock:
            data = dict(self._counters)
            if reset:
                self._counters.clear()
            return data

    def last_runs_snapshot(self, reset: bool = False) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            data = {label: run.snapshot() for label, run in self._last_runs.items()}
            if reset:
                self._last_runs.clear()
            return data

    def reset(self) -> None:
        with self._lock:
            self._timings.clear()
            self._counters.clear()
            self._last_runs.clear()


metrics_registry = _MetricsRegistry()

_INSTRUMENTATION_ENABLED: bool = bool(settings.debug_instrumentation_enabled)


def set_instrumentation_enabled(enabled: bool) -> None:
    global _INSTRUMENTATION_ENABLED
    _INSTRUMENTATION_ENABLED = bool(enabled)


def instrumentation_enabled() -> bool:
    return _INSTRUMENTATION_ENABLED


@contextmanager
def timer(label: str):
    """Time a code block and record it under ``label``."""
    if not instrumentation_enabled():
        yield
        return
    t0 = perf_counter()
    try:
        yield
    finally:
        dt_ms = (perf_counter() - t0) * 1000.0
        metrics_registry.record(label, dt_ms)
        metrics_registry.set_last_run(label, dt_ms)


def timeit(label: str) -> Callable[[_F], _F]:
    """Decorator form of :func:`timer`."""

    def _wrap(func: _F) -> _F:
        @wraps(func)
        def _inner(*args: Any, **kwargs: Any):
            with timer(label):
                return func(*args, **kwargs)

        return cast(_F, _inner)

    return _wrap


def inc_counter(label: str, amount: float = 1.0) -> None:
    if instrumentation_enabled():
        metrics_registry.inc(label, amount)


def record_last_run(label: str, duration_ms: float, *, metadata: Mapping[str, Any] | None = None) -> None:
    if instrumentation_enabled():
        metrics_registry.set_last_run(label, duration_ms, metadata=metadata)


def get_metrics(reset: bool = False) -> Dict[str, Dict[str, float]]:
    return metrics_registry.snapshot(reset=reset)


def get_counters(reset: bool = False) -> Dict[str, float]:
    return metrics_registry.counters_snapshot(reset=reset)


def get_last_runs(reset: bool = False) -> Dict[str, Dict[str, Any]]:
    return metrics_registry.last_runs_snapshot(reset=reset)


__all__ = [
    "timer",
    "timeit",
    "inc_counter",
    "record_last_run",
    "get_metrics",
    "get_counters",
    "get_last_runs",
    "metrics_registry",
    "set_instrumentation_enabled",
    "instrumentation_enabled",
]
