"""Request counters, render timings and /api/status payload assembly."""

from __future__ import annotations

import threading
import time
from collections import deque
from datetime import datetime, timezone

from constants import PERF_RECENT_MAX_ITEMS

api_counters = {"requests": 0, "4xx": 0, "5xx": 0}
perf_recent = deque(maxlen=PERF_RECENT_MAX_ITEMS)  # [{'route':..., 'ms':..., 'ts':...}, ...]
_stats_lock = threading.Lock()


def count_response(status_code: int):
    with _stats_lock:
        api_counters["requests"] += 1
        if 400 <= status_code < 500:
            api_counters["4xx"] += 1
        elif status_code >= 500:
            api_counters["5xx"] += 1


def perf_record(route: str, ms: float):
    with _stats_lock:
        perf_recent.append({"route": route, "ms": float(ms), "ts": time.time()})


def reset_stats():
    with _stats_lock:
        for k in api_counters:
            api_counters[k] = 0
        perf_recent.clear()


def _percentile(values, p):
    if not values:
        return None
    xs = sorted(float(v) for v in values)
    if len(xs) == 1:
        return xs[0]
    rank = (len(xs) - 1) * float(p)
    lo = int(rank)
    hi = min(lo + 1, len(xs) - 1)
    frac = rank - lo
    return xs[lo] * (1.0 - frac) + xs[hi] * frac


def build_status_payload(*, started_at: datetime, dimensions: dict, image_route: bool):
    now = datetime.now(timezone.utc)
    with _stats_lock:
        counters = dict(api_counters)
        recent = list(perf_recent)

    render = {}
    for route in sorted({p["route"] for p in recent}):
        ms = [p["ms"] for p in recent if p["route"] == route]
        p50 = _percentile(ms, 0.5)
        p95 = _percentile(ms, 0.95)
        render[route] = {
            "count": len(ms),
            "p50Ms": round(p50, 2) if p50 is not None else None,
            "p95Ms": round(p95, 2) if p95 is not None else None,
        }

    return {
        "uptimeSeconds": round((now - started_at).total_seconds(), 1),
        "dimensions": dimensions,
        "imageRoute": image_route,
        "api": counters,
        "render": render,
    }
