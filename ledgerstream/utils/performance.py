"""
Process snapshot helpers for the performance endpoint.
"""

from __future__ import annotations

import threading

import psutil


def get_process_memory_mb() -> float:
    """RSS of the current process in megabytes, via :mod:`psutil`."""
    rss_bytes: int = psutil.Process().memory_info().rss
    return rss_bytes / (1024 * 1024)


def collect_performance_snapshot(last_request_ms: float) -> dict:
    """
    Build the ``{"time", "memory", "threads"}`` payload.

    *last_request_ms* is the duration of the most recently completed
    request; memory and thread count are sampled now.
    """
    return {
        "time": f"{last_request_ms:.4f} ms",
        "memory": f"{get_process_memory_mb():.2f} MB",
        "threads": threading.active_count(),
    }
