"""
Performance metrics route.

Endpoint
--------
GET /ledgerstream/v1/performance

Returns the execution time of the most recently completed request,
current process RSS memory usage, and active thread count.
"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from ledgerstream import get_last_request_time_ms
from ledgerstream.utils.performance import collect_performance_snapshot

performance_bp = Blueprint("performance", __name__)


@performance_bp.route("/performance", methods=["GET"])
def get_performance() -> tuple[Response, int]:
    """
    Return a live performance snapshot::

        {"time": "X.XXXX ms", "memory": "XXX.XX MB", "threads": integer}
    """
    snapshot = collect_performance_snapshot(get_last_request_time_ms())
    return jsonify(snapshot), 200
