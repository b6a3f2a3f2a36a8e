"""
Application factory with performance measurement middleware.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Mapping, Optional

from flask import Flask, Response, g, jsonify

from ledgerstream import config
from ledgerstream.utils.logging_setup import configure_logging, get_logger

# Thread-safe store for last request timing
_last_request_lock = threading.Lock()
_last_request_time_ms: float = 0.0

logger = get_logger(__name__)


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the Flask application."""
    configure_logging(config.LOG_LEVEL)

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config["API_BASE"] = config.API_BASE
    if overrides:
        app.config.update(overrides)

    # ── Performance middleware ──────────────────────────────────────────────

    @app.before_request
    def _start_timer() -> None:
        g.start_time = time.perf_counter()

    @app.after_request
    def _stop_timer(response: Response) -> Response:
        global _last_request_time_ms
        elapsed = (time.perf_counter() - g.start_time) * 1_000
        with _last_request_lock:
            _last_request_time_ms = elapsed
        response.headers["X-Response-Time-Ms"] = f"{elapsed:.4f}"
        return response

    # ── Error handlers ──────────────────────────────────────────────────────

    @app.errorhandler(400)
    def bad_request(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Bad Request", "message": str(exc)}), 400

    @app.errorhandler(404)
    def not_found(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Not Found", "message": str(exc)}), 404

    @app.errorhandler(405)
    def method_not_allowed(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Method Not Allowed", "message": str(exc)}), 405

    @app.errorhandler(422)
    def unprocessable(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Unprocessable Entity", "message": str(exc)}), 422

    @app.errorhandler(500)
    def internal_error(exc: Any) -> tuple[Response, int]:
        logger.error("Unhandled error: %s", exc)
        return jsonify({"error": "Internal Server Error", "message": str(exc)}), 500

    # ── Register blueprints ─────────────────────────────────────────────────

    from ledgerstream.routes.transactions import transactions_bp
    from ledgerstream.routes.aggregations import aggregations_bp
    from ledgerstream.routes.performance import performance_bp

    app.register_blueprint(transactions_bp, url_prefix=config.API_BASE)
    app.register_blueprint(aggregations_bp, url_prefix=config.API_BASE)
    app.register_blueprint(performance_bp, url_prefix=config.API_BASE)

    logger.info("ledgerstream app created, API base %s", config.API_BASE)
    return app


def get_last_request_time_ms() -> float:
    """Return the execution time of the most recently completed request (ms)."""
    with _last_request_lock:
        return _last_request_time_ms
