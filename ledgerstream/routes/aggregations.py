"""
Aggregation routes.

Endpoints
---------
POST /ledgerstream/v1/aggregations:group
POST /ledgerstream/v1/aggregations:summary
POST /ledgerstream/v1/aggregations:top
POST /ledgerstream/v1/aggregations:adjust

Every endpoint takes ``{"transactions": [...], ...}`` and returns amounts as
exact decimal strings.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from flask import Blueprint, Response, jsonify, request

from ledgerstream import config
from ledgerstream.models.schemas import Transaction
from ledgerstream.services import aggregation_service as engine
from ledgerstream.services.recipe_service import summarize_by_account
from ledgerstream.services.transaction_service import parse_transaction_dicts
from ledgerstream.utils.financial import decimal_to_str
from ledgerstream.utils.logging_setup import get_logger

aggregations_bp = Blueprint("aggregations", __name__)

logger = get_logger(__name__)

GROUP_KEYS: Dict[str, Callable[[Transaction], Any]] = {
    "accountId": engine.by_account,
    "type": engine.by_type,
}

METRICS = ("list", "sum", "count")


#Shared parsing helpers
def _load(body: Dict[str, Any]) -> List[Transaction]:
    if "transactions" not in body:
        raise ValueError("Missing required field: 'transactions'")
    return parse_transaction_dicts(body["transactions"]).transactions


def _group_key(body: Dict[str, Any]) -> Callable[[Transaction], Any]:
    name = body.get("key", "accountId")
    if name not in GROUP_KEYS:
        raise ValueError(f"'key' must be one of {sorted(GROUP_KEYS)}, got {name!r}.")
    return GROUP_KEYS[name]


def _json_body() -> Dict[str, Any] | None:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else None


def _require_str(obj: Dict[str, Any], key: str) -> str:
    val = obj[key]
    if not isinstance(val, str):
        raise ValueError(f"Field {key!r} must be a string, got {type(val).__name__}.")
    return val


#Endpoint: group
@aggregations_bp.route("/aggregations:group", methods=["POST"])
def group_transactions() -> tuple[Response, int]:
    body = _json_body()
    if body is None:
        return jsonify({"error": "Invalid or missing JSON body."}), 400

    try:
        transactions = _load(body)
        key = _group_key(body)
        metric = body.get("metric", "list")
        if metric not in METRICS:
            raise ValueError(f"'metric' must be one of {list(METRICS)}, got {metric!r}.")
    except (ValueError, TypeError) as exc:
        logger.warning("Rejected group request: %s", exc)
        return jsonify({"error": str(exc)}), 422

    if metric == "sum":
        result = {
            k: decimal_to_str(v)
            for k, v in engine.sum_amount_by_group(transactions, key).items()
        }
    elif metric == "count":
        result = engine.count_by_group(transactions, key)
    else:
        result = {
            k: [t.to_dict() for t in members]
            for k, members in engine.group_by(transactions, key).items()
        }

    logger.info("Grouped %d transactions into %d groups (%s)", len(transactions), len(result), metric)
    return jsonify(result), 200


#Endpoint: summary
@aggregations_bp.route("/aggregations:summary", methods=["POST"])
def summarize_transactions() -> tuple[Response, int]:
    """
    Scalar reductions over the (optionally type-filtered) transactions.

    Response body::

        {
            "total":    "325.00",
            "max":      "200.00" | null,
            "count":    3,
            "keys":     "A,B",
            "accounts": [{"key", "count", "total", "max"}, ...]
        }
    """
    body = _json_body()
    if body is None:
        return jsonify({"error": "Invalid or missing JSON body."}), 400

    try:
        transactions = _load(body)
        key = _group_key(body)
        if body.get("type") is not None:
            transactions = engine.filter_by_type(transactions, _require_str(body, "type"))
    except (ValueError, TypeError) as exc:
        logger.warning("Rejected summary request: %s", exc)
        return jsonify({"error": str(exc)}), 422

    maximum = engine.max_amount(transactions)
    return jsonify({
        "total": decimal_to_str(engine.total_amount(transactions)),
        "max": None if maximum is None else decimal_to_str(maximum),
        "count": len(transactions),
        "keys": engine.concatenate_distinct_keys(transactions, key, config.KEY_SEPARATOR),
        "accounts": [s.to_dict() for s in summarize_by_account(transactions)],
    }), 200


#Endpoint: top-N
@aggregations_bp.route("/aggregations:top", methods=["POST"])
def top_transactions() -> tuple[Response, int]:
    body = _json_body()
    if body is None:
        return jsonify({"error": "Invalid or missing JSON body."}), 400

    try:
        transactions = _load(body)
        top = engine.top_n_by_amount(transactions, body.get("n", config.DEFAULT_TOP_N))
    except (ValueError, TypeError) as exc:
        logger.warning("Rejected top request: %s", exc)
        return jsonify({"error": str(exc)}), 422

    return jsonify([t.to_dict() for t in top]), 200


#Endpoint: percentage adjustment
@aggregations_bp.route("/aggregations:adjust", methods=["POST"])
def adjust_amounts() -> tuple[Response, int]:
    body = _json_body()
    if body is None:
        return jsonify({"error": "Invalid or missing JSON body."}), 400

    try:
        transactions = _load(body)
        if "factor" not in body:
            raise ValueError("Missing required field: 'factor'")
        adjusted = engine.apply_percentage_adjustment(transactions, body["factor"])
    except (ValueError, TypeError) as exc:
        logger.warning("Rejected adjust request: %s", exc)
        return jsonify({"error": str(exc)}), 422

    return jsonify([decimal_to_str(a) for a in adjusted]), 200
