from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, Response, jsonify, request

from ledgerstream.models.schemas import Transaction
from ledgerstream.services.aggregation_service import (
    filter_by_amount_greater_than,
    filter_by_type,
)
from ledgerstream.services.transaction_service import parse_transaction_dicts
from ledgerstream.utils.financial import decimal_to_str
from ledgerstream.utils.logging_setup import get_logger

transactions_bp = Blueprint("transactions", __name__)

logger = get_logger(__name__)


#Endpoint: parse
@transactions_bp.route("/transactions:parse", methods=["POST"])
def parse_transactions() -> tuple[Response, int]:

    rows = request.get_json(silent=True)
    if not isinstance(rows, list):
        return jsonify({"error": "Body must be a list of transactions."}), 422

    try:
        result = parse_transaction_dicts(rows)
    except ValueError as exc:
        logger.warning("Rejected parse request: %s", exc)
        return jsonify({"error": str(exc)}), 422

    logger.info("Parsed %d transactions totalling %s", result.count, decimal_to_str(result.total_amount))
    return jsonify(result.to_dict()), 200


#Endpoint: filter
@transactions_bp.route("/transactions:filter", methods=["POST"])
def filter_transactions() -> tuple[Response, int]:
    """
    Keep the transactions matching every given criterion.

    Body::

        {"transactions": [...], "type": "DEBIT", "minAmount": 100}

    Both ``type`` and ``minAmount`` are optional; omitting both returns
    the input unchanged.
    """
    body: Dict[str, Any] | None = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Invalid or missing JSON body."}), 400

    try:
        selected: List[Transaction] = parse_transaction_dicts(
            body.get("transactions")
        ).transactions
        if body.get("type") is not None:
            selected = filter_by_type(selected, _require_str(body, "type"))
        if body.get("minAmount") is not None:
            selected = filter_by_amount_greater_than(selected, body["minAmount"])
    except (ValueError, TypeError) as exc:
        logger.warning("Rejected filter request: %s", exc)
        return jsonify({"error": str(exc)}), 422

    return jsonify([t.to_dict() for t in selected]), 200


#Internal field-access helpers
def _require_str(obj: Dict[str, Any], key: str) -> str:
    val = obj[key]
    if not isinstance(val, str):
        raise ValueError(f"Field {key!r} must be a string, got {type(val).__name__}.")
    return val
