# Overview: Flask API routes for market rates; ingest feed readings and list daily rows.

from flask import Blueprint, request

from .. import actions
from ..decorators import to_response

market_bp = Blueprint("market", __name__, url_prefix="/api/market-rate")


@market_bp.post("")
def record_market_rates_route():
    """
    Ingest one reading. Body: { time, gold_price, exchange_rate }.
    Both values append to today's row of their type.
    """
    payload = request.get_json(silent=True) or {}
    return to_response(actions.record_market_rates_action(
        payload.get("time"),
        payload.get("gold_price"),
        payload.get("exchange_rate"),
    ))


@market_bp.post("/<rate_type>")
def append_market_rate_route(rate_type: str):
    """Append a single sample. Body: { time, value }."""
    payload = request.get_json(silent=True) or {}
    return to_response(actions.append_market_rate_action(rate_type, payload.get("value"), payload.get("time")))


@market_bp.get("")
def list_market_rates_route():
    return to_response(actions.get_market_rates_action(
        limit=request.args.get("limit", 30, type=int),
        rate_type=request.args.get("type"),
    ))
