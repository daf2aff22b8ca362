from flask import Blueprint, request

from jewelry_admin import actions
from jewelry_admin.decorators import to_response


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/monthly")
def monthly_summary():
    months = request.args.get("months", 6, type=int)
    return to_response(actions.get_monthly_summary_action(months))


@reports_bp.get("/dashboard")
def dashboard():
    return to_response(actions.get_dashboard_action(
        start=request.args.get("start"),
        end=request.args.get("end"),
    ))


@reports_bp.post("/price")
def calculate_price():
    """Gold price calculator. Body: { weight, gold_price, quality?, mode?, yway?, pe? }."""
    params = request.get_json(silent=True) or {}
    return to_response(actions.calculate_price_action(params))
