# Overview: Flask API routes for invoices; parses input and returns JSON responses.

# backend/jewelry_admin/routes/invoices.py
"""
Invoice routes.

POST creates an invoice (sales, pawn or buy) and settles catalog stock.
Lookups return the invoice with its line items nested under "items".
"""
from flask import Blueprint, request

from .. import actions
from ..decorators import to_response

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.post("")
def create_invoice_route():
    """
    Create an invoice.

    Body:
    - customer_name (required), customer_phone, customer_address
    - total (required), type (sales|pawn|buy, required), status
    - due_date (ISO-8601, required for pawn), notes
    - items: [{product_id?, name, category?, quantity, price, discount?, return_type?, weight?}]
    """
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    return to_response(actions.create_invoice_action(payload), 201)


@invoices_bp.get("")
def list_invoices_route():
    return to_response(actions.get_invoices_action())


@invoices_bp.get("/<invoice_id>")
def get_invoice_route(invoice_id: str):
    return to_response(actions.get_invoice_by_id_action(invoice_id))


@invoices_bp.get("/number/<invoice_number>")
def get_invoice_by_number_route(invoice_number: str):
    return to_response(actions.get_invoice_by_number_action(invoice_number))
