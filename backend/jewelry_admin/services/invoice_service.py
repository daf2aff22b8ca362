"""
Invoice Service - invoice creation and lookup.

create_invoice is the one write in the system that spans two tables:
the invoice (with its lines) and catalog stock. Both happen in a single
transaction. Stock moves as a relative SQL update (stock = stock - qty),
never as a value computed in Python, so concurrent invoices against the
same item cannot overwrite each other.

Stock direction by invoice type:
- sales: stock decreases by the line quantity
- buy: stock increases by the line quantity
- pawn: no change (pawned pieces are collateral, not inventory)
"""

from __future__ import annotations

import random
from decimal import Decimal

from flask import current_app
from sqlalchemy import text, update
from sqlalchemy.exc import IntegrityError

from ..constants import DEFAULT_INVOICE_STATUS, INVOICE_STATUSES, INVOICE_TYPES, STOCK_DIRECTION
from ..extensions import db
from ..id_utils import generate_id
from ..models import Invoice, InvoiceItem, Item
from ..signals import invalidate_views
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    coerce_amount,
    coerce_float,
    coerce_int,
    enforce_rules_invoice_line,
    validate_payload,
)
from .concurrency import run_with_retry
from jewelry_admin.time_utils import utcnow

INVOICE_POLICY = ModelValidationPolicy(
    writable_fields={
        "customer_name", "customer_phone", "customer_address",
        "total", "type", "status", "due_date", "notes",
    },
    required_on_create={"customer_name", "total", "type"},
    choices={"type": INVOICE_TYPES},
)

LINE_FIELDS = {
    "product_id", "name", "category", "quantity", "price",
    "discount", "return_type", "weight",
    # accepted but ignored: the stored line total is always recomputed
    "total",
}

INVOICE_NUMBER_MIN = 100000
INVOICE_NUMBER_MAX = 999999


class InvoiceNumberExhaustedError(ConflictError):
    """Every candidate invoice number drawn already existed."""


def _draw_suffix() -> int:
    return random.randint(INVOICE_NUMBER_MIN, INVOICE_NUMBER_MAX)


def generate_invoice_number(*, max_attempts: int | None = None, year: int | None = None) -> str:
    """
    Draw "INV-<year>-<6 digits>" candidates until one is unused.

    Makes exactly max_attempts draws at most (INVOICE_NUMBER_MAX_ATTEMPTS,
    10 by default). The uniqueness check here is advisory; the unique
    constraint on invoices.invoice_number is what rejects a concurrent
    duplicate.
    """
    if max_attempts is None:
        max_attempts = current_app.config["INVOICE_NUMBER_MAX_ATTEMPTS"]
    year = year or utcnow().year

    for _ in range(max_attempts):
        candidate = f"INV-{year}-{_draw_suffix()}"
        exists = (
            db.session.query(Invoice.id)
            .filter(Invoice.invoice_number == candidate)
            .first()
        )
        if exists is None:
            return candidate

    raise InvoiceNumberExhaustedError("Failed to generate a unique invoice number. Please try again.")


def _optional_str(value) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_line(raw, index: int) -> dict:
    label = f"items[{index}]"
    if not isinstance(raw, dict):
        raise ValidationError(f"{label} must be an object")

    unknown = sorted(set(raw) - LINE_FIELDS)
    if unknown:
        raise ValidationError(f"{label}: field not allowed: {', '.join(unknown)}")

    name = _optional_str(raw.get("name"))
    if name is None:
        raise ValidationError(f"{label}.name is required")
    if raw.get("quantity") is None:
        raise ValidationError(f"{label}.quantity is required")
    if raw.get("price") is None:
        raise ValidationError(f"{label}.price is required")

    discount = raw.get("discount")
    weight = raw.get("weight")
    line = {
        "product_id": _optional_str(raw.get("product_id")),
        "name": name,
        "category": _optional_str(raw.get("category")),
        "quantity": coerce_int(f"{label}.quantity", raw["quantity"]),
        "price": coerce_amount(f"{label}.price", raw["price"]),
        "discount": coerce_amount(f"{label}.discount", discount) if discount not in (None, "") else Decimal("0"),
        "return_type": _optional_str(raw.get("return_type")),
        "weight": coerce_float(f"{label}.weight", weight) if weight not in (None, "") else None,
    }
    enforce_rules_invoice_line(line, index)
    line["total"] = line["price"] * line["quantity"] - line["discount"]
    return line


def parse_invoice_payload(payload: dict) -> tuple[dict, list[dict]]:
    """Validate a create payload; returns (header patch, parsed lines)."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    raw_lines = payload.get("items") or []
    if not isinstance(raw_lines, list):
        raise ValidationError("items must be a list")

    header = {k: v for k, v in payload.items() if k != "items"}
    patch = validate_payload(model=Invoice, payload=header, policy=INVOICE_POLICY, partial=False)

    invoice_type = patch["type"]
    if invoice_type == "pawn" and patch.get("due_date") is None:
        raise ValidationError("Due date is required for pawn invoices")

    status = patch.get("status") or DEFAULT_INVOICE_STATUS[invoice_type]
    if status not in INVOICE_STATUSES[invoice_type]:
        raise ValidationError(
            f"status for {invoice_type} invoices must be one of: {', '.join(INVOICE_STATUSES[invoice_type])}"
        )
    patch["status"] = status

    lines = [_parse_line(raw, i) for i, raw in enumerate(raw_lines)]

    if current_app.config.get("INVOICE_VERIFY_TOTAL"):
        line_sum = sum((line["total"] for line in lines), Decimal("0"))
        if line_sum != patch["total"]:
            raise ValidationError(f"total {patch['total']} does not match the sum of line totals {line_sum}")

    return patch, lines


def _apply_stock_delta(invoice_type: str, line: dict) -> None:
    new_stock = Item.stock + STOCK_DIRECTION[invoice_type] * line["quantity"]

    stmt = (
        update(Item)
        .where(Item.id == line["product_id"])
        .values(stock=new_stock, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    try:
        db.session.execute(stmt)
    except IntegrityError:
        db.session.rollback()
        raise ValidationError(f"Insufficient stock for item {line['product_id']}")


def _write_invoice(patch: dict, lines: list[dict]) -> Invoice:
    """Insert the invoice and its lines, then move stock. Caller owns the transaction."""
    invoice_type = patch["type"]
    invoice = Invoice(
        id=generate_id("inv"),
        invoice_number=generate_invoice_number(),
        **patch,
    )
    db.session.add(invoice)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Invoice number already exists. Please try again.")

    for position, line in enumerate(lines):
        db.session.add(InvoiceItem(
            id=generate_id("inv-item"),
            invoice_id=invoice.id,
            item_id=line["product_id"],
            position=position,
            name=line["name"],
            category=line["category"],
            quantity=line["quantity"],
            price=line["price"],
            discount=line["discount"],
            total=line["total"],
            return_type=line["return_type"],
            weight=line["weight"],
        ))
    db.session.flush()

    if invoice_type in STOCK_DIRECTION:
        for line in lines:
            # Free-form lines have no catalog item to move
            if line["product_id"]:
                _apply_stock_delta(invoice_type, line)
    return invoice


def create_invoice(payload: dict) -> dict:
    """
    Create an invoice with its lines and settle catalog stock.

    Returns {"id", "invoice_number"}. Raises ValidationError for bad input
    (including a pawn invoice without due_date), InvoiceNumberExhaustedError
    when no free number was drawn, ConflictError when a concurrent insert
    took the same number first. On any failure nothing is committed.
    """
    patch, lines = parse_invoice_payload(payload)

    def _op() -> Invoice:
        # Serialize writers on SQLite so the number check and insert see a stable table
        if db.engine.dialect.name == "sqlite":
            db.session.execute(text("BEGIN IMMEDIATE"))
        try:
            invoice = _write_invoice(patch, lines)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return invoice

    invoice = run_with_retry(_op)

    current_app.logger.info(
        "Created %s invoice %s with %d line(s)", patch["type"], invoice.invoice_number, len(lines)
    )
    invalidate_views(current_app._get_current_object(), "/invoice", "/inventory", "/sales")
    return {"id": invoice.id, "invoice_number": invoice.invoice_number}


def list_invoices() -> list[dict]:
    """
    All invoices with their lines, newest first.

    Unpaginated full scan; fine for a single shop's volume.
    """
    invoices = (
        db.session.query(Invoice)
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .all()
    )
    return [inv.to_dict() for inv in invoices]


def get_invoice_by_id(invoice_id: str) -> dict:
    invoice = db.session.query(Invoice).filter(Invoice.id == invoice_id).first()
    if invoice is None:
        raise NotFoundError("Invoice not found")
    return invoice.to_dict()


def get_invoice_by_number(invoice_number: str) -> dict:
    invoice = db.session.query(Invoice).filter(Invoice.invoice_number == invoice_number).first()
    if invoice is None:
        raise NotFoundError("Invoice not found")
    return invoice.to_dict()
