# Overview: Dashboard aggregates over invoices and catalog stock.

from __future__ import annotations

import calendar
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func

from jewelry_admin.constants import INVOICE_TYPES
from jewelry_admin.extensions import db
from jewelry_admin.models import Invoice, Item
from jewelry_admin.time_utils import month_starts, parse_iso_datetime
from jewelry_admin.validation import ValidationError


def _parse_range(start: str | None, end: str | None) -> tuple[datetime | None, datetime | None]:
    try:
        start_dt = parse_iso_datetime(start) if start else None
        end_dt = parse_iso_datetime(end) if end else None
    except ValueError:
        raise ValidationError("start and end must be ISO-8601 datetimes")
    if start_dt and end_dt and end_dt < start_dt:
        raise ValidationError("end must not be before start")
    return start_dt, end_dt


def _empty_bucket() -> dict:
    bucket = {}
    for invoice_type in INVOICE_TYPES:
        bucket[f"{invoice_type}_amount"] = Decimal("0")
        bucket[f"{invoice_type}_count"] = 0
    return bucket


def _as_floats(bucket: dict) -> dict:
    return {k: float(v) if isinstance(v, Decimal) else v for k, v in bucket.items()}


def monthly_summary(*, months: int = 6, today: date | None = None) -> list[dict]:
    """
    Per-month invoice volume and count by type, for the last `months`
    calendar months including the current one, oldest first.
    """
    if months < 1 or months > 36:
        raise ValidationError("months must be between 1 and 36")

    starts = month_starts(months, today)
    first = datetime.combine(starts[0], datetime.min.time())

    buckets = {(s.year, s.month): _empty_bucket() for s in starts}
    rows = (
        db.session.query(Invoice.type, Invoice.total, Invoice.created_at)
        .filter(Invoice.created_at >= first)
        .all()
    )
    for invoice_type, total, created_at in rows:
        bucket = buckets.get((created_at.year, created_at.month))
        if bucket is None or invoice_type not in INVOICE_TYPES:
            continue
        bucket[f"{invoice_type}_amount"] += total or Decimal("0")
        bucket[f"{invoice_type}_count"] += 1

    return [
        {
            "month": calendar.month_abbr[s.month],
            "year": s.year,
            **_as_floats(buckets[(s.year, s.month)]),
        }
        for s in starts
    ]


def range_summary(*, start: str | None = None, end: str | None = None) -> dict:
    """Totals by type for invoices created in [start, end]; open ends are unbounded."""
    start_dt, end_dt = _parse_range(start, end)

    query = db.session.query(Invoice.type, func.count(Invoice.id), func.sum(Invoice.total))
    if start_dt:
        query = query.filter(Invoice.created_at >= start_dt)
    if end_dt:
        query = query.filter(Invoice.created_at <= end_dt)

    bucket = _empty_bucket()
    for invoice_type, count, amount in query.group_by(Invoice.type).all():
        if invoice_type not in INVOICE_TYPES:
            continue
        bucket[f"{invoice_type}_count"] = count
        bucket[f"{invoice_type}_amount"] = Decimal(str(amount or 0))
    return _as_floats(bucket)


def dashboard_stats() -> dict:
    """Headline numbers: invoice counts/amounts by type and units in stock."""
    stats = range_summary()
    stats["units_in_stock"] = int(db.session.query(func.coalesce(func.sum(Item.stock), 0)).scalar())
    stats["item_count"] = db.session.query(Item).count()
    return stats
