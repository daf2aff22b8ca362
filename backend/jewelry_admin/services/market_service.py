"""
Market Service - daily gold price and exchange rate samples.

Each (type, calendar day) has one DailyMarketRate row. Samples posted
during the day are appended to that row's hourly_rate list in arrival
order; the first sample after midnight (UTC) starts a new row.
"""

from __future__ import annotations

from datetime import datetime

from flask import current_app

from ..constants import MARKET_RATE_TYPES
from ..extensions import db
from ..models import DailyMarketRate
from ..signals import invalidate_views
from ..validation import ValidationError, coerce_float
from jewelry_admin.time_utils import day_bounds, utcnow

# Feeds post midnight as "12 AM"; the charts sort labels on a 0-23 clock
MIDNIGHT_LABELS = {"12 AM": "0 AM"}


def normalize_time_label(label) -> str:
    if label is None or not str(label).strip():
        raise ValidationError("time is required")
    label = str(label).strip()
    return MIDNIGHT_LABELS.get(label, label)


def _positive_value(key: str, value) -> float:
    if value is None:
        raise ValidationError(f"{key} is required")
    number = coerce_float(key, value)
    if number <= 0:
        raise ValidationError(f"{key} must be a positive number")
    return number


def append_market_rate(
    *,
    rate_type: str,
    value,
    time_label: str,
    now: datetime | None = None,
) -> dict:
    """
    Append one sample to today's row for rate_type, creating the row if
    the day has none yet.
    """
    if rate_type not in MARKET_RATE_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(MARKET_RATE_TYPES)}")
    number = _positive_value("value", value)
    label = normalize_time_label(time_label)

    now = now or utcnow()
    start, end = day_bounds(now)

    row = (
        db.session.query(DailyMarketRate)
        .filter(
            DailyMarketRate.type == rate_type,
            DailyMarketRate.created_at >= start,
            DailyMarketRate.created_at < end,
        )
        .order_by(DailyMarketRate.created_at.asc(), DailyMarketRate.id.asc())
        .first()
    )

    sample = {"time": label, "value": number}
    if row is None:
        row = DailyMarketRate(type=rate_type, hourly_rate=[sample], created_at=now, updated_at=now)
        db.session.add(row)
    else:
        # Reassign so the JSON column is flagged dirty
        row.hourly_rate = list(row.hourly_rate or []) + [sample]
        row.updated_at = now

    db.session.commit()
    return row.to_dict()


def record_market_rates(*, time_label: str, gold_price, exchange_rate, now: datetime | None = None) -> dict:
    """Ingest one feed reading carrying both the gold price and the exchange rate."""
    if time_label is None or gold_price is None or exchange_rate is None:
        raise ValidationError("Missing required fields. Expected: { time, gold_price, exchange_rate }")
    gold = _positive_value("gold_price", gold_price)
    fx = _positive_value("exchange_rate", exchange_rate)

    now = now or utcnow()
    gold_row = append_market_rate(rate_type="gold", value=gold, time_label=time_label, now=now)
    fx_row = append_market_rate(rate_type="exchange_rate", value=fx, time_label=time_label, now=now)

    current_app.logger.info("Recorded market rates at %s: gold=%s exchange_rate=%s", time_label, gold, fx)
    invalidate_views(current_app._get_current_object(), "/", "/analytics")
    return {"gold": gold_row, "exchange_rate": fx_row}


def list_market_rates(*, limit: int | None = 30, rate_type: str | None = None) -> list[dict]:
    """Most recent rows first, each with its decoded sample list."""
    query = db.session.query(DailyMarketRate)
    if rate_type:
        if rate_type not in MARKET_RATE_TYPES:
            raise ValidationError(f"type must be one of: {', '.join(MARKET_RATE_TYPES)}")
        query = query.filter(DailyMarketRate.type == rate_type)

    query = query.order_by(DailyMarketRate.created_at.desc(), DailyMarketRate.id.desc())
    if limit:
        query = query.limit(min(max(limit, 1), 366))
    return [row.to_dict() for row in query.all()]
