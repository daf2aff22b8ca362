from __future__ import annotations

from ..extensions import db
from jewelry_admin.time_utils import to_utc_z, utcnow


class DailyMarketRate(db.Model):
    """
    One row per (type, calendar day). hourly_rate holds the day's samples
    in arrival order: [{"time": "9 AM", "value": 2350.5}, ...].
    """
    __tablename__ = "daily_market_rate"
    __table_args__ = (
        db.Index("ix_daily_market_rate_type_created", "type", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(32), nullable=False)  # gold, exchange_rate
    hourly_rate = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "hourly_rate": list(self.hourly_rate or []),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
