from __future__ import annotations

from ..extensions import db
from jewelry_admin.time_utils import to_utc_z, utcnow


class _LookupMixin:
    """Slug-keyed name list. Items and invoices store the name as free text, so nothing cascades."""

    id = db.Column(db.String(128), primary_key=True)
    name = db.Column(db.String(128), nullable=False, unique=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": to_utc_z(self.created_at),
        }


class Category(_LookupMixin, db.Model):
    __tablename__ = "categories"


class Material(_LookupMixin, db.Model):
    __tablename__ = "materials"
