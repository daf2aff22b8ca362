from __future__ import annotations

from ..extensions import db
from jewelry_admin.time_utils import to_utc_z, utcnow


class Item(db.Model):
    """
    Catalog item.

    Stock is only ever changed by direct edits or by invoice settlement,
    which applies relative deltas (stock = stock +/- quantity) in SQL.
    """
    __tablename__ = "items"
    __table_args__ = (
        db.Index("ix_items_category", "category"),
        db.Index("ix_items_created_at", "created_at"),
        db.CheckConstraint("stock >= 0", name="ck_items_stock_non_negative"),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(64), nullable=False)
    description = db.Column(db.Text, nullable=True)
    material = db.Column(db.String(128), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    image = db.Column(db.String(1024), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Item id={self.id!r} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "material": self.material,
            "stock": self.stock,
            "image": self.image,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
