from __future__ import annotations

from ..extensions import db
from jewelry_admin.time_utils import to_utc_z, utcnow


def _amount(value):
    return float(value) if value is not None else None


class Invoice(db.Model):
    """
    Invoice document for a sales, pawn or buy transaction.

    invoice_number is unique at the storage layer; the allocator's
    check-then-insert can race, and the constraint turns that race into
    an insert failure rather than a duplicate.
    """
    __tablename__ = "invoices"
    __table_args__ = (
        db.UniqueConstraint("invoice_number", name="uq_invoices_invoice_number"),
        db.Index("ix_invoices_type_created", "type", "created_at"),
        db.CheckConstraint("type <> 'pawn' OR due_date IS NOT NULL", name="ck_invoices_pawn_due_date"),
    )

    id = db.Column(db.String(64), primary_key=True)

    # Human-readable number (e.g., "INV-2026-482913")
    invoice_number = db.Column(db.String(32), nullable=False)

    customer_name = db.Column(db.String(255), nullable=False)
    customer_phone = db.Column(db.String(64), nullable=True)
    customer_address = db.Column(db.Text, nullable=True)

    # Caller-supplied; not recomputed from the lines
    total = db.Column(db.Numeric(12, 2), nullable=False)

    type = db.Column(db.String(16), nullable=False)  # sales, pawn, buy
    status = db.Column(db.String(32), nullable=False, default="paid")
    due_date = db.Column(db.DateTime(timezone=True), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    items = db.relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InvoiceItem.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Invoice id={self.id!r} number={self.invoice_number!r} type={self.type}>"

    def to_dict(self, include_items: bool = True) -> dict:
        data = {
            "id": self.id,
            "invoice_number": self.invoice_number,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "customer_address": self.customer_address,
            "total": _amount(self.total),
            "type": self.type,
            "status": self.status,
            "due_date": to_utc_z(self.due_date) if self.due_date else None,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_items:
            data["items"] = [line.to_dict() for line in self.items]
        return data


class InvoiceItem(db.Model):
    """
    Line item snapshot. item_id is a weak reference: the catalog item may be
    edited or deleted later without touching the invoice.
    """
    __tablename__ = "invoice_items"

    id = db.Column(db.String(64), primary_key=True)
    invoice_id = db.Column(
        db.String(64),
        db.ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id = db.Column(db.String(64), nullable=True, index=True)
    # Order of the line on the invoice as submitted
    position = db.Column(db.Integer, nullable=False, default=0)

    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(64), nullable=True)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    discount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total = db.Column(db.Numeric(12, 2), nullable=False)
    return_type = db.Column(db.String(32), nullable=True)  # making-charges, percentage
    weight = db.Column(db.Float, nullable=True)

    invoice = db.relationship("Invoice", back_populates="items")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "invoice_id": self.invoice_id,
            "item_id": self.item_id,
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "price": _amount(self.price),
            "discount": _amount(self.discount),
            "total": _amount(self.total),
            "return_type": self.return_type,
            "weight": self.weight,
        }
