# backend/jewelry_admin/services/item_service.py
"""
Item Service - catalog CRUD, listing and search.

Images are written to the configured ImageStore under
"inventory/<epoch-ms>-<token>.<ext>" and referenced from the item as
"/api/images/<key>". Uploads are checked against a fixed allow-list of
MIME types and extensions before anything is stored.
"""
from __future__ import annotations

import time
from dataclasses import dataclass

from flask import current_app
from sqlalchemy import and_, func, or_

from ..constants import IMAGE_EXTENSIONS, IMAGE_MIME_TYPES, ITEM_CATEGORIES, STOCK_STATUSES
from ..extensions import db, images
from ..id_utils import generate_id, random_token
from ..models import Item
from ..signals import invalidate_views
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    coerce_int,
    enforce_rules_item,
    validate_payload,
)

ITEM_POLICY = ModelValidationPolicy(
    writable_fields={"name", "category", "description", "material", "stock", "image"},
    required_on_create={"name", "category", "material"},
    choices={"category": ITEM_CATEGORIES},
)

IMAGE_URL_PREFIX = "/api/images/"


@dataclass(frozen=True)
class ImageUpload:
    data: bytes
    mimetype: str
    filename: str


def validate_image(upload: ImageUpload) -> str:
    """Check MIME type and extension; returns the lowercased extension."""
    if upload.mimetype not in IMAGE_MIME_TYPES:
        raise ValidationError("Invalid file type. Only standard images (JPEG, PNG, WEBP, GIF, SVG) are allowed.")

    if "." not in upload.filename:
        raise ValidationError("Invalid file extension.")
    # "ring." has an empty extension and is stored as jpg
    extension = upload.filename.rsplit(".", 1)[-1].lower() or "jpg"
    if extension not in IMAGE_EXTENSIONS:
        raise ValidationError("Invalid file extension.")
    return extension


def store_image(upload: ImageUpload) -> str:
    """Validate and store an upload; returns the image URI to save on the item."""
    extension = validate_image(upload)
    key = f"inventory/{int(time.time() * 1000)}-{random_token()}.{extension}"
    images.put(key, upload.data, upload.mimetype)
    return f"{IMAGE_URL_PREFIX}{key}"


def discard_image(uri: str | None) -> bool:
    """
    Delete a previously uploaded image. URIs outside IMAGE_URL_PREFIX
    (default image, external links) are left alone.

    Called after the owning row is committed; a storage failure is logged
    and returns False.
    """
    if not uri or not uri.startswith(IMAGE_URL_PREFIX):
        return False
    key = uri[len(IMAGE_URL_PREFIX):]
    try:
        return images.delete(key)
    except Exception:
        current_app.logger.exception("Failed to delete image %s", key)
        return False


def _refresh_views(*paths: str) -> None:
    invalidate_views(current_app._get_current_object(), "/inventory", *paths)


def _get_or_404(item_id: str) -> Item:
    item = db.session.query(Item).filter(Item.id == item_id).first()
    if item is None:
        raise NotFoundError("Item not found")
    return item


def create_item(*, payload: dict, image: ImageUpload | None = None) -> dict:
    """
    Create a catalog item.

    stock defaults to 0. With no upload and no "image" URI in the payload,
    the item gets DEFAULT_ITEM_IMAGE.
    """
    patch = validate_payload(model=Item, payload=payload, policy=ITEM_POLICY, partial=False)
    enforce_rules_item(patch)
    if patch.get("description") == "":
        patch["description"] = None

    if image is not None and image.data:
        patch["image"] = store_image(image)
    elif not patch.get("image"):
        patch["image"] = current_app.config["DEFAULT_ITEM_IMAGE"]

    item = Item(id=generate_id("item"), **patch)
    if item.stock is None:
        item.stock = 0
    db.session.add(item)
    db.session.commit()

    _refresh_views()
    return item.to_dict()


def update_item(*, item_id: str, payload: dict, image: ImageUpload | None = None) -> dict:
    """Partial update; a new upload replaces the image URI."""
    item = _get_or_404(item_id)
    previous_image = item.image

    patch = validate_payload(model=Item, payload=payload, policy=ITEM_POLICY, partial=True)
    enforce_rules_item(patch)
    if patch.get("description") == "":
        patch["description"] = None
    if image is not None and image.data:
        patch["image"] = store_image(image)

    for key, value in patch.items():
        setattr(item, key, value)
    db.session.commit()

    if item.image != previous_image:
        discard_image(previous_image)

    _refresh_views(f"/inventory/edit/{item_id}")
    return item.to_dict()


def delete_item(*, item_id: str) -> int:
    """
    Remove an item unconditionally. Invoice lines keep their snapshot and
    their (now dangling) item_id; an uploaded image is removed from
    storage. Returns the number of rows deleted.
    """
    image = db.session.query(Item.image).filter(Item.id == item_id).scalar()
    deleted = db.session.query(Item).filter(Item.id == item_id).delete(synchronize_session=False)
    db.session.commit()
    if deleted:
        discard_image(image)
    _refresh_views()
    return deleted


def get_item(item_id: str) -> dict:
    return _get_or_404(item_id).to_dict()


def set_stock(*, item_id: str, stock) -> dict:
    """Set stock to an absolute value (manual count correction)."""
    value = coerce_int("stock", stock)
    enforce_rules_item({"stock": value})

    item = _get_or_404(item_id)
    item.stock = value
    db.session.commit()

    _refresh_views()
    return item.to_dict()


def _stock_condition(stock_status: str):
    threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    if stock_status == "low-stock":
        return and_(Item.stock > 0, Item.stock <= threshold)
    if stock_status == "out-of-stock":
        return Item.stock == 0
    return None


def _material_condition(materials):
    materials = [m.strip() for m in materials or [] if m and m.strip()]
    if not materials:
        return None
    return or_(*[func.lower(Item.material).like(f"%{m.lower()}%") for m in materials])


def list_items(
    *,
    category: str | None = "all",
    materials: list[str] | None = None,
    stock_status: str | None = "all",
    page: int | None = 1,
    page_size: int | None = 10,
) -> dict:
    """
    Filtered, paginated listing, newest first.

    Filters combine with AND; multiple materials combine with OR, each a
    case-insensitive "contains". stats counts the whole catalog regardless
    of filters (dashboard cards).

    Returns:
        Dict with 'items', 'pagination' and 'stats'.
    """
    stock_status = stock_status or "all"
    if stock_status not in STOCK_STATUSES:
        raise ValidationError(f"stock_status must be one of: {', '.join(STOCK_STATUSES)}")

    page = max(page or 1, 1)
    page_size = min(max(page_size or 10, 1), 100)

    conditions = []
    if category and category != "all":
        conditions.append(Item.category == category)
    stock_cond = _stock_condition(stock_status)
    if stock_cond is not None:
        conditions.append(stock_cond)
    material_cond = _material_condition(materials)
    if material_cond is not None:
        conditions.append(material_cond)

    base_query = db.session.query(Item)
    if conditions:
        base_query = base_query.filter(and_(*conditions))

    total = base_query.count()
    total_pages = (total + page_size - 1) // page_size

    items = (
        base_query.order_by(Item.created_at.desc(), Item.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return {
        "items": [i.to_dict() for i in items],
        "pagination": {
            "total": total,
            "total_pages": total_pages,
            "current_page": page,
            "page_size": page_size,
        },
        "stats": {
            "total_count": db.session.query(Item).count(),
            "low_stock_count": db.session.query(Item).filter(_stock_condition("low-stock")).count(),
            "out_of_stock_count": db.session.query(Item).filter(_stock_condition("out-of-stock")).count(),
        },
    }


def search_items(
    *,
    term: str | None = None,
    category: str | None = None,
    materials: list[str] | None = None,
) -> list[dict]:
    """
    Substring search on name or id (case-insensitive), newest first.

    Loads the whole table and filters in Python, capped at
    SEARCH_RESULT_LIMIT results. Fine at shop scale; switch to an indexed
    text search in the database if the catalog grows large.
    """
    limit = current_app.config["SEARCH_RESULT_LIMIT"]
    needle = (term or "").strip().lower()
    wanted = [m.lower() for m in materials or [] if m]

    results = []
    for item in db.session.query(Item).order_by(Item.created_at.desc(), Item.id.desc()).all():
        if category and category != "all" and item.category != category:
            continue
        if wanted and not any(m in item.material.lower() for m in wanted):
            continue
        if needle and needle not in item.name.lower() and needle not in item.id.lower():
            continue
        results.append(item.to_dict())
        if len(results) >= limit:
            break
    return results
