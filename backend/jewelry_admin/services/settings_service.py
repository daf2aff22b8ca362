"""
Settings Service - category and material lookup lists.

Both tables are name lists keyed by a slug of the name. Reads go through
the app's LookupCache; every mutation invalidates the cached list and
signals the views that render the pickers.

Deleting a category or material does not touch items or invoices: they
store the name as free text.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db, lookup_cache
from ..id_utils import slugify
from ..models import Category, Material
from ..signals import invalidate_views
from ..validation import ConflictError, NotFoundError, ValidationError

SETTINGS_VIEWS = ("/settings", "/inventory", "/invoice/create")

# model, cache key, label used in messages
_LOOKUPS = {
    "category": (Category, "categories", "category"),
    "material": (Material, "materials", "material quality"),
}


def _clean_name(name) -> str:
    if name is None or not str(name).strip():
        raise ValidationError("name is required")
    # Stored as typed; only the slug id collapses inner whitespace
    name = str(name).strip()
    if len(name) > 128:
        raise ValidationError("name exceeds max length 128")
    return name


def _changed(cache_key: str) -> None:
    lookup_cache.invalidate(cache_key)
    invalidate_views(current_app._get_current_object(), *SETTINGS_VIEWS)


def _list(kind: str) -> list[dict]:
    model, cache_key, _ = _LOOKUPS[kind]

    def _load():
        rows = db.session.query(model).order_by(model.name.asc()).all()
        return [row.to_dict() for row in rows]

    # Copy so callers cannot mutate the cached list
    return list(lookup_cache.get_or_load(cache_key, _load))


def _create(kind: str, name) -> dict:
    model, cache_key, label = _LOOKUPS[kind]
    name = _clean_name(name)
    row_id = slugify(name)

    duplicate = (
        db.session.query(model)
        .filter((model.id == row_id) | (model.name == name))
        .first()
    )
    if duplicate is not None:
        raise ConflictError(f"Failed to create {label}. It might already exist.")

    row = model(id=row_id, name=name)
    db.session.add(row)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Failed to create {label}. It might already exist.")

    _changed(cache_key)
    return row.to_dict()


def _update(kind: str, row_id: str, name) -> dict:
    """Rename in place; the id (slug of the original name) is kept."""
    model, cache_key, label = _LOOKUPS[kind]
    name = _clean_name(name)

    row = db.session.get(model, row_id)
    if row is None:
        raise NotFoundError(f"{label.capitalize()} not found")

    row.name = name
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"A {label} named {name!r} already exists")

    _changed(cache_key)
    return row.to_dict()


def _delete(kind: str, row_id: str) -> None:
    model, cache_key, label = _LOOKUPS[kind]
    row = db.session.get(model, row_id)
    if row is None:
        raise NotFoundError(f"{label.capitalize()} not found")

    db.session.delete(row)
    db.session.commit()
    _changed(cache_key)


def list_categories() -> list[dict]:
    return _list("category")


def create_category(name) -> dict:
    return _create("category", name)


def update_category(category_id: str, name) -> dict:
    return _update("category", category_id, name)


def delete_category(category_id: str) -> None:
    _delete("category", category_id)


def list_materials() -> list[dict]:
    return _list("material")


def create_material(name) -> dict:
    return _create("material", name)


def update_material(material_id: str, name) -> dict:
    return _update("material", material_id, name)


def delete_material(material_id: str) -> None:
    _delete("material", material_id)


def seed_defaults(categories, materials) -> dict:
    """Insert any of the given names that are missing. Returns counts created."""
    created = {"categories": 0, "materials": 0}
    for kind, names, counter in (("category", categories, "categories"), ("material", materials, "materials")):
        model, cache_key, _ = _LOOKUPS[kind]
        for name in names:
            row_id = slugify(name)
            if db.session.get(model, row_id) is None:
                db.session.add(model(id=row_id, name=name))
                created[counter] += 1
        lookup_cache.invalidate(cache_key)
    db.session.commit()
    return created
