# Overview: Flask API routes for catalog items; parses input and returns JSON responses.

# backend/jewelry_admin/routes/items.py
"""
Catalog item routes.

Create and update accept either JSON or multipart/form-data. With
multipart, the optional "image" file part is uploaded to image storage;
a plain "image" form field is taken as an image URI.
"""
from flask import Blueprint, request

from .. import actions
from ..decorators import to_response
from ..services.item_service import ImageUpload

items_bp = Blueprint("items", __name__, url_prefix="/api/items")


def _read_item_request() -> tuple[dict, ImageUpload | None]:
    if request.mimetype == "multipart/form-data" or request.form:
        fields = request.form.to_dict()
        # An empty "image" field on an edit form means "keep the current one"
        if not fields.get("image"):
            fields.pop("image", None)
        upload = None
        file = request.files.get("image")
        if file is not None and file.filename:
            upload = ImageUpload(
                data=file.read(),
                mimetype=file.mimetype or "",
                filename=file.filename,
            )
        return fields, upload

    payload = request.get_json(silent=True)
    return (payload if payload is not None else {}), None


def _materials_arg() -> list[str]:
    # ?materials=Gold&materials=Pearl or ?materials=Gold,Pearl
    values = []
    for raw in request.args.getlist("materials"):
        values.extend(v.strip() for v in raw.split(",") if v.strip())
    return values


@items_bp.get("")
def list_items_route():
    """
    Query params:
    - page: int (default 1)
    - page_size: int (default 10, max 100)
    - category: str (default "all")
    - materials: repeated or comma-separated; OR-combined "contains" match
    - stock_status: all | low-stock | out-of-stock
    """
    return to_response(actions.get_items_action(
        page=request.args.get("page", 1, type=int),
        page_size=request.args.get("page_size", 10, type=int),
        category=request.args.get("category", "all"),
        materials=_materials_arg(),
        stock_status=request.args.get("stock_status", "all"),
    ))


@items_bp.get("/search")
def search_items_route():
    return to_response(actions.search_items_action(
        search_term=request.args.get("q"),
        category=request.args.get("category"),
        materials=_materials_arg(),
    ))


@items_bp.post("")
def create_item_route():
    fields, upload = _read_item_request()
    return to_response(actions.create_item_action(fields, upload), 201)


@items_bp.get("/<item_id>")
def get_item_route(item_id: str):
    return to_response(actions.get_item_by_id_action(item_id))


@items_bp.put("/<item_id>")
def update_item_route(item_id: str):
    fields, upload = _read_item_request()
    return to_response(actions.update_item_action(item_id, fields, upload))


@items_bp.delete("/<item_id>")
def delete_item_route(item_id: str):
    return to_response(actions.delete_item_action(item_id))


@items_bp.put("/<item_id>/stock")
def update_stock_route(item_id: str):
    payload = request.get_json(silent=True) or {}
    return to_response(actions.update_stock_action(item_id, payload.get("stock")))
