# Overview: Flask API routes for the category and material lookup lists.

from flask import Blueprint, request

from .. import actions
from ..decorators import to_response

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


def _name_arg():
    payload = request.get_json(silent=True) or {}
    return payload.get("name")


@settings_bp.get("/categories")
def list_categories_route():
    return to_response(actions.get_categories_action())


@settings_bp.post("/categories")
def create_category_route():
    return to_response(actions.create_category_action(_name_arg()), 201)


@settings_bp.put("/categories/<category_id>")
def update_category_route(category_id: str):
    return to_response(actions.update_category_action(category_id, _name_arg()))


@settings_bp.delete("/categories/<category_id>")
def delete_category_route(category_id: str):
    return to_response(actions.delete_category_action(category_id))


@settings_bp.get("/materials")
def list_materials_route():
    return to_response(actions.get_materials_action())


@settings_bp.post("/materials")
def create_material_route():
    return to_response(actions.create_material_action(_name_arg()), 201)


@settings_bp.put("/materials/<material_id>")
def update_material_route(material_id: str):
    return to_response(actions.update_material_action(material_id, _name_arg()))


@settings_bp.delete("/materials/<material_id>")
def delete_material_route(material_id: str):
    return to_response(actions.delete_material_action(material_id))
