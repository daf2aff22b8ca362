"""
Request-style operations.

Every function here returns {"success": True, "data": ...} or
{"success": False, "error": <message>, "kind": <error kind>} and never
raises. Routes and the CLI call these; services underneath raise.
"""

from __future__ import annotations

from .decorators import action
from .services import (
    invoice_service,
    item_service,
    market_service,
    pricing_service,
    reporting_service,
    settings_service,
)
from .services.item_service import ImageUpload


# --- Invoices ---

@action("Failed to create invoice")
def create_invoice_action(data: dict):
    return invoice_service.create_invoice(data)


@action("Failed to fetch invoices")
def get_invoices_action():
    return invoice_service.list_invoices()


@action("Failed to fetch invoice")
def get_invoice_by_id_action(invoice_id: str):
    return invoice_service.get_invoice_by_id(invoice_id)


@action("Failed to fetch invoice by number")
def get_invoice_by_number_action(invoice_number: str):
    return invoice_service.get_invoice_by_number(invoice_number)


# --- Items ---

@action("Failed to create item")
def create_item_action(fields: dict, image: ImageUpload | None = None):
    return item_service.create_item(payload=fields, image=image)


@action("Failed to update item")
def update_item_action(item_id: str, fields: dict, image: ImageUpload | None = None):
    return item_service.update_item(item_id=item_id, payload=fields, image=image)


@action("Failed to delete item")
def delete_item_action(item_id: str):
    return {"deleted": item_service.delete_item(item_id=item_id)}


@action("Failed to fetch items")
def get_items_action(
    *,
    page: int | None = 1,
    page_size: int | None = 10,
    category: str | None = "all",
    materials: list[str] | None = None,
    stock_status: str | None = "all",
):
    return item_service.list_items(
        category=category,
        materials=materials,
        stock_status=stock_status,
        page=page,
        page_size=page_size,
    )


@action("Failed to fetch item")
def get_item_by_id_action(item_id: str):
    return item_service.get_item(item_id)


@action("Failed to update stock")
def update_stock_action(item_id: str, new_stock):
    return item_service.set_stock(item_id=item_id, stock=new_stock)


@action("Failed to search items")
def search_items_action(
    *,
    search_term: str | None = None,
    category: str | None = None,
    materials: list[str] | None = None,
):
    return item_service.search_items(term=search_term, category=category, materials=materials)


# --- Market rates ---

@action("Failed to append market rate")
def append_market_rate_action(rate_type: str, value, time_label: str):
    return market_service.append_market_rate(rate_type=rate_type, value=value, time_label=time_label)


@action("Failed to update market rate")
def record_market_rates_action(time_label: str, gold_price, exchange_rate):
    return market_service.record_market_rates(
        time_label=time_label,
        gold_price=gold_price,
        exchange_rate=exchange_rate,
    )


@action("Failed to fetch market rates")
def get_market_rates_action(limit: int | None = 30, rate_type: str | None = None):
    return market_service.list_market_rates(limit=limit, rate_type=rate_type)


# --- Settings ---

@action("Failed to fetch categories")
def get_categories_action():
    return settings_service.list_categories()


@action("Failed to create category")
def create_category_action(name: str):
    return settings_service.create_category(name)


@action("Failed to update category")
def update_category_action(category_id: str, name: str):
    return settings_service.update_category(category_id, name)


@action("Failed to delete category")
def delete_category_action(category_id: str):
    settings_service.delete_category(category_id)


@action("Failed to fetch material quality")
def get_materials_action():
    return settings_service.list_materials()


@action("Failed to create material quality")
def create_material_action(name: str):
    return settings_service.create_material(name)


@action("Failed to update material quality")
def update_material_action(material_id: str, name: str):
    return settings_service.update_material(material_id, name)


@action("Failed to delete material quality")
def delete_material_action(material_id: str):
    settings_service.delete_material(material_id)


# --- Reports & pricing ---

@action("Failed to build monthly summary")
def get_monthly_summary_action(months: int = 6):
    return reporting_service.monthly_summary(months=months)


@action("Failed to build dashboard")
def get_dashboard_action(start: str | None = None, end: str | None = None):
    if start or end:
        return reporting_service.range_summary(start=start, end=end)
    return reporting_service.dashboard_stats()


@action("Failed to calculate price")
def calculate_price_action(params: dict):
    return pricing_service.calculate_gold_price(
        weight=params.get("weight"),
        gold_price=params.get("gold_price"),
        quality=params.get("quality"),
        mode=params.get("mode") or "sell",
        yway=params.get("yway") or 0,
        pe=params.get("pe") or 0,
    )
