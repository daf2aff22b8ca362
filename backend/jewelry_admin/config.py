# backend/jewelry_admin/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/jewelry_admin.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///jewelry_admin.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Image storage: "local", "r2", or empty (uploads fail with a configuration error)
    IMAGE_STORAGE_BACKEND = os.environ.get("IMAGE_STORAGE_BACKEND", "local")
    IMAGE_STORAGE_PATH = os.environ.get("IMAGE_STORAGE_PATH", "instance/images")
    R2_ENDPOINT_URL = os.environ.get("R2_ENDPOINT_URL")
    R2_ACCESS_KEY_ID = os.environ.get("R2_ACCESS_KEY_ID")
    R2_SECRET_ACCESS_KEY = os.environ.get("R2_SECRET_ACCESS_KEY")
    R2_BUCKET_NAME = os.environ.get("R2_BUCKET_NAME")

    DEFAULT_ITEM_IMAGE = os.environ.get(
        "DEFAULT_ITEM_IMAGE",
        "https://images.unsplash.com/photo-1605100804763-247f67b3557e?w=400&h=400&fit=crop",
    )

    INVOICE_NUMBER_MAX_ATTEMPTS = 10
    # Off: the invoice total is taken from the caller as-is
    INVOICE_VERIFY_TOTAL = _env_bool("INVOICE_VERIFY_TOTAL")

    LOW_STOCK_THRESHOLD = 5
    SEARCH_RESULT_LIMIT = 50

    CORS_ALLOWED_ORIGINS = tuple(
        o.strip()
        for o in os.environ.get("CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    )
