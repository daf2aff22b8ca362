from __future__ import annotations

import re
import secrets
import time

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def random_token(length: int = 7) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_id(prefix: str) -> str:
    """Time-ordered string id, e.g. "item-1718000000000-k3j9x0a"."""
    return f"{prefix}-{int(time.time() * 1000)}-{random_token()}"


def slugify(name: str) -> str:
    """Lookup-table id: lowercase, whitespace runs become a single hyphen."""
    return re.sub(r"\s+", "-", name.strip().lower())
