# Overview: Enumerations and seed data shared by models, services and the CLI.

ITEM_CATEGORIES = ("rings", "necklaces", "bracelets", "earrings", "watches")

DEFAULT_MATERIALS = (
    "24K Gold",
    "22K Gold",
    "18K Gold",
    "14K Gold",
    "Platinum",
    "Sterling Silver",
    "Diamond",
    "Pearl",
    "Gemstone",
    "Rose Gold",
    "White Gold",
)

INVOICE_TYPES = ("sales", "pawn", "buy")

# Status domain depends on the invoice type
INVOICE_STATUSES = {
    "sales": ("paid", "unpaid", "partially_paid", "cancelled"),
    "buy": ("paid", "unpaid", "partially_paid", "cancelled"),
    "pawn": ("active", "overdue", "expired", "redeemed"),
}

DEFAULT_INVOICE_STATUS = {
    "sales": "paid",
    "buy": "paid",
    "pawn": "active",
}

# Invoice types that move catalog stock, with the sign of the movement
STOCK_DIRECTION = {
    "sales": -1,
    "buy": 1,
}

MARKET_RATE_TYPES = ("gold", "exchange_rate")

STOCK_STATUSES = ("all", "low-stock", "out-of-stock")

IMAGE_MIME_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif", "image/svg+xml")
IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "webp", "gif", "svg")
