from .inventory import Item
from .invoices import Invoice, InvoiceItem
from .market import DailyMarketRate
from .settings import Category, Material

__all__ = [
    'Item',
    'Invoice', 'InvoiceItem',
    'DailyMarketRate',
    'Category', 'Material',
]
