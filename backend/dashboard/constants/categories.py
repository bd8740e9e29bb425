"""Central enum-like definitions for catalog categories and stock policy.
Categories are labels used for scoping, not manageable resources; extend the tuple
rather than renaming an existing label (stored products and account scopes reference it).
"""
from __future__ import annotations
from typing import Iterable, List

CATEGORIES = (
    'Electronics',
    'Accessories',
    'Clothing',
    'Food',
    'Home',
    'Sports',
)

# Stock bucket thresholds: in stock > LOW_STOCK_MAX, low stock 1..LOW_STOCK_MAX, out of stock == 0
LOW_STOCK_MAX = 10
OUT_OF_STOCK = 0

STOCK_STATUSES = ('in_stock', 'low_stock', 'out_of_stock')


def is_known_category(value) -> bool:
    return isinstance(value, str) and value in CATEGORIES


def unknown_categories(values: Iterable) -> List[str]:
    return sorted({str(v) for v in values if not is_known_category(v)})


def stock_status(stock: int) -> str:
    if stock <= OUT_OF_STOCK:
        return 'out_of_stock'
    if stock <= LOW_STOCK_MAX:
        return 'low_stock'
    return 'in_stock'
