"""Rollups over already-scoped products and sales.

Every function here is pure: callers hand in the rows the principal is allowed to see
(``catalog.products_query`` / ``ledger.sales_query``), so scoping never leaks in here.
"""
from __future__ import annotations

from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Sequence

from dashboard.constants.categories import LOW_STOCK_MAX, OUT_OF_STOCK, stock_status

TOP_PRODUCTS = 5
RECENT_PRODUCTS = 5


def total_revenue(sales: Iterable) -> Decimal:
    return sum((Decimal(s.revenue) for s in sales), Decimal('0.00'))


def stock_buckets(products: Iterable) -> Dict[str, int]:
    buckets = {'in_stock': 0, 'low_stock': 0, 'out_of_stock': 0}
    for p in products:
        buckets[stock_status(p.stock)] += 1
    return buckets


def top_products(sales: Iterable, n: int = TOP_PRODUCTS) -> List[Dict[str, Any]]:
    """Products ranked by summed revenue; equal revenue keeps first-seen order."""
    grouped: "OrderedDict[int, Dict[str, Any]]" = OrderedDict()
    for s in sales:
        row = grouped.get(s.product_id)
        if row is None:
            name = s.product.name if getattr(s, 'product', None) is not None else None
            row = grouped[s.product_id] = {'product_id': s.product_id, 'name': name,
                                           'quantity': 0, 'revenue': Decimal('0.00')}
        row['quantity'] += s.quantity
        row['revenue'] += Decimal(s.revenue)
    # sorted() is stable, so ties stay in insertion order
    return sorted(grouped.values(), key=lambda r: r['revenue'], reverse=True)[:n]


def monthly_revenue(sales: Iterable) -> Dict[str, Decimal]:
    months: Dict[str, Decimal] = {}
    for s in sales:
        key = s.date.strftime('%Y-%m')
        months[key] = months.get(key, Decimal('0.00')) + Decimal(s.revenue)
    return dict(sorted(months.items()))


def totals(products: Sequence, sales: Sequence) -> Dict[str, int]:
    return {
        'products': len(products),
        'items_sold': sum(s.quantity for s in sales),
        'total_stock': sum(p.stock for p in products),
        'categories': len({p.category for p in products}),
    }


def products_by_category(products: Iterable) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for p in products:
        counts[p.category] = counts.get(p.category, 0) + 1
    return counts


def stock_by_category(products: Iterable) -> Dict[str, int]:
    units: Dict[str, int] = {}
    for p in products:
        units[p.category] = units.get(p.category, 0) + p.stock
    return units


def recent_products(products: Iterable, n: int = RECENT_PRODUCTS) -> list:
    return sorted(products, key=lambda p: (p.created_at, p.id), reverse=True)[:n]


def restock_candidates(products: Iterable, n: int = TOP_PRODUCTS) -> list:
    """Lowest-stock products at or below the low-stock ceiling, emptiest first."""
    low = [p for p in products if OUT_OF_STOCK <= p.stock <= LOW_STOCK_MAX]
    return sorted(low, key=lambda p: (p.stock, p.id))[:n]
