from __future__ import annotations
from flask import Blueprint
from dashboard.decorators.auth import require_principal, current_principal
from dashboard.services import analytics, catalog, ledger

analytics_bp = Blueprint('analytics', __name__)


def _money(value) -> str:
    return str(value)


def _scoped_rows():
    principal = current_principal()
    products = catalog.list_products(principal)
    sales = ledger.list_sales(principal)
    return products, sales


@analytics_bp.get('/summary')
@require_principal
def summary():
    """Dashboard cards: counts, revenue, stock distribution and the newest products."""
    products, sales = _scoped_rows()
    buckets = analytics.stock_buckets(products)
    return {
        'total_products': len(products),
        'total_revenue': _money(analytics.total_revenue(sales)),
        'low_stock_count': buckets['low_stock'] + buckets['out_of_stock'],
        'total_categories': analytics.totals(products, sales)['categories'],
        'category_stats': [{'name': k, 'count': v} for k, v in analytics.products_by_category(products).items()],
        'stock_stats': buckets,
        'recent_products': [catalog.product_json(p) for p in analytics.recent_products(products)],
    }


@analytics_bp.get('/overview')
@require_principal
def overview():
    products, sales = _scoped_rows()
    t = analytics.totals(products, sales)
    return {
        'total_revenue': _money(analytics.total_revenue(sales)),
        'items_sold': t['items_sold'],
        'total_stock': t['total_stock'],
        'products': t['products'],
        'stock_buckets': analytics.stock_buckets(products),
        'monthly_revenue': [
            {'month': m, 'revenue': _money(v)} for m, v in analytics.monthly_revenue(sales).items()
        ],
        'top_products': [
            {**row, 'revenue': _money(row['revenue'])} for row in analytics.top_products(sales)
        ],
        'stock_by_category': analytics.stock_by_category(products),
        'restock': [catalog.product_json(p) for p in analytics.restock_candidates(products)],
    }
