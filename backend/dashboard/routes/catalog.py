from __future__ import annotations
from flask import Blueprint, request
from dashboard.constants.categories import LOW_STOCK_MAX, OUT_OF_STOCK, STOCK_STATUSES
from dashboard.decorators.auth import require_principal, current_principal
from dashboard.decorators.audit import audit_log
from dashboard.errors import DashboardError, ValidationError
from dashboard.models.product import Product
from dashboard.services import catalog
from dashboard.utils.filters import apply_filters
from dashboard.utils.listing import apply_pagination, build_list_payload
from dashboard.utils.sorting import apply_multi_sort
from dashboard.utils.validation import validate_category

catalog_bp = Blueprint('catalog', __name__)

SORTABLE = {
    'name': Product.name,
    'price': Product.price,
    'stock': Product.stock,
    'category': Product.category,
    'created_at': Product.created_at,
    'id': Product.id,
}


def _status_filter(q, status):
    if status == 'out_of_stock':
        return q.filter(Product.stock == OUT_OF_STOCK)
    if status == 'low_stock':
        return q.filter(Product.stock > OUT_OF_STOCK, Product.stock <= LOW_STOCK_MAX)
    return q.filter(Product.stock > LOW_STOCK_MAX)


FILTERS = {
    'search': {'op': lambda q, v: q.filter(Product.name.ilike(f'%{v}%')), 'coerce': str.strip},
    'category': {'op': lambda q, v: q.filter(Product.category == v), 'coerce': validate_category},
    'status': {'op': _status_filter, 'validate': lambda v: v in STOCK_STATUSES},
}


def _product_snapshot(args, kwargs):
    try:
        return catalog.product_json(catalog.get_product(current_principal(), kwargs['product_id']))
    except DashboardError:
        # the update itself reports the error
        return None


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('JSON object body required')
    return data


@catalog_bp.get('/categories')
@require_principal
def list_categories():
    return {'data': catalog.allowed_categories(current_principal())}


@catalog_bp.get('/products')
@require_principal
def list_products():
    q = catalog.products_query(current_principal())
    q = apply_filters(q, FILTERS, request.args)
    q = apply_multi_sort(q, request.args.get('sort'), SORTABLE, Product.created_at.desc(), Product.id.desc())
    paged_q, total, limit, offset = apply_pagination(q)
    rows = [catalog.product_json(p) for p in paged_q.all()]
    return build_list_payload(rows, total, limit, offset)


@catalog_bp.get('/products/<int:product_id>')
@require_principal
def get_product(product_id: int):
    return catalog.product_json(catalog.get_product(current_principal(), product_id))


@catalog_bp.post('/products')
@require_principal
@audit_log('PRODUCT.CREATE', entity='Product', entity_id_key='id', meta_keys=['name', 'category', 'stock'])
def create_product():
    product = catalog.create_product(current_principal(), _json_body())
    return catalog.product_json(product), 201


@catalog_bp.put('/products/<int:product_id>')
@require_principal
@audit_log(
    'PRODUCT.UPDATE',
    entity='Product',
    entity_id_key='id',
    diff_keys=['name', 'price', 'stock', 'category'],
    pre_fetch=_product_snapshot,
)
def update_product(product_id: int):
    product = catalog.update_product(current_principal(), product_id, _json_body())
    return catalog.product_json(product)


@catalog_bp.delete('/products/<int:product_id>')
@require_principal
@audit_log('PRODUCT.DELETE', entity='Product', entity_id_arg='product_id')
def delete_product(product_id: int):
    catalog.delete_product(current_principal(), product_id)
    return {'deleted': True, 'id': product_id}
