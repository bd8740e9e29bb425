"""Product CRUD scoped by category.

Reads go through the principal's visibility filter; writes are gated on
``can_write_category`` for every category the write touches.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import select, delete

from dashboard import get_db
from dashboard.constants.categories import CATEGORIES
from dashboard.errors import Forbidden, NotFound, ValidationError
from dashboard.models.product import Product
from dashboard.models.sale import Sale
from dashboard.services.policy import Principal, can_read_category, can_write_category, visible_category_filter
from dashboard.services.transactions import run_in_transaction, lock_for_update
from dashboard.utils.validation import (
    require_text, optional_text, parse_price, parse_int, validate_category, validate_url_list,
)

logger = logging.getLogger(__name__)

NAME_MAX = 100
DESCRIPTION_MAX = 1000
EDITABLE_FIELDS = ('name', 'description', 'price', 'stock', 'category', 'images')


def products_query(principal: Principal, session=None):
    """Scoped product query, newest first. Callers may add filters/pagination."""
    session = session or get_db()
    q = session.query(Product).populate_existing()
    return visible_category_filter(principal).apply(q, Product.category)


def list_products(principal: Principal, session=None) -> List[Product]:
    return products_query(principal, session).order_by(Product.created_at.desc(), Product.id.desc()).all()


def _load_product(session, product_id: int, for_update: bool = False) -> Product:
    stmt = select(Product).where(Product.id == product_id).execution_options(populate_existing=True)
    if for_update:
        stmt = lock_for_update(stmt)
    product = session.execute(stmt).scalar_one_or_none()
    if product is None:
        raise NotFound('Product not found')
    return product


def get_product(principal: Principal, product_id: int, session=None) -> Product:
    session = session or get_db()
    product = _load_product(session, product_id)
    if not can_read_category(principal, product.category):
        raise Forbidden("You don't have access to products in this category")
    return product


def _require_label(value):
    if value is not None and not isinstance(value, str):
        raise ValidationError('category must be a string')
    return value


def _clean_fields(fields: Dict[str, Any], partial: bool) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    if not partial or 'name' in fields:
        cleaned['name'] = require_text(fields.get('name'), 'name', NAME_MAX)
    if not partial or 'description' in fields:
        cleaned['description'] = optional_text(fields.get('description'), 'description', DESCRIPTION_MAX)
    if not partial or 'price' in fields:
        cleaned['price'] = parse_price(fields.get('price'))
    if not partial or 'stock' in fields:
        cleaned['stock'] = parse_int(fields.get('stock', 0 if not partial else None), 'stock', minimum=0)
    if not partial or 'category' in fields:
        cleaned['category'] = validate_category(fields.get('category'))
    if not partial or 'images' in fields:
        cleaned['images'] = validate_url_list(fields.get('images'))
    return cleaned


def create_product(principal: Principal, fields: Dict[str, Any], session=None) -> Product:
    session = session or get_db()
    category = _require_label(fields.get('category'))
    # Permission is decided on the requested label before anything else is looked at
    if not can_write_category(principal, category):
        logger.info('principal %s denied product create in %r', principal.id, category)
        raise Forbidden(f"You don't have permission to add products in {category} category")
    cleaned = _clean_fields(fields, partial=False)

    def _op():
        product = Product(**cleaned)
        session.add(product)
        session.flush()
        return product

    product = run_in_transaction(session, _op, label='product create')
    session.refresh(product)
    return product


def update_product(principal: Principal, product_id: int, fields: Dict[str, Any], session=None) -> Product:
    session = session or get_db()
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f'Unknown fields: {sorted(unknown)}')

    def _op():
        product = _load_product(session, product_id, for_update=True)
        if not can_write_category(principal, product.category):
            raise Forbidden("You don't have permission to edit products in this category")
        new_category = _require_label(fields.get('category', product.category))
        if new_category != product.category and not can_write_category(principal, new_category):
            raise Forbidden(f"You don't have permission to move products into {new_category} category")
        cleaned = _clean_fields(fields, partial=True)
        for key, value in cleaned.items():
            setattr(product, key, value)
        session.flush()
        return product

    product = run_in_transaction(session, _op, label='product update')
    session.refresh(product)
    return product


def delete_product(principal: Principal, product_id: int, session=None) -> None:
    """Delete a product together with its sale records."""
    session = session or get_db()

    def _op():
        product = _load_product(session, product_id, for_update=True)
        if not can_write_category(principal, product.category):
            raise Forbidden("You don't have permission to delete products in this category")
        removed = session.execute(delete(Sale).where(Sale.product_id == product.id)).rowcount
        session.delete(product)
        return removed

    removed = run_in_transaction(session, _op, label='product delete')
    logger.info('product %s deleted by %s (%s sales removed)', product_id, principal.id, removed)


def product_json(p: Product) -> Dict[str, Any]:
    return {
        'id': p.id,
        'name': p.name,
        'description': p.description,
        'price': str(p.price),
        'stock': p.stock,
        'category': p.category,
        'images': list(p.images or []),
        'created_at': p.created_at.isoformat() if p.created_at else None,
    }


def allowed_categories(principal: Principal) -> List[str]:
    return [c for c in CATEGORIES if can_write_category(principal, c)]
