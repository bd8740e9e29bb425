"""Sale ledger: record and reverse sales with stock kept in lockstep.

A sale attempt moves Requested -> Validated -> Committed, or is Rejected with a
domain error. The Sale row and the stock change are written in one transaction;
stock is decremented with a guarded UPDATE (``stock >= quantity``) so two
concurrent sales can never oversell, whatever either of them read earlier.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from flask import current_app, has_app_context
from sqlalchemy import select, update

from dashboard import get_db
from dashboard.errors import Forbidden, InsufficientStock, NotFound
from dashboard.models.product import Product
from dashboard.models.sale import Sale
from dashboard.services.policy import Principal, can_write_category, visible_category_filter
from dashboard.services.transactions import DEFAULT_ATTEMPTS, lock_for_update, run_in_transaction
from dashboard.utils.validation import parse_int

logger = logging.getLogger(__name__)


def _attempts() -> int:
    if has_app_context():
        return int(current_app.config.get('SALE_RETRY_ATTEMPTS', DEFAULT_ATTEMPTS))
    return DEFAULT_ATTEMPTS


def _current_stock(session, product_id: int) -> int:
    stock = session.execute(select(Product.stock).where(Product.id == product_id)).scalar_one_or_none()
    return int(stock or 0)


def _sync_product(session, product_id: int) -> None:
    # stock was changed with a bulk UPDATE; bring any loaded instance up to date
    product = session.get(Product, product_id)
    if product is not None:
        session.refresh(product)


def record_sale(principal: Principal, product_id, quantity, session=None) -> Sale:
    session = session or get_db()
    quantity = parse_int(quantity, 'quantity', minimum=1)
    product_id = parse_int(product_id, 'product_id')

    def _op():
        # Fresh read inside the transaction; never trust a stock value seen earlier
        stmt = lock_for_update(
            select(Product).where(Product.id == product_id).execution_options(populate_existing=True)
        )
        product = session.execute(stmt).scalar_one_or_none()
        if product is None:
            raise NotFound('Product not found')
        if not can_write_category(principal, product.category):
            raise Forbidden("You don't have permission to sell products from this category")
        if product.stock < quantity:
            raise InsufficientStock(product.stock)
        # Current price at commit time, not a price captured earlier
        revenue = (Decimal(product.price) * quantity).quantize(Decimal('0.01'))
        decremented = session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        ).rowcount
        if decremented != 1:
            raise InsufficientStock(_current_stock(session, product_id))
        sale = Sale(product_id=product_id, quantity=quantity, revenue=revenue, created_by=principal.id)
        session.add(sale)
        session.flush()
        return sale

    try:
        sale = run_in_transaction(session, _op, label='sale commit', attempts=_attempts())
    except InsufficientStock as exc:
        logger.info('sale rejected for product %s: requested %s, available %s', product_id, quantity, exc.available)
        raise
    session.refresh(sale)
    _sync_product(session, product_id)
    logger.info('sale %s committed: product %s qty %s revenue %s', sale.id, product_id, quantity, sale.revenue)
    return sale


def delete_sale(principal: Principal, sale_id, session=None) -> None:
    """Remove a sale and give its quantity back to the product's stock.

    Only an authenticated principal is required; the product's category is not checked.
    """
    session = session or get_db()
    sale_id = parse_int(sale_id, 'sale_id')

    def _op():
        sale = session.execute(
            select(Sale).where(Sale.id == sale_id).execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if sale is None:
            raise NotFound('Sale not found')
        product_id, quantity = sale.product_id, sale.quantity
        session.delete(sale)
        session.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        return product_id, quantity

    product_id, quantity = run_in_transaction(session, _op, label='sale reversal', attempts=_attempts())
    _sync_product(session, product_id)
    logger.info('sale %s reversed by %s: product %s stock +%s', sale_id, principal.id, product_id, quantity)


def sales_query(principal: Principal, session=None, product_id: Optional[int] = None):
    """Sales whose product category is visible to ``principal``, newest first."""
    session = session or get_db()
    q = session.query(Sale).join(Sale.product).populate_existing()
    q = visible_category_filter(principal).apply(q, Product.category)
    if product_id is not None:
        q = q.filter(Sale.product_id == product_id)
    return q.order_by(Sale.date.desc(), Sale.id.desc())


def list_sales(principal: Principal, session=None) -> List[Sale]:
    return sales_query(principal, session).all()


def sale_json(s: Sale) -> Dict[str, Any]:
    p = s.product
    return {
        'id': s.id,
        'product_id': s.product_id,
        'quantity': s.quantity,
        'revenue': str(s.revenue),
        'date': s.date.isoformat() if s.date else None,
        'product': {
            'id': p.id,
            'name': p.name,
            'price': str(p.price),
            'category': p.category,
            'images': list(p.images or []),
        } if p is not None else None,
    }
