from __future__ import annotations
from flask import Blueprint, request
from dashboard.decorators.auth import require_principal, current_principal
from dashboard.decorators.audit import audit_log
from dashboard.services import ledger
from dashboard.utils.listing import apply_pagination, build_list_payload
from dashboard.utils.validation import parse_int

sales_bp = Blueprint('sales', __name__)


@sales_bp.get('')
@require_principal
def list_sales():
    product_id = request.args.get('product_id')
    q = ledger.sales_query(
        current_principal(),
        product_id=parse_int(product_id, 'product_id') if product_id else None,
    )
    paged_q, total, limit, offset = apply_pagination(q)
    rows = [ledger.sale_json(s) for s in paged_q.all()]
    return build_list_payload(rows, total, limit, offset)


@sales_bp.post('')
@require_principal
@audit_log('SALE.CREATE', entity='Sale', entity_id_key='id', meta_keys=['product_id', 'quantity', 'revenue'])
def record_sale():
    data = request.get_json(silent=True) or {}
    sale = ledger.record_sale(current_principal(), data.get('product_id'), data.get('quantity'))
    return ledger.sale_json(sale), 201


@sales_bp.delete('/<int:sale_id>')
@require_principal
@audit_log('SALE.DELETE', entity='Sale', entity_id_arg='sale_id')
def delete_sale(sale_id: int):
    ledger.delete_sale(current_principal(), sale_id)
    return {'deleted': True, 'id': sale_id}
