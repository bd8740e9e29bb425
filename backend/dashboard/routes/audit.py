from __future__ import annotations
from flask import Blueprint, request
from dashboard import get_db
from dashboard.decorators.auth import require_super_admin
from dashboard.models.audit import AuditLog
from dashboard.utils.filters import apply_filters
from dashboard.utils.listing import apply_pagination, build_list_payload

audit_bp = Blueprint('audit', __name__)

FILTERS = {
    'action': {'op': lambda q, v: q.filter(AuditLog.action == v)},
    'entity': {'op': lambda q, v: q.filter(AuditLog.entity == v)},
    'actor_id': {'op': lambda q, v: q.filter(AuditLog.actor_id == v), 'coerce': int},
}


def _log_json(a: AuditLog):
    return {
        'id': a.id,
        'actor_id': a.actor_id,
        'action': a.action,
        'entity': a.entity,
        'entity_id': a.entity_id,
        'meta': a.meta or {},
        'created_at': a.created_at.isoformat() if a.created_at else None,
    }


@audit_bp.get('/logs')
@require_super_admin
def list_logs():
    q = apply_filters(get_db().query(AuditLog), FILTERS, request.args)
    paged_q, total, limit, offset = apply_pagination(q.order_by(AuditLog.id.desc()))
    return build_list_payload([_log_json(a) for a in paged_q.all()], total, limit, offset)
