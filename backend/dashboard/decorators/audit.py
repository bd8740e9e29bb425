from __future__ import annotations
"""Audit logging decorator for mutating route handlers.

Usage examples:

@audit_log('PRODUCT.CREATE', entity='Product', entity_id_key='id', meta_keys=['name', 'category'])
def create_product():
    ... return product_json(p), 201

@audit_log('ADMIN.CATEGORIES.SET', entity='Admin', entity_id_arg='admin_id',
           diff_keys=['assigned_categories'], pre_fetch=lambda a, kw: {...})
def set_categories(admin_id): ...

Parameters:
  action: audit action code
  entity: optional entity label
  entity_id_key: key in the returned JSON whose value becomes entity_id
  entity_id_arg: view keyword argument used when entity_id_key is absent
  meta_keys: keys projected from the returned JSON into meta
  meta_builder: callable (data, rv, args, kwargs) -> dict; overrides meta_keys
  diff_keys / pre_fetch: snapshot taken before the view runs; changed keys land in meta['changes']

Only successful responses are audited; a view that raises records nothing.
Audit failures are logged and never change the response.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from dashboard import get_db
from dashboard.services.audit import add_audit

logger = logging.getLogger(__name__)


def _extract_payload(rv: Any):
    if isinstance(rv, tuple) and rv:
        return rv[0]
    return rv


def _changes(before: Dict[str, Any], after: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    out = {}
    for k in keys:
        if k in before and k in after and before[k] != after[k]:
            out[k] = {'before': before[k], 'after': after[k]}
    return out


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    meta_builder: Optional[Callable[[dict, Any, tuple, dict], dict]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before = pre_fetch(args, kwargs) if diff_keys and pre_fetch else None
            rv = fn(*args, **kwargs)
            data = _extract_payload(rv)
            if not isinstance(data, dict):
                data = {}
            entity_id = data.get(entity_id_key) if entity_id_key else None
            if entity_id is None and entity_id_arg:
                entity_id = kwargs.get(entity_id_arg)
            if meta_builder:
                meta = meta_builder(data, rv, args, kwargs) or {}
            else:
                meta = {k: data[k] for k in (meta_keys or ()) if k in data}
            if before:
                changes = _changes(before, data, diff_keys)
                if changes:
                    meta['changes'] = changes
            session = get_db()
            try:
                add_audit(action, entity, entity_id, meta)
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                logger.exception('audit entry %s for %s %s was not recorded', action, entity, entity_id)
            return rv
        return wrapper
    return outer
