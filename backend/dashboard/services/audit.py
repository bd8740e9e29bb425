from __future__ import annotations
from typing import Any, Dict, Optional
from flask import g

from dashboard import get_db
from dashboard.models.audit import AuditLog


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[Any] = None,
              meta: Optional[Dict[str, Any]] = None, actor_id: Optional[int] = None):
    """Stage an audit entry on the current session.

    Parameters:
      action: short action code e.g. PRODUCT.CREATE, SALE.DELETE, ADMIN.CATEGORIES.SET
      entity: optional entity label (Product, Sale, Admin)
      entity_id: optional primary key, stored as a string
      meta: JSON-safe dictionary (shallow copied)
      actor_id: defaults to the principal resolved for the current request
    """
    if actor_id is None:
        principal = g.get('principal')
        actor_id = principal.id if principal is not None else 0
    log = AuditLog(
        actor_id=actor_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta=dict(meta or {}),
    )
    get_db().add(log)
    # Caller owns the commit
    return log
