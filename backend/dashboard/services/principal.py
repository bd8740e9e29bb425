from __future__ import annotations
from typing import Optional
from sqlalchemy import select

from dashboard import get_db
from dashboard.errors import Unauthorized
from dashboard.models.authz import AdminAccount
from dashboard.services.policy import Principal


def principal_from_account(account: AdminAccount) -> Principal:
    return Principal.build(account.id, account.role, account.assigned_categories)


def resolve_principal(identity, session=None) -> Optional[Principal]:
    """Map a token identity to a Principal, reading role and categories fresh from the store.

    Returns None when the identity is missing, malformed, or names a deleted account.
    """
    if identity is None:
        return None
    try:
        account_id = int(identity)
    except (TypeError, ValueError):
        return None
    session = session or get_db()
    account = session.execute(select(AdminAccount).where(AdminAccount.id == account_id)).scalar_one_or_none()
    if account is None:
        return None
    return principal_from_account(account)


def require_principal(identity, session=None) -> Principal:
    principal = resolve_principal(identity, session=session)
    if principal is None:
        raise Unauthorized('Unauthorized')
    return principal
