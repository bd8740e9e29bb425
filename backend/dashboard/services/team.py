"""Admin accounts: team management for the super-admin and self-service for everyone."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from dashboard import get_db
from dashboard.constants.roles import Role
from dashboard.errors import Conflict, Forbidden, NotFound, TransactionFailure, ValidationError
from dashboard.models.authz import AdminAccount
from dashboard.services.notifier import NotificationResult
from dashboard.services.policy import Principal
from dashboard.services.transactions import run_in_transaction
from dashboard.utils.validation import require_text, validate_category_set

logger = logging.getLogger(__name__)

PASSWORD_MIN = 6


def _normalize_email(value) -> str:
    email = require_text(value, 'email', 128).lower()
    if '@' not in email:
        raise ValidationError('email must be a valid address')
    return email


def _email_taken(session, email: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(AdminAccount.id).where(func.lower(AdminAccount.email) == email)
    if exclude_id is not None:
        stmt = stmt.where(AdminAccount.id != exclude_id)
    return session.execute(stmt).first() is not None


def _get_account(session, account_id: int) -> AdminAccount:
    account = session.get(AdminAccount, account_id)
    if account is None:
        raise NotFound('Admin not found')
    return account


def _commit(session, op, label: str):
    try:
        return run_in_transaction(session, op, label=label)
    except TransactionFailure as exc:
        # unique index on email lost a race with a concurrent create/update
        if isinstance(exc.__cause__, IntegrityError):
            raise Conflict('Email already exists') from exc
        raise


def list_admins(session=None) -> List[AdminAccount]:
    session = session or get_db()
    stmt = select(AdminAccount).order_by(AdminAccount.created_at.desc(), AdminAccount.id.desc())
    return list(session.execute(stmt).scalars())


def create_admin(fields: Dict[str, Any], notifier=None, invited_by: Optional[str] = None,
                 session=None) -> Tuple[AdminAccount, Optional[NotificationResult]]:
    """Create a category-scoped admin.

    The role is always ``admin``; whatever role the caller supplies is ignored. When
    ``send_email`` is set a welcome notification goes out after the account is
    committed, and a delivery failure is reported back rather than undoing the account.
    """
    session = session or get_db()
    name = require_text(fields.get('name'), 'name', 128)
    email = _normalize_email(fields.get('email'))
    password = require_text(fields.get('password'), 'password')
    categories = validate_category_set(fields.get('assigned_categories'))
    if fields.get('role') not in (None, Role.ADMIN.value):
        logger.info('create_admin ignored requested role %r for %s', fields.get('role'), email)

    def _op():
        if _email_taken(session, email):
            raise Conflict('Email already exists')
        account = AdminAccount(name=name, email=email, role=Role.ADMIN, assigned_categories=categories)
        account.set_password(password)
        session.add(account)
        session.flush()
        return account

    account = _commit(session, _op, 'admin create')
    session.refresh(account)
    logger.info('admin %s created with categories %s', account.id, categories)

    result = None
    if fields.get('send_email') and notifier is not None:
        result = notifier.notify('welcome', {
            'name': account.name,
            'email': account.email,
            'role': account.role.value,
            'invited_by': invited_by,
        })
    return account, result


def delete_admin(account_id: int, session=None) -> None:
    session = session or get_db()

    def _op():
        account = _get_account(session, account_id)
        if account.is_super_admin:
            raise Forbidden('Cannot delete super admin')
        session.delete(account)

    run_in_transaction(session, _op, label='admin delete')
    logger.info('admin %s deleted', account_id)


def update_admin_categories(account_id: int, categories, session=None) -> AdminAccount:
    session = session or get_db()
    cleaned = validate_category_set(categories)

    def _op():
        account = _get_account(session, account_id)
        if account.is_super_admin:
            raise Forbidden('Super admin access is not category scoped')
        account.assigned_categories = cleaned
        session.flush()
        return account

    account = run_in_transaction(session, _op, label='admin categories')
    session.refresh(account)
    return account


def update_profile(principal: Principal, fields: Dict[str, Any], session=None) -> AdminAccount:
    session = session or get_db()
    name = require_text(fields.get('name'), 'name', 128) if 'name' in fields else None
    email = _normalize_email(fields.get('email')) if 'email' in fields else None

    def _op():
        account = _get_account(session, principal.id)
        if email is not None and email != account.email:
            if _email_taken(session, email, exclude_id=account.id):
                raise Conflict('Email already in use')
            account.email = email
        if name is not None:
            account.name = name
        session.flush()
        return account

    account = _commit(session, _op, 'profile update')
    session.refresh(account)
    return account


def change_password(principal: Principal, current: Any, new: Any, session=None) -> None:
    session = session or get_db()
    if not isinstance(current, str) or not current:
        raise ValidationError('Current password is required')
    new = require_text(new, 'new password')
    if len(new) < PASSWORD_MIN:
        raise ValidationError(f'New password must be at least {PASSWORD_MIN} characters')

    def _op():
        account = _get_account(session, principal.id)
        if not account.verify_password(current):
            raise ValidationError('Current password is incorrect')
        account.set_password(new)

    run_in_transaction(session, _op, label='password change')
    logger.info('password changed for account %s', principal.id)


def admin_json(a: AdminAccount) -> Dict[str, Any]:
    return {
        'id': a.id,
        'name': a.name,
        'email': a.email,
        'role': a.role.value,
        'assigned_categories': list(a.assigned_categories or []),
        'created_at': a.created_at.isoformat() if a.created_at else None,
    }
