from __future__ import annotations
from typing import Any, Dict

from dashboard import get_db
from dashboard.errors import Forbidden, ValidationError
from dashboard.models.settings import CompanySettings
from dashboard.services.policy import Principal
from dashboard.services.transactions import run_in_transaction
from dashboard.utils.validation import require_text, parse_int

SETTINGS_FIELDS = ('company_name', 'currency', 'low_stock_threshold')


def get_settings(session=None) -> CompanySettings:
    """Return the single settings row, creating it with defaults on first use."""
    session = session or get_db()
    row = session.get(CompanySettings, CompanySettings.SINGLETON_ID)
    if row is None:
        def _op():
            created = CompanySettings(id=CompanySettings.SINGLETON_ID)
            session.add(created)
            session.flush()
            return created
        row = run_in_transaction(session, _op, label='settings init')
        session.refresh(row)
    return row


def update_settings(principal: Principal, fields: Dict[str, Any], session=None) -> CompanySettings:
    if not principal.is_super_admin:
        raise Forbidden('Only super admins can update company settings')
    session = session or get_db()
    cleaned: Dict[str, Any] = {}
    if 'company_name' in fields:
        cleaned['company_name'] = require_text(fields['company_name'], 'company_name', 128)
    if 'currency' in fields:
        currency = fields['currency']
        if not isinstance(currency, str) or len(currency.strip()) != 3 or not currency.strip().isalpha():
            raise ValidationError('currency must be a 3-letter code')
        cleaned['currency'] = currency.strip().upper()
    if 'low_stock_threshold' in fields:
        cleaned['low_stock_threshold'] = parse_int(fields['low_stock_threshold'], 'low_stock_threshold', minimum=0)
    row = get_settings(session)

    def _op():
        for key, value in cleaned.items():
            setattr(row, key, value)
        session.flush()
        return row

    row = run_in_transaction(session, _op, label='settings update')
    session.refresh(row)
    return row


def settings_json(s: CompanySettings) -> Dict[str, Any]:
    return {
        'company_name': s.company_name,
        'currency': s.currency,
        'low_stock_threshold': s.low_stock_threshold,
        'updated_at': s.updated_at.isoformat() if s.updated_at else None,
    }
