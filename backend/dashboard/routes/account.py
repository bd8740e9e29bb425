from __future__ import annotations
from flask import Blueprint, request
from dashboard.decorators.auth import require_principal, current_principal
from dashboard.decorators.audit import audit_log
from dashboard.services import company, team

account_bp = Blueprint('account', __name__)


@account_bp.put('/account/profile')
@require_principal
@audit_log('ACCOUNT.PROFILE.UPDATE', entity='Admin', entity_id_key='id', meta_keys=['name', 'email'])
def update_profile():
    data = request.get_json(silent=True) or {}
    account = team.update_profile(current_principal(), data)
    return team.admin_json(account)


@account_bp.put('/account/password')
@require_principal
@audit_log('ACCOUNT.PASSWORD.CHANGE', entity='Admin')
def change_password():
    data = request.get_json(silent=True) or {}
    team.change_password(current_principal(), data.get('current_password'), data.get('new_password'))
    return {'message': 'Password updated successfully'}


@account_bp.get('/settings/company')
@require_principal
def get_company_settings():
    return company.settings_json(company.get_settings())


@account_bp.put('/settings/company')
@require_principal
@audit_log('SETTINGS.COMPANY.UPDATE', entity='CompanySettings', meta_keys=['company_name', 'currency', 'low_stock_threshold'])
def update_company_settings():
    data = request.get_json(silent=True) or {}
    return company.settings_json(company.update_settings(current_principal(), data))
