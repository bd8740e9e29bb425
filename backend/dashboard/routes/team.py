from __future__ import annotations
from flask import Blueprint, request
from dashboard import get_db
from dashboard.decorators.auth import require_super_admin, current_principal
from dashboard.decorators.audit import audit_log
from dashboard.models.authz import AdminAccount
from dashboard.services import team
from dashboard.services.notifier import get_notifier

team_bp = Blueprint('team', __name__)


def _categories_snapshot(args, kwargs):
    account = get_db().get(AdminAccount, kwargs['admin_id'])
    return {'assigned_categories': list(account.assigned_categories or [])} if account else None


@team_bp.get('/admins')
@require_super_admin
def list_admins():
    return {'data': [team.admin_json(a) for a in team.list_admins()]}


@team_bp.post('/admins')
@require_super_admin
@audit_log(
    'ADMIN.CREATE',
    entity='Admin',
    meta_builder=lambda data, rv, a, kw: {
        'email': data['admin']['email'],
        'assigned_categories': data['admin']['assigned_categories'],
        'email_sent': data['email_sent'],
    },
)
def create_admin():
    data = request.get_json(silent=True) or {}
    inviter = get_db().get(AdminAccount, current_principal().id)
    account, result = team.create_admin(
        data,
        notifier=get_notifier(),
        invited_by=inviter.name if inviter else None,
    )
    email_sent = bool(result and result.success)
    return {
        'admin': team.admin_json(account),
        'email_sent': email_sent,
        'email_error': result.error if result and not result.success else None,
        'message': 'Admin created and email sent!' if email_sent else 'Admin created successfully',
    }, 201


@team_bp.put('/admins/<int:admin_id>/categories')
@require_super_admin
@audit_log(
    'ADMIN.CATEGORIES.SET',
    entity='Admin',
    entity_id_key='id',
    diff_keys=['assigned_categories'],
    pre_fetch=_categories_snapshot,
)
def set_admin_categories(admin_id: int):
    data = request.get_json(silent=True) or {}
    account = team.update_admin_categories(admin_id, data.get('assigned_categories'))
    return team.admin_json(account)


@team_bp.delete('/admins/<int:admin_id>')
@require_super_admin
@audit_log('ADMIN.DELETE', entity='Admin', entity_id_arg='admin_id')
def delete_admin(admin_id: int):
    team.delete_admin(admin_id)
    return {'deleted': True, 'id': admin_id}
