from flask import Blueprint, request
from flask_jwt_extended import create_access_token
from sqlalchemy import select
from dashboard import get_db
from dashboard.errors import NotFound, Unauthorized, ValidationError
from dashboard.models.authz import AdminAccount
from dashboard.decorators.auth import require_principal, current_principal
from dashboard.services.team import admin_json

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    email = data.get('email'); password = data.get('password')
    if not isinstance(email, str) or not email or not password:
        raise ValidationError('email & password required')
    session = get_db()
    account = session.execute(select(AdminAccount).where(AdminAccount.email == email.strip().lower())).scalar_one_or_none()
    if not account or not account.verify_password(password):
        raise Unauthorized('Invalid email or password')
    # Role and categories are deliberately not put in the token; they are re-read on every request
    token = create_access_token(identity=str(account.id))
    return {'access_token': token, 'account': admin_json(account)}


@auth_bp.get('/me')
@require_principal
def me():
    principal = current_principal()
    account = get_db().get(AdminAccount, principal.id)
    if account is None:
        raise NotFound('Account not found')
    return admin_json(account)
