from functools import wraps
from flask import g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from dashboard.errors import Forbidden
from dashboard.services.policy import Principal, can_manage_team
from dashboard.services.principal import require_principal as _require_principal


def current_principal() -> Principal:
    """Principal for the active request, resolved once and cached on ``g``."""
    principal = g.get('principal')
    if principal is None:
        verify_jwt_in_request()
        principal = _require_principal(get_jwt_identity())
        g.principal = principal
    return principal


def require_principal(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        current_principal()
        return fn(*args, **kwargs)
    return wrapper


def require_super_admin(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not can_manage_team(current_principal()):
            raise Forbidden('Only super admins can manage the team')
        return fn(*args, **kwargs)
    return wrapper
