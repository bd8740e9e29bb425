"""Domain error taxonomy.

Services raise these; the app-level error handler renders every one of them into the
standard ``{"error": {...}}`` envelope using ``status`` and ``detail``.
"""
from __future__ import annotations
from typing import Any, Dict, Optional


class DashboardError(Exception):
    status = 500
    title = 'Internal Server Error'
    default_detail = 'Unexpected error'

    def __init__(self, detail: Optional[str] = None, **extra: Any):
        self.detail = detail or self.default_detail
        self.extra = extra
        super().__init__(self.detail)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_payload(self) -> Dict[str, Any]:
        body = {
            'status': self.status,
            'title': self.title,
            'detail': self.detail,
            'code': self.code,
        }
        body.update(self.extra)
        return {'error': body}


class Unauthorized(DashboardError):
    status = 401
    title = 'Unauthorized'
    default_detail = 'Authentication required'


class Forbidden(DashboardError):
    status = 403
    title = 'Forbidden'
    default_detail = 'You do not have permission to perform this action'


class NotFound(DashboardError):
    status = 404
    title = 'Not Found'
    default_detail = 'Resource not found'


class ValidationError(DashboardError):
    status = 400
    title = 'Bad Request'
    default_detail = 'Invalid input'


class Conflict(DashboardError):
    status = 409
    title = 'Conflict'
    default_detail = 'Resource already exists'


class InsufficientStock(DashboardError):
    status = 409
    title = 'Conflict'

    def __init__(self, available: int):
        self.available = available
        super().__init__(f'Not enough stock. Available: {available}', available=available)


class TransactionFailure(DashboardError):
    """Store could not complete an atomic unit; safe for the caller to retry."""
    status = 503
    title = 'Service Unavailable'
    default_detail = 'The operation could not be completed, please retry'

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, retryable=True)


__all__ = [
    'DashboardError', 'Unauthorized', 'Forbidden', 'NotFound', 'ValidationError',
    'Conflict', 'InsufficientStock', 'TransactionFailure',
]
