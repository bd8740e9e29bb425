"""Environment-backed defaults applied by ``create_app`` before caller overrides."""
from __future__ import annotations
import os
from typing import Any, Dict

# Image ceiling enforced by the upload store; MAX_CONTENT_LENGTH leaves room for multipart framing
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def load_defaults() -> Dict[str, Any]:
    return {
        'JWT_SECRET_KEY': os.getenv('JWT_SECRET_KEY', 'dev-secret'),
        'DATABASE_URL': os.getenv('DATABASE_URL', 'sqlite:///dev.db'),
        'UPLOAD_DIR': os.getenv('UPLOAD_DIR', os.path.abspath('uploads')),
        'MAX_CONTENT_LENGTH': MAX_UPLOAD_BYTES + 64 * 1024,
        'APP_URL': os.getenv('APP_URL', 'http://localhost:3000'),
        'MAIL_SERVER': os.getenv('MAIL_SERVER'),
        'MAIL_PORT': int(os.getenv('MAIL_PORT', '587')),
        'MAIL_USERNAME': os.getenv('MAIL_USERNAME'),
        'MAIL_PASSWORD': os.getenv('MAIL_PASSWORD'),
        'MAIL_SENDER': os.getenv('MAIL_SENDER', 'no-reply@localhost'),
        'SALE_RETRY_ATTEMPTS': int(os.getenv('SALE_RETRY_ATTEMPTS', '3')),
    }
