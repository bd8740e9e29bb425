"""Local image store backing product pictures."""
from __future__ import annotations

import logging
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from dashboard.config.defaults import MAX_UPLOAD_BYTES
from dashboard.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}


def _extension(filename: str) -> str:
    return filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''


def _size(storage) -> int:
    stream = storage.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def store_upload(storage, upload_dir: str = None) -> str:
    """Validate and save a werkzeug ``FileStorage``; return the stored file name."""
    if storage is None or not storage.filename:
        raise ValidationError('No file uploaded')
    mimetype = storage.mimetype or ''
    filename = secure_filename(storage.filename)
    if not mimetype.startswith('image/') or _extension(filename) not in ALLOWED_EXTENSIONS:
        raise ValidationError('Only image files are allowed')
    if _size(storage) > MAX_UPLOAD_BYTES:
        raise ValidationError('File too large. Maximum size is 5MB')
    upload_dir = upload_dir or current_app.config['UPLOAD_DIR']
    os.makedirs(upload_dir, exist_ok=True)
    stored = f'{uuid.uuid4().hex}_{filename}'
    storage.save(os.path.join(upload_dir, stored))
    logger.info('stored upload %s (%s)', stored, mimetype)
    return stored
