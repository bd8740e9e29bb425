from __future__ import annotations
from flask import Blueprint, request, current_app, send_from_directory, url_for
from dashboard.decorators.auth import require_principal
from dashboard.decorators.audit import audit_log
from dashboard.services.uploads import store_upload

uploads_bp = Blueprint('uploads', __name__)


@uploads_bp.post('')
@require_principal
@audit_log('UPLOAD.CREATE', entity='Upload', entity_id_key='name')
def upload_image():
    name = store_upload(request.files.get('file'))
    return {'name': name, 'url': url_for('uploads.serve_upload', name=name)}, 201


@uploads_bp.get('/<path:name>')
def serve_upload(name: str):
    # send_from_directory rejects paths escaping UPLOAD_DIR with a 404
    return send_from_directory(current_app.config['UPLOAD_DIR'], name)
