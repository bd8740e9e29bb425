import io
import pytest
from werkzeug.datastructures import FileStorage
from dashboard.config.defaults import MAX_UPLOAD_BYTES
from dashboard.errors import ValidationError
from dashboard.services.uploads import store_upload
from tests.test_utils_seed import ensure_account, auth_headers

PNG = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64


def _file(data, name='pic.png', mimetype='image/png'):
    return FileStorage(stream=io.BytesIO(data), filename=name, content_type=mimetype)


def test_store_upload_saves_with_unique_name(tmp_path):
    name = store_upload(_file(PNG, name='../../my pic.png'), upload_dir=str(tmp_path))
    assert name.endswith('_my_pic.png')
    assert (tmp_path / name).read_bytes() == PNG
    assert store_upload(_file(PNG), upload_dir=str(tmp_path)) != store_upload(_file(PNG), upload_dir=str(tmp_path))


@pytest.mark.parametrize('name,mimetype', [
    ('notes.txt', 'text/plain'),
    ('pic.png', 'application/octet-stream'),
    ('script.exe', 'image/png'),
])
def test_store_upload_rejects_non_images(tmp_path, name, mimetype):
    with pytest.raises(ValidationError) as exc:
        store_upload(_file(PNG, name=name, mimetype=mimetype), upload_dir=str(tmp_path))
    assert exc.value.detail == 'Only image files are allowed'


def test_store_upload_rejects_oversized_files(tmp_path):
    with pytest.raises(ValidationError) as exc:
        store_upload(_file(b'\x00' * (MAX_UPLOAD_BYTES + 1)), upload_dir=str(tmp_path))
    assert '5MB' in exc.value.detail
    assert list(tmp_path.iterdir()) == []


def test_upload_route_round_trip(client):
    headers = auth_headers(client, ensure_account('img@example.com', ['Home']))
    resp = client.post('/uploads', data={'file': (io.BytesIO(PNG), 'shot.png', 'image/png')},
                       headers=headers, content_type='multipart/form-data')
    assert resp.status_code == 201, resp.get_json()
    url = resp.get_json()['url']
    assert url.startswith('/uploads/')
    served = client.get(url)
    assert served.status_code == 200 and served.data == PNG


def test_upload_route_requires_auth_and_file(client):
    assert client.post('/uploads', data={}).status_code == 401
    headers = auth_headers(client, ensure_account('img2@example.com', ['Home']))
    resp = client.post('/uploads', data={}, headers=headers, content_type='multipart/form-data')
    assert resp.status_code == 400
    assert client.get('/uploads/missing.png').status_code == 404
