from dashboard.errors import InsufficientStock, ValidationError, TransactionFailure
from tests.test_utils_seed import ensure_super_admin, auth_headers


def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert 'error' in body
    assert body['error']['status'] == 404
    assert 'detail' in body['error']


def test_domain_error_payloads():
    assert ValidationError('bad').to_payload() == {
        'error': {'status': 400, 'title': 'Bad Request', 'detail': 'bad', 'code': 'ValidationError'}
    }
    err = InsufficientStock(4)
    assert err.status == 409 and err.to_payload()['error']['available'] == 4
    assert TransactionFailure().status == 503


def test_internal_error_shape(client, monkeypatch):
    root = ensure_super_admin('err@example.com')
    headers = auth_headers(client, root)
    # Break the listing only after login so auth still works
    import dashboard.routes.team as team_routes

    def boom():
        raise RuntimeError('explode')

    monkeypatch.setattr(team_routes.team, 'list_admins', boom)
    resp = client.get('/team/admins', headers=headers)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error']['status'] == 500
    assert body['error']['title'] == 'Internal Server Error'
    assert 'explode' not in body['error']['detail']


def test_healthz_is_public(client):
    assert client.get('/healthz').get_json() == {'status': 'ok'}
