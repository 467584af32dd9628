from datetime import timedelta
from flask_jwt_extended import create_access_token


def test_expired_token_gets_json_401(client, profile):
    token = create_access_token(identity=profile.id, expires_delta=timedelta(seconds=-1))
    resp = client.get('/api/browse', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 401
    assert resp.get_json()['notifications'][0]['level'] == 'error'


def test_cookie_token_is_accepted(client, profile):
    client.set_cookie('access_token_cookie', create_access_token(identity=profile.id))
    assert client.get('/api/browse').status_code == 200


def test_logout_clears_browsing_state_and_cookies(client, auth_headers, make_candidate):
    make_candidate('Ana Flores')
    make_candidate('Bruno Salas')
    client.post('/api/browse/filter', json={'category': 'presidente'}, headers=auth_headers)
    with client.session_transaction() as sess:
        assert sess['browse']['category'] == 'presidente'

    resp = client.post('/logout')
    assert resp.status_code == 200
    assert any('access_token_cookie=;' in c for c in resp.headers.getlist('Set-Cookie'))
    with client.session_transaction() as sess:
        assert 'browse' not in sess
