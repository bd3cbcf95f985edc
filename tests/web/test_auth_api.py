"""
Tests for session authentication endpoints.
"""


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


class TestSignUp:

    def test_sign_up_opens_session(self, client):
        response = client.post('/api/auth/sign-up', json={'username': 'alice', 'password': 'secret123'})

        assert response.status_code == 201
        data = response.get_json()
        assert data["success"] is True
        assert data["user"]["username"] == "alice"
        assert "password_hash" not in data["user"]

        with client.session_transaction() as sess:
            assert sess['username'] == 'alice'
            assert sess['user_id'] == data["user"]["id"]

    def test_duplicate_username(self, auth_client):
        auth_client.post('/api/auth/sign-out')
        response = auth_client.post('/api/auth/sign-up', json={'username': 'alice', 'password': 'other123'})
        assert response.status_code == 409

    def test_invalid_body(self, client):
        response = client.post('/api/auth/sign-up', json={'username': 'al', 'password': 'x'})
        assert response.status_code == 400
        assert response.get_json()["success"] is False


class TestSignIn:

    def test_sign_in(self, auth_client):
        auth_client.post('/api/auth/sign-out')
        response = auth_client.post('/api/auth/sign-in', json={'username': 'alice', 'password': 'secret123'})

        assert response.status_code == 200
        assert response.get_json()["user"]["username"] == "alice"

    def test_wrong_password(self, auth_client):
        auth_client.post('/api/auth/sign-out')
        response = auth_client.post('/api/auth/sign-in', json={'username': 'alice', 'password': 'wrong'})
        assert response.status_code == 401

    def test_unknown_user(self, client):
        response = client.post('/api/auth/sign-in', json={'username': 'ghost', 'password': 'whatever'})
        assert response.status_code == 401


class TestSession:

    def test_current_session(self, auth_client):
        response = auth_client.get('/api/auth/session')
        assert response.status_code == 200
        assert response.get_json()["user"]["username"] == "alice"

    def test_sign_out_clears_session(self, auth_client):
        response = auth_client.post('/api/auth/sign-out')
        assert response.status_code == 200

        with auth_client.session_transaction() as sess:
            assert 'user_id' not in sess

        response = auth_client.get('/api/auth/session')
        assert response.status_code == 401

    def test_unauthenticated_routes(self, client):
        for method, url in [
            ('get', '/api/auth/session'),
            ('get', '/api/custom-recipes'),
            ('get', '/api/planning'),
            ('get', '/api/shopping-list'),
            ('post', '/api/shopping-list/items'),
        ]:
            response = getattr(client, method)(url)
            assert response.status_code == 401
            assert response.get_json() == {"success": False, "message": "Unauthorized"}

    def test_stale_session_user(self, client):
        with client.session_transaction() as sess:
            sess['user_id'] = 999
            sess['username'] = 'ghost'

        response = client.get('/api/auth/session')
        assert response.status_code == 401
        with client.session_transaction() as sess:
            assert 'user_id' not in sess
