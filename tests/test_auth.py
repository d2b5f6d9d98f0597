from models.user import User
from seed_data import DEMO_EMAIL, seed_database


def _register(client, **overrides):
    payload = {'name': 'Asha', 'email': 'asha@example.com', 'password': 'secret123'}
    payload.update(overrides)
    return client.post('/api/auth/register', json=payload)


def test_register_logs_the_user_in(anon_client):
    response = _register(anon_client, email='Asha@Example.com')
    assert response.status_code == 201
    assert response.get_json()['user']['email'] == 'asha@example.com'
    assert anon_client.get('/api/auth/me').get_json()['user']['name'] == 'Asha'


def test_password_is_hashed(anon_client, app):
    _register(anon_client)
    with app.app_context():
        user = User.query.filter_by(email='asha@example.com').one()
        assert user.password_hash != 'secret123'
        assert user.check_password('secret123')


def test_register_validation(anon_client):
    assert _register(anon_client, name='').status_code == 400
    assert _register(anon_client, email='not-an-email').status_code == 400
    assert _register(anon_client, password='123').status_code == 400
    assert _register(anon_client).status_code == 201
    assert _register(anon_client).status_code == 400


def test_login_and_logout(app):
    _register(app.test_client())

    client = app.test_client()
    assert client.get('/api/auth/me').status_code == 401
    assert client.post('/api/auth/login', json={
        'email': 'asha@example.com', 'password': 'wrong-pass',
    }).status_code == 401

    response = client.post('/api/auth/login', json={'email': 'asha@example.com', 'password': 'secret123'})
    assert response.status_code == 200
    assert client.get('/api/auth/me').status_code == 200

    assert client.post('/api/auth/logout').status_code == 200
    assert client.get('/api/auth/me').status_code == 401


def test_login_requires_fields(anon_client):
    assert anon_client.post('/api/auth/login', json={'email': 'a@b.co'}).status_code == 400


def test_non_string_credentials_are_rejected(anon_client):
    for field, value in (('name', 123), ('email', ['a@b.co']), ('password', {'x': 1})):
        response = _register(anon_client, **{field: value})
        assert response.status_code == 400
        assert response.get_json() == {'error': f'{field} must be a string'}

    response = anon_client.post('/api/auth/login', json={'email': 42, 'password': 'secret123'})
    assert response.status_code == 400


def test_protected_routes_return_json_401(anon_client):
    for method, path in [('get', '/api/exams'), ('get', '/api/notes'), ('get', '/api/tasks'),
                         ('get', '/api/quizzes'), ('post', '/api/explain-concept')]:
        response = getattr(anon_client, method)(path, json={})
        assert response.status_code == 401
        assert response.get_json()['login_required'] is True


def test_csrf_token_endpoint(anon_client):
    assert anon_client.get('/api/auth/csrf-token').get_json()['csrfToken']


def test_json_error_pages(anon_client):
    missing = anon_client.get('/api/does-not-exist')
    assert missing.status_code == 404
    assert missing.get_json() == {'error': 'Resource not found'}
    assert anon_client.delete('/api/auth/me').status_code == 405


def test_health_reports_ai_configuration(anon_client, app):
    assert anon_client.get('/api/health').get_json() == {'status': 'ok', 'aiConfigured': True}
    app.extensions['completion_client'] = None
    assert anon_client.get('/api/health').get_json()['aiConfigured'] is False


def test_seed_database_is_idempotent(app):
    first = seed_database(app)
    second = seed_database(app)
    assert first == second
    with app.app_context():
        user = User.query.filter_by(email=DEMO_EMAIL).one()
        assert len(user.tasks) == 1
        assert len(user.notes) == 1
