import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class FakeCompletionClient:
    """Stands in for the Gemini client: replays queued responses and records prompts."""

    def __init__(self):
        self.responses = []
        self.prompts = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def complete(self, prompt):
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("unexpected completion request")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def app():
    from app import create_app
    from extensions import db

    flask_app = create_app('testing')
    yield flask_app

    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def fake_ai(app):
    fake = FakeCompletionClient()
    app.extensions['completion_client'] = fake
    return fake


@pytest.fixture
def anon_client(app):
    return app.test_client()


def register(client, email='student@example.com', name='Asha', password='secret123'):
    return client.post('/api/auth/register', json={
        'name': name,
        'email': email,
        'password': password,
    })


@pytest.fixture
def client(app, fake_ai):
    test_client = app.test_client()
    response = register(test_client)
    assert response.status_code == 201
    return test_client


@pytest.fixture
def other_client(app, fake_ai):
    test_client = app.test_client()
    response = register(test_client, email='other@example.com', name='Ravi')
    assert response.status_code == 201
    return test_client


@pytest.fixture
def make_client():
    """Build a standalone fake client preloaded with ``responses``"""
    def _make(*responses):
        fake = FakeCompletionClient()
        fake.queue(*responses)
        return fake
    return _make
