"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path, so tests never see each
other's users or tokens.
"""
import pytest

from api import create_app
from models import storage
from services import users_service

PASSWORD = "Secret1!"


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", {"DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}"})
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    """App context for calling services directly."""
    with app.app_context():
        yield app


@pytest.fixture
def user(app_ctx):
    return users_service.create_user("Ada", "Lovelace", "a@x.com", PASSWORD)


@pytest.fixture
def signed_up(client):
    """Sign up a@x.com over HTTP and return the response body."""
    resp = client.post(
        "/api/auth/signup",
        json={"firstName": "Ada", "lastName": "Lovelace", "email": "a@x.com", "password": PASSWORD},
    )
    assert resp.status_code == 201
    return resp.get_json()
