"""
Shared fixtures for the portfolio admin tests.

The app runs against mongomock and a temporary uploads folder, so no
database server or blob storage is needed.
Run with: pytest tests/ -v
"""

import io

import mongomock
import pytest
from PIL import Image

from portfolio_admin import create_app
from portfolio_admin.modules.auth.database import AdminDatabase

ADMIN_USERNAME = 'admin'
ADMIN_PASSWORD = 'correct-horse'
TEST_DB = 'portfolio_test'


# ---------------------------------------------------------------------------
# App and database
# ---------------------------------------------------------------------------

@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def db(mongo_client):
    """Direct handle on the test database for seeding and assertions."""
    return mongo_client[TEST_DB]


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / 'uploads'


@pytest.fixture
def app_config(upload_dir):
    return {
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'MONGODB_DB': TEST_DB,
        'BOOTSTRAP_ON_START': False,
        'UPLOAD_FOLDER': str(upload_dir),
        'STORAGE_CONNECTION_STRING': '',
        'LOG_BUFFER_SIZE': 1,
    }


@pytest.fixture
def app(app_config, mongo_client):
    """Fully initialised app with one admin account."""
    app = create_app(app_config, mongo_client=mongo_client)
    with app.app_context():
        AdminDatabase.create_admin(ADMIN_USERNAME, ADMIN_PASSWORD)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    """Test client holding a signed-in admin session."""
    response = client.post('/api/admin/session', json={
        'username': ADMIN_USERNAME,
        'password': ADMIN_PASSWORD,
    })
    assert response.status_code == 200
    return client


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

@pytest.fixture
def image_bytes():
    """Factory for in-memory images of a given size and format."""
    def make(size=(800, 600), fmt='PNG', color=(200, 30, 30)):
        buf = io.BytesIO()
        Image.new('RGB', size, color).save(buf, format=fmt)
        return buf.getvalue()
    return make
