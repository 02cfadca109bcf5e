"""
Critical Integration Tests for Portfolio Admin
==============================================

Focused tests covering the integration points most likely to break:
app wiring, the admin gate, the error envelope and the JSON encoding.
Run with: pytest tests/test_critical.py -v

NOTE: pytest and mongomock are listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

from unittest.mock import patch

import mongomock
import pytest
from bson import ObjectId
from flask import Flask
from pymongo.errors import ServerSelectionTimeoutError

from portfolio_admin import PortfolioAdmin, create_app


# ---------------------------------------------------------------------------
# 1. Initialisation -- PortfolioAdmin(app) registers itself and its modules
# ---------------------------------------------------------------------------

def test_extension_registered(app):
    extension = app.extensions['portfolio_admin']
    assert isinstance(extension, PortfolioAdmin)
    assert extension.get_registered_modules() == [
        'auth', 'dashboard', 'projects', 'settings', 'work_experience', 'basic_info', 'logs', 'media',
    ]


def test_features_can_be_disabled(app_config):
    app = Flask(__name__)
    app.config.update(app_config)
    extension = PortfolioAdmin(app, {'features': {'logs': False, 'media': False}},
                               mongo_client=mongomock.MongoClient())

    modules = extension.get_registered_modules()
    assert 'logs' not in modules
    assert 'media' not in modules
    assert 'auth' in modules and 'dashboard' in modules


def test_session_cookie_settings(app):
    assert app.config['SESSION_COOKIE_HTTPONLY'] is True
    assert app.config['SESSION_COOKIE_SAMESITE'] == 'Lax'
    assert app.config['PERMANENT_SESSION_LIFETIME'].total_seconds() == 24 * 3600


def test_secure_cookie_follows_debug_flag(app_config, mongo_client, monkeypatch):
    monkeypatch.delenv('SESSION_COOKIE_SECURE', raising=False)
    app_config['TESTING'] = False

    app_config['DEBUG'] = True
    assert create_app(app_config, mongo_client=mongo_client).config['SESSION_COOKIE_SECURE'] is False

    app_config['DEBUG'] = False
    assert create_app(app_config, mongo_client=mongo_client).config['SESSION_COOKIE_SECURE'] is True


def test_bootstrap_seeds_categories(app_config, mongo_client, db):
    app_config['BOOTSTRAP_ON_START'] = True
    create_app(app_config, mongo_client=mongo_client)

    stored = sorted(doc['category'] for doc in db.categories.find())
    assert stored == ['content', 'innovation', 'product', 'software']


# ---------------------------------------------------------------------------
# 2. Admin gate -- API routes answer 401, pages redirect to the login page
# ---------------------------------------------------------------------------

def test_api_requires_session(client):
    response = client.get('/api/admin/project')
    assert response.status_code == 401

    body = response.get_json()
    assert body['code'] == 'AUTHENTICATION_ERROR'
    assert body['message'] == 'Unauthorized'
    assert body['error'] == 'Unauthorized'
    assert 'timestamp' in body


def test_pages_redirect_to_login(client):
    response = client.get('/admin/dashboard')
    assert response.status_code == 302
    assert '/admin/login?next=' in response.headers['Location']


def test_login_page_is_public(client):
    response = client.get('/admin/login')
    assert response.status_code == 200
    assert b'Admin Login' in response.data


def test_login_page_redirects_signed_in_admin(admin_client):
    response = admin_client.get('/admin/login')
    assert response.status_code == 302
    assert response.headers['Location'].rstrip('/').endswith(('/admin', '/admin/dashboard'))


def test_static_assets_are_public(client):
    response = client.get('/admin/static/admin.js')
    assert response.status_code == 200
    assert b'AdminApi' in response.data


# ---------------------------------------------------------------------------
# 3. Error handling -- envelope for 404 and database failures
# ---------------------------------------------------------------------------

def test_unknown_api_route_returns_json(admin_client):
    response = admin_client.get('/api/admin/does-not-exist')
    assert response.status_code == 404
    assert response.get_json()['code'] == 'NOT_FOUND'


def test_database_failure_returns_500_envelope(admin_client):
    with patch('portfolio_admin.modules.projects.routes.ProjectDatabase.get_all',
               side_effect=ServerSelectionTimeoutError('no servers')):
        response = admin_client.get('/api/admin/project')

    assert response.status_code == 500
    assert response.get_json()['code'] == 'DATABASE_ERROR'


@pytest.mark.parametrize('url', ['/api/admin/project', '/api/admin/session', '/api/admin/settings/categories'])
def test_json_body_must_be_an_object(admin_client, url):
    response = admin_client.post(url, json=[1])
    assert response.status_code == 400

    body = response.get_json()
    assert body['code'] == 'VALIDATION_ERROR'
    assert body['details'] == {'body': 'Expected a JSON object'}


def test_not_found_page_renders_html(admin_client):
    response = admin_client.get(f'/admin/project/{ObjectId()}/edit')
    assert response.status_code == 404
    assert b'Project not found' in response.data


# ---------------------------------------------------------------------------
# 4. JSON encoding -- ObjectIds and datetimes
# ---------------------------------------------------------------------------

def test_object_ids_and_dates_serialised(admin_client):
    response = admin_client.post('/api/admin/project', json={
        'title': 'Encoder',
        'description': 'Checks the JSON provider',
        'category': 'software',
    })
    project = response.get_json()['project']

    assert ObjectId.is_valid(project['_id'])
    assert ObjectId.is_valid(project['createdBy'])
    assert project['createdAt'].endswith('Z')
