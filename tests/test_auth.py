"""
Auth Tests
==========

Login, lockout, session lifetime and password change.
"""

import time

from conftest import ADMIN_PASSWORD, ADMIN_USERNAME


def login(client, password=ADMIN_PASSWORD, username=ADMIN_USERNAME, **kwargs):
    return client.post('/api/admin/session', json={'username': username, 'password': password}, **kwargs)


# ---------------------------------------------------------------------------
# Session API
# ---------------------------------------------------------------------------

def test_login_success(client, db):
    response = login(client)
    assert response.status_code == 200

    body = response.get_json()
    assert body['admin']['username'] == ADMIN_USERNAME

    info = client.get('/api/admin/session').get_json()
    assert info['admin']['username'] == ADMIN_USERNAME
    assert info['expiresAt'] - info['loginTime'] == 24 * 3600
    assert db.admins.find_one({'username': ADMIN_USERNAME})['lastLogin'] is not None


def test_login_wrong_password(client):
    response = login(client, password='nope')
    assert response.status_code == 401
    assert response.get_json()['message'] == 'Invalid username or password'


def test_login_unknown_user_looks_like_wrong_password(client):
    response = login(client, username='ghost')
    assert response.status_code == 401
    assert response.get_json()['message'] == 'Invalid username or password'


def test_login_missing_fields(client):
    response = client.post('/api/admin/session', json={'username': ''})
    assert response.status_code == 400

    details = response.get_json()['details']
    assert 'username' in details
    assert 'password' in details


def test_logout_ends_session(admin_client):
    assert admin_client.delete('/api/admin/session').status_code == 200
    assert admin_client.get('/api/admin/session').status_code == 401


def test_expired_session_rejected(admin_client):
    with admin_client.session_transaction() as sess:
        sess['login_time'] = time.time() - 25 * 3600

    assert admin_client.get('/api/admin/project').status_code == 401


def test_login_is_logged(client, db):
    login(client)
    login(client, password='nope')

    messages = [entry['message'] for entry in db.logs.find({'category': 'auth'})]
    assert 'Admin logged in' in messages
    assert 'Failed login attempt' in messages


# ---------------------------------------------------------------------------
# Lockout
# ---------------------------------------------------------------------------

def test_lockout_after_five_failures(client):
    for _ in range(4):
        assert login(client, password='nope').status_code == 401

    response = login(client, password='nope')
    assert response.status_code == 429
    assert response.get_json()['code'] == 'ACCOUNT_LOCKED'
    assert int(response.headers['Retry-After']) > 0

    # Still locked, even with the right password
    response = login(client)
    assert response.status_code == 429
    assert 0 < response.get_json()['details']['retryAfter'] <= 300


def test_lockout_is_per_client_address(client):
    for _ in range(5):
        login(client, password='nope')

    response = login(client, headers={'X-Forwarded-For': '10.0.0.9'})
    assert response.status_code == 200


def test_successful_login_resets_failures(client, db):
    for _ in range(3):
        login(client, password='nope')
    assert login(client).status_code == 200

    assert db.login_attempts.count_documents({}) == 0


# ---------------------------------------------------------------------------
# Password change
# ---------------------------------------------------------------------------

def test_change_password(admin_client):
    response = admin_client.put('/api/admin/change-password', json={
        'currentPassword': ADMIN_PASSWORD,
        'newPassword': 'new-secret',
    })
    assert response.status_code == 200

    admin_client.delete('/api/admin/session')
    assert login(admin_client).status_code == 401
    assert login(admin_client, password='new-secret').status_code == 200


def test_change_password_too_short(admin_client):
    response = admin_client.put('/api/admin/change-password', json={
        'currentPassword': ADMIN_PASSWORD,
        'newPassword': '12345',
    })
    assert response.status_code == 400
    assert 'newPassword' in response.get_json()['details']


def test_change_password_wrong_current(admin_client):
    response = admin_client.put('/api/admin/change-password', json={
        'currentPassword': 'not-it',
        'newPassword': 'new-secret',
    })
    assert response.status_code == 400
    assert response.get_json()['details']['currentPassword'] == 'Current password is incorrect'


# ---------------------------------------------------------------------------
# Login page
# ---------------------------------------------------------------------------

def test_login_form_redirects_to_next(client):
    response = client.post('/admin/login', data={
        'username': ADMIN_USERNAME,
        'password': ADMIN_PASSWORD,
        'next': '/admin/logs',
    })
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/admin/logs')


def test_login_form_ignores_offsite_next(client):
    response = client.post('/admin/login', data={
        'username': ADMIN_USERNAME,
        'password': ADMIN_PASSWORD,
        'next': '//evil.example.com/',
    })
    assert response.status_code == 302
    assert 'evil.example.com' not in response.headers['Location']


def test_login_form_shows_error(client):
    response = client.post('/admin/login', data={'username': ADMIN_USERNAME, 'password': 'nope'})
    assert response.status_code == 401
    assert b'Invalid username or password' in response.data


def test_logout_page(admin_client):
    response = admin_client.get('/admin/logout')
    assert response.status_code == 302
    assert admin_client.get('/api/admin/session').status_code == 401
