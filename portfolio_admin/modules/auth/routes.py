"""
Auth Routes
===========

Session API (login, session info, logout), password change and the login
and change-password pages.
"""

from flask import flash, jsonify, redirect, render_template, request, session, url_for

from . import auth_bp
from .database import AdminDatabase, LoginAttempts
from .utils import safe_next_url, session_info, start_session
from ...core.errors import (
    AccountLockedError, AuthenticationError, PortfolioError, ValidationError, json_body,
)
from ...core.logging_service import LoggingService, get_client_ip

MIN_PASSWORD_LENGTH = 6


def authenticate(username, password):
    """Check credentials against the lockout table and the admins collection.

    Returns the admin document, raises on missing fields, lockout or bad credentials.
    """
    username = (username or '').strip()
    errors = {}
    if not username:
        errors['username'] = 'Username is required'
    if not password:
        errors['password'] = 'Password is required'
    if errors:
        raise ValidationError('Username and password are required', errors)

    ip = get_client_ip()
    try:
        LoginAttempts.check_locked(username, ip)
    except AccountLockedError as e:
        LoggingService.log('warn', 'auth', 'Login blocked: too many failed attempts', {
            'retryAfter': e.retry_after,
        }, username=username)
        raise

    admin = AdminDatabase.verify_credentials(username, password)
    if not admin:
        failures, locked_until = LoginAttempts.record_failure(username, ip)
        LoggingService.log('warn', 'auth', 'Failed login attempt', {
            'failures': failures,
            'locked': locked_until is not None,
        }, username=username)
        if locked_until:
            LoginAttempts.check_locked(username, ip)
        raise AuthenticationError('Invalid username or password')

    LoginAttempts.clear(username, ip)
    start_session(admin)
    LoggingService.log_auth('Admin logged in', username=admin['username'])
    return admin


# ===== Session API =====

@auth_bp.route('/api/admin/session', methods=['POST'])
def create_session():
    data = json_body() if request.is_json else request.form.to_dict()
    admin = authenticate(data.get('username'), data.get('password'))
    info = session_info()
    return jsonify({
        'message': 'Login successful',
        'admin': {'id': str(admin['_id']), 'username': admin['username']},
        'expiresAt': info['expiresAt'],
    })


@auth_bp.route('/api/admin/session', methods=['GET'])
def get_session():
    return jsonify(session_info())


@auth_bp.route('/api/admin/session', methods=['DELETE'])
def delete_session():
    LoggingService.log_auth('Admin logged out')
    session.clear()
    return jsonify({'message': 'Logged out'})


@auth_bp.route('/api/admin/change-password', methods=['PUT'])
def change_password():
    """Change the signed-in admin's password"""
    data = json_body()
    current_password = data.get('currentPassword')
    new_password = data.get('newPassword')

    errors = {}
    if not current_password:
        errors['currentPassword'] = 'Current password is required'
    if not new_password:
        errors['newPassword'] = 'New password is required'
    if errors:
        raise ValidationError('Missing required fields', errors)

    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError('New password is too short', {
            'newPassword': f'New password must be at least {MIN_PASSWORD_LENGTH} characters'
        })

    admin_id = session['admin_id']
    if not AdminDatabase.check_password(admin_id, current_password):
        LoggingService.log('warn', 'auth', 'Password change rejected: current password mismatch')
        raise ValidationError('Current password is incorrect', {
            'currentPassword': 'Current password is incorrect'
        })

    AdminDatabase.set_password(admin_id, new_password)
    LoggingService.log_auth('Admin password changed')
    return jsonify({'message': 'Password updated successfully'})


# ===== Pages =====

@auth_bp.route('/admin/login', methods=['GET', 'POST'])
def login():
    """Admin login page"""
    next_url = safe_next_url(request.values.get('next'))

    if request.method == 'POST':
        try:
            authenticate(request.form.get('username'), request.form.get('password'))
        except PortfolioError as e:
            flash(e.message, 'error')
            return render_template('auth/login.html', next=next_url,
                                   username=request.form.get('username', '')), e.status

        return redirect(next_url or url_for('admin.dashboard'))

    return render_template('auth/login.html', next=next_url, username='')


@auth_bp.route('/admin/logout')
def logout():
    LoggingService.log_auth('Admin logged out')
    session.clear()
    flash('You have been logged out', 'success')
    return redirect(url_for('auth.login'))


@auth_bp.route('/admin/settings/change-password')
def change_password_page():
    return render_template('auth/change_password.html')
