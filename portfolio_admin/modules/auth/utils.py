import secrets
import time

from flask import redirect, request, session, url_for

from ...core.config import get_config_value
from ...core.errors import AuthenticationError


def _session_lifetime_seconds():
    return int(get_config_value('SESSION_LIFETIME_HOURS', 24)) * 3600


def start_session(admin):
    """Issue a fresh admin session"""
    session.clear()
    session.permanent = True
    session['admin_id'] = str(admin['_id'])
    session['admin_username'] = admin['username']
    session['session_id'] = secrets.token_hex(16)
    session['login_time'] = time.time()


def is_session_valid():
    """Admin id, session id and a login time younger than the session lifetime"""
    if not session.get('admin_id') or not session.get('session_id'):
        return False
    try:
        login_time = float(session.get('login_time'))
    except (TypeError, ValueError):
        return False
    return time.time() - login_time < _session_lifetime_seconds()


def session_info():
    login_time = float(session['login_time'])
    return {
        'admin': {'id': session['admin_id'], 'username': session.get('admin_username')},
        'sessionId': session['session_id'],
        'loginTime': login_time,
        'expiresAt': login_time + _session_lifetime_seconds(),
    }


def safe_next_url(target):
    """Only same-site relative paths are followed after login"""
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


def register_gate(app):
    """Protect every admin page and admin API route"""

    @app.before_request
    def admin_gate():
        path = request.path.rstrip('/') or '/'

        if path.startswith('/api/admin'):
            if path == '/api/admin/session' and request.method == 'POST':
                return None
            if not is_session_valid():
                raise AuthenticationError()
            return None

        if path == '/admin/login':
            if is_session_valid():
                return redirect(url_for('admin.dashboard'))
            return None

        if path.startswith('/admin/static'):
            return None

        if path == '/admin' or path.startswith('/admin/'):
            if not is_session_valid():
                session.clear()
                return redirect(url_for('auth.login', next=request.path))
        return None
