"""
Auth Module
===========

Admin authentication for the portfolio console:
- Username/password login with server-side lockout
- Signed-cookie sessions with a fixed lifetime
- Password change
- The gate that protects /admin pages and /api/admin routes
"""

from flask import Blueprint

auth_bp = Blueprint(
    'auth',
    __name__,
    template_folder='templates',
)

from . import routes
from .database import AdminDatabase, LoginAttempts
from .utils import register_gate

__all__ = ['auth_bp', 'AdminDatabase', 'LoginAttempts', 'register_gate']
