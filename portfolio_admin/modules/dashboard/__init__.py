"""
Dashboard Module
================

Admin dashboard interface for the portfolio console.

Provides:
- Dashboard page with project and activity statistics
- The shared admin layout, error page and client script

This is the foundation module that other admin features plug into.
"""

from flask import Blueprint

# Blueprint name is 'admin' so pages link to url_for('admin.dashboard')
dashboard_bp = Blueprint(
    'admin',
    __name__,
    template_folder='templates',
    static_folder='static',
    static_url_path='/admin/static'
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp']
