"""
Projects Admin Module
=====================

Admin interface for portfolio project management.
Plugs into the admin dashboard module.

Provides:
- Project creation and editing, per category
- Image upload with thumbnails
- Tags and skills
"""

from flask import Blueprint

projects_bp = Blueprint(
    'projects',
    __name__,
    template_folder='templates',
)

from . import routes

__all__ = ['projects_bp']
