"""
Logs Module
===========

Log viewer, export and cleanup for admins, plus the public endpoint that
browser code posts its own log entries to.
"""

from flask import Blueprint

logs_bp = Blueprint('logs', __name__, template_folder='templates')

from . import routes

__all__ = ['logs_bp']
