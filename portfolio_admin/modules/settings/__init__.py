"""
Settings Module
===============

Category settings: display titles, descriptions, enabled flags and colour
palettes for the four project categories.
"""

from flask import Blueprint

settings_bp = Blueprint('settings', __name__, template_folder='templates')

from . import routes
