"""
Basic Info Module
=================

Name, experience, contact details and profile picture of the portfolio owner.
"""

from flask import Blueprint

basic_info_bp = Blueprint('basic_info', __name__, template_folder='templates')

from . import routes

__all__ = ['basic_info_bp']
