"""
Work Experience Module
======================

Admin CRUD for the work history shown on the portfolio, with optional
company logos.
"""

from flask import Blueprint

work_experience_bp = Blueprint('work_experience', __name__, template_folder='templates')

from . import routes

__all__ = ['work_experience_bp']
