"""
Media Module
============

Direct image uploads, read-URL issuing and container management for the
blob storage, plus serving of locally stored uploads.
"""

from flask import Blueprint

media_bp = Blueprint('media', __name__)

from . import routes

__all__ = ['media_bp']
