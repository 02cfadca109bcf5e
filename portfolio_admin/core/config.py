import os
from dotenv import load_dotenv

load_dotenv(override=True)


def _int_env(name, default):
    value = os.getenv(name)
    try:
        return int(value) if value not in (None, '') else default
    except ValueError:
        return default


class Config:
    """
    Base configuration for the portfolio admin console.
    Deployments provide connection strings and secrets via environment variables.
    """
    # Flask settings
    DEBUG = os.getenv('FLASK_DEBUG', 'false').lower() in ('true', '1', 'yes')
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY') or os.getenv('SESSION_SECRET')
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))
    SESSION_LIFETIME_HOURS = _int_env('SESSION_LIFETIME_HOURS', 24)

    # Document database
    MONGODB_URI = os.getenv('MONGODB_URI', 'mongodb://localhost:27017')
    MONGODB_DB = os.getenv('MONGODB_DB', 'portfolio')
    # Create indexes and seed default categories when the app starts
    BOOTSTRAP_ON_START = os.getenv('BOOTSTRAP_ON_START', 'true').lower() in ('true', '1', 'yes')

    # Blob storage (S3 compatible). Empty connection string = local uploads folder
    STORAGE_CONNECTION_STRING = os.getenv('STORAGE_CONNECTION_STRING', '')
    STORAGE_CONTAINER_NAME = os.getenv('STORAGE_CONTAINER_NAME', 'originals')
    STORAGE_THUMBNAILS_CONTAINER = os.getenv('STORAGE_THUMBNAILS_CONTAINER', 'thumbnails')
    IMAGE_URL_EXPIRY_HOURS = _int_env('IMAGE_URL_EXPIRY_HOURS', 24)

    # Login lockout
    LOGIN_MAX_ATTEMPTS = _int_env('LOGIN_MAX_ATTEMPTS', 5)
    LOGIN_LOCKOUT_MINUTES = _int_env('LOGIN_LOCKOUT_MINUTES', 5)

    # Logging
    LOG_RATE_LIMIT = _int_env('LOG_RATE_LIMIT', 100)
    LOG_BUFFER_SIZE = _int_env('LOG_BUFFER_SIZE', 1)

    # Public client-log endpoint
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]

    # Collection names
    ADMINS_COLLECTION = 'admins'
    CATEGORIES_COLLECTION = 'categories'
    PROJECTS_COLLECTION = 'projects'
    WORK_EXPERIENCE_COLLECTION = 'workexperiences'
    BASIC_INFO_COLLECTION = 'basic_info'
    LOGS_COLLECTION = 'logs'
    LOGIN_ATTEMPTS_COLLECTION = 'login_attempts'

    # Shown by the basic-info screen before anything has been saved
    BASIC_INFO_DEFAULTS = {
        'name': os.getenv('BASIC_INFO_NAME', ''),
        'yearsOfExperience': os.getenv('BASIC_INFO_YEARS', ''),
        'phone': os.getenv('BASIC_INFO_PHONE', ''),
        'email': os.getenv('BASIC_INFO_EMAIL', ''),
    }

    # Port for local server
    port = _int_env('PORT', 5000)


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
