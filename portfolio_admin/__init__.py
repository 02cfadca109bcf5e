"""
Portfolio Admin - A Flask Admin Console
=======================================

Admin console for a personal portfolio:
- Projects per category with images and thumbnails
- Category settings and colour palettes
- Work experience and basic profile info
- Admin authentication and session management
- Structured activity logs with a viewer

Usage:
    from portfolio_admin import create_app

    app = create_app()

or, on an existing Flask app:

    from portfolio_admin import PortfolioAdmin

    PortfolioAdmin(app, {'features': {'logs': True}})
"""

import os
import secrets
from datetime import timedelta

from flask import Flask, session
from flask_cors import CORS
from pymongo.errors import PyMongoError

from .core.config import Config
from .core.database import Database, MongoJSONProvider
from .core.errors import register_error_handlers
from .core.logging_service import LoggingService

__version__ = '0.1.0'

# Optional modules; auth and dashboard are always registered
DEFAULT_FEATURES = {
    'projects': True,
    'settings': True,
    'work_experience': True,
    'basic_info': True,
    'logs': True,
    'media': True,
}


class PortfolioAdmin:
    """Flask extension that wires the admin modules into an app"""

    def __init__(self, app=None, config=None, mongo_client=None):
        self.config = config or {}
        self.features = dict(DEFAULT_FEATURES, **self.config.get('features', {}))
        self._registered_modules = []
        if app is not None:
            self.init_app(app, mongo_client=mongo_client)

    def init_app(self, app, mongo_client=None):
        self._apply_config(app)

        app.json = MongoJSONProvider(app)
        Database.init_app(app, mongo_client)
        LoggingService.init_app(app)
        register_error_handlers(app)

        from .modules.auth.utils import register_gate
        register_gate(app)

        CORS(app, resources={r'/api/log': {'origins': app.config['CORS_ORIGINS']}})

        self._register_modules(app)

        from .cli import register_commands
        register_commands(app)

        from .modules.settings.categories import CATEGORY_CONFIG

        @app.context_processor
        def inject_admin_context():
            return {
                'admin_username': session.get('admin_username'),
                'nav_categories': CATEGORY_CONFIG,
                'brand_name': app.config.get('BRAND_NAME', 'Portfolio Admin'),
            }

        app.extensions['portfolio_admin'] = self

        if app.config.get('BOOTSTRAP_ON_START'):
            self.bootstrap(app)

    def _apply_config(self, app):
        for key in dir(Config):
            if key.isupper():
                app.config.setdefault(key, getattr(Config, key))

        if not app.config.get('SECRET_KEY'):
            app.logger.warning('FLASK_SECRET_KEY is not set; sessions will not survive a restart')
            app.config['SECRET_KEY'] = secrets.token_hex(32)

        app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(hours=int(app.config['SESSION_LIFETIME_HOURS']))
        app.config['SESSION_COOKIE_HTTPONLY'] = True
        app.config['SESSION_COOKIE_SAMESITE'] = app.config.get('SESSION_COOKIE_SAMESITE') or 'Lax'
        secure = os.getenv('SESSION_COOKIE_SECURE')
        if secure:
            app.config['SESSION_COOKIE_SECURE'] = secure.lower() in ('true', '1', 'yes')
        else:
            app.config['SESSION_COOKIE_SECURE'] = not (app.debug or app.testing)

    def _register_modules(self, app):
        from .modules.auth import auth_bp
        from .modules.dashboard import dashboard_bp

        app.register_blueprint(auth_bp)
        app.register_blueprint(dashboard_bp)
        self._registered_modules.extend(['auth', 'dashboard'])

        if self.features.get('projects'):
            from .modules.projects import projects_bp
            app.register_blueprint(projects_bp)
            self._registered_modules.append('projects')

        if self.features.get('settings'):
            from .modules.settings import settings_bp
            app.register_blueprint(settings_bp)
            self._registered_modules.append('settings')

        if self.features.get('work_experience'):
            from .modules.work_experience import work_experience_bp
            app.register_blueprint(work_experience_bp)
            self._registered_modules.append('work_experience')

        if self.features.get('basic_info'):
            from .modules.basic_info import basic_info_bp
            app.register_blueprint(basic_info_bp)
            self._registered_modules.append('basic_info')

        if self.features.get('logs'):
            from .modules.logs import logs_bp
            app.register_blueprint(logs_bp)
            self._registered_modules.append('logs')

        if self.features.get('media'):
            from .modules.media import media_bp
            app.register_blueprint(media_bp)
            self._registered_modules.append('media')

    def bootstrap(self, app):
        """Create indexes and seed default categories"""
        from .modules.settings.database import CategoryDatabase

        with app.app_context():
            try:
                Database.ensure_indexes()
                created, _ = CategoryDatabase.init_defaults()
            except PyMongoError as e:
                app.logger.warning('Database bootstrap skipped: %s', e)
                return
            if created:
                LoggingService.log_system('info', 'Default categories created', {'created': created})

    def get_registered_modules(self):
        return list(self._registered_modules)


def create_app(config_overrides=None, mongo_client=None):
    """Application factory"""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    PortfolioAdmin(app, mongo_client=mongo_client)
    return app


__all__ = ['PortfolioAdmin', 'create_app']
