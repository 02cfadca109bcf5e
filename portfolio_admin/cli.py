"""
Maintenance Commands
====================

Flask CLI commands for setting up and repairing the portfolio database:

    flask --app app create-admin --username admin
    flask --app app init-categories
    flask --app app normalize-categories
    flask --app app cleanup-logs --days 30
    flask --app app list-blobs --thumbnails
"""

import click
from flask.cli import with_appcontext

from .core.database import Database
from .core.logging_service import LoggingService
from .core.storage import list_blobs


@click.command('create-admin')
@click.option('--username', default='admin', show_default=True)
@click.password_option()
@with_appcontext
def create_admin_command(username, password):
    """Create an admin account"""
    from .modules.auth.database import AdminDatabase

    admin_id = AdminDatabase.create_admin(username, password)
    LoggingService.log_system('info', 'Admin account created', {'username': username})
    click.echo(f'Created admin {username} ({admin_id})')


@click.command('init-categories')
@with_appcontext
def init_categories_command():
    """Create indexes, seed missing categories and fill missing palettes"""
    from .modules.settings.database import CategoryDatabase

    Database.ensure_indexes()
    created, updated = CategoryDatabase.init_defaults()
    click.echo(f"Created: {', '.join(created) or 'none'}")
    click.echo(f"Palette filled: {', '.join(updated) or 'none'}")


@click.command('normalize-categories')
@with_appcontext
def normalize_categories_command():
    """Rewrite project category references stored as ids to type strings"""
    from .modules.projects.database import ProjectDatabase

    modified = ProjectDatabase.normalize_category_references()
    LoggingService.log_system('info', 'Project category references normalized', {'modified': modified})
    click.echo(f'Updated {modified} project(s)')


@click.command('cleanup-logs')
@click.option('--days', default=30, show_default=True, type=click.IntRange(min=1))
@with_appcontext
def cleanup_logs_command(days):
    """Delete log entries older than DAYS"""
    deleted = LoggingService.cleanup_old_logs(days)
    click.echo(f'Deleted {deleted} log entries')


@click.command('list-blobs')
@click.option('--thumbnails', is_flag=True, help='List the thumbnails container')
@with_appcontext
def list_blobs_command(thumbnails):
    """List blob names in the originals (or thumbnails) container"""
    names = list_blobs(thumbnail=thumbnails)
    for name in names:
        click.echo(name)
    click.echo(f'{len(names)} blob(s)')


def register_commands(app):
    for command in (create_admin_command, init_categories_command, normalize_categories_command,
                    cleanup_logs_command, list_blobs_command):
        app.cli.add_command(command)
