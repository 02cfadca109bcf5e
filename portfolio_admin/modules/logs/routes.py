"""
Log Routes
==========

Admin log viewer API plus public client-log ingestion at /api/log.
"""

import uuid

from flask import Response, current_app, jsonify, render_template, request

from . import logs_bp
from .ratelimit import RateLimiter
from ...core.config import get_config_value
from ...core.database import utcnow
from ...core.errors import RateLimitError, ValidationError, json_body
from ...core.logging_service import (
    LOG_CATEGORIES, LOG_LEVELS, LoggingService, console, format_log_line, get_client_ip,
)

CLIENT_LOG_LEVELS = ('error', 'warn', 'info', 'debug')
MAX_CLIENT_MESSAGE_LENGTH = 2000

_LIMITER_KEY = 'portfolio_admin.log_rate_limiter'


def get_rate_limiter():
    limiter = current_app.extensions.get(_LIMITER_KEY)
    if limiter is None:
        limiter = RateLimiter(int(get_config_value('LOG_RATE_LIMIT', 100)))
        current_app.extensions[_LIMITER_KEY] = limiter
    return limiter


def _int_arg(name, default, minimum=1):
    value = request.values.get(name)
    if value in (None, ''):
        return default
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {name}', {name: f'{name} must be a number'})
    if value < minimum:
        raise ValidationError(f'Invalid {name}', {name: f'{name} must be at least {minimum}'})
    return value


def _filters():
    return {
        'level': request.args.get('level') or None,
        'category': request.args.get('category') or None,
        'start_date': request.args.get('startDate') or None,
        'end_date': request.args.get('endDate') or None,
    }


# ===== Admin API =====

@logs_bp.route('/api/admin/logs')
def get_logs():
    """Filtered, paginated log entries, newest first"""
    result = LoggingService.query_logs(
        page=_int_arg('page', 1),
        limit=_int_arg('limit', 50),
        **_filters()
    )
    return jsonify(result)


@logs_bp.route('/api/admin/logs/export')
def export_logs():
    """Plain-text download of the filtered log entries"""
    lines = [format_log_line(entry) for entry in LoggingService.iter_logs(**_filters())]
    filename = f"logs-{utcnow().strftime('%Y-%m-%d')}.txt"
    return Response(
        '\n'.join(lines) + ('\n' if lines else ''),
        mimetype='text/plain',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )


@logs_bp.route('/api/admin/logs/cleanup', methods=['POST'])
def cleanup_logs():
    data = json_body()
    days = data.get('days', 30)
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise ValidationError('Invalid days', {'days': 'days must be a positive whole number'})

    deleted_count = LoggingService.cleanup_old_logs(days)
    return jsonify({'message': f'Deleted {deleted_count} log entries', 'deletedCount': deleted_count})


# ===== Public client logs =====

@logs_bp.route('/api/log', methods=['POST'])
def ingest_client_log():
    """Accept a log entry from browser code"""
    allowed, retry_after = get_rate_limiter().hit(get_client_ip())
    if not allowed:
        raise RateLimitError('Too many log requests', {'retryAfter': retry_after})

    correlation_id = request.headers.get('X-Correlation-Id') or str(uuid.uuid4())
    data = json_body()

    level = str(data.get('level') or 'info').lower()
    category = data.get('category')
    message = data.get('message')

    errors = {}
    if level not in CLIENT_LOG_LEVELS:
        errors['level'] = f"Level must be one of: {', '.join(CLIENT_LOG_LEVELS)}"
    if not category:
        errors['category'] = 'Category is required'
    elif category not in LOG_CATEGORIES:
        errors['category'] = f"Category must be one of: {', '.join(LOG_CATEGORIES)}"
    if not message:
        errors['message'] = 'Message is required'
    if errors:
        raise ValidationError('Invalid log entry', errors)

    message = str(message)[:MAX_CLIENT_MESSAGE_LENGTH]
    if category in ('auth', 'action'):
        # Only system entries keep the client's level
        level = 'info'
    if level == 'debug':
        # Debug output is not persisted
        console.debug('[client][%s] %s %s', category, message, correlation_id)
    else:
        LoggingService.log(level, category, message, data.get('details'), request_info={
            'correlationId': correlation_id,
            'source': 'client',
        })

    response = jsonify({'success': True, 'correlationId': correlation_id})
    response.headers['X-Correlation-Id'] = correlation_id
    return response


# ===== Pages =====

@logs_bp.route('/admin/logs')
def logs_page():
    return render_template('logs/logs.html', levels=LOG_LEVELS, categories=LOG_CATEGORIES)
