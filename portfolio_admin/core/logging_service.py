"""
Centralized logging service for the portfolio admin console.
Provides structured logging with database storage and easy integration.

Entries are buffered per application and written with insert_many when the
buffer reaches LOG_BUFFER_SIZE and at the end of every app context, so a log
line does not cost a database round-trip. If the database is unavailable the
entries go to the process logger instead.
"""

import logging
import math
import threading
import traceback
from datetime import date, datetime, timedelta, timezone

from bson import ObjectId
from flask import current_app, has_app_context, has_request_context, request, session

from .config import Config, get_config_value
from .database import Database, utcnow
from .errors import ValidationError

LOG_LEVELS = ('info', 'warn', 'error')
LOG_CATEGORIES = ('auth', 'action', 'system')

_BUFFER_KEY = 'portfolio_admin.log_buffer'
_PYTHON_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'error': logging.ERROR,
}

console = logging.getLogger('portfolio_admin')


def _clean_value(value):
    """Coerce detail values into something BSON can store"""
    if value is None or isinstance(value, (str, int, float, bool, datetime)):
        return value
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _clean_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_clean_value(v) for v in value]
    if isinstance(value, BaseException):
        return f'{type(value).__name__}: {value}'
    return str(value)


def parse_datetime(value, field, end_of_day=False):
    """Parse an ISO 8601 date or datetime from a query string into naive UTC"""
    if value in (None, ''):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except (ValueError, AttributeError):
        raise ValidationError('Invalid date filter', {field: f'{field} must be an ISO 8601 date'})

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    # A bare date as the upper bound covers the whole day
    if end_of_day and len(value.strip()) == 10:
        parsed = parsed + timedelta(days=1) - timedelta(microseconds=1)
    return parsed


def get_client_ip():
    """First address in X-Forwarded-For, else the socket peer"""
    ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
    if ip_address and ',' in ip_address:
        ip_address = ip_address.split(',')[0].strip()
    return ip_address or 'unknown'


def format_log_line(entry):
    timestamp = entry.get('timestamp')
    if isinstance(timestamp, datetime):
        timestamp = timestamp.isoformat() + 'Z'
    return f"[{timestamp}] {str(entry.get('level', '')).upper()} [{entry.get('category')}]: {entry.get('message')}"


class LoggingService:
    """Centralized logging service for application-wide logging"""

    _lock = threading.Lock()

    @staticmethod
    def init_app(app):
        app.extensions[_BUFFER_KEY] = []

        @app.teardown_appcontext
        def flush_log_buffer(exc):
            LoggingService.flush()

    @staticmethod
    def _get_buffer():
        return current_app.extensions.setdefault(_BUFFER_KEY, [])

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return {}

        return {
            'ip': get_client_ip(),
            'userAgent': request.headers.get('User-Agent') or 'unknown',
            'path': request.path,
            'method': request.method,
        }

    @staticmethod
    def _get_session_identity():
        if not has_request_context():
            return None, None
        return session.get('admin_id'), session.get('admin_username')

    @staticmethod
    def _write_to_console(entry):
        level = _PYTHON_LEVELS.get(entry.get('level'), logging.INFO)
        console.log(level, '[%s][%s] %s %s', entry.get('level'), entry.get('category'),
                    entry.get('message'), entry.get('details') or '')

    @staticmethod
    def log(level, category, message, details=None, user_id=None, username=None, request_info=None):
        """
        Log a message to the database

        Args:
            level (str): info, warn or error
            category (str): auth, action or system
            message (str): Main log message
            details (dict): Free-form details
            user_id (str): Optional admin id, defaults to the session's
            username (str): Optional admin username, defaults to the session's
            request_info (dict): Overrides for ip, userAgent, path, method, correlationId
        """
        session_id, session_username = LoggingService._get_session_identity()

        entry = {
            'timestamp': utcnow(),
            'level': (level or 'info').lower(),
            'category': category,
            'message': message,
            'details': _clean_value(details) if details is not None else {},
            'userId': user_id or session_id,
            'username': username or session_username,
        }
        entry.update(LoggingService._get_request_context())
        if request_info:
            entry.update({k: _clean_value(v) for k, v in request_info.items() if v is not None})

        if not has_app_context():
            LoggingService._write_to_console(entry)
            return

        with LoggingService._lock:
            buffer = LoggingService._get_buffer()
            buffer.append(entry)
            should_flush = len(buffer) >= int(get_config_value('LOG_BUFFER_SIZE', 1) or 1)

        if should_flush:
            LoggingService.flush()

    @staticmethod
    def flush():
        """Write buffered entries; returns how many were persisted"""
        if not has_app_context():
            return 0

        with LoggingService._lock:
            buffer = LoggingService._get_buffer()
            entries = list(buffer)
            del buffer[:]

        if not entries:
            return 0

        try:
            Database.collection(Config.LOGS_COLLECTION).insert_many(entries)
            return len(entries)
        except Exception as e:
            # Fallback to console logging if database fails
            for entry in entries:
                LoggingService._write_to_console(entry)
            console.error('Logging service error: %s', e)
            return 0

    @staticmethod
    def log_auth(message, details=None, request_info=None, username=None):
        """Log authentication events (login, logout, lockouts)"""
        LoggingService.log('info', 'auth', message, details, username=username, request_info=request_info)

    @staticmethod
    def log_action(message, details=None, request_info=None):
        """Log admin actions (create, update, delete)"""
        LoggingService.log('info', 'action', message, details, request_info=request_info)

    @staticmethod
    def log_system(level, message, details=None, request_info=None):
        """Log system events"""
        LoggingService.log(level, 'system', message, details, request_info=request_info)

    @staticmethod
    def log_error(category, message, error, details=None, request_info=None):
        """Log error with full traceback"""
        error_details = {
            'error': str(error),
            'errorType': type(error).__name__,
            'stack': ''.join(traceback.format_exception(type(error), error, error.__traceback__)),
        }
        if details:
            error_details['additional'] = details

        LoggingService.log('error', category, message, error_details, request_info=request_info)

    # ===== Log viewer =====

    @staticmethod
    def build_query(level=None, category=None, start_date=None, end_date=None):
        """Validate viewer filters and build the MongoDB query"""
        query = {}

        if level:
            if level not in LOG_LEVELS:
                raise ValidationError('Invalid log level', {
                    'level': f"Level must be one of: {', '.join(LOG_LEVELS)}"
                })
            query['level'] = level

        if category:
            if category not in LOG_CATEGORIES:
                raise ValidationError('Invalid log category', {
                    'category': f"Category must be one of: {', '.join(LOG_CATEGORIES)}"
                })
            query['category'] = category

        start = parse_datetime(start_date, 'startDate')
        end = parse_datetime(end_date, 'endDate', end_of_day=True)
        if start and end and start > end:
            raise ValidationError('Invalid date range', {'startDate': 'startDate must be before endDate'})

        if start or end:
            query['timestamp'] = {}
            if start:
                query['timestamp']['$gte'] = start
            if end:
                query['timestamp']['$lte'] = end

        return query

    @staticmethod
    def query_logs(level=None, category=None, start_date=None, end_date=None, page=1, limit=50):
        """Return one page of log entries, newest first, with pagination info"""
        query = LoggingService.build_query(level, category, start_date, end_date)

        page = max(1, int(page or 1))
        limit = min(max(1, int(limit or 50)), 200)

        # Make sure the viewer sees this request's own entries
        LoggingService.flush()

        logs = Database.collection(Config.LOGS_COLLECTION)
        total = logs.count_documents(query)
        cursor = logs.find(query).sort('timestamp', -1).skip((page - 1) * limit).limit(limit)

        return {
            'logs': list(cursor),
            'pagination': {
                'page': page,
                'limit': limit,
                'total': total,
                'totalPages': math.ceil(total / limit) if total else 0,
            },
        }

    @staticmethod
    def iter_logs(level=None, category=None, start_date=None, end_date=None):
        """All matching entries, newest first (used by the export)"""
        query = LoggingService.build_query(level, category, start_date, end_date)
        LoggingService.flush()
        return Database.collection(Config.LOGS_COLLECTION).find(query).sort('timestamp', -1)

    @staticmethod
    def count_recent_errors(hours=24):
        cutoff = utcnow() - timedelta(hours=hours)
        LoggingService.flush()
        return Database.collection(Config.LOGS_COLLECTION).count_documents({
            'level': 'error',
            'timestamp': {'$gt': cutoff},
        })

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        cutoff = utcnow() - timedelta(days=days_to_keep)
        LoggingService.flush()

        result = Database.collection(Config.LOGS_COLLECTION).delete_many({'timestamp': {'$lt': cutoff}})
        deleted_count = result.deleted_count

        LoggingService.log_system('info', f'Cleaned up {deleted_count} old log entries', {
            'daysToKeep': days_to_keep,
        })
        return deleted_count
