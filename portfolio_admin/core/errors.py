"""
Error Handling
==============

Exception hierarchy raised by the admin modules and the handlers that turn
them into the uniform JSON error envelope:

    {"error": "...", "message": "...", "code": "...", "details": {...}, "timestamp": "..."}

Errors are caught at the handler boundary, logged with request context and
never retried server-side.
"""

from datetime import datetime, timezone

from flask import jsonify, render_template, request
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException


class PortfolioError(Exception):
    """Base class for errors that map onto an HTTP status"""
    status = 500
    code = 'INTERNAL_SERVER_ERROR'

    def __init__(self, message=None, details=None):
        super().__init__(message or self.default_message())
        self.message = message or self.default_message()
        self.details = details

    def default_message(self):
        return 'Internal server error'


class ValidationError(PortfolioError):
    status = 400
    code = 'VALIDATION_ERROR'

    def default_message(self):
        return 'Validation failed'


class AuthenticationError(PortfolioError):
    status = 401
    code = 'AUTHENTICATION_ERROR'

    def default_message(self):
        return 'Unauthorized'


class AccountLockedError(PortfolioError):
    status = 429
    code = 'ACCOUNT_LOCKED'

    def __init__(self, retry_after, message=None):
        super().__init__(message, {'retryAfter': retry_after})
        self.retry_after = retry_after

    def default_message(self):
        return 'Too many failed login attempts. Please try again later.'


class NotFoundError(PortfolioError):
    status = 404
    code = 'NOT_FOUND'

    def __init__(self, resource='Resource', details=None):
        self.resource = resource
        super().__init__(f'{resource} not found', details)


class RateLimitError(PortfolioError):
    status = 429
    code = 'RATE_LIMITED'

    def default_message(self):
        return 'Rate limit exceeded'


class DatabaseError(PortfolioError):
    status = 500
    code = 'DATABASE_ERROR'

    def default_message(self):
        return 'Database operation failed'


class StorageError(PortfolioError):
    status = 502
    code = 'STORAGE_ERROR'

    def default_message(self):
        return 'Blob storage operation failed'


# ===== Formatting =====

_FIELD_LABELS = {
    'title': 'Title',
    'description': 'Description',
    'category': 'Category',
    'tags': 'Tag',
    'skills': 'Skill',
    'link': 'Link',
    'companyName': 'Company name',
    'position': 'Position',
    'startDate': 'Start date',
    'endDate': 'End date',
    'website': 'Website',
    'name': 'Name',
    'yearsOfExperience': 'Years of experience',
    'phone': 'Phone',
    'email': 'Email',
    'username': 'Username',
    'password': 'Password',
    'colorPalette': 'Color palette',
}


def _error_message(label, error):
    error_type = error.get('type', '')
    ctx = error.get('ctx') or {}

    if error_type == 'missing':
        return f'{label} is required'
    if error_type == 'string_too_long':
        return f"{label} must be at most {ctx.get('max_length')} characters"
    if error_type == 'string_too_short':
        if ctx.get('min_length') == 1:
            return f'{label} is required'
        return f"{label} must be at least {ctx.get('min_length')} characters"
    if error_type == 'literal_error':
        return f"{label} must be one of: {ctx.get('expected')}"
    if error_type == 'value_error':
        # Raised by model validators: "Value error, <message>"
        return str(ctx.get('error') or error.get('msg', ''))
    return f"{label}: {error.get('msg', 'invalid value')}"


def format_validation_errors(exc):
    """Convert a pydantic ValidationError into {field: message}"""
    fields = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get('loc', ()) if not isinstance(part, int)]
        field = loc[0] if loc else '__root__'
        label = _FIELD_LABELS.get(field, field)
        fields.setdefault(field, _error_message(label, error))
    return fields


def validation_error_from(exc, message='Validation failed'):
    """Wrap a pydantic ValidationError into our ValidationError"""
    return ValidationError(message, format_validation_errors(exc))


def format_error(error, debug=False):
    """Build the JSON error envelope for any exception"""
    if isinstance(error, PortfolioError):
        status, code, message, details = error.status, error.code, error.message, error.details
    elif isinstance(error, HTTPException):
        status = error.code or 500
        code = (error.name or 'HTTP_ERROR').upper().replace(' ', '_')
        message, details = error.description or error.name, None
    else:
        status, code, details = 500, 'INTERNAL_SERVER_ERROR', None
        message = str(error) if debug else 'An unexpected error occurred'

    body = {
        'error': message,
        'message': message,
        'code': code,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }
    if details:
        body['details'] = details
    return body, status


def json_body():
    """The request's JSON object, or {} when there is no JSON body"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Invalid request body', {'body': 'Expected a JSON object'})
    return data


def _wants_json():
    return request.path.startswith('/api/') or request.is_json


def register_error_handlers(app):
    """Install the handler-boundary error handling on the app"""
    from .logging_service import LoggingService

    @app.errorhandler(PortfolioError)
    def handle_portfolio_error(error):
        body, status = format_error(error)
        if status >= 500:
            LoggingService.log_error('system', error.code, error, details={'status': status})
        elif status not in (401, 429):
            # Auth failures and lockouts are logged by the auth module; rate limits are not logged
            LoggingService.log_system('warn', f'{error.code}: {error.message}', {
                'status': status,
                'details': error.details,
            })
        response = jsonify(body)
        if isinstance(error.details, dict) and 'retryAfter' in error.details:
            response.headers['Retry-After'] = str(error.details['retryAfter'])
        if _wants_json():
            return response, status
        return render_template('dashboard/error.html', error=body, status=status), status

    @app.errorhandler(PyMongoError)
    def handle_database_error(error):
        app.logger.error('Database error on %s %s: %s', request.method, request.path, error)
        return handle_portfolio_error(DatabaseError(details={'error': type(error).__name__}))

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if not _wants_json():
            return error
        body, status = format_error(error)
        return jsonify(body), status

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        LoggingService.log_error('system', 'INTERNAL_SERVER_ERROR', error)
        app.logger.exception('Unhandled error on %s %s', request.method, request.path)
        body, status = format_error(error, debug=app.debug)
        if _wants_json():
            return jsonify(body), status
        return render_template('dashboard/error.html', error=body, status=status), status
