import threading
from datetime import date, datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app
from flask.json.provider import DefaultJSONProvider
from pymongo import ASCENDING, DESCENDING, MongoClient

from .config import Config, get_config_value
from .errors import NotFoundError

_CLIENT_KEY = 'portfolio_admin.mongo_client'


def utcnow():
    """Naive UTC timestamp, the form MongoDB hands back"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Database:
    # Guards lazy creation of the pooled client
    _lock = threading.Lock()

    @staticmethod
    def init_app(app, client=None):
        """Attach a MongoDB client to the app. Without one, it is created on first use."""
        app.extensions[_CLIENT_KEY] = client

    @classmethod
    def get_client(cls):
        client = current_app.extensions.get(_CLIENT_KEY)
        if client is not None:
            return client

        with cls._lock:
            client = current_app.extensions.get(_CLIENT_KEY)
            if client is None:
                client = MongoClient(
                    get_config_value('MONGODB_URI'),
                    serverSelectionTimeoutMS=10000,
                    socketTimeoutMS=45000,
                    connectTimeoutMS=10000,
                    maxPoolSize=10,
                )
                current_app.extensions[_CLIENT_KEY] = client
                current_app.logger.info('MongoDB client created')
        return client

    @classmethod
    def get_db(cls):
        return cls.get_client()[get_config_value('MONGODB_DB')]

    @classmethod
    def collection(cls, name):
        return cls.get_db()[name]

    @classmethod
    def ensure_indexes(cls):
        """Create the indexes every collection relies on"""
        db = cls.get_db()

        db[Config.ADMINS_COLLECTION].create_index('username', unique=True)

        categories = db[Config.CATEGORIES_COLLECTION]
        categories.create_index('category', unique=True)
        categories.create_index('enabled')

        projects = db[Config.PROJECTS_COLLECTION]
        projects.create_index('category')
        projects.create_index([('createdAt', DESCENDING)])

        experiences = db[Config.WORK_EXPERIENCE_COLLECTION]
        experiences.create_index([('startDate', DESCENDING)])
        experiences.create_index('companyName')

        logs = db[Config.LOGS_COLLECTION]
        logs.create_index([('timestamp', DESCENDING)])
        logs.create_index('level')
        logs.create_index('category')
        logs.create_index('userId')

        db[Config.LOGIN_ATTEMPTS_COLLECTION].create_index([('key', ASCENDING)], unique=True)


def to_object_id(value, resource='Resource'):
    """Parse an id from a URL or payload; malformed ids are treated as missing records"""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundError(resource)


def serialize_doc(doc):
    """Copy of a document with ObjectIds as strings, for templates"""
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, dict):
        return {key: serialize_doc(value) for key, value in doc.items()}
    if isinstance(doc, list):
        return [serialize_doc(value) for value in doc]
    return doc


class MongoJSONProvider(DefaultJSONProvider):
    """JSON provider that understands ObjectId and renders datetimes as ISO 8601"""

    @staticmethod
    def default(o):
        if isinstance(o, ObjectId):
            return str(o)
        if isinstance(o, datetime):
            if o.tzinfo is None:
                return o.isoformat() + 'Z'
            return o.isoformat()
        if isinstance(o, date):
            return o.isoformat()
        return DefaultJSONProvider.default(o)
