import math
from datetime import timedelta

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from ...core.config import Config, get_config_value
from ...core.database import Database, to_object_id, utcnow
from ...core.errors import AccountLockedError, ValidationError


class AdminDatabase:
    @staticmethod
    def _collection():
        return Database.collection(Config.ADMINS_COLLECTION)

    @staticmethod
    def _hash_password(password):
        """Salted password hash (werkzeug scrypt/pbkdf2)"""
        return generate_password_hash(password)

    @staticmethod
    def _verify_password(password, password_hash):
        if not password_hash:
            return False
        return check_password_hash(password_hash, password)

    @staticmethod
    def get_by_username(username):
        return AdminDatabase._collection().find_one({'username': username})

    @staticmethod
    def get_by_id(admin_id):
        return AdminDatabase._collection().find_one({'_id': to_object_id(admin_id, 'Admin')})

    @staticmethod
    def count():
        return AdminDatabase._collection().count_documents({})

    @staticmethod
    def create_admin(username, password):
        """Create a new admin, returns the inserted id"""
        username = (username or '').strip()
        if not username or not password:
            raise ValidationError('Username and password are required')

        now = utcnow()
        try:
            result = AdminDatabase._collection().insert_one({
                'username': username,
                'password': AdminDatabase._hash_password(password),
                'createdAt': now,
                'updatedAt': now,
                'lastLogin': None,
            })
        except DuplicateKeyError:
            raise ValidationError('Admin already exists', {'username': 'Username is already taken'})
        return result.inserted_id

    @staticmethod
    def verify_credentials(username, password):
        """Verify admin login credentials, recording the login on success"""
        admin = AdminDatabase.get_by_username(username)
        if not admin or not AdminDatabase._verify_password(password, admin.get('password')):
            return None

        AdminDatabase._collection().update_one({'_id': admin['_id']}, {'$set': {'lastLogin': utcnow()}})
        return admin

    @staticmethod
    def check_password(admin_id, password):
        admin = AdminDatabase.get_by_id(admin_id)
        return bool(admin) and AdminDatabase._verify_password(password, admin.get('password'))

    @staticmethod
    def set_password(admin_id, new_password):
        result = AdminDatabase._collection().update_one(
            {'_id': to_object_id(admin_id, 'Admin')},
            {'$set': {'password': AdminDatabase._hash_password(new_password), 'updatedAt': utcnow()}},
        )
        return result.modified_count > 0


class LoginAttempts:
    """Failed-login counters keyed by username + IP"""

    @staticmethod
    def _collection():
        return Database.collection(Config.LOGIN_ATTEMPTS_COLLECTION)

    @staticmethod
    def _key(username, ip):
        return f"{(username or '').strip().lower()}|{ip or 'unknown'}"

    @staticmethod
    def check_locked(username, ip):
        """Raise AccountLockedError while the key is locked"""
        doc = LoginAttempts._collection().find_one({'key': LoginAttempts._key(username, ip)})
        locked_until = doc.get('lockedUntil') if doc else None
        now = utcnow()
        if locked_until and locked_until > now:
            raise AccountLockedError(math.ceil((locked_until - now).total_seconds()))

    @staticmethod
    def record_failure(username, ip):
        """Count a failure; returns the lock expiry when this failure triggered a lock"""
        max_attempts = int(get_config_value('LOGIN_MAX_ATTEMPTS', 5))
        lockout = timedelta(minutes=int(get_config_value('LOGIN_LOCKOUT_MINUTES', 5)))
        key = LoginAttempts._key(username, ip)
        now = utcnow()

        doc = LoginAttempts._collection().find_one_and_update(
            {'key': key},
            {'$inc': {'failures': 1}, '$set': {'lastFailure': now}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

        if doc['failures'] >= max_attempts:
            locked_until = now + lockout
            LoginAttempts._collection().update_one(
                {'key': key},
                {'$set': {'lockedUntil': locked_until, 'failures': 0}},
            )
            return doc['failures'], locked_until
        return doc['failures'], None

    @staticmethod
    def clear(username, ip):
        LoginAttempts._collection().delete_one({'key': LoginAttempts._key(username, ip)})
