from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument

from ...core.config import Config, get_config_value
from ...core.database import Database, utcnow
from ...core.errors import validation_error_from
from .schemas import BasicInfo


class BasicInfoDatabase:
    """The single basic_info document"""

    @staticmethod
    def _collection():
        return Database.collection(Config.BASIC_INFO_COLLECTION)

    @staticmethod
    def get():
        """Stored profile, or the configured defaults when nothing is saved yet"""
        info = BasicInfoDatabase._collection().find_one({})
        if info:
            return info
        return dict(get_config_value('BASIC_INFO_DEFAULTS') or {})

    @staticmethod
    def save(data):
        try:
            fields = BasicInfo.model_validate(data).model_dump(by_alias=True)
        except PydanticValidationError as e:
            raise validation_error_from(e, 'All fields are required')

        fields['updatedAt'] = utcnow()
        return BasicInfoDatabase._collection().find_one_and_update(
            {},
            {'$set': fields},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    @staticmethod
    def set_profile_picture(picture):
        """Store the new picture record, returning the one it replaced"""
        previous = BasicInfoDatabase._collection().find_one_and_update(
            {},
            {'$set': {'profilePicture': picture, 'updatedAt': utcnow()}},
            upsert=True,
            return_document=ReturnDocument.BEFORE,
        )
        return (previous or {}).get('profilePicture')

    @staticmethod
    def clear_profile_picture():
        previous = BasicInfoDatabase._collection().find_one_and_update(
            {},
            {'$unset': {'profilePicture': ''}, '$set': {'updatedAt': utcnow()}},
            return_document=ReturnDocument.BEFORE,
        )
        return (previous or {}).get('profilePicture')
