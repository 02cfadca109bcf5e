from pydantic import ValidationError as PydanticValidationError
from pymongo import DESCENDING, ReturnDocument

from ...core.config import Config
from ...core.database import Database, to_object_id, utcnow
from ...core.errors import NotFoundError, validation_error_from
from .schemas import WorkExperience

_WRITABLE_FIELDS = ('companyName', 'position', 'startDate', 'endDate', 'isPresent',
                    'description', 'website', 'logo')


def validate_experience(data):
    try:
        return WorkExperience.model_validate(data).to_document()
    except PydanticValidationError as e:
        raise validation_error_from(e, 'Work experience validation failed')


class WorkExperienceDatabase:
    @staticmethod
    def _collection():
        return Database.collection(Config.WORK_EXPERIENCE_COLLECTION)

    @staticmethod
    def get_all():
        """Newest position first"""
        return list(WorkExperienceDatabase._collection().find().sort('startDate', DESCENDING))

    @staticmethod
    def get(experience_id):
        experience = WorkExperienceDatabase._collection().find_one(
            {'_id': to_object_id(experience_id, 'Work experience')}
        )
        if not experience:
            raise NotFoundError('Work experience')
        return experience

    @staticmethod
    def count():
        return WorkExperienceDatabase._collection().count_documents({})

    @staticmethod
    def create(data):
        document = validate_experience(data)
        now = utcnow()
        document.update(createdAt=now, updatedAt=now)
        result = WorkExperienceDatabase._collection().insert_one(document)
        document['_id'] = result.inserted_id
        return document

    @staticmethod
    def update(experience_id, changes):
        """Merge changes onto the stored entry and re-validate; returns (updated, previous)"""
        current = WorkExperienceDatabase.get(experience_id)

        merged = {key: current.get(key) for key in _WRITABLE_FIELDS}
        merged.update({key: value for key, value in changes.items() if key in _WRITABLE_FIELDS})
        document = validate_experience(merged)
        document['updatedAt'] = utcnow()

        updated = WorkExperienceDatabase._collection().find_one_and_update(
            {'_id': current['_id']},
            {'$set': document},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError('Work experience')
        return updated, current

    @staticmethod
    def delete(experience_id):
        """Delete an entry, returning the removed document"""
        experience = WorkExperienceDatabase._collection().find_one_and_delete(
            {'_id': to_object_id(experience_id, 'Work experience')}
        )
        if not experience:
            raise NotFoundError('Work experience')
        return experience
