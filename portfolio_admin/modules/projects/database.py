"""
Project Database Helpers
========================
"""

from pydantic import ValidationError as PydanticValidationError
from pymongo import DESCENDING, ReturnDocument

from ...core.config import Config
from ...core.database import Database, to_object_id, utcnow
from ...core.errors import NotFoundError, ValidationError, validation_error_from
from ..settings.database import CategoryDatabase
from .schemas import Project

# Fields a client may set; everything else on the document is server-managed
_WRITABLE_FIELDS = ('title', 'description', 'category', 'image', 'link', 'tags', 'skills')


def validate_project(data):
    """Resolve the category reference and validate the whole record"""
    data = dict(data)
    if data.get('category') is not None:
        data['category'] = CategoryDatabase.resolve_reference(data['category'])
    try:
        return Project.model_validate(data).to_document()
    except PydanticValidationError as e:
        raise validation_error_from(e, 'Project validation failed')


class ProjectDatabase:
    @staticmethod
    def _collection():
        return Database.collection(Config.PROJECTS_COLLECTION)

    @staticmethod
    def with_category_details(project):
        """Attach the resolved category document as categoryDetails"""
        if project is None:
            return None
        try:
            category = CategoryDatabase.resolve_reference(project.get('category'))
        except ValidationError:
            # Dangling legacy reference
            category = None
        project['categoryDetails'] = CategoryDatabase.details_for(category) if category else None
        return project

    @staticmethod
    def get_all(category=None):
        """Projects newest first, optionally for one category (either stored form)"""
        query = CategoryDatabase.reference_filter(category) if category else {}
        cursor = ProjectDatabase._collection().find(query).sort('createdAt', DESCENDING)
        return [ProjectDatabase.with_category_details(p) for p in cursor]

    @staticmethod
    def get(project_id):
        project = ProjectDatabase._collection().find_one({'_id': to_object_id(project_id, 'Project')})
        if not project:
            raise NotFoundError('Project')
        return ProjectDatabase.with_category_details(project)

    @staticmethod
    def create(data, created_by=None):
        document = validate_project(data)
        now = utcnow()
        document.update({
            'createdBy': to_object_id(created_by, 'Admin') if created_by else None,
            'createdAt': now,
            'updatedAt': now,
        })
        result = ProjectDatabase._collection().insert_one(document)
        document['_id'] = result.inserted_id
        return ProjectDatabase.with_category_details(document)

    @staticmethod
    def update(project_id, changes):
        """Merge changes onto the stored record and re-validate it as a whole"""
        object_id = to_object_id(project_id, 'Project')
        current = ProjectDatabase._collection().find_one({'_id': object_id})
        if not current:
            raise NotFoundError('Project')

        merged = {key: current.get(key) for key in _WRITABLE_FIELDS}
        merged.update({key: value for key, value in changes.items() if key in _WRITABLE_FIELDS})
        document = validate_project(merged)
        document['updatedAt'] = utcnow()

        updated = ProjectDatabase._collection().find_one_and_update(
            {'_id': object_id},
            {'$set': document},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError('Project')
        return ProjectDatabase.with_category_details(updated), current

    @staticmethod
    def delete(project_id):
        """Delete a project, returning the removed document"""
        project = ProjectDatabase._collection().find_one_and_delete({'_id': to_object_id(project_id, 'Project')})
        if not project:
            raise NotFoundError('Project')
        return project

    # ===== Category level =====

    @staticmethod
    def find_by_category(category_type):
        return list(ProjectDatabase._collection().find(CategoryDatabase.reference_filter(category_type)))

    @staticmethod
    def delete_by_category(category_type):
        return ProjectDatabase._collection().delete_many(
            CategoryDatabase.reference_filter(category_type)
        ).deleted_count

    @staticmethod
    def count_by_category(category_type):
        return ProjectDatabase._collection().count_documents(CategoryDatabase.reference_filter(category_type))

    @staticmethod
    def normalize_category_references():
        """Rewrite legacy ObjectId category references to type strings"""
        modified = 0
        for doc in CategoryDatabase.get_all():
            result = ProjectDatabase._collection().update_many(
                {'category': {'$in': [doc['_id'], str(doc['_id'])]}},
                {'$set': {'category': doc['category'], 'updatedAt': utcnow()}},
            )
            modified += result.modified_count
        return modified
