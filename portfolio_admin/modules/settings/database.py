"""
Category Settings Database
==========================

Category documents in MongoDB: one per category type, holding the display
title, description, enabled flag and colour palette.
"""

from bson import ObjectId
from pymongo import ReturnDocument

from ...core.config import Config
from ...core.database import Database, utcnow
from ...core.errors import NotFoundError, ValidationError
from .categories import (
    CATEGORY_TYPES, EDITABLE_FIELDS, default_category, default_palette_for,
    is_category_type, is_palette,
)


def _type_error(field='category'):
    return ValidationError('Invalid category', {
        field: f"Category must be one of: {', '.join(CATEGORY_TYPES)}"
    })


class CategoryDatabase:
    @staticmethod
    def _collection():
        return Database.collection(Config.CATEGORIES_COLLECTION)

    @staticmethod
    def get_all():
        return list(CategoryDatabase._collection().find().sort('category', 1))

    @staticmethod
    def get_by_type(category_type):
        return CategoryDatabase._collection().find_one({'category': category_type})

    @staticmethod
    def get_categories_map():
        """{type: document} for every category type, defaults filling the gaps"""
        stored = {doc['category']: doc for doc in CategoryDatabase.get_all()}
        return {t: stored.get(t) or default_category(t) for t in CATEGORY_TYPES}

    @staticmethod
    def details_for(category_type):
        if not is_category_type(category_type):
            return None
        return CategoryDatabase.get_by_type(category_type) or default_category(category_type)

    @staticmethod
    def clean_updates(updates, field_prefix=''):
        """Keep editable fields only, checking their types and palette names"""
        if not isinstance(updates, dict):
            raise ValidationError('Invalid category data', {field_prefix or 'updates': 'Expected an object'})

        cleaned = {}
        errors = {}
        for key in EDITABLE_FIELDS:
            if key not in updates:
                continue
            value = updates[key]
            if key in ('title', 'description'):
                if not isinstance(value, str) or not value.strip():
                    errors[field_prefix + key] = f'{key.capitalize()} must be a non-empty string'
                    continue
                value = value.strip()
            elif key == 'enabled':
                if not isinstance(value, bool):
                    errors[field_prefix + key] = 'Enabled must be true or false'
                    continue
            elif key == 'colorPalette' and not is_palette(value):
                errors[field_prefix + key] = 'Invalid color palette'
                continue
            cleaned[key] = value

        if errors:
            raise ValidationError('Invalid category data', errors)
        return cleaned

    @staticmethod
    def save_all(categories):
        """Bulk upsert from {type: {title, description, enabled, colorPalette}}"""
        if not isinstance(categories, dict) or not categories:
            raise ValidationError('Invalid category data', {'categories': 'Categories are required'})

        # Validate everything before the first write
        prepared = {}
        for category_type, data in categories.items():
            if not is_category_type(category_type):
                raise _type_error(category_type)
            prepared[category_type] = CategoryDatabase.clean_updates(data, f'{category_type}.')

        now = utcnow()
        for category_type, fields in prepared.items():
            defaults = default_category(category_type)
            on_insert = {k: v for k, v in defaults.items() if k not in fields and k != '_id'}
            on_insert['createdAt'] = now
            CategoryDatabase._collection().update_one(
                {'category': category_type},
                {'$set': dict(fields, updatedAt=now), '$setOnInsert': on_insert},
                upsert=True,
            )

        return CategoryDatabase.get_categories_map()

    @staticmethod
    def update(category_type, updates):
        if not is_category_type(category_type):
            raise _type_error('categoryType')

        fields = CategoryDatabase.clean_updates(updates)
        if not fields:
            raise ValidationError('No valid fields to update', {
                'updates': f"Allowed fields: {', '.join(EDITABLE_FIELDS)}"
            })

        fields['updatedAt'] = utcnow()
        updated = CategoryDatabase._collection().find_one_and_update(
            {'category': category_type},
            {'$set': fields},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError('Category')
        return updated

    @staticmethod
    def init_defaults():
        """Seed missing categories and fill in missing palettes.

        Returns:
            (created types, types whose palette was filled in)
        """
        created, updated = [], []
        now = utcnow()

        for category_type in CATEGORY_TYPES:
            existing = CategoryDatabase.get_by_type(category_type)
            if not existing:
                doc = default_category(category_type)
                doc.pop('_id')
                doc.update(createdAt=now, updatedAt=now)
                CategoryDatabase._collection().insert_one(doc)
                created.append(category_type)
            elif not existing.get('colorPalette'):
                CategoryDatabase._collection().update_one(
                    {'_id': existing['_id']},
                    {'$set': {'colorPalette': default_palette_for(category_type), 'updatedAt': now}},
                )
                updated.append(category_type)

        return created, updated

    # ===== Category references =====

    @staticmethod
    def resolve_reference(value):
        """Turn a type string, a category id or a populated category object into the type string"""
        if isinstance(value, dict):
            value = value.get('category') or value.get('_id')

        if is_category_type(value):
            return value

        if isinstance(value, ObjectId) or (isinstance(value, str) and ObjectId.is_valid(value)):
            doc = CategoryDatabase._collection().find_one({'_id': ObjectId(str(value))})
            if doc and is_category_type(doc.get('category')):
                return doc['category']

        raise _type_error()

    @staticmethod
    def reference_values(category_type):
        """Every stored form that refers to this category: the type, the id and its hex"""
        values = [category_type]
        doc = CategoryDatabase.get_by_type(category_type)
        if doc:
            values.extend([doc['_id'], str(doc['_id'])])
        return values

    @staticmethod
    def reference_filter(category_type):
        return {'category': {'$in': CategoryDatabase.reference_values(category_type)}}
