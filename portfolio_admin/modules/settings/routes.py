"""
Settings Admin Routes
=====================

Category settings API and page.
"""

from flask import jsonify, render_template

from . import settings_bp
from .categories import CATEGORY_TYPES, COLOR_PALETTES
from .database import CategoryDatabase
from ...core.errors import ValidationError, json_body
from ...core.logging_service import LoggingService
from ...core.storage import discard_image


def _category_type_from(data):
    category_type = data.get('categoryType')
    if not category_type:
        raise ValidationError('Category type is required', {'categoryType': 'Category type is required'})
    if category_type not in CATEGORY_TYPES:
        raise ValidationError('Invalid category type', {
            'categoryType': f"Category must be one of: {', '.join(CATEGORY_TYPES)}"
        })
    return category_type


@settings_bp.route('/api/admin/settings/categories', methods=['GET'])
def get_categories():
    return jsonify({'categories': CategoryDatabase.get_categories_map()})


@settings_bp.route('/api/admin/settings/categories', methods=['POST'])
def save_categories():
    """Bulk upsert of category settings"""
    data = json_body()
    categories = CategoryDatabase.save_all(data.get('categories'))

    LoggingService.log_action('Category settings saved', {
        'categories': sorted(data['categories'].keys()),
    })
    return jsonify({'message': 'Categories updated successfully', 'categories': categories})


@settings_bp.route('/api/admin/settings/categories', methods=['PATCH'])
def update_category():
    data = json_body()
    category_type = _category_type_from(data)

    category = CategoryDatabase.update(category_type, data.get('updates') or {})

    LoggingService.log_action('Category updated', {
        'category': category_type,
        'fields': sorted((data.get('updates') or {}).keys()),
    })
    return jsonify({'message': 'Category updated successfully', 'category': category})


@settings_bp.route('/api/admin/settings/categories', methods=['DELETE'])
def delete_category():
    """Delete every project in a category; the category settings are kept"""
    from ..projects.database import ProjectDatabase

    data = json_body()
    category_type = _category_type_from(data)

    projects = ProjectDatabase.find_by_category(category_type)
    for project in projects:
        discard_image(project.get('image'))

    deleted_count = ProjectDatabase.delete_by_category(category_type)

    LoggingService.log_action('Category projects deleted', {
        'category': category_type,
        'deletedCount': deleted_count,
    })
    return jsonify({'message': 'Projects deleted successfully', 'deletedCount': deleted_count})


@settings_bp.route('/api/admin/settings/categories/init', methods=['POST'])
def init_categories():
    """Seed missing categories with their defaults"""
    created, updated = CategoryDatabase.init_defaults()

    if created or updated:
        LoggingService.log_system('info', 'Categories initialized', {
            'created': created,
            'paletteFilled': updated,
        })
    return jsonify({
        'message': 'Categories initialized successfully',
        'success': True,
        'created': created,
        'updated': updated,
    })


@settings_bp.route('/api/admin/settings/color-palettes', methods=['GET'])
def get_color_palettes():
    return jsonify({'palettes': COLOR_PALETTES})


# ===== Pages =====

@settings_bp.route('/admin/settings')
def settings_page():
    """Category settings page"""
    return render_template('settings/settings.html',
                           categories=CategoryDatabase.get_categories_map(),
                           palettes=COLOR_PALETTES)
