"""
Projects Admin Routes
=====================

JSON API under /api/admin/project and the list / add / edit pages.
Records reference their category by type string; see CategoryDatabase.
"""

import json

from flask import abort, jsonify, render_template, request, session
from pymongo.errors import PyMongoError

from . import projects_bp
from .database import ProjectDatabase, validate_project
from ..settings.categories import CATEGORY_TYPES, COLOR_PALETTES
from ..settings.database import CategoryDatabase
from ...core.database import serialize_doc
from ...core.errors import PortfolioError, ValidationError, json_body
from ...core.logging_service import LoggingService
from ...core.storage import discard_image, store_upload


# ===== Request helpers =====

def _project_payload():
    """JSON body, or multipart form fields plus an optional image file"""
    if request.is_json:
        return json_body(), None

    data = request.form.to_dict()
    for key in ('tags', 'skills'):
        values = request.form.getlist(key)
        if len(values) > 1:
            data[key] = values
        elif values and values[0].strip().startswith('['):
            try:
                data[key] = json.loads(values[0])
            except ValueError:
                raise ValidationError('Invalid form data', {key: f'{key.capitalize()} must be a JSON list'})

    image = request.files.get('image')
    if image is not None and not image.filename:
        image = None
    return data, image


# ===== API =====

@projects_bp.route('/api/admin/project', methods=['GET'])
def get_projects():
    """Get all projects, optionally for one category"""
    category = request.args.get('category')
    if category:
        category = CategoryDatabase.resolve_reference(category)
    return jsonify({'projects': ProjectDatabase.get_all(category)})


@projects_bp.route('/api/admin/project/<project_id>', methods=['GET'])
def get_project(project_id):
    return jsonify({'project': ProjectDatabase.get(project_id)})


@projects_bp.route('/api/admin/project', methods=['POST'])
def create_project():
    """Create new project"""
    data, image_file = _project_payload()

    if image_file is not None:
        # Reject bad input before anything reaches storage
        validate_project(data)
        data['image'] = store_upload(image_file)

    try:
        project = ProjectDatabase.create(data, created_by=session.get('admin_id'))
    except (PortfolioError, PyMongoError):
        if image_file is not None:
            discard_image(data['image'])
        raise

    LoggingService.log_action('Project created', {
        'projectId': str(project['_id']),
        'title': project['title'],
        'category': project['category'],
    })
    return jsonify({'message': 'Project created successfully', 'project': project})


@projects_bp.route('/api/admin/project/<project_id>', methods=['PUT'])
def update_project(project_id):
    """Update project; only the fields sent are changed"""
    changes, image_file = _project_payload()

    if image_file is not None:
        ProjectDatabase.get(project_id)
        changes['image'] = store_upload(image_file)

    try:
        project, previous = ProjectDatabase.update(project_id, changes)
    except (PortfolioError, PyMongoError):
        if image_file is not None:
            discard_image(changes['image'])
        raise

    old_image = previous.get('image')
    if 'image' in changes and old_image and old_image != project.get('image'):
        discard_image(old_image)

    LoggingService.log_action('Project updated', {
        'projectId': project_id,
        'fields': sorted(changes.keys()),
    })
    return jsonify({'message': 'Project updated successfully', 'project': project})


@projects_bp.route('/api/admin/project/<project_id>', methods=['DELETE'])
def delete_project(project_id):
    """Delete project and, best-effort, its images"""
    project = ProjectDatabase.get(project_id)
    discard_image(project.get('image'))
    ProjectDatabase.delete(project_id)

    LoggingService.log_action('Project deleted', {
        'projectId': project_id,
        'title': project.get('title'),
    })
    return jsonify({'message': 'Project deleted successfully'})


# ===== Pages =====

@projects_bp.route('/admin/projects/<category>')
def projects_page(category):
    if category not in CATEGORY_TYPES:
        abort(404)
    return render_template('projects/list.html',
                           category=CategoryDatabase.details_for(category),
                           palettes=COLOR_PALETTES)


@projects_bp.route('/admin/project/add')
def add_project_page():
    selected = request.args.get('category')
    return render_template('projects/editor.html',
                           project=None,
                           categories=CategoryDatabase.get_categories_map(),
                           selected_category=selected if selected in CATEGORY_TYPES else None)


@projects_bp.route('/admin/project/<project_id>/edit')
def edit_project_page(project_id):
    project = serialize_doc(ProjectDatabase.get(project_id))
    return render_template('projects/editor.html',
                           project=project,
                           categories=CategoryDatabase.get_categories_map(),
                           selected_category=project['categoryDetails']['category']
                           if project.get('categoryDetails') else None)
