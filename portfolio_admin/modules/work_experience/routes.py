"""
Work Experience Routes
======================
"""

from flask import jsonify, render_template, request
from pymongo.errors import PyMongoError

from . import work_experience_bp
from .database import WorkExperienceDatabase, validate_experience
from ...core.errors import PortfolioError, ValidationError, json_body
from ...core.logging_service import LoggingService
from ...core.storage import discard_image, store_upload


def _experience_payload():
    """JSON body, or multipart fields with an optional logo file"""
    if request.is_json:
        return json_body(), None

    logo = request.files.get('logo')
    if logo is not None and not logo.filename:
        logo = None
    return request.form.to_dict(), logo


@work_experience_bp.route('/api/admin/work-experience', methods=['GET'])
def get_experiences():
    return jsonify(WorkExperienceDatabase.get_all())


@work_experience_bp.route('/api/admin/work-experience', methods=['POST'])
def create_experience():
    data, logo_file = _experience_payload()

    if logo_file is not None:
        validate_experience(data)
        data['logo'] = store_upload(logo_file, field='logo')

    try:
        experience = WorkExperienceDatabase.create(data)
    except (PortfolioError, PyMongoError):
        if logo_file is not None:
            discard_image(data['logo'])
        raise

    LoggingService.log_action('Work experience created', {
        'experienceId': str(experience['_id']),
        'companyName': experience['companyName'],
    })
    return jsonify({
        'message': 'Work experience created successfully',
        'id': str(experience['_id']),
        'experience': experience,
    })


@work_experience_bp.route('/api/admin/work-experience/<experience_id>', methods=['PUT'])
def update_experience(experience_id):
    changes, logo_file = _experience_payload()

    if logo_file is not None:
        WorkExperienceDatabase.get(experience_id)
        changes['logo'] = store_upload(logo_file, field='logo')

    try:
        experience, previous = WorkExperienceDatabase.update(experience_id, changes)
    except (PortfolioError, PyMongoError):
        if logo_file is not None:
            discard_image(changes['logo'])
        raise

    old_logo = previous.get('logo')
    if 'logo' in changes and old_logo and old_logo != experience.get('logo'):
        discard_image(old_logo)

    LoggingService.log_action('Work experience updated', {
        'experienceId': experience_id,
        'fields': sorted(changes.keys()),
    })
    return jsonify({'message': 'Work experience updated successfully', 'experience': experience})


@work_experience_bp.route('/api/admin/work-experience', methods=['DELETE'])
@work_experience_bp.route('/api/admin/work-experience/<experience_id>', methods=['DELETE'])
def delete_experience(experience_id=None):
    experience_id = experience_id or request.args.get('id')
    if not experience_id:
        raise ValidationError('ID is required', {'id': 'ID is required'})

    experience = WorkExperienceDatabase.delete(experience_id)
    discard_image(experience.get('logo'))

    LoggingService.log_action('Work experience deleted', {
        'experienceId': experience_id,
        'companyName': experience.get('companyName'),
    })
    return jsonify({'message': 'Work experience deleted successfully'})


@work_experience_bp.route('/admin/work-experience')
def work_experience_page():
    return render_template('work_experience/work_experience.html',
                           experiences=WorkExperienceDatabase.get_all())
