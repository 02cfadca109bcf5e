from flask import jsonify, render_template, request
from pymongo.errors import PyMongoError

from . import basic_info_bp
from .database import BasicInfoDatabase
from ...core.errors import NotFoundError, PortfolioError, ValidationError, json_body
from ...core.logging_service import LoggingService
from ...core.storage import discard_image, store_upload


@basic_info_bp.route('/api/admin/basic-info', methods=['GET'])
def get_basic_info():
    return jsonify(BasicInfoDatabase.get())


@basic_info_bp.route('/api/admin/basic-info', methods=['PATCH'])
def update_basic_info():
    data = json_body()
    info = BasicInfoDatabase.save(data)

    LoggingService.log_action('Basic info updated')
    return jsonify({'message': 'Updated successfully', 'basicInfo': info})


@basic_info_bp.route('/api/admin/basic-info/profile-picture', methods=['POST'])
def upload_profile_picture():
    image = request.files.get('image')
    if image is None or not image.filename:
        raise ValidationError('No image file provided', {'image': 'Image is required'})

    picture = store_upload(image)
    try:
        previous = BasicInfoDatabase.set_profile_picture(picture)
    except (PortfolioError, PyMongoError):
        discard_image(picture)
        raise

    if previous:
        discard_image(previous)

    LoggingService.log_action('Profile picture updated', {'fileName': picture['path']})
    return jsonify({'message': 'Profile picture updated', 'profilePicture': picture})


@basic_info_bp.route('/api/admin/basic-info/profile-picture', methods=['DELETE'])
def delete_profile_picture():
    previous = BasicInfoDatabase.clear_profile_picture()
    if not previous:
        raise NotFoundError('Profile picture')

    discard_image(previous)
    LoggingService.log_action('Profile picture removed')
    return jsonify({'message': 'Profile picture removed'})


@basic_info_bp.route('/admin/basic-info')
def basic_info_page():
    return render_template('basic_info/basic_info.html', info=BasicInfoDatabase.get())
