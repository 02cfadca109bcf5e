import os

from flask import abort, jsonify, request, send_from_directory

from . import media_bp
from ...core.config import get_config_value
from ...core.errors import ValidationError
from ...core.logging_service import LoggingService
from ...core.storage import (
    ensure_containers, get_image_url, is_cloud_storage, store_upload,
)


@media_bp.route('/api/admin/upload-image', methods=['POST'])
def upload_image():
    """Upload image, returning original and thumbnail URLs"""
    image = request.files.get('image')
    if image is None or not image.filename:
        raise ValidationError('No image file provided', {'image': 'Image is required'})

    stored = store_upload(image)
    LoggingService.log_action('Image uploaded', {'fileName': stored['path']})
    return jsonify({
        'originalUrl': stored['original'],
        'thumbnailUrl': stored['thumbnail'],
        'fileName': stored['path'],
    })


@media_bp.route('/api/admin/get-image-url')
def image_url():
    file_name = request.args.get('fileName')
    if not file_name:
        raise ValidationError('File name is required', {'fileName': 'File name is required'})

    thumbnail = request.args.get('thumbnail', '').lower() in ('true', '1', 'yes')
    return jsonify({'url': get_image_url(file_name, thumbnail=thumbnail)})


@media_bp.route('/api/admin/update-container-access', methods=['POST'])
def update_container_access():
    """Make sure both containers exist"""
    containers = ensure_containers()
    LoggingService.log_system('info', 'Storage containers checked', {'containers': containers})
    return jsonify({'message': 'Containers ready', 'containers': containers})


@media_bp.route('/uploads/<path:filename>')
def serve_upload(filename):
    """Locally stored uploads (no storage connection string configured)"""
    if is_cloud_storage():
        abort(404)
    return send_from_directory(os.path.abspath(get_config_value('UPLOAD_FOLDER')), filename)
