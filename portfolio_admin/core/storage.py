"""
Storage Utility
===============

Image storage with cloud (S3-compatible) / local branching.

Every upload lands in two containers: the original image and a 400x300
thumbnail, both under the same blob name. With no STORAGE_CONNECTION_STRING
configured, containers are folders under UPLOAD_FOLDER served from /uploads.
"""

import io
import os
import threading
import uuid
from urllib.parse import unquote, urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from PIL import Image, ImageOps, UnidentifiedImageError

from .config import get_config_value
from .errors import StorageError, ValidationError

THUMBNAIL_SIZE = (400, 300)
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

CONTENT_TYPES = {
    'jpg': 'image/jpeg', 'jpeg': 'image/jpeg',
    'png': 'image/png', 'gif': 'image/gif', 'webp': 'image/webp',
}
_PIL_FORMATS = {'jpg': 'JPEG', 'jpeg': 'JPEG', 'png': 'PNG', 'gif': 'GIF', 'webp': 'WEBP'}

_CLIENT_KEY = 'portfolio_admin.s3_client'
_client_lock = threading.Lock()


def _extension(filename):
    return filename.rsplit('.', 1)[-1].lower() if filename and '.' in filename else ''


def allowed_file(filename):
    return _extension(filename) in ALLOWED_EXTENSIONS


def unique_blob_name(filename):
    """Random blob name that keeps the upload's extension"""
    ext = _extension(filename) or 'jpg'
    return f"{uuid.uuid4().hex}.{ext}"


def parse_connection_string(connection_string):
    """Parse 'EndpointUrl=...;AccessKeyId=...;SecretAccessKey=...;Region=...'"""
    parts = {}
    for segment in (connection_string or '').split(';'):
        if '=' not in segment:
            continue
        key, value = segment.split('=', 1)
        parts[key.strip()] = value.strip()

    missing = [k for k in ('EndpointUrl', 'AccessKeyId', 'SecretAccessKey') if not parts.get(k)]
    if missing:
        raise StorageError('Invalid storage connection string', {'missing': missing})
    return parts


def is_cloud_storage():
    return bool(get_config_value('STORAGE_CONNECTION_STRING'))


def _container(thumbnail=False):
    if thumbnail:
        return get_config_value('STORAGE_THUMBNAILS_CONTAINER', 'thumbnails')
    return get_config_value('STORAGE_CONTAINER_NAME', 'originals')


def get_s3_client():
    """Cached S3 client for the configured connection string"""
    cached = current_app.extensions.get(_CLIENT_KEY)
    connection_string = get_config_value('STORAGE_CONNECTION_STRING')
    if cached and cached[0] == connection_string:
        return cached[1]

    with _client_lock:
        config = parse_connection_string(connection_string)
        client = boto3.client(
            's3',
            endpoint_url=config['EndpointUrl'],
            aws_access_key_id=config['AccessKeyId'],
            aws_secret_access_key=config['SecretAccessKey'],
            region_name=config.get('Region') or 'us-east-1',
        )
        current_app.extensions[_CLIENT_KEY] = (connection_string, client)
    return client


def make_thumbnail(data, filename):
    """Resize to 400x300, cover fit, centred"""
    ext = _extension(filename)
    pil_format = _PIL_FORMATS.get(ext, 'JPEG')
    try:
        with Image.open(io.BytesIO(data)) as img:
            img = ImageOps.exif_transpose(img)
            thumb = ImageOps.fit(img, THUMBNAIL_SIZE, method=Image.LANCZOS, centering=(0.5, 0.5))
            if pil_format == 'JPEG' and thumb.mode != 'RGB':
                thumb = thumb.convert('RGB')
            buf = io.BytesIO()
            thumb.save(buf, format=pil_format)
            return buf.getvalue()
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError('Uploaded file is not a valid image', {'image': str(e)})


# ===== Upload =====

def upload_image(data, filename):
    """Upload an original and its thumbnail.

    Args:
        data: Raw bytes of the uploaded file.
        filename: Client filename, used for the extension only.

    Returns:
        {'original': url, 'thumbnail': url, 'fileName': blob name}
    """
    if not data:
        raise StorageError('No image data provided')

    blob_name = unique_blob_name(filename)
    thumbnail = make_thumbnail(data, blob_name)

    _put_blob(_container(), blob_name, data)
    _put_blob(_container(thumbnail=True), blob_name, thumbnail)

    return {
        'original': get_image_url(blob_name),
        'thumbnail': get_image_url(blob_name, thumbnail=True),
        'fileName': blob_name,
    }


def store_upload(file_storage, field='image'):
    """Upload a posted file, returning the image record kept on documents"""
    if not allowed_file(file_storage.filename):
        raise ValidationError('Invalid file type', {field: f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"})

    uploaded = upload_image(file_storage.read(), file_storage.filename)
    return {
        'original': uploaded['original'],
        'thumbnail': uploaded['thumbnail'],
        'path': uploaded['fileName'],
    }


def _put_blob(container, blob_name, data):
    if not is_cloud_storage():
        folder = os.path.join(get_config_value('UPLOAD_FOLDER'), container)
        os.makedirs(folder, exist_ok=True)
        with open(os.path.join(folder, blob_name), 'wb') as f:
            f.write(data)
        return

    try:
        get_s3_client().put_object(
            Bucket=container,
            Key=blob_name,
            Body=data,
            ContentType=CONTENT_TYPES.get(_extension(blob_name), 'application/octet-stream'),
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError('Failed to upload image', {'container': container, 'error': str(e)}) from e


def get_image_url(blob_name, thumbnail=False):
    """Time-limited read URL (presigned) or the local /uploads path"""
    container = _container(thumbnail)
    if not is_cloud_storage():
        return f"/uploads/{container}/{blob_name}"

    expiry_hours = int(get_config_value('IMAGE_URL_EXPIRY_HOURS', 24))
    try:
        return get_s3_client().generate_presigned_url(
            'get_object',
            Params={'Bucket': container, 'Key': blob_name},
            ExpiresIn=expiry_hours * 3600,
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError('Failed to generate image URL', {'error': str(e)}) from e


# ===== Delete / list =====

def delete_image(blob_name):
    """Delete the original and the thumbnail"""
    if not blob_name:
        return False

    for container in (_container(), _container(thumbnail=True)):
        if not is_cloud_storage():
            path = os.path.join(get_config_value('UPLOAD_FOLDER'), container, blob_name)
            if os.path.isfile(path):
                os.unlink(path)
            continue
        try:
            get_s3_client().delete_object(Bucket=container, Key=blob_name)
        except (BotoCoreError, ClientError) as e:
            raise StorageError('Failed to delete image', {'container': container, 'error': str(e)}) from e
    return True


def discard_image(image):
    """Best-effort removal of a stored image record; failures are logged, not raised"""
    if not image:
        return False

    blob_name = image.get('path') or blob_name_from_url(image.get('original')) \
        or blob_name_from_url(image.get('thumbnail'))
    try:
        return delete_image(blob_name)
    except StorageError as e:
        from .logging_service import LoggingService
        LoggingService.log_error('system', 'Failed to delete image blobs', e, {'fileName': blob_name})
        return False


def list_blobs(thumbnail=False):
    """Blob names in the originals (or thumbnails) container"""
    container = _container(thumbnail)

    if not is_cloud_storage():
        folder = os.path.join(get_config_value('UPLOAD_FOLDER'), container)
        if not os.path.isdir(folder):
            return []
        return sorted(os.listdir(folder))

    names = []
    try:
        paginator = get_s3_client().get_paginator('list_objects_v2')
        for page in paginator.paginate(Bucket=container):
            for obj in page.get('Contents', []):
                names.append(obj['Key'])
    except (BotoCoreError, ClientError) as e:
        raise StorageError('Failed to list blobs', {'container': container, 'error': str(e)}) from e
    return names


def ensure_containers():
    """Create both containers if missing; returns {container: created}"""
    result = {}
    for container in (_container(), _container(thumbnail=True)):
        if not is_cloud_storage():
            folder = os.path.join(get_config_value('UPLOAD_FOLDER'), container)
            result[container] = not os.path.isdir(folder)
            os.makedirs(folder, exist_ok=True)
            continue

        client = get_s3_client()
        try:
            client.head_bucket(Bucket=container)
            result[container] = False
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') not in ('404', 'NoSuchBucket', 'NotFound'):
                raise StorageError('Failed to check container', {'container': container, 'error': str(e)}) from e
            try:
                client.create_bucket(Bucket=container)
            except (BotoCoreError, ClientError) as create_error:
                raise StorageError('Failed to create container', {
                    'container': container, 'error': str(create_error),
                }) from create_error
            result[container] = True
        except BotoCoreError as e:
            raise StorageError('Failed to check container', {'container': container, 'error': str(e)}) from e
    return result


def blob_name_from_url(url):
    """Last path segment of a stored URL, query string stripped"""
    if not url:
        return None
    name = unquote(urlparse(url).path.rsplit('/', 1)[-1])
    return name or None
