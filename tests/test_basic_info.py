"""
Basic Info Tests
================
"""

import io
import os

VALID_INFO = {
    'name': 'Jordan Example',
    'yearsOfExperience': '7+',
    'phone': '+44 20 7946 0000',
    'email': 'Jordan@Example.com',
}


def test_defaults_when_empty(admin_client):
    info = admin_client.get('/api/admin/basic-info').get_json()
    assert set(info) >= {'name', 'yearsOfExperience', 'phone', 'email'}


def test_save_basic_info(admin_client, db):
    response = admin_client.patch('/api/admin/basic-info', json=VALID_INFO)
    assert response.status_code == 200
    assert response.get_json()['message'] == 'Updated successfully'

    info = admin_client.get('/api/admin/basic-info').get_json()
    assert info['name'] == 'Jordan Example'
    assert info['email'] == 'jordan@example.com'
    assert db.basic_info.count_documents({}) == 1


def test_save_is_a_singleton(admin_client, db):
    admin_client.patch('/api/admin/basic-info', json=VALID_INFO)
    admin_client.patch('/api/admin/basic-info', json=dict(VALID_INFO, name='Renamed'))

    assert db.basic_info.count_documents({}) == 1
    assert db.basic_info.find_one()['name'] == 'Renamed'


def test_numeric_years_accepted(admin_client):
    response = admin_client.patch('/api/admin/basic-info', json=dict(VALID_INFO, yearsOfExperience=5))
    assert response.status_code == 200
    assert response.get_json()['basicInfo']['yearsOfExperience'] == '5'


def test_all_fields_required(admin_client):
    data = dict(VALID_INFO)
    data.pop('phone')

    response = admin_client.patch('/api/admin/basic-info', json=data)
    assert response.status_code == 400

    body = response.get_json()
    assert body['message'] == 'All fields are required'
    assert body['details']['phone'] == 'Phone is required'


def test_invalid_email(admin_client):
    response = admin_client.patch('/api/admin/basic-info', json=dict(VALID_INFO, email='not-an-email'))
    assert response.status_code == 400
    assert 'email' in response.get_json()['details']


# ---------------------------------------------------------------------------
# Profile picture
# ---------------------------------------------------------------------------

def upload_picture(client, image_bytes, name='me.png'):
    return client.post('/api/admin/basic-info/profile-picture', data={
        'image': (io.BytesIO(image_bytes()), name),
    }, content_type='multipart/form-data')


def test_profile_picture_replace_and_remove(admin_client, upload_dir, image_bytes):
    first = upload_picture(admin_client, image_bytes).get_json()['profilePicture']
    second = upload_picture(admin_client, image_bytes).get_json()['profilePicture']

    assert not os.path.exists(upload_dir / 'originals' / first['path'])
    assert os.path.isfile(upload_dir / 'originals' / second['path'])
    assert admin_client.get('/api/admin/basic-info').get_json()['profilePicture'] == second

    assert admin_client.delete('/api/admin/basic-info/profile-picture').status_code == 200
    assert not os.path.exists(upload_dir / 'originals' / second['path'])
    assert 'profilePicture' not in admin_client.get('/api/admin/basic-info').get_json()


def test_remove_missing_picture(admin_client):
    assert admin_client.delete('/api/admin/basic-info/profile-picture').status_code == 404


def test_picture_required(admin_client):
    response = admin_client.post('/api/admin/basic-info/profile-picture', data={},
                                 content_type='multipart/form-data')
    assert response.status_code == 400
