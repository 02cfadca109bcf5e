"""
Dashboard and Page Tests
========================
"""

import pytest
from bson import ObjectId

from portfolio_admin.core.database import utcnow


def test_stats(admin_client, db):
    category_id = db.categories.insert_one({'category': 'product', 'title': 'Products'}).inserted_id
    db.projects.insert_many([
        {'title': 'A', 'description': 'a', 'category': 'product', 'createdAt': utcnow()},
        {'title': 'B', 'description': 'b', 'category': category_id, 'createdAt': utcnow()},
        {'title': 'C', 'description': 'c', 'category': 'software', 'createdAt': utcnow()},
    ])
    db.workexperiences.insert_one({'companyName': 'Acme', 'startDate': utcnow()})
    db.logs.insert_one({'timestamp': utcnow(), 'level': 'error', 'category': 'system', 'message': 'x'})

    stats = admin_client.get('/api/admin/dashboard/stats').get_json()['stats']
    assert stats == {
        'products': 2,
        'software': 1,
        'content': 0,
        'innovation': 0,
        'workExperiences': 1,
        'errorsLast24h': 1,
    }


@pytest.mark.parametrize('path', [
    '/admin',
    '/admin/dashboard',
    '/admin/projects/software',
    '/admin/project/add?category=content',
    '/admin/settings',
    '/admin/settings/change-password',
    '/admin/work-experience',
    '/admin/basic-info',
    '/admin/logs',
])
def test_pages_render(admin_client, path):
    response = admin_client.get(path)
    assert response.status_code == 200
    assert b'Log out' in response.data


def test_unknown_category_page(admin_client):
    assert admin_client.get('/admin/projects/hardware').status_code == 404


def test_edit_page(admin_client):
    project = admin_client.post('/api/admin/project', json={
        'title': 'Editable',
        'description': 'Shown in the editor',
        'category': 'innovation',
    }).get_json()['project']

    response = admin_client.get(f"/admin/project/{project['_id']}/edit")
    assert response.status_code == 200
    assert b'Editable' in response.data


def test_work_experience_page_lists_entries(admin_client):
    admin_client.post('/api/admin/work-experience', json={
        'companyName': 'Globex',
        'position': 'Analyst',
        'startDate': '2019-04-01',
        'isPresent': True,
        'description': 'Numbers.',
    })
    response = admin_client.get('/admin/work-experience')
    assert b'Globex' in response.data
    assert b'Present' in response.data


def test_missing_project_edit_page(admin_client):
    assert admin_client.get(f'/admin/project/{ObjectId()}/edit').status_code == 404
