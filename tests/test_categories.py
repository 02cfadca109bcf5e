"""
Category Settings Tests
=======================
"""

import io
import os

from portfolio_admin.core.database import utcnow
from portfolio_admin.modules.settings.categories import COLOR_PALETTES


def init_categories(client):
    response = client.post('/api/admin/settings/categories/init')
    assert response.status_code == 200
    return response.get_json()


def test_defaults_before_anything_is_stored(admin_client):
    categories = admin_client.get('/api/admin/settings/categories').get_json()['categories']

    assert sorted(categories) == ['content', 'innovation', 'product', 'software']
    assert categories['product']['title'] == 'Product Projects'
    assert categories['product']['enabled'] is True
    assert categories['product']['colorPalette'] in COLOR_PALETTES


def test_init_is_idempotent(admin_client, db):
    body = init_categories(admin_client)
    assert body['success'] is True
    assert sorted(body['created']) == ['content', 'innovation', 'product', 'software']

    assert init_categories(admin_client)['created'] == []
    assert db.categories.count_documents({}) == 4


def test_init_fills_missing_palette(admin_client, db):
    db.categories.insert_one({'category': 'content', 'title': 'Writing', 'description': 'Words',
                              'enabled': True})

    body = init_categories(admin_client)
    assert body['updated'] == ['content']

    stored = db.categories.find_one({'category': 'content'})
    assert stored['title'] == 'Writing'
    assert stored['colorPalette'] in COLOR_PALETTES


def test_patch_category(admin_client, db):
    init_categories(admin_client)

    response = admin_client.patch('/api/admin/settings/categories', json={
        'categoryType': 'software',
        'updates': {'title': 'Code', 'enabled': False, 'colorPalette': 'ruby-fusion', 'category': 'x'},
    })
    assert response.status_code == 200

    stored = db.categories.find_one({'category': 'software'})
    assert stored['title'] == 'Code'
    assert stored['enabled'] is False
    assert stored['colorPalette'] == 'ruby-fusion'


def test_patch_rejects_bad_values(admin_client):
    init_categories(admin_client)

    response = admin_client.patch('/api/admin/settings/categories', json={
        'categoryType': 'software',
        'updates': {'colorPalette': 'neon-nightmare'},
    })
    assert response.status_code == 400

    response = admin_client.patch('/api/admin/settings/categories', json={
        'categoryType': 'hardware',
        'updates': {'title': 'Nope'},
    })
    assert response.status_code == 400


def test_patch_missing_category(admin_client):
    response = admin_client.patch('/api/admin/settings/categories', json={
        'categoryType': 'software',
        'updates': {'title': 'Code'},
    })
    assert response.status_code == 404


def test_bulk_save(admin_client):
    response = admin_client.post('/api/admin/settings/categories', json={
        'categories': {'product': {'title': 'Things I Made', 'colorPalette': 'golden-dawn'}},
    })
    assert response.status_code == 200

    product = response.get_json()['categories']['product']
    assert product['title'] == 'Things I Made'
    assert product['description'] == 'Manage your product portfolio projects'
    assert product['colorPalette'] == 'golden-dawn'


def test_bulk_save_validates_before_writing(admin_client, db):
    response = admin_client.post('/api/admin/settings/categories', json={
        'categories': {
            'product': {'title': 'Fine'},
            'software': {'title': ''},
        },
    })
    assert response.status_code == 400
    assert db.categories.count_documents({}) == 0


def test_color_palettes(admin_client):
    palettes = admin_client.get('/api/admin/settings/color-palettes').get_json()['palettes']
    assert len(palettes) == 10
    for palette in palettes.values():
        assert set(palette) == {'name', 'primary', 'secondary', 'accent', 'muted'}


# ---------------------------------------------------------------------------
# Cascade delete
# ---------------------------------------------------------------------------

def test_delete_cascades_to_projects(admin_client, db):
    init_categories(admin_client)
    category_id = db.categories.find_one({'category': 'software'})['_id']

    for title in ('One', 'Two'):
        admin_client.post('/api/admin/project', json={
            'title': title, 'description': 'Software thing', 'category': 'software',
        })
    # Records that still point at the category by id, in both forms
    db.projects.insert_many([
        {'title': 'Legacy', 'description': 'Id reference', 'category': category_id, 'createdAt': utcnow()},
        {'title': 'Legacy hex', 'description': 'Hex reference', 'category': str(category_id),
         'createdAt': utcnow()},
    ])
    admin_client.post('/api/admin/project', json={
        'title': 'Keep', 'description': 'Other category', 'category': 'product',
    })

    response = admin_client.delete('/api/admin/settings/categories', json={'categoryType': 'software'})
    assert response.status_code == 200
    assert response.get_json() == {'message': 'Projects deleted successfully', 'deletedCount': 4}

    assert [p['title'] for p in db.projects.find()] == ['Keep']
    assert db.categories.find_one({'category': 'software'})['_id'] == category_id


def test_create_then_delete_category(admin_client):
    response = admin_client.post('/api/admin/project', json={
        'title': 'A', 'description': 'B', 'category': 'product',
    })
    assert response.status_code == 200
    project = response.get_json()['project']
    assert project['categoryDetails']['category'] == 'product'

    response = admin_client.delete('/api/admin/settings/categories', json={'categoryType': 'product'})
    assert response.get_json()['deletedCount'] >= 1
    assert admin_client.get(f"/api/admin/project/{project['_id']}").status_code == 404


def test_delete_removes_project_images(admin_client, upload_dir, image_bytes):
    response = admin_client.post('/api/admin/project', data={
        'title': 'Pictured',
        'description': 'Has an image',
        'category': 'content',
        'image': (io.BytesIO(image_bytes()), 'pic.png'),
    }, content_type='multipart/form-data')
    path = response.get_json()['project']['image']['path']

    admin_client.delete('/api/admin/settings/categories', json={'categoryType': 'content'})

    assert not os.path.exists(upload_dir / 'originals' / path)
    assert not os.path.exists(upload_dir / 'thumbnails' / path)


def test_delete_requires_category_type(admin_client):
    assert admin_client.delete('/api/admin/settings/categories', json={}).status_code == 400
    assert admin_client.delete('/api/admin/settings/categories',
                               json={'categoryType': 'hardware'}).status_code == 400


def test_delete_keeps_category_settings(admin_client, db):
    init_categories(admin_client)
    admin_client.patch('/api/admin/settings/categories', json={
        'categoryType': 'content',
        'updates': {'title': 'Writing', 'colorPalette': 'golden-dawn'},
    })

    admin_client.delete('/api/admin/settings/categories', json={'categoryType': 'content'})

    content = admin_client.get('/api/admin/settings/categories').get_json()['categories']['content']
    assert content['title'] == 'Writing'
    assert content['colorPalette'] == 'golden-dawn'
    assert db.categories.count_documents({}) == 4
