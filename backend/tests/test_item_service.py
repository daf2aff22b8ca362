"""
Catalog CRUD, filtered listing, search and image uploads.
"""

from datetime import datetime

import pytest

from jewelry_admin.extensions import images
from jewelry_admin.models import Item
from jewelry_admin.services import item_service
from jewelry_admin.services.item_service import ImageUpload
from jewelry_admin.validation import NotFoundError, ValidationError

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32


def _ids(result):
    return [item['id'] for item in result['items']]


# ---------------------------------------------------------------------------
# Create / update / delete
# ---------------------------------------------------------------------------

def test_create_item_defaults_stock_and_image(app, db_session):
    item = item_service.create_item(payload={
        'name': 'Pearl Necklace',
        'category': 'necklaces',
        'material': 'Pearl',
        'description': '',
    })

    assert item['id'].startswith('item-')
    assert item['stock'] == 0
    assert item['description'] is None
    assert item['image'] == app.config['DEFAULT_ITEM_IMAGE']


def test_create_item_missing_fields(db_session):
    with pytest.raises(ValidationError, match='Missing required fields: category, material'):
        item_service.create_item(payload={'name': 'Ring'})


def test_create_item_rejects_unknown_category_and_negative_stock(db_session):
    base = {'name': 'Ring', 'material': '18K Gold'}
    with pytest.raises(ValidationError, match='category must be one of'):
        item_service.create_item(payload={**base, 'category': 'crowns'})
    with pytest.raises(ValidationError, match='stock must be >= 0'):
        item_service.create_item(payload={**base, 'category': 'rings', 'stock': -1})
    with pytest.raises(ValidationError, match='Field not allowed: price'):
        item_service.create_item(payload={**base, 'category': 'rings', 'price': 5})

    assert db_session.query(Item).count() == 0


def test_create_item_with_upload_stores_image(db_session):
    item = item_service.create_item(
        payload={'name': 'Ruby Ring', 'category': 'rings', 'material': 'Gemstone', 'stock': '3'},
        image=ImageUpload(data=PNG_BYTES, mimetype='image/png', filename='ruby.PNG'),
    )

    assert item['stock'] == 3
    assert item['image'].startswith('/api/images/inventory/')
    assert item['image'].endswith('.png')

    key = item['image'][len('/api/images/'):]
    stored = images.get(key)
    assert stored.body == PNG_BYTES
    assert stored.content_type == 'image/png'


@pytest.mark.parametrize('upload, message', [
    (ImageUpload(data=b'MZ', mimetype='application/x-msdownload', filename='x.exe'), 'Invalid file type'),
    (ImageUpload(data=b'<html>', mimetype='image/png', filename='x.html'), 'Invalid file extension'),
])
def test_invalid_uploads_are_rejected(db_session, upload, message):
    with pytest.raises(ValidationError, match=message):
        item_service.create_item(
            payload={'name': 'Ring', 'category': 'rings', 'material': 'Gold'},
            image=upload,
        )
    assert db_session.query(Item).count() == 0


def test_filename_without_extension_is_rejected():
    upload = ImageUpload(data=b'x', mimetype='image/png', filename='photo')

    with pytest.raises(ValidationError, match='Invalid file extension.'):
        item_service.validate_image(upload)


def test_filename_with_trailing_dot_is_stored_as_jpg():
    upload = ImageUpload(data=b'\xff\xd8\xff', mimetype='image/jpeg', filename='photo.')
    assert item_service.validate_image(upload) == 'jpg'


def test_update_item_is_partial(make_item):
    make_item(id='item-1', name='Old Name', material='18K Gold', stock=4)

    item = item_service.update_item(item_id='item-1', payload={'name': 'New Name'})

    assert item['name'] == 'New Name'
    assert item['material'] == '18K Gold'
    assert item['stock'] == 4


def test_update_missing_item(db_session):
    with pytest.raises(NotFoundError, match='Item not found'):
        item_service.update_item(item_id='nope', payload={'name': 'x'})


def test_delete_item_reports_rows_removed(make_item):
    make_item(id='item-1')

    assert item_service.delete_item(item_id='item-1') == 1
    assert item_service.delete_item(item_id='item-1') == 0
    with pytest.raises(NotFoundError):
        item_service.get_item('item-1')


def _upload(filename='ring.png'):
    return ImageUpload(data=PNG_BYTES, mimetype='image/png', filename=filename)


def _key(uri):
    return uri[len('/api/images/'):]


RUBY = {'name': 'Ruby Ring', 'category': 'rings', 'material': 'Gemstone'}


def test_replacing_an_upload_removes_the_old_image(db_session):
    item = item_service.create_item(payload=RUBY, image=_upload())

    updated = item_service.update_item(item_id=item['id'], payload={}, image=_upload('new.png'))

    assert updated['image'] != item['image']
    assert images.get(_key(item['image'])) is None
    assert images.get(_key(updated['image'])).body == PNG_BYTES


def test_deleting_an_item_removes_its_uploaded_image(db_session):
    item = item_service.create_item(payload=RUBY, image=_upload())

    assert item_service.delete_item(item_id=item['id']) == 1
    assert images.get(_key(item['image'])) is None


def test_external_images_are_never_deleted(make_item, monkeypatch):
    make_item(id='item-1', image='https://cdn.example.com/ring.jpg')
    deleted_keys = []
    monkeypatch.setattr(images, 'delete', deleted_keys.append)

    item_service.update_item(item_id='item-1', payload={'image': 'https://cdn.example.com/other.jpg'})
    item_service.delete_item(item_id='item-1')

    assert deleted_keys == []


def test_storage_failure_does_not_undo_item_delete(db_session, monkeypatch):
    item = item_service.create_item(payload=RUBY, image=_upload())

    def broken_delete(key):
        raise RuntimeError('bucket offline')

    monkeypatch.setattr(images, 'delete', broken_delete)

    assert item_service.delete_item(item_id=item['id']) == 1
    with pytest.raises(NotFoundError):
        item_service.get_item(item['id'])


def test_set_stock(make_item):
    make_item(id='item-1', stock=4)

    assert item_service.set_stock(item_id='item-1', stock=12)['stock'] == 12
    with pytest.raises(ValidationError):
        item_service.set_stock(item_id='item-1', stock=-2)
    with pytest.raises(ValidationError):
        item_service.set_stock(item_id='item-1', stock='1.5')


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog(make_item):
    make_item(id='ring-gold', category='rings', material='22K Gold', stock=10, created_at=datetime(2026, 1, 1))
    make_item(id='ring-low', category='rings', material='Rose Gold', stock=3, created_at=datetime(2026, 1, 2))
    make_item(id='ring-out', category='rings', material='Platinum', stock=0, created_at=datetime(2026, 1, 3))
    make_item(id='pearl', category='necklaces', material='Pearl', stock=5, created_at=datetime(2026, 1, 4))
    make_item(id='silver', category='bracelets', material='Sterling Silver', stock=20, created_at=datetime(2026, 1, 5))


def test_list_items_newest_first_with_stats(catalog):
    result = item_service.list_items()

    assert _ids(result) == ['silver', 'pearl', 'ring-out', 'ring-low', 'ring-gold']
    assert result['pagination'] == {'total': 5, 'total_pages': 1, 'current_page': 1, 'page_size': 10}
    assert result['stats'] == {'total_count': 5, 'low_stock_count': 2, 'out_of_stock_count': 1}


def test_list_items_by_category(catalog):
    assert _ids(item_service.list_items(category='rings')) == ['ring-out', 'ring-low', 'ring-gold']


def test_list_items_stock_status(catalog):
    # low stock is 0 < stock <= 5
    assert _ids(item_service.list_items(stock_status='low-stock')) == ['pearl', 'ring-low']
    assert _ids(item_service.list_items(stock_status='out-of-stock')) == ['ring-out']
    with pytest.raises(ValidationError, match='stock_status must be one of'):
        item_service.list_items(stock_status='plenty')


def test_list_items_materials_are_or_combined_contains(catalog):
    result = item_service.list_items(materials=['gold', 'PEARL'])

    assert _ids(result) == ['pearl', 'ring-low', 'ring-gold']


def test_filters_combine_with_and(catalog):
    result = item_service.list_items(category='rings', materials=['gold'], stock_status='low-stock')

    assert _ids(result) == ['ring-low']
    # stats ignore filters
    assert result['stats']['total_count'] == 5


def test_list_items_pagination(catalog):
    page = item_service.list_items(page=2, page_size=2)

    assert _ids(page) == ['ring-out', 'ring-low']
    assert page['pagination'] == {'total': 5, 'total_pages': 3, 'current_page': 2, 'page_size': 2}

    assert item_service.list_items(page_size=1000)['pagination']['page_size'] == 100


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def test_search_matches_name_or_id(catalog, make_item):
    make_item(id='special-7', name='Diamond Stud', category='earrings', material='Diamond')

    assert [i['id'] for i in item_service.search_items(term='diamond')] == ['special-7']
    assert [i['id'] for i in item_service.search_items(term='RING-LOW')] == ['ring-low']


def test_search_filters_and_limit(app, catalog, monkeypatch):
    results = item_service.search_items(term='gold ring', category='rings', materials=['rose'])
    assert [i['id'] for i in results] == ['ring-low']

    monkeypatch.setitem(app.config, 'SEARCH_RESULT_LIMIT', 2)
    assert len(item_service.search_items()) == 2
