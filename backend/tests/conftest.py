"""
Pytest fixtures for jewelry admin backend tests.

Provides an in-memory database, a per-test clean slate, the test client
and small factories for catalog items and invoices.
"""

import itertools
from datetime import datetime

import pytest

from jewelry_admin import create_app
from jewelry_admin.extensions import db, lookup_cache
from jewelry_admin.id_utils import generate_id
from jewelry_admin.models import Invoice, Item

_invoice_numbers = itertools.count(100000)


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'IMAGE_STORAGE_BACKEND': 'local',
        'IMAGE_STORAGE_PATH': str(tmp_path_factory.mktemp('images')),
        'INVOICE_VERIFY_TOTAL': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty every table and the lookup cache before each test."""
    with app.app_context():
        db.session.rollback()
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        lookup_cache.invalidate()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def make_item(db_session):
    """Factory for catalog items; keyword arguments override the defaults."""
    def _make(**overrides):
        fields = {
            'id': generate_id('item'),
            'name': 'Gold Ring',
            'category': 'rings',
            'material': '22K Gold',
            'stock': 10,
            'image': '/api/images/inventory/test.jpg',
        }
        fields.update(overrides)
        item = Item(**fields)
        db_session.add(item)
        db_session.commit()
        return item

    return _make


@pytest.fixture(scope='function')
def make_invoice(db_session):
    """Insert an invoice row directly, bypassing the service (no stock movement)."""
    def _make(**overrides):
        fields = {
            'id': generate_id('inv'),
            'invoice_number': f"INV-2026-{next(_invoice_numbers)}",
            'customer_name': 'Walk-in',
            'total': 100,
            'type': 'sales',
            'status': 'paid',
        }
        fields.update(overrides)
        invoice = Invoice(**fields)
        db_session.add(invoice)
        db_session.commit()
        return invoice

    return _make


def sale_payload(**overrides) -> dict:
    """A valid sales invoice body with no lines; pass items=[...] to add some."""
    payload = {
        'customer_name': 'Daw Aye Aye',
        'customer_phone': '09-555-0100',
        'total': 190,
        'type': 'sales',
        'items': [],
    }
    payload.update(overrides)
    return payload


def at(year, month, day, hour=12):
    return datetime(year, month, day, hour, 0, 0)
