"""
Concurrent invoice creation against a file-backed SQLite database, and the
busy-database retry helper.
"""

import threading

import pytest
from sqlalchemy.exc import OperationalError

from conftest import sale_payload
from jewelry_admin import create_app
from jewelry_admin.extensions import db
from jewelry_admin.models import Invoice, Item
from jewelry_admin.services import concurrency, invoice_service

THREADS = 8
SALES_PER_THREAD = 5


@pytest.fixture
def file_app(tmp_path):
    """App on a real SQLite file so threads get separate connections."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'concurrency.sqlite3'}",
        'IMAGE_STORAGE_BACKEND': '',
    })
    with app.app_context():
        db.create_all()
        db.session.add(Item(
            id='item-1', name='Gold Chain', category='necklaces', material='22K Gold',
            stock=100, image='/api/images/inventory/chain.jpg',
        ))
        db.session.commit()

    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


def test_concurrent_sales_settle_stock_exactly(file_app):
    errors = []
    start = threading.Barrier(THREADS)

    def worker():
        with file_app.app_context():
            start.wait()
            try:
                for _ in range(SALES_PER_THREAD):
                    invoice_service.create_invoice(sale_payload(items=[
                        {'product_id': 'item-1', 'name': 'Gold Chain', 'quantity': 1, 'price': 100},
                    ]))
            except Exception as exc:
                errors.append(exc)
            finally:
                db.session.remove()

    threads = [threading.Thread(target=worker) for _ in range(THREADS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    with file_app.app_context():
        numbers = [n for (n,) in db.session.query(Invoice.invoice_number).all()]
        assert len(numbers) == THREADS * SALES_PER_THREAD
        assert len(set(numbers)) == len(numbers)
        assert db.session.get(Item, 'item-1').stock == 100 - THREADS * SALES_PER_THREAD


def _locked():
    return OperationalError('BEGIN IMMEDIATE', {}, Exception('database is locked'))


def test_run_with_retry_recovers_from_a_busy_database(app, db_session):
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise _locked()
        return 'done'

    assert concurrency.run_with_retry(flaky, backoff_base=0) == 'done'
    assert len(calls) == 2


def test_run_with_retry_gives_up_after_all_attempts(app, db_session):
    calls = []

    def always_locked():
        calls.append(1)
        raise _locked()

    with pytest.raises(OperationalError):
        concurrency.run_with_retry(always_locked, attempts=3, backoff_base=0)
    assert len(calls) == 3


def test_run_with_retry_does_not_retry_other_errors(app, db_session):
    calls = []

    def invalid():
        calls.append(1)
        raise ValueError('bad input')

    with pytest.raises(ValueError):
        concurrency.run_with_retry(invalid, backoff_base=0)
    assert len(calls) == 1
