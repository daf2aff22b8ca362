from datetime import date, datetime

import pytest

from jewelry_admin.services import reporting_service
from jewelry_admin.validation import ValidationError


@pytest.fixture
def history(make_invoice):
    make_invoice(type='sales', total=100, created_at=datetime(2026, 1, 15))
    make_invoice(type='sales', total=250.5, created_at=datetime(2026, 3, 2))
    make_invoice(type='pawn', status='active', due_date=datetime(2026, 6, 1), total=400, created_at=datetime(2026, 3, 20))
    make_invoice(type='buy', total=75, created_at=datetime(2026, 3, 31, 23))
    # outside the six-month window
    make_invoice(type='sales', total=999, created_at=datetime(2025, 9, 30))


def test_monthly_summary_buckets_by_month_and_type(history):
    summary = reporting_service.monthly_summary(months=6, today=date(2026, 3, 10))

    assert [(m['month'], m['year']) for m in summary] == [
        ('Oct', 2025), ('Nov', 2025), ('Dec', 2025), ('Jan', 2026), ('Feb', 2026), ('Mar', 2026),
    ]
    january, march = summary[3], summary[5]
    assert january['sales_amount'] == 100.0
    assert january['sales_count'] == 1
    assert march == {
        'month': 'Mar',
        'year': 2026,
        'sales_amount': 250.5,
        'sales_count': 1,
        'pawn_amount': 400.0,
        'pawn_count': 1,
        'buy_amount': 75.0,
        'buy_count': 1,
    }
    assert summary[0]['sales_count'] == 0


def test_monthly_summary_range_is_bounded(db_session):
    with pytest.raises(ValidationError, match='months must be between 1 and 36'):
        reporting_service.monthly_summary(months=0)


def test_range_summary(history):
    totals = reporting_service.range_summary(start='2026-03-01', end='2026-03-31T23:59:59Z')

    assert totals['sales_amount'] == 250.5
    assert totals['pawn_count'] == 1
    assert totals['buy_count'] == 1

    with pytest.raises(ValidationError):
        reporting_service.range_summary(start='2026-04-01', end='2026-03-01')
    with pytest.raises(ValidationError):
        reporting_service.range_summary(start='last tuesday')


def test_dashboard_stats_include_stock(history, make_item):
    make_item(stock=4)
    make_item(stock=6)

    stats = reporting_service.dashboard_stats()

    assert stats['sales_count'] == 3
    assert stats['units_in_stock'] == 10
    assert stats['item_count'] == 2
