from conftest import sale_payload
from jewelry_admin.services import invoice_service, settings_service


def test_system_init_seeds_lookups(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['system', 'init'])

    assert result.exit_code == 0
    assert 'Categories created: 5' in result.output
    assert 'Materials created: 11' in result.output
    assert 'Rings' in [c['name'] for c in settings_service.list_categories()]

    again = runner.invoke(args=['system', 'init'])
    assert 'Categories created: 0' in again.output


def test_rates_record_and_list(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['rates', 'record', '--time', '9 AM', '--gold', '2350.5', '--exchange', '4480'])
    assert result.exit_code == 0
    assert 'gold: 1 sample(s) today' in result.output

    listing = runner.invoke(args=['rates', 'list', '--type', 'gold'])
    assert '9 AM=2350.5' in listing.output


def test_rates_record_rejects_bad_values(app, db_session):
    result = app.test_cli_runner().invoke(
        args=['rates', 'record', '--time', '9 AM', '--gold', '-1', '--exchange', '4480']
    )

    assert result.exit_code != 0
    assert 'gold_price must be a positive number' in result.output


def test_invoices_list_and_low_stock(app, make_item):
    make_item(id='item-low', name='Thin Chain', stock=2)
    invoice_service.create_invoice(sale_payload(customer_name='Ko Zaw', type='buy'))
    runner = app.test_cli_runner()

    invoices = runner.invoke(args=['invoices', 'list', '--type', 'buy'])
    assert 'Ko Zaw' in invoices.output

    low = runner.invoke(args=['items', 'low-stock'])
    assert 'item-low' in low.output
    assert 'low-stock: 1' in low.output
