from decimal import Decimal

from flask import request

from services.listing import home_listing, product_listing, category_listing, catalog_stats


def _names(listing):
    return [product.name for product in listing.items]


def test_home_never_lists_inactive_products(app, make_product):
    make_product(name='Visible Widget')
    make_product(name='Hidden Widget', is_active=False)

    for query in ('/', '/?search=widget', '/?stock=in_stock', '/?status=inactive', '/?min_price=0'):
        with app.test_request_context(query):
            assert _names(home_listing(request.args)) == ['Visible Widget']


def test_price_bounds_are_inclusive(app, make_product):
    for price in ('5.00', '10.00', '30.00', '50.00', '50.01'):
        make_product(name=f'Item {price}', price=price)

    with app.test_request_context('/products?min_price=10&max_price=50'):
        listing = product_listing(request.args)
    prices = sorted(product.price for product in listing.items)
    assert prices == [Decimal('10.00'), Decimal('30.00'), Decimal('50.00')]
    assert listing.filters['min_price'] == '10'
    assert listing.filters['max_price'] == '50'


def test_unparseable_price_is_ignored(app, make_product):
    make_product(name='Cheap', price='1.00')
    make_product(name='Pricey', price='100.00')

    with app.test_request_context('/products?min_price=abc&max_price=NaN'):
        listing = product_listing(request.args)
    assert sorted(_names(listing)) == ['Cheap', 'Pricey']
    assert 'min_price' not in listing.filters
    assert 'max_price' not in listing.filters


def test_search_matches_name_or_description_case_insensitively(app, make_product):
    make_product(name='Blue WIDGET')
    make_product(name='Lamp', description='Pairs well with a widget')
    make_product(name='Kettle', sku='WIDGET-SKU')

    with app.test_request_context('/?search=widget'):
        assert sorted(_names(home_listing(request.args))) == ['Blue WIDGET', 'Lamp']
    with app.test_request_context('/products?search=widget'):
        assert sorted(_names(product_listing(request.args))) == ['Blue WIDGET', 'Kettle', 'Lamp']


def test_search_stays_grouped_with_other_filters(app, make_category, make_product):
    garden = make_category('Garden')
    make_product(name='Widget One')
    make_product(name='Garden Lamp', description='not a widget', category_id=garden)
    make_product(name='Garden Widget', category_id=garden)

    with app.test_request_context(f'/products?search=widget&category={garden}'):
        listing = product_listing(request.args)
    assert sorted(_names(listing)) == ['Garden Lamp', 'Garden Widget']


def test_search_treats_wildcards_literally(app, make_product):
    make_product(name='100% cotton')
    make_product(name='1000 cotton')

    with app.test_request_context('/products?search=100%25'):
        assert _names(product_listing(request.args)) == ['100% cotton']


def test_status_and_stock_filters(app, make_product):
    make_product(name='Active stocked', stock_quantity=3)
    make_product(name='Active empty', stock_quantity=0)
    make_product(name='Inactive stocked', stock_quantity=3, is_active=False)

    with app.test_request_context('/products?status=inactive'):
        assert _names(product_listing(request.args)) == ['Inactive stocked']
    with app.test_request_context('/products?status=active&stock=out_of_stock'):
        assert _names(product_listing(request.args)) == ['Active empty']
    with app.test_request_context('/products?stock=in_stock'):
        assert sorted(_names(product_listing(request.args))) == ['Active stocked', 'Inactive stocked']


def test_home_only_recognizes_in_stock(app, make_product):
    make_product(name='Stocked', stock_quantity=3)
    make_product(name='Empty', stock_quantity=0)

    with app.test_request_context('/?stock=out_of_stock'):
        listing = home_listing(request.args)
    assert sorted(_names(listing)) == ['Empty', 'Stocked']
    assert 'stock' not in listing.filters


def test_sort_by_price_ascending_across_pages(app, make_product):
    for index, price in enumerate(['9.50', '3.00', '45.00', '12.25', '1.00', '30.00', '7.75', '18.00',
                                   '3.00', '60.00', '22.10', '5.55', '14.00', '2.20', '80.00']):
        make_product(name=f'Item {index}', price=price)

    prices = []
    for page in (1, 2):
        with app.test_request_context(f'/products?sort=price&direction=asc&page={page}'):
            listing = product_listing(request.args)
        prices.extend(product.price for product in listing.items)

    assert len(prices) == 15
    assert prices == sorted(prices)


def test_unknown_sort_column_falls_back_to_created_at(app, make_product):
    first = make_product(name='First')
    second = make_product(name='Second')

    with app.test_request_context('/products?sort=password_hash&direction=sideways'):
        listing = product_listing(request.args)
    assert listing.filters['sort'] == 'created_at'
    assert listing.filters['direction'] == 'desc'
    assert [product.id for product in listing.items] == [second, first]


def test_home_does_not_sort_by_stock(app, make_product):
    make_product(name='A')
    with app.test_request_context('/?sort=stock_quantity'):
        assert home_listing(request.args).filters['sort'] == 'created_at'


def test_pages_hold_twelve_products(app, make_product):
    for index in range(13):
        make_product(name=f'Item {index}')

    with app.test_request_context('/?page=2&search=item'):
        listing = home_listing(request.args)
        assert listing.pagination.total == 13
        assert len(listing.items) == 1
        assert 'search=item' in listing.page_url(1)
    with app.test_request_context('/?page=99'):
        assert home_listing(request.args).items == []


def test_category_listing_filters_and_counts(app, make_category, make_product):
    tools = make_category('Tools', description='Hammers and more')
    toys = make_category('Toys')
    make_category('Retired', is_active=False)
    make_product(name='Hammer', category_id=tools)
    make_product(name='Saw', category_id=tools)
    make_product(name='Ball', category_id=toys)

    with app.test_request_context('/categories?sort=products_count&direction=desc&status=active'):
        listing = category_listing(request.args)
    assert [(c.name, c.products_count) for c in listing.items] == [('Tools', 2), ('Toys', 1), ('Electronics', 0)]

    with app.test_request_context('/categories?search=hammers&status=active'):
        assert [c.name for c in category_listing(request.args).items] == ['Tools']
    with app.test_request_context('/categories?status=inactive'):
        assert [c.name for c in category_listing(request.args).items] == ['Retired']


def test_category_pages_hold_ten(app, make_category):
    for index in range(11):
        make_category(f'Category {index}')

    with app.test_request_context('/categories'):
        listing = category_listing(request.args)
    assert listing.pagination.total == 11
    assert len(listing.items) == 10


def test_catalog_stats(app, make_category, make_product):
    toys = make_category('Toys')
    make_category('Retired', is_active=False)
    make_product(name='Ball', category_id=toys)
    make_product(name='Kite', category_id=toys, stock_quantity=0)
    make_product(name='Old ball', category_id=toys, is_active=False)
    make_product(name='Phone')

    with app.test_request_context('/'):
        stats = catalog_stats()
    assert stats['total_products'] == 3
    assert stats['total_categories'] == 2
    assert stats['in_stock_products'] == 2
    assert [(f['category'].name, f['products_count']) for f in stats['featured_categories']] == [
        ('Toys', 2),
        ('Electronics', 1),
    ]


def test_home_page_renders(client, make_product):
    make_product(name='Shown Widget')
    make_product(name='Secret Widget', is_active=False)

    response = client.get('/?search=widget&min_price=oops')
    assert response.status_code == 200
    assert b'Shown Widget' in response.data
    assert b'Secret Widget' not in response.data

