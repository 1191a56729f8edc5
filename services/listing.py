"""Filtered, sorted and paginated listings for the catalog pages.

Every listing accepts the raw query arguments of the request. Parameters that
are missing, blank or unparseable add no constraint and are not echoed back.
Filters are ANDed together; ``search`` is a single OR group over its columns.
"""
import logging
from decimal import Decimal, InvalidOperation

from flask import current_app, url_for
from sqlalchemy import and_, desc, func, or_

from models import db
from models.category import Category
from models.product import Product

logger = logging.getLogger(__name__)

DEFAULT_SORT = 'created_at'
DEFAULT_DIRECTION = 'desc'

HOME_SORTS = {
    'created_at': Product.created_at,
    'name': Product.name,
    'price': Product.price,
}
PRODUCT_SORTS = {
    'created_at': Product.created_at,
    'updated_at': Product.updated_at,
    'name': Product.name,
    'price': Product.price,
    'stock_quantity': Product.stock_quantity,
}
CATEGORY_SORTS = {
    'created_at': Category.created_at,
    'name': Category.name,
    'products_count': Category.products_count,
}


class Listing:
    """One page of results plus the filters that produced it."""

    def __init__(self, pagination, filters, endpoint):
        self.pagination = pagination
        self.filters = filters
        self.endpoint = endpoint

    @property
    def items(self):
        return self.pagination.items

    def page_url(self, page):
        return url_for(self.endpoint, page=page, **self.filters)

    def links(self):
        """Navigation links for the pager, None marking a gap."""
        links = []
        for page in self.pagination.iter_pages():
            links.append((page, self.page_url(page) if page else None))
        return links


def _text_arg(args, key):
    value = (args.get(key) or '').strip()
    return value or None


def _choice_arg(args, key, choices):
    value = _text_arg(args, key)
    return value if value in choices else None


def _decimal_arg(args, key):
    raw = _text_arg(args, key)
    if raw is None:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        logger.debug('Ignoring unparseable %s=%r', key, raw)
        return None
    if not value.is_finite():
        logger.debug('Ignoring non-finite %s=%r', key, raw)
        return None
    return value


def _page_arg(args):
    page = args.get('page', 1, type=int)
    return page if page and page > 0 else 1


def _sort(args, sorts):
    sort = _text_arg(args, 'sort') or DEFAULT_SORT
    if sort not in sorts:
        logger.debug('Ignoring unknown sort column %r', sort)
        sort = DEFAULT_SORT
    direction = (_text_arg(args, 'direction') or DEFAULT_DIRECTION).lower()
    if direction not in ('asc', 'desc'):
        direction = DEFAULT_DIRECTION
    return sort, direction


def _order(query, column, tiebreaker, direction):
    if direction == 'asc':
        return query.order_by(column.asc(), tiebreaker.asc())
    return query.order_by(column.desc(), tiebreaker.desc())


def _search_clause(term, columns):
    return or_(*[column.icontains(term, autoescape=True) for column in columns])


def _apply_product_filters(query, args, filters, stock_values, search_columns, with_status):
    search = _text_arg(args, 'search')
    if search:
        query = query.filter(_search_clause(search, search_columns))
        filters['search'] = search

    category = args.get('category', type=int)
    if category is not None:
        query = query.filter(Product.category_id == category)
        filters['category'] = category

    if with_status:
        status = _choice_arg(args, 'status', ('active', 'inactive'))
        if status:
            query = query.filter(Product.is_active.is_(status == 'active'))
            filters['status'] = status

    stock = _choice_arg(args, 'stock', stock_values)
    if stock == 'in_stock':
        query = query.filter(Product.stock_quantity > 0)
    elif stock == 'out_of_stock':
        query = query.filter(Product.stock_quantity == 0)
    if stock:
        filters['stock'] = stock

    min_price = _decimal_arg(args, 'min_price')
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
        filters['min_price'] = str(min_price)
    max_price = _decimal_arg(args, 'max_price')
    if max_price is not None:
        query = query.filter(Product.price <= max_price)
        filters['max_price'] = str(max_price)
    return query


def home_listing(args):
    """Active products for the public catalog page."""
    filters = {}
    query = Product.query.filter(Product.is_active.is_(True))
    query = _apply_product_filters(query, args, filters,
                                   stock_values=('in_stock',),
                                   search_columns=(Product.name, Product.description),
                                   with_status=False)
    sort, direction = _sort(args, HOME_SORTS)
    query = _order(query, HOME_SORTS[sort], Product.id, direction)
    filters.update(sort=sort, direction=direction)
    pagination = query.paginate(page=_page_arg(args), per_page=current_app.config['PRODUCTS_PER_PAGE'],
                                error_out=False)
    return Listing(pagination, filters, 'home')


def product_listing(args):
    """All products, any author, for the management page."""
    filters = {}
    query = Product.query
    query = _apply_product_filters(query, args, filters,
                                   stock_values=('in_stock', 'out_of_stock'),
                                   search_columns=(Product.name, Product.description, Product.sku),
                                   with_status=True)
    sort, direction = _sort(args, PRODUCT_SORTS)
    query = _order(query, PRODUCT_SORTS[sort], Product.id, direction)
    filters.update(sort=sort, direction=direction)
    pagination = query.paginate(page=_page_arg(args), per_page=current_app.config['PRODUCTS_PER_PAGE'],
                                error_out=False)
    return Listing(pagination, filters, 'products.list_products')


def category_listing(args):
    filters = {}
    query = Category.query

    search = _text_arg(args, 'search')
    if search:
        query = query.filter(_search_clause(search, (Category.name, Category.description)))
        filters['search'] = search

    status = _choice_arg(args, 'status', ('active', 'inactive'))
    if status:
        query = query.filter(Category.is_active.is_(status == 'active'))
        filters['status'] = status

    sort, direction = _sort(args, CATEGORY_SORTS)
    query = _order(query, CATEGORY_SORTS[sort], Category.id, direction)
    filters.update(sort=sort, direction=direction)
    pagination = query.paginate(page=_page_arg(args), per_page=current_app.config['CATEGORIES_PER_PAGE'],
                                error_out=False)
    return Listing(pagination, filters, 'categories.list_categories')


def active_categories():
    return Category.query.filter(Category.is_active.is_(True)).order_by(Category.name).all()


def catalog_stats():
    active_products = Product.query.filter(Product.is_active.is_(True))
    active_count = func.count(Product.id).label('active_products_count')
    featured = (
        db.session.query(Category, active_count)
        .outerjoin(Product, and_(Product.category_id == Category.id, Product.is_active.is_(True)))
        .filter(Category.is_active.is_(True))
        .group_by(Category.id)
        .order_by(desc('active_products_count'), Category.name)
        .limit(current_app.config['FEATURED_CATEGORIES'])
        .all()
    )
    return {
        'total_products': active_products.count(),
        'total_categories': Category.query.filter(Category.is_active.is_(True)).count(),
        'in_stock_products': active_products.filter(Product.stock_quantity > 0).count(),
        'featured_categories': [
            {'category': category, 'products_count': count} for category, count in featured
        ],
    }
