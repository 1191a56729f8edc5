import logging

from sqlalchemy.exc import IntegrityError

from models import db
from models.category import Category
from models.product import Product

logger = logging.getLogger(__name__)


class CategoryHasProducts(Exception):
    """The category still owns products and cannot be deleted."""

    def __init__(self, category, products_count):
        super().__init__(f'category {category.id} owns {products_count} product(s)')
        self.category = category
        self.products_count = products_count


def create_category(form):
    category = Category(
        name=form.name.data,
        description=form.description.data,
        is_active=form.is_active.data,
        slug=Category.unique_slug(form.name.data),
    )
    db.session.add(category)
    db.session.commit()
    logger.info('Category %s created (%s)', category.id, category.slug)
    return category


def update_category(category, form):
    if form.name.data != category.name:
        category.slug = Category.unique_slug(form.name.data, exclude_id=category.id)
    category.name = form.name.data
    category.description = form.description.data
    category.is_active = form.is_active.data
    db.session.commit()
    logger.info('Category %s updated', category.id)
    return category


def delete_category(category):
    """Delete ``category`` unless it owns products.

    The count and the delete run in one transaction with the category row
    locked, and the RESTRICT foreign key rejects a product inserted in between.
    Raises ``CategoryHasProducts`` and leaves everything unchanged otherwise.
    """
    db.session.query(Category).filter(Category.id == category.id).with_for_update().one()
    products_count = Product.query.filter(Product.category_id == category.id).count()
    if products_count > 0:
        db.session.rollback()
        logger.warning('Refused to delete category %s: %s product(s) attached', category.id, products_count)
        raise CategoryHasProducts(category, products_count)

    category_id = category.id
    db.session.delete(category)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning('Category %s gained products while being deleted', category_id)
        raise CategoryHasProducts(category, 1) from exc
    logger.info('Category %s deleted', category_id)
