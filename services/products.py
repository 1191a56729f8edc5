import logging

from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.product import Product
from services.images import image_store

logger = logging.getLogger(__name__)


def _assign(product, form):
    product.name = form.name.data
    product.description = form.description.data
    product.price = form.price.data
    product.sku = form.sku.data
    product.stock_quantity = form.stock_quantity.data
    product.category_id = form.category_id.data
    product.is_active = form.is_active.data


def _commit_or_discard(store, staged):
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        store.discard(staged)
        logger.error('Rolled back product write', exc_info=True)
        raise


def create_product(form, author):
    """Persist a validated ``ProductForm`` as a product authored by ``author``.

    The uploaded image, if any, is written before the row so the record never
    points at a file that was not stored.
    """
    store = image_store()
    upload = form.uploaded_image()
    staged = store.stage(upload) if upload else None
    product = Product(author=author, image=staged)
    _assign(product, form)
    db.session.add(product)
    _commit_or_discard(store, staged)
    logger.info('Product %s created by user %s', product.id, author.id)
    return product


def update_product(product, form):
    """Full-record update; a new image replaces the old one, no image keeps it.

    The replacement is staged first, the reference is swapped in the same
    commit as the other fields, and only then is the old file removed.
    """
    store = image_store()
    upload = form.uploaded_image()
    staged = store.stage(upload) if upload else None
    previous = product.image
    _assign(product, form)
    if staged:
        product.image = staged
    _commit_or_discard(store, staged)
    if staged and previous:
        store.discard(previous)
    logger.info('Product %s updated', product.id)
    return product


def delete_product(product):
    image = product.image
    product_id = product.id
    db.session.delete(product)
    db.session.commit()
    image_store().discard(image)
    logger.info('Product %s deleted', product_id)
