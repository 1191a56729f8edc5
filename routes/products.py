from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_babel import gettext as _
from sqlalchemy.exc import IntegrityError

from forms.product_forms import ProductForm
from models import db
from models.category import Category
from models.product import Product
from routes.auth import identity_required
from services.images import ImageStorageError
from services.listing import product_listing, active_categories
from services.products import create_product, update_product, delete_product

products_bp = Blueprint('products', __name__, url_prefix='/products')


def _category_choices(product=None):
    categories = active_categories()
    # keep the current category selectable even when it was deactivated
    if product is not None and product.category is not None and product.category not in categories:
        categories.append(product.category)
    return [(c.id, c.name) for c in categories]


def _save_failed(form, exc):
    if isinstance(exc, ImageStorageError):
        flash(_('The image could not be stored. Please try again.'), 'danger')
    elif db.session.get(Category, form.category_id.data) is None:
        # removed between validation and commit
        form.category_id.errors.append(_('Selected category does not exist.'))
    else:
        form.sku.errors.append(_('A product with this SKU already exists.'))


@products_bp.route('')
@identity_required
def list_products(identity):
    listing = product_listing(request.args)
    return render_template('products/list.html', title=_('Products'), listing=listing,
                           products=listing.items, filters=listing.filters,
                           categories=active_categories())


@products_bp.route('', methods=['POST'])
@products_bp.route('/create', methods=['GET', 'POST'])
@identity_required
def add_product(identity):
    form = ProductForm()
    form.category_id.choices = _category_choices()
    if form.validate_on_submit():
        try:
            product = create_product(form, author=identity)
        except (ImageStorageError, IntegrityError) as exc:
            _save_failed(form, exc)
        else:
            flash(_('Product created successfully.'), 'success')
            return redirect(url_for('products.show_product', product_id=product.id))
    return render_template('products/form.html', title=_('New product'), form=form)


@products_bp.route('/<int:product_id>')
@identity_required
def show_product(identity, product_id):
    product = db.get_or_404(Product, product_id)
    return render_template('products/show.html', title=product.name, product=product)


@products_bp.route('/<int:product_id>', methods=['PUT'])
@products_bp.route('/<int:product_id>/edit', methods=['GET', 'POST'])
@identity_required
def edit_product(identity, product_id):
    product = db.get_or_404(Product, product_id)
    form = ProductForm(obj=product)
    form.category_id.choices = _category_choices(product)
    if form.validate_on_submit():
        try:
            update_product(product, form)
        except (ImageStorageError, IntegrityError) as exc:
            _save_failed(form, exc)
        else:
            flash(_('Product updated successfully.'), 'success')
            return redirect(url_for('products.show_product', product_id=product.id))
    return render_template('products/form.html', title=_('Edit product'), form=form, product=product, edit=True)


@products_bp.route('/<int:product_id>', methods=['DELETE'])
@products_bp.route('/<int:product_id>/delete', methods=['POST'])
@identity_required
def destroy_product(identity, product_id):
    product = db.get_or_404(Product, product_id)
    delete_product(product)
    flash(_('Product deleted successfully.'), 'success')
    return redirect(url_for('products.list_products'))
