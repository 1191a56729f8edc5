from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_babel import gettext as _

from forms.category_forms import CategoryForm
from models import db
from models.category import Category
from models.product import Product
from routes.auth import identity_required
from services.categories import CategoryHasProducts, create_category, update_category, delete_category
from services.listing import category_listing

categories_bp = Blueprint('categories', __name__, url_prefix='/categories')


@categories_bp.route('')
@identity_required
def list_categories(identity):
    listing = category_listing(request.args)
    return render_template('categories/list.html', title=_('Categories'), listing=listing,
                           categories=listing.items, filters=listing.filters)


@categories_bp.route('', methods=['POST'])
@categories_bp.route('/create', methods=['GET', 'POST'])
@identity_required
def add_category(identity):
    form = CategoryForm()
    if form.validate_on_submit():
        create_category(form)
        flash(_('Category created successfully.'), 'success')
        return redirect(url_for('categories.list_categories'))
    return render_template('categories/form.html', title=_('New category'), form=form)


@categories_bp.route('/<int:category_id>')
@identity_required
def show_category(identity, category_id):
    category = db.get_or_404(Category, category_id)
    products = (Product.query
                .filter(Product.category_id == category.id, Product.is_active.is_(True))
                .order_by(Product.created_at.desc(), Product.id.desc())
                .all())
    return render_template('categories/show.html', title=category.name, category=category, products=products)


@categories_bp.route('/<int:category_id>', methods=['PUT'])
@categories_bp.route('/<int:category_id>/edit', methods=['GET', 'POST'])
@identity_required
def edit_category(identity, category_id):
    category = db.get_or_404(Category, category_id)
    form = CategoryForm(obj=category)
    if form.validate_on_submit():
        update_category(category, form)
        flash(_('Category updated successfully.'), 'success')
        return redirect(url_for('categories.list_categories'))
    return render_template('categories/form.html', title=_('Edit category'), form=form, category=category, edit=True)


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
@categories_bp.route('/<int:category_id>/delete', methods=['POST'])
@identity_required
def destroy_category(identity, category_id):
    category = db.get_or_404(Category, category_id)
    try:
        delete_category(category)
    except CategoryHasProducts:
        flash(_('Cannot delete category that has products. Please move or delete all products first.'), 'danger')
        return redirect(url_for('categories.show_category', category_id=category_id))
    flash(_('Category deleted successfully.'), 'success')
    return redirect(url_for('categories.list_categories'))
