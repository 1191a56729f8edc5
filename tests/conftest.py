import io
from decimal import Decimal

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.category import Category
from models.product import Product
from models.user import User

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64

USER_EMAIL = 'owner@example.com'
USER_PASSWORD = 'secret-password'


@pytest.fixture
def upload():
    """Build a multipart file tuple; PNG content by default."""
    def _upload(name='photo.png', content=PNG_BYTES):
        return (io.BytesIO(content), name)
    return _upload


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(Config)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    with app.app_context():
        user = User(name='Owner', email=USER_EMAIL)
        user.set_password(USER_PASSWORD)
        db.session.add(user)
        db.session.commit()
        return user.id


@pytest.fixture
def auth_client(client, user):
    response = client.post('/auth/login', data={'email': USER_EMAIL, 'password': USER_PASSWORD})
    assert response.status_code == 302
    return client


@pytest.fixture
def make_category(app):
    def _make_category(name='Electronics', **overrides):
        with app.app_context():
            category = Category(name=name, slug=Category.unique_slug(name), **overrides)
            db.session.add(category)
            db.session.commit()
            return category.id
    return _make_category


@pytest.fixture
def category(make_category):
    return make_category()


@pytest.fixture
def make_product(app, user, category):
    def _make_product(name='Widget', price='10.00', category_id=None, **overrides):
        with app.app_context():
            product = Product(
                name=name,
                price=Decimal(price),
                stock_quantity=overrides.pop('stock_quantity', 5),
                category_id=category_id or category,
                created_by=user,
                **overrides,
            )
            db.session.add(product)
            db.session.commit()
            return product.id
    return _make_product


@pytest.fixture
def product_form(category):
    """Valid form data for creating or updating a product."""
    def _product_form(**overrides):
        data = {
            'name': 'Blue Widget',
            'description': 'A very blue widget.',
            'price': '19.99',
            'sku': 'BW-1',
            'stock_quantity': '7',
            'category_id': str(category),
            'is_active': 'y',
        }
        data.update(overrides)
        return {key: value for key, value in data.items() if value is not None}
    return _product_form
