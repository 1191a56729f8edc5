import logging
import random
from decimal import Decimal

from app import create_app
from models import db
from models.category import Category
from models.product import Product
from models.user import User

logger = logging.getLogger(__name__)

CATEGORY_NAMES = [
    'Electronics',
    'Clothing & Fashion',
    'Home & Garden',
    'Sports & Outdoors',
    'Books & Media',
    'Health & Beauty',
    'Toys & Games',
    'Automotive',
    'Food & Beverages',
    'Office Supplies',
    'Pet Supplies',
    'Jewelry & Accessories',
]
ADJECTIVES = ['Classic', 'Compact', 'Deluxe', 'Eco', 'Portable', 'Premium', 'Smart', 'Ultra']
NOUNS = ['Widget', 'Lamp', 'Backpack', 'Speaker', 'Bottle', 'Notebook', 'Kettle', 'Jacket']


def make_product(category, author, **overrides):
    values = {
        'name': f'{random.choice(ADJECTIVES)} {random.choice(NOUNS)}',
        'description': f'A dependable item from our {category.name} range.',
        'price': Decimal(random.randint(100, 99999)) / 100,
        'sku': f'SKU-{random.randint(0, 99999999):08d}',
        'stock_quantity': random.randint(1, 500),
        'is_active': True,
    }
    values.update(overrides)
    return Product(category=category, author=author, **values)


def create_database(app):
    with app.app_context():
        db.drop_all()
        logger.info('Dropped existing tables')
        db.create_all()
        logger.info('Created tables')

        admin = User(name='Admin User', email='admin@example.com')
        admin.set_password('password')
        db.session.add(admin)

        users = [admin]
        for number in range(1, 6):
            user = User(name=f'User {number}', email=f'user{number}@example.com')
            user.set_password('password')
            users.append(user)
            db.session.add(user)

        categories = []
        for name in random.sample(CATEGORY_NAMES, 8):
            category = Category(name=name, slug=Category.unique_slug(name),
                                description=f'Everything in {name}.', is_active=True)
            db.session.add(category)
            db.session.flush()
            categories.append(category)

        for category in categories:
            for _ in range(random.randint(3, 8)):
                db.session.add(make_product(category, random.choice(users)))

        for _ in range(5):
            db.session.add(make_product(random.choice(categories), random.choice(users), stock_quantity=0))
        for _ in range(3):
            db.session.add(make_product(random.choice(categories), random.choice(users), is_active=False))

        db.session.commit()
        logger.info('Seeded %s categories and %s products', len(categories), Product.query.count())
        logger.info('Log in as admin@example.com / password')


if __name__ == '__main__':
    create_database(create_app())
