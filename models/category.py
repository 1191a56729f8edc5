import re
import unicodedata

from models import db


def slugify(value):
    """Turn a category name into a lower-case, dash separated ASCII slug."""
    value = unicodedata.normalize('NFKD', value).encode('ascii', 'ignore').decode('ascii')
    value = re.sub(r'[^\w\s-]', '', value.lower())
    return re.sub(r'[-\s_]+', '-', value).strip('-')


class Category(db.Model):
    __tablename__ = 'categories'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, default=db.func.current_timestamp(), onupdate=db.func.current_timestamp())

    # no delete cascade: categories that own products are never deleted
    products = db.relationship('Product', back_populates='category', passive_deletes='all')

    __table_args__ = (
        db.Index('ix_categories_active_created', 'is_active', 'created_at'),
    )

    @staticmethod
    def unique_slug(name, exclude_id=None):
        base = slugify(name)[:240] or 'category'
        slug = base
        suffix = 2
        while True:
            query = Category.query.filter(Category.slug == slug)
            if exclude_id is not None:
                query = query.filter(Category.id != exclude_id)
            if query.first() is None:
                return slug
            slug = f'{base}-{suffix}'
            suffix += 1

    def __repr__(self):
        return f'<Category {self.slug}>'
