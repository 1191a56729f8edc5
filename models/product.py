from sqlalchemy import func, select

from models import db
from models.category import Category


class Product(db.Model):
    __tablename__ = 'products'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False, index=True)
    sku = db.Column(db.String(100), unique=True, nullable=True)
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    image = db.Column(db.String(255), nullable=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='RESTRICT'), nullable=False, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, default=db.func.current_timestamp(), onupdate=db.func.current_timestamp())

    category = db.relationship('Category', back_populates='products')
    author = db.relationship('User', back_populates='products')

    __table_args__ = (
        db.Index('ix_products_active_category', 'is_active', 'category_id'),
        db.Index('ix_products_active_created', 'is_active', 'created_at'),
    )

    @property
    def in_stock(self):
        return self.stock_quantity > 0

    @property
    def image_url(self):
        if not self.image:
            return None
        from services.images import image_store
        return image_store().url_for(self.image)

    def __repr__(self):
        return f'<Product {self.name}>'


Category.products_count = db.column_property(
    select(func.count(Product.id))
    .where(Product.category_id == Category.id)
    .correlate_except(Product)
    .scalar_subquery()
)
