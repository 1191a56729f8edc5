from decimal import Decimal

from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileAllowed, FileSize
from werkzeug.datastructures import FileStorage
from wtforms import StringField, TextAreaField, SelectField, IntegerField, DecimalField, BooleanField, SubmitField
from wtforms.validators import DataRequired, Length, NumberRange, Optional, ValidationError

from forms.validators import Filled, Parsed, ImageContent, strip, none_if_empty
from models import db
from models.category import Category
from models.product import Product

IMAGE_EXTENSIONS = ['jpeg', 'png', 'jpg', 'gif', 'webp']
MAX_IMAGE_SIZE = 2 * 1024 * 1024
MAX_PRICE = Decimal('999999.99')
MAX_STOCK = 999999


class ProductForm(FlaskForm):
    name = StringField(_l('Name'), filters=[strip], validators=[
        DataRequired(message=_l('Product name is required.')),
        Length(max=255, message=_l('Product name cannot exceed 255 characters.')),
    ])
    description = TextAreaField(_l('Description'), filters=[strip, none_if_empty], validators=[
        Optional(),
        Length(max=2000, message=_l('The description field must not be greater than 2000 characters.')),
    ])
    price = DecimalField(_l('Price'), places=2, validators=[
        Filled(message=_l('Product price is required.')),
        Parsed(_l('Price must be a valid number.')),
        NumberRange(min=0, message=_l('Price cannot be negative.')),
        NumberRange(max=MAX_PRICE, message=_l('Price cannot exceed 999,999.99.')),
    ])
    sku = StringField(_l('SKU'), filters=[strip, none_if_empty], validators=[
        Optional(),
        Length(max=100, message=_l('The sku field must not be greater than 100 characters.')),
    ])
    stock_quantity = IntegerField(_l('Stock quantity'), validators=[
        Filled(message=_l('Stock quantity is required.')),
        Parsed(_l('Stock quantity must be a whole number.')),
        NumberRange(min=0, message=_l('Stock quantity cannot be negative.')),
        NumberRange(max=MAX_STOCK, message=_l('The stock quantity field must not be greater than 999999.')),
    ])
    category_id = SelectField(_l('Category'), coerce=int, validate_choice=False, validators=[
        Filled(message=_l('Please select a category.')),
        Parsed(_l('Selected category does not exist.')),
    ])
    image = FileField(_l('Image'), validators=[
        ImageContent(_l('File must be an image.')),
        FileAllowed(IMAGE_EXTENSIONS, message=_l('Image must be a JPEG, PNG, JPG, GIF, or WebP file.')),
        FileSize(max_size=MAX_IMAGE_SIZE, message=_l('Image size cannot exceed 2MB.')),
    ])
    is_active = BooleanField(_l('Active'), default=True, false_values=(False, 'false', '', '0', 'off'))
    submit = SubmitField(_l('Save'))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # the product being edited, None on create
        self.product = kwargs.get('obj')

    def uploaded_image(self):
        """The newly uploaded file, or None when the request carried no image."""
        data = self.image.data
        # on edit the field falls back to the stored path string
        if isinstance(data, FileStorage) and data:
            return data
        return None

    def validate_sku(self, field):
        query = Product.query.filter(Product.sku == field.data)
        if self.product is not None:
            query = query.filter(Product.id != self.product.id)
        if query.first() is not None:
            raise ValidationError(_l('A product with this SKU already exists.'))

    def validate_category_id(self, field):
        if db.session.get(Category, field.data) is None:
            raise ValidationError(_l('Selected category does not exist.'))
