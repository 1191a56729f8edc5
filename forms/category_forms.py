from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, BooleanField, SubmitField
from wtforms.validators import DataRequired, Length, Optional

from forms.validators import strip, none_if_empty


class CategoryForm(FlaskForm):
    name = StringField(_l('Name'), filters=[strip], validators=[
        DataRequired(message=_l('Category name is required.')),
        Length(max=255, message=_l('Category name cannot exceed 255 characters.')),
    ])
    description = TextAreaField(_l('Description'), filters=[strip, none_if_empty], validators=[
        Optional(),
        Length(max=1000, message=_l('The description field must not be greater than 1000 characters.')),
    ])
    is_active = BooleanField(_l('Active'), default=True, false_values=(False, 'false', '', '0', 'off'))
    submit = SubmitField(_l('Save'))
