from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SubmitField
from wtforms.validators import DataRequired, Length, EqualTo, Regexp

from forms.validators import strip

EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'


class LoginForm(FlaskForm):
    email = StringField(_l('Email'), filters=[strip], validators=[DataRequired()])
    password = PasswordField(_l('Password'), validators=[DataRequired()])
    remember = BooleanField(_l('Remember me'))
    submit = SubmitField(_l('Log in'))


class RegisterForm(FlaskForm):
    name = StringField(_l('Name'), filters=[strip], validators=[DataRequired(), Length(max=255)])
    email = StringField(_l('Email'), filters=[strip], validators=[
        DataRequired(),
        Length(max=255),
        Regexp(EMAIL_PATTERN, message=_l('Enter a valid email address.')),
    ])
    password = PasswordField(_l('Password'), validators=[DataRequired(), Length(min=8)])
    confirm = PasswordField(_l('Confirm password'), validators=[
        DataRequired(),
        EqualTo('password', message=_l('Passwords do not match.')),
    ])
    submit = SubmitField(_l('Register'))
