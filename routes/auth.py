import logging
from functools import wraps

from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_babel import gettext as _
from flask_login import login_user, logout_user, login_required, current_user

from forms.auth_forms import LoginForm, RegisterForm
from models import db
from models.user import User

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


def identity_required(f):
    """Require a logged-in user and pass it to the view as the first argument."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return current_app.login_manager.unauthorized()
        return f(current_user._get_current_object(), *args, **kwargs)
    return decorated_function


def _safe_next(target):
    # only same-site relative paths
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('products.list_products'))
    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.lower()).first()
        if user and user.check_password(form.password.data):
            login_user(user, remember=form.remember.data)
            logger.info('User %s logged in', user.id)
            flash(_('Logged in successfully.'), 'success')
            return redirect(_safe_next(request.args.get('next')) or url_for('products.list_products'))
        flash(_('These credentials do not match our records.'), 'danger')
    return render_template('auth/login.html', title=_('Log in'), form=form)


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    form = RegisterForm()
    if form.validate_on_submit():
        email = form.email.data.lower()
        if User.query.filter_by(email=email).first():
            form.email.errors.append(_('The email has already been taken.'))
        else:
            user = User(name=form.name.data, email=email)
            user.set_password(form.password.data)
            db.session.add(user)
            db.session.commit()
            logger.info('User %s registered', user.id)
            login_user(user)
            flash(_('Your account has been created.'), 'success')
            return redirect(url_for('products.list_products'))
    return render_template('auth/register.html', title=_('Register'), form=form)


@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    flash(_('You have been logged out.'), 'success')
    return redirect(url_for('home'))
