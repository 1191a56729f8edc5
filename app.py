import logging
from datetime import datetime, timezone

from flask import Flask, render_template, redirect, url_for, request, jsonify, send_from_directory
from flask_babel import Babel, gettext as _
from flask_login import LoginManager, login_required
from flask_wtf.csrf import CSRFProtect

from config import Config
from models import db
from models.category import Category
from models.user import User
from services.listing import home_listing, catalog_stats

# Initialize extensions
login_manager = LoginManager()
babel = Babel()
csrf = CSRFProtect()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    db.init_app(app)
    login_manager.init_app(app)
    csrf.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.localize_callback = _
    login_manager.login_message_category = 'warning'

    def get_locale():
        return app.config['BABEL_DEFAULT_LOCALE']
    babel.init_app(app, locale_selector=get_locale)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Register Blueprints
    from routes.auth import auth_bp
    app.register_blueprint(auth_bp)
    from routes.products import products_bp
    app.register_blueprint(products_bp)
    from routes.categories import categories_bp
    app.register_blueprint(categories_bp)

    @app.route('/')
    def home():
        listing = home_listing(request.args)
        categories = (Category.query
                      .filter(Category.is_active.is_(True))
                      .order_by(Category.name)
                      .all())
        return render_template('home.html',
                               title=_('Catalog'),
                               listing=listing,
                               products=listing.items,
                               categories=categories,
                               stats=catalog_stats(),
                               filters=listing.filters)

    @app.route('/dashboard')
    @login_required
    def dashboard():
        return redirect(url_for('products.list_products'))

    @app.route('/health-check')
    def health_check():
        timestamp = datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
        return jsonify({'status': 'ok', 'timestamp': timestamp})

    @app.route('/uploads/<path:path>')
    def uploads(path):
        return send_from_directory(app.config['UPLOAD_FOLDER'], path)

    @app.cli.command('init-db')
    def init_db():
        """Create the catalog tables."""
        db.create_all()
        app.logger.info('Created catalog tables')

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
