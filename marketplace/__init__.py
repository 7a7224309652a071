from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from marketplace.logger import get_logger
from marketplace.services.notifications.dispatcher import NotificationDispatcher

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://"  # Use Redis in production for distributed systems
)
notifier = NotificationDispatcher()


def _env_flag(name, default):
    """Read a boolean flag from the environment"""
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(test_config=None):
    """
    Application factory.

    Configuration comes from environment variables (see generate_env.py);
    values in ``test_config`` override them.
    """
    from pathlib import Path

    base_dir = Path(__file__).parent.parent

    app = Flask(__name__, instance_path=str(base_dir / 'instance'))

    # Get singleton logger
    logger = get_logger("marketplace")
    logger.info("Initializing Flask application")

    # SECURITY: Require SECRET_KEY in environment - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    app.config['APP_ENV'] = os.environ.get('APP_ENV', 'development')

    # Prefer an explicit DATABASE_URL; otherwise keep the SQLite file in instance/
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        instance_dir = Path(app.instance_path)
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'marketplace.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Session cookie security configuration
    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['PERMANENT_SESSION_LIFETIME'] = int(os.environ.get('PERMANENT_SESSION_LIFETIME', '3600'))
    app.config['REMEMBER_COOKIE_SECURE'] = app.config['SESSION_COOKIE_SECURE']
    app.config['REMEMBER_COOKIE_HTTPONLY'] = True

    # Rate limiting
    app.config['RATELIMIT_DEFAULT'] = os.environ.get('RATELIMIT_DEFAULT', '200 per day;50 per hour')
    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')

    # Notifications and mail transport
    app.config['NOTIFICATIONS_ENABLED'] = _env_flag('NOTIFICATIONS_ENABLED', 'True')
    app.config['NOTIFICATION_MODE'] = os.environ.get('NOTIFICATION_MODE', 'thread')
    app.config['NOTIFICATION_WORKERS'] = int(os.environ.get('NOTIFICATION_WORKERS', '2'))
    app.config['SMTP_HOST'] = os.environ.get('SMTP_HOST')
    app.config['SMTP_PORT'] = int(os.environ.get('SMTP_PORT', '587'))
    app.config['SMTP_USER'] = os.environ.get('SMTP_USER')
    app.config['SMTP_PASS'] = os.environ.get('SMTP_PASS')
    app.config['SMTP_USE_TLS'] = _env_flag('SMTP_USE_TLS', 'True')
    app.config['MAIL_SENDER_ALIAS'] = os.environ.get('MAIL_SENDER_ALIAS', 'Marketplace Orders')

    if test_config:
        app.config.update(test_config)

    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    if app.config['APP_ENV'] != 'production':
        logger.warning("APP_ENV is not 'production' - error responses include exception details")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    notifier.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from marketplace.data.core.user import User
    from marketplace.data.core.vendor import Vendor
    from marketplace.data.catalog.listing import Listing
    from marketplace.data.orders.order import Order

    logger.debug("Models imported and registered")

    # Register blueprints
    from marketplace.auth import auth
    from marketplace.presentation.routes import init_app as init_routes

    app.register_blueprint(auth, url_prefix='/auth')
    init_routes(app)

    logger.info("Flask application initialization complete")

    return app
