# rollodex/__init__.py
import os
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from flask import Flask, request, jsonify, send_from_directory
from flask.logging import default_handler
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_talisman import Talisman
from sqlalchemy import text

from .config import get_config_by_name
from .models import db
from .errors import register_error_handlers
from .audit_log_service import AuditLogService
from .database import register_db_commands

# Stateless until bound to an app in create_app
migrate = Migrate()
jwt = JWTManager()

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'


def configure_logging(app):
    log_level_str = app.config.get('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    if app.testing:
        return

    if app.debug:
        handler = logging.StreamHandler()
        log_level = logging.DEBUG
    elif app.config.get('LOG_FILE'):
        log_file = app.config['LOG_FILE']
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024 * 100, backupCount=20)
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(log_level)
    app.logger.removeHandler(default_handler)
    if not app.logger.handlers:
        app.logger.addHandler(handler)
    app.logger.setLevel(log_level)


def create_app(config_name=None, config_overrides=None):
    app_config = get_config_by_name(config_name)

    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    app = Flask(__name__, instance_path=os.path.join(project_root, 'instance'))
    app.config.from_object(app_config)
    if config_overrides:
        app.config.update(config_overrides)
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    configure_logging(app)
    app.logger.info(f"ROLLodex API starting with config: {app_config.__name__}")
    app.logger.info(f"Upload folder: {app.config['UPLOAD_FOLDER']}")

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # Per-app limiter so counters never leak between app instances
    app.limiter = Limiter(key_func=get_remote_address, app=app)

    Talisman(
        app,
        content_security_policy=None,
        force_https=app.config.get('TALISMAN_FORCE_HTTPS', False),
        strict_transport_security=app.config.get('TALISMAN_FORCE_HTTPS', False),
        frame_options='DENY',
        referrer_policy='strict-origin-when-cross-origin',
    )

    cors_origins = [origin.strip() for origin in app.config.get("CORS_ORIGINS", "*").split(',')]
    CORS(app, resources={r"/api/*": {"origins": cors_origins}, r"/uploads/*": {"origins": cors_origins}},
         supports_credentials=True)
    app.logger.info(f"CORS configured for origins: {cors_origins}")

    app.audit_log_service = AuditLogService(app=app)

    register_error_handlers(app)
    register_db_commands(app)

    if app.config.get('AUTO_CREATE_TABLES'):
        with app.app_context():
            db.create_all()

    # Register Blueprints
    from .auth.routes import auth_bp
    app.register_blueprint(auth_bp)
    app.limiter.limit(app.config.get('AUTH_RATELIMITS', "20 per minute"))(auth_bp)

    from .users.routes import users_bp
    app.register_blueprint(users_bp)

    from .brands import brands_bp
    app.register_blueprint(brands_bp)

    from .relationships.routes import relationships_bp
    app.register_blueprint(relationships_bp)

    from .analytics.routes import analytics_bp
    app.register_blueprint(analytics_bp)

    app.logger.info("Blueprints registered.")

    @app.before_request
    def log_request():
        app.logger.info(f"{request.method} {request.path}")

    @app.route('/health')
    @app.limiter.exempt
    def health():
        database = 'connected'
        try:
            db.session.execute(text('SELECT 1'))
        except Exception as e:
            db.session.rollback()
            app.logger.error(f"Health check database probe failed: {e}")
            database = 'disconnected'
        healthy = database == 'connected'
        return jsonify({
            "status": 'ok' if healthy else 'degraded',
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": app.config.get('ENVIRONMENT', 'development'),
            "version": app.config.get('API_VERSION'),
            "database": database,
        }), 200 if healthy else 503

    @app.route(app.config.get('UPLOAD_URL_PREFIX', '/uploads') + '/<path:filepath>')
    def serve_upload(filepath):
        # send_from_directory refuses paths that escape UPLOAD_FOLDER
        return send_from_directory(app.config['UPLOAD_FOLDER'], filepath)

    return app
