from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def _error_body(status: int, title: str, detail: str, code: str):
    return {
        'error': {
            'status': status,
            'title': title,
            'detail': detail,
            'code': code,
        }
    }


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    from .config.defaults import load_defaults
    app.config.update(load_defaults())

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)
    _register_jwt_handlers()

    from .services.notifier import build_notifier
    app.extensions['notifier'] = build_notifier(app.config)

    from .routes.auth import auth_bp
    from .routes.catalog import catalog_bp
    from .routes.sales import sales_bp
    from .routes.team import team_bp
    from .routes.account import account_bp
    from .routes.analytics import analytics_bp
    from .routes.uploads import uploads_bp
    from .routes.audit import audit_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(catalog_bp, url_prefix='/catalog')
    app.register_blueprint(sales_bp, url_prefix='/sales')
    app.register_blueprint(team_bp, url_prefix='/team')
    app.register_blueprint(account_bp)  # /account/* and /settings/*
    app.register_blueprint(analytics_bp, url_prefix='/analytics')
    app.register_blueprint(uploads_bp, url_prefix='/uploads')
    app.register_blueprint(audit_bp, url_prefix='/audit')

    @app.before_request
    def _reset_principal():
        # g outlives a request when the caller already holds an app context
        from flask import g
        g.pop('principal', None)

    @app.teardown_appcontext
    def _remove_session(exc=None):
        # a fresh session per request keeps the identity map from serving stale rows
        SessionLocal.remove()

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    from .errors import DashboardError

    @app.errorhandler(DashboardError)
    def handle_domain_error(e):  # type: ignore
        if e.status >= 500:
            app.logger.warning('%s: %s', e.code, e.detail)
        return e.to_payload(), e.status

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            return _error_body(e.code, e.name, e.description, e.name.replace(' ', '')), e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return _error_body(500, 'Internal Server Error', 'Unexpected error', 'InternalServerError'), 500

    return app


def _register_jwt_handlers():
    # Token problems share the envelope used by every other 401
    @jwt.unauthorized_loader
    def _missing_token(reason):
        return _error_body(401, 'Unauthorized', reason, 'Unauthorized'), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return _error_body(401, 'Unauthorized', reason, 'Unauthorized'), 401

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return _error_body(401, 'Unauthorized', 'Token has expired', 'Unauthorized'), 401


def get_db():
    return SessionLocal()
