import logging
import os
import sys

from dotenv import load_dotenv
from flask import Flask, jsonify
from logtail import LogtailHandler

from models import db
from seed import seed_catalog

# Blueprints
from modules.auth.routes import auth_bp, login_manager
from modules.careers import bp as careers_bp
from modules.catalog.routes import catalog_bp
from modules.dashboard.routes import dashboard_bp
from modules.roadmap.routes import roadmap_bp
from modules.skills.routes import skills_bp

load_dotenv()


# -------------------- App factory ----------------------
def create_app(config_overrides=None):
    app = Flask(__name__)

    # Logging
    handlers = [logging.StreamHandler(sys.stdout)]
    token = os.getenv("LOGTAIL_TOKEN")
    if token:
        handlers.append(LogtailHandler(source_token=token))
    logging.basicConfig(level=logging.INFO, handlers=handlers)
    app.logger.handlers = handlers
    app.logger.setLevel(logging.INFO)

    # Core config
    secret = os.getenv("SECRET_KEY") or os.getenv("FLASK_SECRET_KEY") or "dev-secret-key"
    app.config["SECRET_KEY"] = secret

    db_url = os.getenv("DATABASE_URL") or os.getenv("DEV_DATABASE_URI") or "sqlite:///skillwise.db"
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)
    app.config["SQLALCHEMY_DATABASE_URI"] = db_url
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["MAX_CONTENT_LENGTH"] = 5 * 1024 * 1024  # 5MB uploads

    is_prod = os.getenv("FLASK_ENV") == "production" or os.getenv("ENV") == "production"
    if is_prod:
        app.config.update(
            SESSION_COOKIE_SECURE=True,
            SESSION_COOKIE_SAMESITE="Lax",
            REMEMBER_COOKIE_SECURE=True,
        )
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    # Tests and scripts
    if config_overrides:
        app.config.update(config_overrides)

    # Extensions
    db.init_app(app)
    login_manager.init_app(app)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(skills_bp, url_prefix="/skills")
    app.register_blueprint(careers_bp)
    app.register_blueprint(roadmap_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(dashboard_bp, url_prefix="/dashboard")

    @app.route("/health")
    def health():
        return jsonify({"ok": True, "status": "healthy"})

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"ok": False, "error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"ok": False, "error": "Method not allowed"}), 405

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"ok": False, "error": "File too large (max 5MB)"}), 413

    @app.errorhandler(500)
    def srv_error(e):
        try:
            app.logger.exception("Unhandled 500 error")
            db.session.rollback()
        except Exception:
            pass
        return jsonify({"ok": False, "error": "Internal server error"}), 500

    @app.teardown_request
    def _teardown_request(exc):
        if exc:
            try:
                db.session.rollback()
            except Exception:
                pass

    # No migration tooling: tables are created in place, catalog seeded once
    with app.app_context():
        if app.config.get("AUTO_CREATE_TABLES", os.getenv("AUTO_CREATE_TABLES", "1") == "1"):
            db.create_all()
            seed_catalog()

    return app
