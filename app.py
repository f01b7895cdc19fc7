# app.py — Alnwick Community Center backend (pages + JSON API + uploads)
import os, logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from flask import Flask, jsonify, request, render_template
from flask_cors import CORS
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from extensions import db
from defense import init_defense
from schemas import validation_payload

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_DB = f"sqlite:///{(BASE_DIR / 'community_center.db').as_posix()}"

SQLALCHEMY_DATABASE_URI = DEFAULT_DB
_raw_db = os.environ.get("DATABASE_URL")
if _raw_db:
    if _raw_db.startswith("postgres://"):
        _raw_db = _raw_db.replace("postgres://", "postgresql+psycopg2://", 1)
    elif _raw_db.startswith("postgresql://"):
        _raw_db = _raw_db.replace("postgresql://", "postgresql+psycopg2://", 1)
    if "sslmode=" not in _raw_db and "+psycopg2://" in _raw_db and "localhost" not in _raw_db:
        _raw_db += ("&" if "?" in _raw_db else "?") + "sslmode=require"
    SQLALCHEMY_DATABASE_URI = _raw_db

ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 300}

SECRET_KEY       = os.getenv("SECRET_KEY", "acc-dev-secret")
JWT_SECRET       = os.getenv("JWT_SECRET", SECRET_KEY)
UPLOAD_DIR       = os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
DONATION_GOAL    = int(os.getenv("DONATION_GOAL", "250000"))
CORS_ORIGINS     = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
CREATE_ALL       = os.getenv("CREATE_ALL", "true").lower() in {"1", "true", "yes"}
EMAIL_SENDING_ENABLED = os.getenv("EMAIL_SENDING_ENABLED", "false").lower() in {"1", "true", "yes"}

def _import_models():
    """Models must be imported before create_all()."""
    for modname in ("models_auth", "models_rooms", "models_bookings", "models_events",
                    "models_donations", "models_contact", "models_uploads", "models_engagement"):
        __import__(modname)

def create_app(test_config=None):
    app = Flask(__name__)

    app.config.update(
        SECRET_KEY=SECRET_KEY,
        JWT_SECRET=JWT_SECRET,
        SQLALCHEMY_DATABASE_URI=SQLALCHEMY_DATABASE_URI,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SQLALCHEMY_ENGINE_OPTIONS=ENGINE_OPTIONS,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        UPLOAD_DIR=UPLOAD_DIR,
        MAX_UPLOAD_BYTES=MAX_UPLOAD_BYTES,
        # whole request: up to 5 files of MAX_UPLOAD_BYTES plus form fields
        MAX_CONTENT_LENGTH=5 * MAX_UPLOAD_BYTES + 1024 * 1024,
        DONATION_GOAL=DONATION_GOAL,
        EMAIL_SENDING_ENABLED=EMAIL_SENDING_ENABLED,
        CREATE_ALL=CREATE_ALL,
    )
    if test_config:
        app.config.update(test_config)
    if "sqlite" in app.config["SQLALCHEMY_DATABASE_URI"]:
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {}

    _init_logging(app)
    db.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": CORS_ORIGINS}}, supports_credentials=True)
    init_defense(app)
    Path(app.config["UPLOAD_DIR"]).mkdir(parents=True, exist_ok=True)

    _import_models()
    if app.config["CREATE_ALL"]:
        with app.app_context():
            db.create_all()
            app.logger.info("DB create_all() OK")

    # ---------- Blueprints ----------
    from routes_auth import bp_auth
    from routes_uploads import bp_uploads
    from routes_rooms import bp_rooms
    from routes_bookings import bp_bookings
    from routes_events import bp_events
    from routes_donations import bp_donations
    from routes_contact import bp_contact
    from routes_newsletter import bp_newsletter
    from routes_site_images import bp_site_images
    from routes_admin_users import bp_admin_users
    from routes_dashboard import bp_dashboard
    from routes_pages import bp_pages

    for bp in (bp_auth, bp_uploads, bp_rooms, bp_bookings, bp_events, bp_donations, bp_contact,
               bp_newsletter, bp_site_images, bp_admin_users, bp_dashboard, bp_pages):
        app.register_blueprint(bp)

    _init_errors(app)
    _init_cli(app)

    # ---------- Health ----------
    @app.get("/health")
    @app.get("/healthz")
    def health():
        return jsonify(ok=True, service="community-center-backend")

    return app

def _wants_json() -> bool:
    return request.path.startswith("/api/") or request.path.startswith("/uploads/")

def _init_errors(app):
    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return jsonify(validation_payload(e)), 400

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(e):
        limit = app.config["MAX_UPLOAD_BYTES"] // (1024 * 1024)
        return jsonify(ok=False, error="file_too_large",
                       message=f"File exceeds the {limit} MB limit"), 413

    @app.errorhandler(HTTPException)
    def _http_error(e):
        if _wants_json():
            code = (e.name or "error").lower().replace(" ", "_")
            return jsonify(ok=False, error=code, message=e.description), e.code
        if e.code == 404:
            return render_template("404.html", title="Page Not Found"), 404
        return e

    @app.errorhandler(Exception)
    def _unexpected(e):
        db.session.rollback()
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify(ok=False, error="server_error", message="Internal server error"), 500

def _init_cli(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        db.create_all()
        app.logger.info("DB create_all() OK")

    @app.cli.command("seed-db")
    def seed_db_command():
        """Load rooms, a year of recurring events and the admin account."""
        from seed import seed_all
        db.create_all()
        counts = seed_all()
        app.logger.info("Seed done: %s", counts)

def _init_logging(app):
    app.logger.setLevel(logging.INFO)
    if app.config.get("TESTING"):
        return
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    sh = logging.StreamHandler(); sh.setFormatter(fmt); app.logger.addHandler(sh)
    logs_dir = BASE_DIR / "logs"
    try:
        logs_dir.mkdir(exist_ok=True)
        fh = RotatingFileHandler(logs_dir / "backend.log", maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        fh.setFormatter(fmt); app.logger.addHandler(fh)
    except OSError as e:
        app.logger.warning("File logging disabled: %s", e)
    app.logger.info("Logging ready")

if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "10000")), debug=True)
