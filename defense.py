# defense.py — community center backend
# Basic defense: rate limits, scanner user agents and probe paths.

import os
from flask import request, abort
from extensions import limiter

DEFAULT_LIMIT    = os.getenv("RATE_LIMIT_DEFAULT", "200/minute")
LOGIN_LIMIT      = os.getenv("RATE_LIMIT_LOGIN", "10/minute")
FORM_LIMIT       = os.getenv("RATE_LIMIT_FORMS", "20/minute")   # contact, bookings, donations
NEWSLETTER_LIMIT = os.getenv("RATE_LIMIT_NEWSLETTER", "10/minute")

BAD_UA = ("sqlmap", "nmap", "nikto", "acunetix", "dirbuster", "wpscan")
BAD_PATHS = ("/wp-admin", "/wp-login", "/phpmyadmin", "/.env", "/.git", "/server-status")


def init_defense(app):
    """Enables the defenses on a Flask app. Returns True when done."""
    # 1) Rate limiting (RATELIMIT_ENABLED=False turns it off, e.g. in tests)
    app.config.setdefault("RATELIMIT_DEFAULT", DEFAULT_LIMIT)
    app.config.setdefault("RATELIMIT_STORAGE_URI", os.getenv("RATELIMIT_STORAGE_URI", "memory://"))
    limiter.init_app(app)
    if app.config.get("RATELIMIT_ENABLED", True):
        app.logger.info("[DEFENSE] Rate limit ON (%s, login %s)", app.config["RATELIMIT_DEFAULT"], LOGIN_LIMIT)
    else:
        app.logger.info("[DEFENSE] Rate limit OFF")

    # 2) Simple agent and path filters
    @app.before_request
    def _pre_block():
        path = (request.path or "").lower()
        ua = (request.headers.get("User-Agent") or "").lower()

        if any(bad in ua for bad in BAD_UA):
            abort(403)
        if any(path.startswith(p) for p in BAD_PATHS):
            abort(404)  # looks like nothing is there

    return True
