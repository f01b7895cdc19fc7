# routes_newsletter.py — subscriptions, signed unsubscribe links, admin compose/send
import os
from datetime import datetime, timedelta
from flask import Blueprint, request, jsonify, current_app, url_for
import jwt

from extensions import db, limiter
from defense import NEWSLETTER_LIMIT
from guards import admin_required
from models_contact import NewsletterSubscriber, add_subscriber_if_missing
from schemas import NewsletterSubscribeIn, NewsletterComposeIn, parse_body
from services_notify import send_newsletter

bp_newsletter = Blueprint("newsletter", __name__)

# ---------- Config ----------
JWT_SECRET = os.getenv("JWT_SECRET", "acc-dev-secret")
UNSUB_TTL_DAYS = int(os.getenv("UNSUBSCRIBE_TTL_DAYS", "365"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")

# ---------- JWT helpers ----------
def _secret():
    return current_app.config.get("JWT_SECRET", JWT_SECRET)

def make_unsubscribe_token(email: str) -> str:
    payload = {
        "sub": f"unsubscribe:{email}",
        "email": email,
        "exp": datetime.utcnow() + timedelta(days=UNSUB_TTL_DAYS),
        "iat": datetime.utcnow(),
        "iss": "community-center",
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")

def read_unsubscribe_token(token: str) -> str:
    """Email carried by a valid token; raises jwt.InvalidTokenError otherwise."""
    payload = jwt.decode(token, _secret(), algorithms=["HS256"],
                         options={"require": ["exp", "iat", "iss"]}, issuer="community-center")
    if not str(payload.get("sub", "")).startswith("unsubscribe:") or not payload.get("email"):
        raise jwt.InvalidTokenError("bad subject")
    return payload["email"]

def unsubscribe_url(email: str) -> str:
    token = make_unsubscribe_token(email)
    base = current_app.config.get("PUBLIC_BASE_URL", PUBLIC_BASE_URL).rstrip("/")
    if base:
        return f"{base}{url_for('newsletter.unsubscribe', token=token)}"
    return url_for("newsletter.unsubscribe", token=token, _external=True)

# ---------- Endpoints ----------
@bp_newsletter.post("/api/newsletter/subscribe")
@limiter.limit(NEWSLETTER_LIMIT)
def subscribe():
    data = parse_body(NewsletterSubscribeIn)
    row, created = add_subscriber_if_missing(data.email)
    if not created:
        return jsonify(ok=True, status="already_subscribed", message="Email already subscribed",
                       subscriber=row.to_dict()), 200
    db.session.commit()
    current_app.logger.info("[NEWSLETTER] subscribed id=%s", row.id)
    return jsonify(ok=True, status="subscribed", message="Subscribed successfully", subscriber=row.to_dict()), 201

@bp_newsletter.get("/api/newsletter/unsubscribe")
def unsubscribe():
    token = (request.args.get("token") or "").strip()
    if not token:
        return jsonify(ok=False, error="missing_token"), 400
    try:
        email = read_unsubscribe_token(token)
    except jwt.InvalidTokenError as e:
        return jsonify(ok=False, error="invalid_or_expired", message=str(e)), 400

    row = NewsletterSubscriber.query.filter_by(email=email).first()
    if row:
        sub_id = row.id
        db.session.delete(row); db.session.commit()
        current_app.logger.info("[NEWSLETTER] unsubscribed id=%s", sub_id)
    return jsonify(ok=True, message="You have been unsubscribed")

@bp_newsletter.get("/api/admin/newsletter-subscribers")
@admin_required
def admin_list_subscribers():
    rows = NewsletterSubscriber.query.order_by(NewsletterSubscriber.created_at.desc(),
                                               NewsletterSubscriber.id.desc()).all()
    return jsonify(ok=True, subscribers=[r.to_dict() for r in rows])

@bp_newsletter.delete("/api/admin/newsletter-subscribers/<int:sub_id>")
@admin_required
def admin_delete_subscriber(sub_id: int):
    row = db.session.get(NewsletterSubscriber, sub_id)
    if not row:
        return jsonify(ok=False, error="subscriber_not_found"), 404
    db.session.delete(row); db.session.commit()
    return jsonify(ok=True, message="Subscriber removed")

@bp_newsletter.post("/api/admin/send-newsletter")
@admin_required
def admin_send_newsletter():
    data = parse_body(NewsletterComposeIn)
    if data.test_mode:
        if not send_newsletter(data.subject, data.content, [], test_email=data.test_email):
            return jsonify(ok=False, error="send_failed", message="Test newsletter could not be sent"), 500
        return jsonify(ok=True, testMode=True, recipients=1,
                       message=f"Test newsletter sent to {data.test_email}")

    emails = [r.email for r in NewsletterSubscriber.query.order_by(NewsletterSubscriber.id).all()]
    if not emails:
        return jsonify(ok=False, error="no_subscribers", message="There are no subscribers yet"), 400
    ok = send_newsletter(data.subject, data.content, emails, unsubscribe_url_for=unsubscribe_url)
    if not ok:
        return jsonify(ok=False, error="send_failed", message="Newsletter could not be sent"), 500
    return jsonify(ok=True, testMode=False, recipients=len(emails),
                   message=f"Newsletter sent to {len(emails)} subscribers")
