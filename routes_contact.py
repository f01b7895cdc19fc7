# routes_contact.py
from flask import Blueprint, jsonify, current_app
from extensions import db, limiter
from defense import FORM_LIMIT
from guards import admin_required
from models_contact import ContactMessage, add_subscriber_if_missing
from schemas import ContactIn, parse_body
from services_notify import send_email_notification, create_html_email_body
from services_upload import local_path_for_url

bp_contact = Blueprint("contact", __name__)

@bp_contact.post("/api/contact")
@limiter.limit(FORM_LIMIT)
def create_contact():
    data = parse_body(ContactIn)

    # attachments must point at files this server actually stored
    for url in data.attachments or []:
        path = local_path_for_url(url)
        if path is None or not path.exists():
            return jsonify(ok=False, error="bad_attachment", message=f"Unknown attachment {url}"), 400

    row = ContactMessage(
        name=data.name, email=data.email.lower(), subject=data.subject,
        message=data.message, attachments=data.attachments,
        subscribe_to_newsletter=data.subscribe_to_newsletter,
    )
    db.session.add(row)
    subscribed = False
    if data.subscribe_to_newsletter:
        _, subscribed = add_subscriber_if_missing(row.email)
    db.session.commit()
    current_app.logger.info("[CONTACT] message id=%s newsletter_added=%s", row.id, subscribed)

    form = {
        "name": row.name, "email": row.email, "subject": row.subject,
        "message": row.message, "attachments": row.attachments or [],
        "subscribeToNewsletter": row.subscribe_to_newsletter,
    }
    send_email_notification(
        f"New Contact Form: {row.subject}",
        f"From: {row.name} <{row.email}>\n\n{row.message}",
        create_html_email_body(form),
    )
    return jsonify(ok=True, message=row.to_dict()), 201

@bp_contact.get("/api/admin/contact-messages")
@admin_required
def list_contact_messages():
    rows = ContactMessage.query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()
    return jsonify(ok=True, messages=[r.to_dict() for r in rows])
