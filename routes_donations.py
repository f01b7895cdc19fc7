# routes_donations.py — pledges toward the building fund (no payment processing here)
import os
from flask import Blueprint, jsonify, current_app
from extensions import db, limiter
from defense import FORM_LIMIT
from guards import admin_required, current_user
from models_donations import Donation, total_donations
from models_engagement import metrics_for
from schemas import DonationIn, parse_body
from services_notify import send_email_notification, create_html_email_body

DONATION_GOAL = int(os.getenv("DONATION_GOAL", "250000"))

bp_donations = Blueprint("donations", __name__)

@bp_donations.post("/api/donations")
@limiter.limit(FORM_LIMIT)
def create_donation():
    data = parse_body(DonationIn)
    d = Donation(
        name=data.name, email=data.email.lower(), amount=data.amount,
        is_recurring=data.is_recurring, is_anonymous=data.is_anonymous,
        message=data.message, image_url=data.image_url,
    )
    db.session.add(d)
    user = current_user()
    if user:
        m = metrics_for(user.id)
        m.donations_count = (m.donations_count or 0) + 1
        m.total_donation_amount = (m.total_donation_amount or 0) + d.amount
        m.community_points = (m.community_points or 0) + 5
    db.session.commit()
    current_app.logger.info("[DONATION] id=%s amount=%s recurring=%s", d.id, d.amount, d.is_recurring)

    form = d.to_dict()
    form.pop("id", None); form.pop("createdAt", None)
    send_email_notification(
        f"New Donation: ${d.amount}",
        f"{d.name} <{d.email}> pledged ${d.amount}{' monthly' if d.is_recurring else ''}.",
        create_html_email_body(form),
    )
    return jsonify(ok=True, donation=d.to_dict()), 201

@bp_donations.get("/api/donations/total")
def donations_total():
    goal = current_app.config.get("DONATION_GOAL", DONATION_GOAL)
    return jsonify(ok=True, total=total_donations(), goal=goal)

@bp_donations.get("/api/admin/donations")
@admin_required
def admin_list_donations():
    rows = Donation.query.order_by(Donation.created_at.desc(), Donation.id.desc()).all()
    return jsonify(ok=True, donations=[d.to_dict() for d in rows], total=total_donations())
