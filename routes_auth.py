# routes_auth.py — cookie-session accounts: register, login, logout, profile
from datetime import datetime
from flask import Blueprint, jsonify, current_app

from extensions import db, limiter
from defense import LOGIN_LIMIT
from guards import current_user, login_user, logout_user, login_required
from models_auth import User, find_user_by_email
from models_engagement import metrics_for
from schemas import RegisterIn, LoginIn, ProfileUpdateIn, parse_body

bp_auth = Blueprint("auth", __name__)

@bp_auth.post("/api/register")
@bp_auth.post("/api/auth/register")
@limiter.limit(LOGIN_LIMIT)
def register():
    data = parse_body(RegisterIn)
    email = data.email.lower()
    if find_user_by_email(email):
        return jsonify(ok=False, error="email_already_registered", message="Email already registered"), 400

    # public sign-up never grants admin
    u = User(name=data.name, email=email, role="user")
    u.set_password(data.password)
    db.session.add(u); db.session.flush()
    metrics_for(u.id)
    db.session.commit()

    login_user(u)
    current_app.logger.info("[AUTH] registered user id=%s", u.id)
    return jsonify(ok=True, user=u.to_dict()), 201

@bp_auth.post("/api/login")
@bp_auth.post("/api/auth/login")
@limiter.limit(LOGIN_LIMIT)
def login():
    data = parse_body(LoginIn)
    u = find_user_by_email(data.email)
    if not u or not u.check_password(data.password):
        current_app.logger.info("[AUTH] failed login for %s", data.email)
        return jsonify(ok=False, error="invalid_credentials", message="Invalid email or password"), 400

    u.last_login_at = datetime.utcnow()
    db.session.commit()
    login_user(u)
    return jsonify(ok=True, user=u.to_dict())

@bp_auth.post("/api/logout")
@bp_auth.post("/api/auth/logout")
def logout():
    logout_user()
    return jsonify(ok=True)

@bp_auth.get("/api/user")
@bp_auth.get("/api/auth/me")
@login_required
def me():
    return jsonify(ok=True, user=current_user().to_dict())

@bp_auth.put("/api/user")
@login_required
def update_profile():
    data = parse_body(ProfileUpdateIn)
    u = current_user()
    if data.name is not None:
        u.name = data.name
    if "profile_picture_url" in data.model_fields_set:
        u.profile_picture_url = data.profile_picture_url
    if data.password:
        u.set_password(data.password)
    db.session.commit()
    return jsonify(ok=True, user=u.to_dict())
