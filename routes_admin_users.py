# routes_admin_users.py — account management for administrators
from flask import Blueprint, jsonify, current_app
from extensions import db
from guards import admin_required, current_user
from models_auth import User, find_user_by_email
from models_engagement import (
    metrics_for, UserEngagementMetrics, UserEventRegistration, UserVolunteerHours, UserPreferences,
)
from schemas import AdminUserIn, AdminUserUpdateIn, parse_body

bp_admin_users = Blueprint("admin_users", __name__)

@bp_admin_users.get("/api/admin/users")
@admin_required
def list_users():
    rows = User.query.order_by(User.id).all()
    return jsonify(ok=True, users=[u.to_dict() for u in rows])

@bp_admin_users.post("/api/admin/users")
@admin_required
def create_user():
    data = parse_body(AdminUserIn)
    email = data.email.lower()
    if find_user_by_email(email):
        return jsonify(ok=False, error="email_already_registered", message="Email already registered"), 400
    u = User(name=data.name, email=email, role=data.role)
    u.set_password(data.password)
    db.session.add(u); db.session.flush()
    metrics_for(u.id)
    db.session.commit()
    current_app.logger.info("[ADMIN] user created id=%s role=%s", u.id, u.role)
    return jsonify(ok=True, user=u.to_dict()), 201

@bp_admin_users.put("/api/admin/users/<int:user_id>")
@admin_required
def update_user(user_id: int):
    u = db.session.get(User, user_id)
    if not u:
        return jsonify(ok=False, error="user_not_found"), 404
    data = parse_body(AdminUserUpdateIn)
    if data.email:
        email = data.email.lower()
        other = find_user_by_email(email)
        if other and other.id != u.id:
            return jsonify(ok=False, error="email_already_registered", message="Email already in use"), 400
        u.email = email
    if data.name:
        u.name = data.name
    if data.role:
        u.role = data.role
    if data.password:
        u.set_password(data.password)
    db.session.commit()
    current_app.logger.info("[ADMIN] user updated id=%s", u.id)
    return jsonify(ok=True, user=u.to_dict())

@bp_admin_users.delete("/api/admin/users/<int:user_id>")
@admin_required
def delete_user(user_id: int):
    if user_id == current_user().id:
        return jsonify(ok=False, error="cannot_delete_self", message="You cannot delete your own account"), 400
    u = db.session.get(User, user_id)
    if not u:
        return jsonify(ok=False, error="user_not_found"), 404
    for model in (UserEngagementMetrics, UserEventRegistration, UserVolunteerHours, UserPreferences):
        model.query.filter_by(user_id=u.id).delete()
    db.session.delete(u); db.session.commit()
    current_app.logger.info("[ADMIN] user deleted id=%s", user_id)
    return jsonify(ok=True, message="User deleted")
