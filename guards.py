# guards.py — session-based access checks for API routes
from functools import wraps
from flask import session, jsonify
from extensions import db
from models_auth import User

def current_user():
    """User stored in the cookie session, or None. A stale id (deleted user) clears the session."""
    uid = session.get("user_id")
    if uid is None:
        return None
    user = db.session.get(User, uid)
    if user is None:
        session.clear()
    return user

def login_user(user: User):
    session.clear()
    session["user_id"] = user.id
    session.permanent = True

def logout_user():
    session.clear()

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return jsonify(ok=False, error="authentication_required", message="Not authenticated"), 401
        return fn(*args, **kwargs)
    return wrapper

def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            return jsonify(ok=False, error="authentication_required", message="Not authenticated"), 401
        if not user.is_admin:
            return jsonify(ok=False, error="admin_required", message="Admin access required"), 403
        return fn(*args, **kwargs)
    return wrapper
