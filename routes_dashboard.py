# routes_dashboard.py — personal dashboard: engagement metrics, registrations, volunteering
from collections import Counter
from datetime import date
from flask import Blueprint, jsonify, current_app
from sqlalchemy import func
from extensions import db
from guards import login_required, current_user
from models_bookings import Booking
from models_engagement import (
    UserEventRegistration, UserVolunteerHours, UserPreferences, metrics_for,
)
from models_events import Event, upcoming_events
from models_rooms import Room
from schemas import PreferencesIn, VolunteerIn, EventRegisterIn, FeedbackIn, parse_body

bp_dashboard = Blueprint("dashboard", __name__)

PEOPLE_PER_VOLUNTEER_HOUR = 2.5

def _month_back(d: date, n: int) -> date:
    y, m = divmod(d.year * 12 + (d.month - 1) - n, 12)
    return date(y, m + 1, 1)

def participation_by_month(registrations, today: date, months: int = 6):
    """[{month: 'Jan 25', count}] oldest first, counting registered events per calendar month."""
    buckets = [_month_back(today, i) for i in range(months - 1, -1, -1)]
    counts = Counter()
    for reg in registrations:
        ev = reg.event
        if ev and ev.date >= buckets[0]:
            counts[(ev.date.year, ev.date.month)] += 1
    return [{"month": b.strftime("%b %y"), "count": counts[(b.year, b.month)]} for b in buckets]

def frequent_activities(registrations, limit: int = 5):
    c = Counter((reg.event.category if reg.event else "Unknown") for reg in registrations)
    return [{"name": n, "count": k} for n, k in c.most_common(limit)]

def _registrations(user_id: int):
    return (UserEventRegistration.query
            .filter_by(user_id=user_id)
            .order_by(UserEventRegistration.registered_at.desc())
            .all())

@bp_dashboard.get("/api/dashboard")
@login_required
def dashboard():
    user = current_user()
    today = date.today()
    metrics = metrics_for(user.id)
    db.session.commit()

    prefs = db.session.get(UserPreferences, user.id)
    upcoming = upcoming_events(today, limit=5)
    recent_bookings = (Booking.query.filter_by(email=user.email)
                       .order_by(Booking.created_at.desc(), Booking.id.desc()).limit(3).all())
    recent_hours = (UserVolunteerHours.query.filter_by(user_id=user.id)
                    .order_by(UserVolunteerHours.created_at.desc(), UserVolunteerHours.id.desc())
                    .limit(3).all())
    regs = _registrations(user.id)

    if metrics.room_preference:
        rooms = Room.query.filter_by(name=metrics.room_preference).all()
    else:
        rooms = Room.query.order_by(Room.id).limit(2).all()
    # first three categories in the order events were added
    categories = [c for (c,) in db.session.query(Event.category)
                  .group_by(Event.category).order_by(func.min(Event.id)).limit(3)]

    hours = metrics.volunteer_hours or 0
    return jsonify(ok=True, dashboard={
        "metrics": metrics.to_dict(),
        "preferences": prefs.preferences if prefs else {},
        "upcomingEvents": [e.to_dict() for e in upcoming],
        "recentBookings": [b.to_dict() for b in recent_bookings],
        "recentVolunteerHours": [h.to_dict() for h in recent_hours],
        "eventRegistrations": [r.to_dict(with_event=True) for r in regs],
        "recommendations": {
            "events": [e.to_dict() for e in upcoming],
            "rooms": [r.to_dict() for r in rooms],
            "activities": [{"name": c} for c in categories],
        },
        "statistics": {
            "frequentActivities": frequent_activities(regs),
            "participationByMonth": participation_by_month(regs, today),
            "volunteerImpact": {"hours": hours, "peopleImpacted": round(hours * PEOPLE_PER_VOLUNTEER_HOUR)},
        },
    })

@bp_dashboard.post("/api/dashboard/preferences")
@login_required
def update_preferences():
    data = parse_body(PreferencesIn)
    user = current_user()
    prefs = db.session.get(UserPreferences, user.id)
    if prefs is None:
        prefs = UserPreferences(user_id=user.id, preferences=data.preferences)
        db.session.add(prefs)
    else:
        prefs.preferences = data.preferences
    db.session.commit()
    return jsonify(ok=True, preferences=prefs.to_dict())

@bp_dashboard.post("/api/dashboard/volunteer")
@login_required
def log_volunteer_hours():
    data = parse_body(VolunteerIn)
    user = current_user()
    if data.event_id and not db.session.get(Event, data.event_id):
        return jsonify(ok=False, error="event_not_found", message="Event not found"), 404
    row = UserVolunteerHours(user_id=user.id, event_id=data.event_id, hours_logged=data.hours_logged,
                             activity_description=data.activity_description, date=data.date)
    db.session.add(row)
    m = metrics_for(user.id)
    m.volunteer_hours = (m.volunteer_hours or 0) + data.hours_logged
    m.community_points = (m.community_points or 0) + data.hours_logged * 5
    db.session.commit()
    current_app.logger.info("[DASHBOARD] user=%s logged %sh", user.id, data.hours_logged)
    return jsonify(ok=True, volunteerHours=row.to_dict()), 201

@bp_dashboard.post("/api/dashboard/events/register")
@login_required
def register_for_event():
    data = parse_body(EventRegisterIn)
    user = current_user()
    ev = db.session.get(Event, data.event_id)
    if not ev:
        return jsonify(ok=False, error="event_not_found", message="Event not found"), 404
    if db.session.get(UserEventRegistration, (user.id, ev.id)):
        return jsonify(ok=False, error="already_registered", message="Already registered for this event"), 400
    reg = UserEventRegistration(user_id=user.id, event_id=ev.id, status="registered", attended=False)
    db.session.add(reg); db.session.commit()
    return jsonify(ok=True, registration=reg.to_dict(with_event=True)), 201

@bp_dashboard.get("/api/dashboard/events/registrations")
@login_required
def list_registrations():
    regs = _registrations(current_user().id)
    return jsonify(ok=True, registrations=[r.to_dict(with_event=True) for r in regs])

@bp_dashboard.post("/api/dashboard/events/<int:event_id>/feedback")
@login_required
def event_feedback(event_id: int):
    data = parse_body(FeedbackIn)
    user = current_user()
    reg = db.session.get(UserEventRegistration, (user.id, event_id))
    if not reg:
        return jsonify(ok=False, error="registration_not_found", message="Registration not found"), 404

    first_attendance = data.attended and not reg.attended
    if "feedback" in data.model_fields_set:
        reg.feedback = data.feedback
    if "rating" in data.model_fields_set:
        reg.rating = data.rating
    reg.attended = reg.attended or data.attended
    if first_attendance:
        reg.status = "attended"
        m = metrics_for(user.id)
        m.events_attended = (m.events_attended or 0) + 1
        m.community_points = (m.community_points or 0) + 10
    db.session.commit()
    return jsonify(ok=True, registration=reg.to_dict(with_event=True))
