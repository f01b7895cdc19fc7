# routes_events.py — public calendar of events and the admin editor
from datetime import date
from flask import Blueprint, request, jsonify, current_app
from extensions import db
from guards import admin_required
from models_engagement import UserEventRegistration, UserVolunteerHours
from models_events import Event, events_in_month
from models_rooms import Room
from schemas import EventIn, parse_body

bp_events = Blueprint("events", __name__)

def _event_or_error(raw_id: str):
    """(event, None) or (None, error response)."""
    try:
        event_id = int(raw_id)
    except (TypeError, ValueError):
        return None, (jsonify(ok=False, error="invalid_event_id", message="Invalid event ID"), 400)
    ev = db.session.get(Event, event_id)
    if not ev:
        return None, (jsonify(ok=False, error="event_not_found", message="Event not found"), 404)
    return ev, None

def _room_missing(room_id: int):
    if db.session.get(Room, room_id):
        return None
    return jsonify(ok=False, error="room_not_found", message="Room not found"), 404

# --- public ------------------------------------------------------------------
@bp_events.get("/api/events")
def list_events():
    year = request.args.get("year", type=int)
    month = request.args.get("month", type=int)
    if year or month:
        if not (year and month and 1 <= month <= 12):
            return jsonify(ok=False, error="bad_month", message="year and month (1-12) go together"), 400
        rows = events_in_month(year, month)
    else:
        q = Event.query
        if request.args.get("upcoming"):
            q = q.filter(Event.date >= date.today())
        rows = q.order_by(Event.date, Event.start_time).all()
    return jsonify(ok=True, events=[e.to_dict() for e in rows])

@bp_events.get("/api/events/<event_id>")
def get_event(event_id):
    ev, err = _event_or_error(event_id)
    if err: return err
    return jsonify(ok=True, event=ev.to_dict())

# --- admin -------------------------------------------------------------------
@bp_events.get("/api/admin/events")
@admin_required
def admin_list_events():
    rows = Event.query.order_by(Event.date.desc(), Event.start_time).all()
    return jsonify(ok=True, events=[e.to_dict() for e in rows])

@bp_events.post("/api/admin/events")
@admin_required
def admin_create_event():
    data = parse_body(EventIn)
    err = _room_missing(data.room_id)
    if err: return err
    ev = Event(**data.model_dump())
    db.session.add(ev); db.session.commit()
    current_app.logger.info("[EVENTS] created id=%s %s", ev.id, ev.title)
    return jsonify(ok=True, event=ev.to_dict()), 201

@bp_events.get("/api/admin/events/<event_id>")
@admin_required
def admin_get_event(event_id):
    ev, err = _event_or_error(event_id)
    if err: return err
    return jsonify(ok=True, event=ev.to_dict())

@bp_events.put("/api/admin/events/<event_id>")
@admin_required
def admin_update_event(event_id):
    ev, err = _event_or_error(event_id)
    if err: return err
    data = parse_body(EventIn)
    err = _room_missing(data.room_id)
    if err: return err
    for k, v in data.model_dump().items():
        setattr(ev, k, v)
    db.session.commit()
    current_app.logger.info("[EVENTS] updated id=%s", ev.id)
    return jsonify(ok=True, event=ev.to_dict())

@bp_events.delete("/api/admin/events/<event_id>")
@admin_required
def admin_delete_event(event_id):
    ev, err = _event_or_error(event_id)
    if err: return err
    UserEventRegistration.query.filter_by(event_id=ev.id).delete()
    UserVolunteerHours.query.filter_by(event_id=ev.id).update({"event_id": None})
    db.session.delete(ev); db.session.commit()
    current_app.logger.info("[EVENTS] deleted id=%s", event_id)
    return jsonify(ok=True, message="Event deleted successfully")
