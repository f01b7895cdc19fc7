# routes_bookings.py — room booking requests, calendar slots, admin approval
from datetime import datetime, date
import re
from typing import Optional
from flask import Blueprint, request, jsonify, current_app
from extensions import db, limiter
from defense import FORM_LIMIT
from guards import admin_required, current_user
from models_bookings import Booking, TIME_SLOTS, find_conflict
from models_engagement import metrics_for
from models_rooms import Room
from schemas import BookingIn, BookingStatusIn, HHMM, parse_body
from services_notify import send_email_notification, create_html_email_body

bp_bookings = Blueprint("bookings", __name__)

_HHMM_RE = re.compile(HHMM)

def _parse_date(s: Optional[str]) -> Optional[date]:
    if not s: return None
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None

def _requested_range(time_slot, start_time, end_time):
    """(start, end) of a request, or None when it names neither a known slot nor a valid range."""
    if start_time and end_time:
        if not (_HHMM_RE.match(start_time) and _HHMM_RE.match(end_time)) or end_time <= start_time:
            return None
        return start_time, end_time
    return TIME_SLOTS.get(time_slot or "")

# --- Availability ------------------------------------------------------------
@bp_bookings.get("/api/bookings/availability")
def availability():
    room_id = request.args.get("room_id", type=int)
    day = _parse_date(request.args.get("date"))
    rng = _requested_range(request.args.get("time_slot"),
                           request.args.get("start_time"), request.args.get("end_time"))
    if not room_id or not day or not rng:
        return jsonify(ok=False, error="missing_params",
                       message="room_id, date and a time slot or start_time/end_time are required"), 400
    if not db.session.get(Room, room_id):
        return jsonify(ok=False, error="room_not_found"), 404

    clash = find_conflict(room_id, day, rng[0], rng[1])
    return jsonify(ok=True, roomId=room_id, date=day.isoformat(),
                   startTime=rng[0], endTime=rng[1], available=clash is None)

# --- Calendar ----------------------------------------------------------------
@bp_bookings.get("/api/bookings")
def calendar_slots():
    q = Booking.query.filter(Booking.status.in_(("pending", "approved")))
    if request.args.get("date"):
        day = _parse_date(request.args.get("date"))
        if not day:
            return jsonify(ok=False, error="bad_date", message="date must be YYYY-MM-DD"), 400
        q = q.filter(Booking.date == day)
    room_id = request.args.get("room_id", type=int)
    if room_id:
        q = q.filter(Booking.room_id == room_id)
    rows = q.order_by(Booking.date, Booking.start_time, Booking.id).limit(500).all()
    return jsonify(ok=True, bookings=[b.to_public_dict() for b in rows])

# --- Create ------------------------------------------------------------------
@bp_bookings.post("/api/bookings")
@limiter.limit(FORM_LIMIT)
def create_booking():
    data = parse_body(BookingIn)
    room = db.session.get(Room, data.room_id)
    if not room:
        return jsonify(ok=False, error="room_not_found", message="Room not found"), 404

    rng = _requested_range(data.time_slot, data.start_time, data.end_time)
    if not rng:
        return jsonify(ok=False, error="invalid_time_slot",
                       message=f"Unknown time slot; use one of {', '.join(TIME_SLOTS)}"), 400
    if data.attendees > room.capacity:
        return jsonify(ok=False, error="over_capacity",
                       message=f"{room.name} holds at most {room.capacity} people"), 400

    clash = find_conflict(room.id, data.date, rng[0], rng[1])
    if clash:
        return jsonify(ok=False, error="time_conflict",
                       message="The room is already booked for that time",
                       conflict=clash.to_public_dict()), 409

    b = Booking(
        name=data.name, email=data.email.lower(), phone=data.phone,
        organization=data.organization, room_id=room.id, date=data.date,
        time_slot=data.time_slot, start_time=rng[0], end_time=rng[1],
        event_type=data.event_type, attendees=data.attendees,
        description=data.description, event_image=data.event_image,
        status="pending",
    )
    db.session.add(b)
    user = current_user()
    if user:
        m = metrics_for(user.id)
        m.bookings_count = (m.bookings_count or 0) + 1
        m.community_points = (m.community_points or 0) + 10
    db.session.commit()
    current_app.logger.info("[BOOKING] id=%s room=%s %s %s-%s", b.id, room.id, b.date, rng[0], rng[1])

    form = b.to_dict()
    form.pop("id", None); form.pop("createdAt", None)
    form["room"] = room.name
    send_email_notification(
        f"New Booking Request: {room.name} on {b.date.isoformat()}",
        f"{b.name} <{b.email}> requested {room.name} on {b.date} {rng[0]}-{rng[1]} for {b.event_type}.",
        create_html_email_body(form),
    )
    return jsonify(ok=True, booking=b.to_dict()), 201

# --- Admin -------------------------------------------------------------------
@bp_bookings.get("/api/admin/bookings")
@admin_required
def admin_list_bookings():
    q = Booking.query
    status = (request.args.get("status") or "").lower()
    if status in ("pending", "approved", "rejected"):
        q = q.filter(Booking.status == status)
    rows = q.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    return jsonify(ok=True, bookings=[b.to_dict() for b in rows])

@bp_bookings.patch("/api/admin/bookings/<int:booking_id>")
@admin_required
def admin_set_status(booking_id: int):
    b = db.session.get(Booking, booking_id)
    if not b:
        return jsonify(ok=False, error="booking_not_found"), 404
    data = parse_body(BookingStatusIn)

    # re-opening or approving must not collide with another live booking
    if data.status in ("pending", "approved") and b.status == "rejected":
        start, end = b.time_range()
        if find_conflict(b.room_id, b.date, start, end, exclude_id=b.id):
            return jsonify(ok=False, error="time_conflict",
                           message="Another booking now holds that time"), 409

    b.status = data.status
    db.session.commit()
    current_app.logger.info("[BOOKING] id=%s -> %s", b.id, b.status)
    return jsonify(ok=True, booking=b.to_dict())
