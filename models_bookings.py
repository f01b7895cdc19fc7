# models_bookings.py
from datetime import datetime, date
from typing import Optional
from extensions import db

BOOKING_STATUSES = ("pending", "approved", "rejected")
BLOCKING_STATUSES = ("pending", "approved")

# named slots offered by the booking form when no explicit start/end is given
TIME_SLOTS = {
    "morning":   ("08:00", "12:00"),
    "afternoon": ("12:00", "17:00"),
    "evening":   ("17:00", "22:00"),
    "full_day":  ("08:00", "22:00"),
}

class Booking(db.Model):
    __tablename__ = "bookings"
    id           = db.Column(db.Integer, primary_key=True)
    created_at   = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # requester
    name         = db.Column(db.String(200), nullable=False)
    email        = db.Column(db.String(200), nullable=False, index=True)
    phone        = db.Column(db.String(40), nullable=False)
    organization = db.Column(db.String(200))

    # what / when
    room_id      = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=False, index=True)
    date         = db.Column(db.Date, nullable=False, index=True)
    time_slot    = db.Column(db.String(32))
    start_time   = db.Column(db.String(5))   # HH:MM
    end_time     = db.Column(db.String(5))
    event_type   = db.Column(db.String(120), nullable=False)
    attendees    = db.Column(db.Integer, nullable=False)
    description  = db.Column(db.Text)
    event_image  = db.Column(db.String(300))

    status       = db.Column(db.String(16), default="pending", nullable=False, index=True)  # pending|approved|rejected

    def time_range(self):
        """(start, end) as HH:MM strings; falls back to the named slot, then to the whole day."""
        if self.start_time and self.end_time:
            return self.start_time, self.end_time
        if self.time_slot in TIME_SLOTS:
            return TIME_SLOTS[self.time_slot]
        return "00:00", "23:59"

    def to_dict(self):
        return dict(
            id=self.id,
            createdAt=self.created_at.isoformat() if self.created_at else None,
            name=self.name, email=self.email, phone=self.phone,
            organization=self.organization, roomId=self.room_id,
            date=self.date.isoformat(), timeSlot=self.time_slot,
            startTime=self.start_time, endTime=self.end_time,
            eventType=self.event_type, attendees=self.attendees,
            description=self.description, eventImage=self.event_image,
            status=self.status,
        )

    def to_public_dict(self):
        # calendar view: no requester details
        start, end = self.time_range()
        return dict(id=self.id, roomId=self.room_id, date=self.date.isoformat(),
                    startTime=start, endTime=end, status=self.status)

def _intersects(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    # HH:MM strings compare lexicographically; touching ranges do not conflict
    return a_start < b_end and b_start < a_end

def find_conflict(room_id: int, day: date, start: str, end: str,
                  exclude_id: Optional[int] = None) -> Optional[Booking]:
    """
    First pending/approved booking of the same room and day whose time range
    intersects [start, end), or None.
    """
    q = Booking.query.filter(
        Booking.room_id == room_id,
        Booking.date == day,
        Booking.status.in_(BLOCKING_STATUSES),
    )
    if exclude_id:
        q = q.filter(Booking.id != exclude_id)
    for b in q.order_by(Booking.id).all():
        b_start, b_end = b.time_range()
        if _intersects(start, end, b_start, b_end):
            return b
    return None
