# models_events.py
import calendar
from datetime import date
from extensions import db

class Event(db.Model):
    __tablename__ = "events"
    id          = db.Column(db.Integer, primary_key=True)
    title       = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    date        = db.Column(db.Date, nullable=False, index=True)
    start_time  = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time    = db.Column(db.String(5), nullable=False)
    room_id     = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=False)
    category    = db.Column(db.String(64), nullable=False, index=True)  # Meetings|Activities|Community Events|...

    def to_dict(self):
        return dict(
            id=self.id, title=self.title, description=self.description,
            date=self.date.isoformat(), startTime=self.start_time,
            endTime=self.end_time, roomId=self.room_id, category=self.category,
        )

def events_in_month(year: int, month: int):
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    return (Event.query
            .filter(Event.date >= first, Event.date <= last)
            .order_by(Event.date, Event.start_time)
            .all())

def upcoming_events(today: date, limit: int = 5):
    return (Event.query
            .filter(Event.date >= today)
            .order_by(Event.date, Event.start_time)
            .limit(limit)
            .all())
