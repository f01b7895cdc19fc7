# models_engagement.py — per-user dashboard data
from datetime import datetime
from extensions import db

class UserEngagementMetrics(db.Model):
    __tablename__ = "user_engagement_metrics"
    id                    = db.Column(db.Integer, primary_key=True)
    user_id               = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"),
                                      unique=True, nullable=False, index=True)
    bookings_count        = db.Column(db.Integer, default=0, nullable=False)
    events_attended       = db.Column(db.Integer, default=0, nullable=False)
    donations_count       = db.Column(db.Integer, default=0, nullable=False)
    total_donation_amount = db.Column(db.Integer, default=0, nullable=False)
    volunteer_hours       = db.Column(db.Integer, default=0, nullable=False)
    community_points      = db.Column(db.Integer, default=0, nullable=False)
    room_preference       = db.Column(db.String(120))
    activity_preference   = db.Column(db.String(120))
    last_updated          = db.Column(db.DateTime, default=datetime.utcnow,
                                      onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return dict(
            userId=self.user_id, bookingsCount=self.bookings_count,
            eventsAttended=self.events_attended, donationsCount=self.donations_count,
            totalDonationAmount=self.total_donation_amount,
            volunteerHours=self.volunteer_hours, communityPoints=self.community_points,
            roomPreference=self.room_preference, activityPreference=self.activity_preference,
            lastUpdated=self.last_updated.isoformat() if self.last_updated else None,
        )

class UserEventRegistration(db.Model):
    __tablename__ = "user_event_registrations"
    user_id       = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    event_id      = db.Column(db.Integer, db.ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    registered_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    status        = db.Column(db.String(16), default="registered", nullable=False)
    attended      = db.Column(db.Boolean, default=False, nullable=False)
    feedback      = db.Column(db.Text)
    rating        = db.Column(db.Integer)  # 1..5

    event = db.relationship("Event", lazy="joined")

    def to_dict(self, with_event=False):
        d = dict(
            userId=self.user_id, eventId=self.event_id,
            registeredAt=self.registered_at.isoformat() if self.registered_at else None,
            status=self.status, attended=self.attended,
            feedback=self.feedback, rating=self.rating,
        )
        if with_event:
            d["event"] = self.event.to_dict() if self.event else None
        return d

class UserVolunteerHours(db.Model):
    __tablename__ = "user_volunteer_hours"
    id                   = db.Column(db.Integer, primary_key=True)
    created_at           = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    user_id              = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"),
                                     nullable=False, index=True)
    event_id             = db.Column(db.Integer, db.ForeignKey("events.id", ondelete="SET NULL"))
    hours_logged         = db.Column(db.Integer, nullable=False)
    activity_description = db.Column(db.Text, nullable=False)
    date                 = db.Column(db.Date, nullable=False)
    verified_by          = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"))

    def to_dict(self):
        return dict(
            id=self.id, userId=self.user_id, eventId=self.event_id,
            hoursLogged=self.hours_logged, activityDescription=self.activity_description,
            date=self.date.isoformat(), verifiedBy=self.verified_by,
            createdAt=self.created_at.isoformat() if self.created_at else None,
        )

class UserPreferences(db.Model):
    __tablename__ = "user_preferences"
    user_id     = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    preferences = db.Column(db.JSON, nullable=False, default=dict)
    created_at  = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at  = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return dict(userId=self.user_id, preferences=self.preferences or {},
                    updatedAt=self.updated_at.isoformat() if self.updated_at else None)

def metrics_for(user_id: int) -> UserEngagementMetrics:
    """Existing metrics row for the user, or a new (pending) one with zeroed counters."""
    m = UserEngagementMetrics.query.filter_by(user_id=user_id).first()
    if not m:
        m = UserEngagementMetrics(user_id=user_id, bookings_count=0, events_attended=0,
                                  donations_count=0, total_donation_amount=0,
                                  volunteer_hours=0, community_points=0)
        db.session.add(m)
    return m
