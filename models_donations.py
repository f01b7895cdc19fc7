# models_donations.py
from datetime import datetime
from sqlalchemy import func
from extensions import db

class Donation(db.Model):
    __tablename__ = "donations"
    id           = db.Column(db.Integer, primary_key=True)
    created_at   = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    name         = db.Column(db.String(200), nullable=False)
    email        = db.Column(db.String(200), nullable=False)
    amount       = db.Column(db.Integer, nullable=False)  # whole USD
    is_recurring = db.Column(db.Boolean, default=False, nullable=False)
    is_anonymous = db.Column(db.Boolean, default=False, nullable=False)
    message      = db.Column(db.Text)
    image_url    = db.Column(db.String(300))

    def to_dict(self):
        return dict(
            id=self.id, createdAt=self.created_at.isoformat() if self.created_at else None,
            name=self.name, email=self.email, amount=self.amount,
            isRecurring=self.is_recurring, isAnonymous=self.is_anonymous,
            message=self.message, imageUrl=self.image_url,
        )

def total_donations() -> int:
    return int(db.session.query(func.coalesce(func.sum(Donation.amount), 0)).scalar() or 0)
