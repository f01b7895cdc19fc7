# models_contact.py
from datetime import datetime
from extensions import db

class ContactMessage(db.Model):
    __tablename__ = "contact_messages"
    id          = db.Column(db.Integer, primary_key=True)
    created_at  = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    name        = db.Column(db.String(200), nullable=False)
    email       = db.Column(db.String(200), nullable=False)
    subject     = db.Column(db.String(200), nullable=False)
    message     = db.Column(db.Text, nullable=False)
    attachments = db.Column(db.JSON)  # ["/uploads/<name>", ...]
    subscribe_to_newsletter = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "attachments": self.attachments,
            "subscribeToNewsletter": self.subscribe_to_newsletter,
        }

class NewsletterSubscriber(db.Model):
    __tablename__ = "newsletter_subscribers"
    id         = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    email      = db.Column(db.String(200), unique=True, nullable=False, index=True)

    def to_dict(self):
        return {"id": self.id, "email": self.email, "createdAt": self.created_at.isoformat()}

def is_subscribed(email: str) -> bool:
    return NewsletterSubscriber.query.filter_by(email=(email or "").strip().lower()).first() is not None

def add_subscriber_if_missing(email: str):
    """Returns (subscriber, created)."""
    email = (email or "").strip().lower()
    row = NewsletterSubscriber.query.filter_by(email=email).first()
    if row:
        return row, False
    row = NewsletterSubscriber(email=email)
    db.session.add(row)
    return row, True
