# models_auth.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db

ROLES = ("user", "admin")

class User(db.Model):
    __tablename__ = "users"
    id            = db.Column(db.Integer, primary_key=True)
    created_at    = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    email         = db.Column(db.String(200), unique=True, index=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    name          = db.Column(db.String(200), nullable=False)
    role          = db.Column(db.String(16), default="user", nullable=False)  # user|admin

    last_login_at       = db.Column(db.DateTime)
    profile_picture_url = db.Column(db.String(300))

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        if not self.password_hash or not raw:
            return False
        return check_password_hash(self.password_hash, raw)

    def to_dict(self):
        # never expose password_hash
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "lastLoginAt": self.last_login_at.isoformat() if self.last_login_at else None,
            "profilePictureUrl": self.profile_picture_url,
        }

def find_user_by_email(email: str):
    return User.query.filter_by(email=(email or "").strip().lower()).first()
