# models_uploads.py
from datetime import datetime
from extensions import db

class SiteImage(db.Model):
    __tablename__ = "site_images"
    id          = db.Column(db.Integer, primary_key=True)
    created_at  = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    name        = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    image_url   = db.Column(db.String(300), nullable=False)  # /uploads/<name> or absolute URL
    category    = db.Column(db.String(64), nullable=False, index=True)  # hero|gallery|rooms|...
    width       = db.Column(db.Integer)
    height      = db.Column(db.Integer)

    def to_dict(self):
        return dict(
            id=self.id, createdAt=self.created_at.isoformat() if self.created_at else None,
            name=self.name, description=self.description, imageUrl=self.image_url,
            category=self.category, width=self.width, height=self.height,
        )
