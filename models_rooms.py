# models_rooms.py
from extensions import db

class Room(db.Model):
    __tablename__ = "rooms"
    id            = db.Column(db.Integer, primary_key=True)

    name          = db.Column(db.String(120), nullable=False, unique=True)
    description   = db.Column(db.Text, nullable=False)
    capacity      = db.Column(db.Integer, nullable=False)
    hourly_rate   = db.Column(db.Integer, nullable=False, default=0)   # USD, 0 = priced locally
    half_day_rate = db.Column(db.Integer, nullable=False, default=0)
    full_day_rate = db.Column(db.Integer, nullable=False, default=0)
    features      = db.Column(db.JSON, nullable=False, default=list)  # ["Stage", "Sound System", ...]
    image_url     = db.Column(db.String(500), nullable=False)

    def to_dict(self):
        return dict(
            id=self.id, name=self.name, description=self.description,
            capacity=self.capacity, hourlyRate=self.hourly_rate,
            halfDayRate=self.half_day_rate, fullDayRate=self.full_day_rate,
            features=list(self.features or []), imageUrl=self.image_url,
        )
