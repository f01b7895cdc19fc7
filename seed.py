# seed.py — sample rooms, a year of recurring events and the admin account (`flask seed-db`)
import os
import calendar
from datetime import date, timedelta
from flask import current_app
from extensions import db
from models_auth import User, find_user_by_email
from models_engagement import metrics_for
from models_events import Event
from models_rooms import Room

ADMIN_EMAIL    = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
ADMIN_NAME     = os.getenv("ADMIN_NAME", "Admin User")
SEED_YEAR      = int(os.getenv("SEED_YEAR", "0")) or None

ROOMS = [
    dict(name="Gymnasium",
         description="Our largest space, perfect for community events, performances, basketball games, and large "
                     "gatherings. Features a stage for music and playwrite performances, plus a full basketball "
                     "court for sports activities. Can accommodate up to 200 people.",
         capacity=200, hourly_rate=40, half_day_rate=120, full_day_rate=250,
         features=["Stage", "Tables and Chairs", "Basketball Court"],
         image_url="https://images.unsplash.com/photo-1519167758481-83f550bb49b3?auto=format&fit=crop&w=1200&q=80"),
    dict(name="Community Room",
         description="Versatile space perfect for gatherings, celebrations, and entertainment events. Features a "
                     "stage for music and karaoke performances.",
         capacity=50, hourly_rate=30, half_day_rate=100, full_day_rate=180,
         features=["Stage", "Sound System", "Flexible Seating"],
         image_url="https://images.unsplash.com/photo-1572177191856-3cde618dee1f?auto=format&fit=crop&w=1200&q=80"),
    dict(name="Community Kitchen",
         description="Fully equipped kitchen available for cooking classes, community meals, and event catering "
                     "preparation.",
         capacity=5, hourly_rate=10, half_day_rate=40, full_day_rate=80,
         features=["Appliances", "Prep Area"],
         image_url="https://images.pexels.com/photos/1267320/pexels-photo-1267320.jpeg?auto=compress&w=1260"),
    dict(name="Classroom",
         description="Versatile classroom space ideal for educational workshops, training sessions, and small "
                     "group activities.",
         capacity=30, hourly_rate=25, half_day_rate=100, full_day_rate=180,
         features=["Flexible Seating"],
         image_url="https://images.unsplash.com/photo-1509062522246-3755977927d7?auto=format&fit=crop&w=1200&q=80"),
    dict(name="Baseball Field",
         description="Regulation-sized baseball field with dugouts, perfect for baseball and softball games, "
                     "practices, and tournaments. Pricing will be determined locally at time of booking.",
         capacity=100, hourly_rate=0, half_day_rate=0, full_day_rate=0,
         features=["Dugouts", "Lighting", "Bleacher Seating", "Local Pricing"],
         image_url="/images/baseball-youth.jpg"),
    dict(name="Soccer Field",
         description="Well-maintained soccer field suitable for matches, practices, and sports events. Pricing "
                     "will be determined locally at time of booking.",
         capacity=150, hourly_rate=0, half_day_rate=0, full_day_rate=0,
         features=["Goal Posts", "Lighting", "Field Markings", "Local Pricing"],
         image_url="https://images.unsplash.com/photo-1553778263-73a83bab9b0c?auto=format&fit=crop&w=1200&q=80"),
    dict(name="Outdoor Pavilion",
         description="Covered outdoor pavilion with picnic tables, perfect for family gatherings, BBQs, and "
                     "outdoor celebrations. Pricing will be determined locally at time of booking.",
         capacity=50, hourly_rate=0, half_day_rate=0, full_day_rate=0,
         features=["Covered Area", "Picnic Tables", "BBQ Grills", "Local Pricing"],
         image_url="/images/pavilion.jpg"),
]

# (month, day, title, description, start, end, room index (1-based), category)
ONE_OFF_EVENTS = [
    (6, 21, "Community Garage Sale",
     "Annual community garage sale fundraiser. Come find treasures and support your community center!",
     "08:00", "16:00", 1, "Community Events"),
    (6, 7, "BINGO Night Fundraiser",
     "Join us for a fun evening of BINGO with prizes! $5 per card, all proceeds support building renovations.",
     "18:00", "20:00", 1, "Community Events"),
    (7, 20, "Summer Concert Series",
     "Outdoor concert featuring local musicians. Bring lawn chairs and enjoy the music!",
     "17:00", "21:00", 1, "Entertainment"),
    (11, 22, "Thanksgiving Potluck",
     "Annual community Thanksgiving potluck dinner. Bring a dish to share!",
     "17:00", "20:00", 2, "Community Events"),
    (12, 8, "Holiday Craft Fair",
     "Annual holiday craft fair featuring local artisans. Perfect for gift shopping!",
     "10:00", "16:00", 1, "Community Events"),
]

def weekdays_in_month(year: int, month: int, weekday: int):
    """All dates in the month falling on `weekday` (Monday=0 ... Sunday=6)."""
    first = date(year, month, 1)
    d = first + timedelta(days=(weekday - first.weekday()) % 7)
    out = []
    while d.month == month:
        out.append(d)
        d += timedelta(days=7)
    return out

def recurring_events(year: int, room_ids: dict):
    """Every Friday: band dance + karaoke. Second Thursday: board meeting."""
    gym, community = room_ids[1], room_ids[2]
    out = []
    for month in range(1, 13):
        out.append(Event(
            title="Alnwick Board Meeting",
            description="Monthly board meeting for the Alnwick Community Center in the Community Room. "
                        "Community members are welcome to attend.",
            date=weekdays_in_month(year, month, calendar.THURSDAY)[1],
            start_time="17:00", end_time="18:00", room_id=community, category="Meetings"))
        for friday in weekdays_in_month(year, month, calendar.FRIDAY):
            out.append(Event(
                title="Borderline Band Dance",
                description="Join us for live music and dancing with the Borderline Band in our Gymnasium. "
                            "All ages welcome.",
                date=friday, start_time="18:00", end_time="22:00", room_id=gym, category="Activities"))
            out.append(Event(
                title="New Sounds Karaoke",
                description="Enjoy an evening of karaoke with New Sounds in the Community Room. Sing your "
                            "favorite songs in a fun, supportive environment.",
                date=friday, start_time="19:00", end_time="22:00", room_id=community, category="Activities"))
    return out

def seed_rooms():
    """Rooms keyed by position (1-based) -> id; existing rooms are kept."""
    ids = {}
    for i, spec in enumerate(ROOMS, start=1):
        room = Room.query.filter_by(name=spec["name"]).first()
        if room is None:
            room = Room(**spec)
            db.session.add(room); db.session.flush()
        ids[i] = room.id
    return ids

def seed_events(year: int, room_ids: dict) -> int:
    if Event.query.filter(Event.date >= date(year, 1, 1), Event.date <= date(year, 12, 31)).first():
        return 0
    events = recurring_events(year, room_ids)
    for month, day, title, desc, start, end, room, category in ONE_OFF_EVENTS:
        events.append(Event(title=title, description=desc, date=date(year, month, day),
                            start_time=start, end_time=end, room_id=room_ids[room], category=category))
    db.session.add_all(events)
    return len(events)

def seed_admin(email: str, password: str, name: str = ADMIN_NAME):
    if not (email and password):
        current_app.logger.warning("[SEED] ADMIN_EMAIL/ADMIN_PASSWORD not set; no admin account created")
        return None
    u = find_user_by_email(email)
    if u is None:
        u = User(email=email.strip().lower(), name=name, role="admin")
        u.set_password(password)
        db.session.add(u); db.session.flush()
        metrics_for(u.id)
    elif not u.is_admin:
        u.role = "admin"
    return u

def seed_all(year: int = None, admin_email: str = None, admin_password: str = None) -> dict:
    year = year or SEED_YEAR or date.today().year
    room_ids = seed_rooms()
    n_events = seed_events(year, room_ids)
    admin = seed_admin(admin_email or ADMIN_EMAIL, admin_password or ADMIN_PASSWORD)
    db.session.commit()
    return {"rooms": len(room_ids), "events": n_events, "admin": admin.email if admin else None}
