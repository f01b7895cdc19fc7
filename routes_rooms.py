
from flask import Blueprint, jsonify
from extensions import db
from models_rooms import Room

bp_rooms = Blueprint("rooms", __name__)

@bp_rooms.get("/api/rooms")
def list_rooms():
    q = Room.query.order_by(Room.id).limit(200).all()
    return jsonify(ok=True, rooms=[r.to_dict() for r in q])

@bp_rooms.get("/api/rooms/<int:room_id>")
def get_room(room_id: int):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify(ok=False, error="room_not_found"), 404
    return jsonify(ok=True, room=room.to_dict())
