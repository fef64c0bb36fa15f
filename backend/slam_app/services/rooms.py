from typing import Optional

from flask import current_app

from slam_app import db
from slam_app.errors import ConflictError, NotFoundError, ValidationError
from slam_app.models import Room, Participant, Round, Participation, Score
from slam_app.notifications import publish
from slam_app.services.updates import PartialUpdate
from slam_app.store import transaction

ROOM_FIELDS = ('name', 'current_participation_id')
PARTICIPANT_FIELDS = ('name', 'pronouns')


def _get_or_404(model, entity_id):
    obj = db.session.get(model, entity_id) if entity_id else None
    if obj is None:
        raise NotFoundError(model.__name__, entity_id)
    return obj


def _require_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError('name is required')
    return name


# ---- Rooms ----

def list_rooms(limit: Optional[int] = None):
    limit = limit or int(current_app.config.get('ROOM_LIST_LIMIT', 10))
    return Room.query.order_by(Room.created_at.desc()).limit(limit).all()


def create_room(name) -> Room:
    room = Room(name=_require_name(name))
    with transaction():
        db.session.add(room)
    current_app.logger.info(f"[room-create] room={room.id} name={room.name!r}")
    return room


def update_room(room_id: str, update: PartialUpdate) -> int:
    if 'name' in update:
        _require_name(update.get('name'))
    with transaction():
        room = _get_or_404(Room, room_id)
        pid = update.get('current_participation_id')
        if pid is not None:
            _get_or_404(Participation, pid)
        update.only(ROOM_FIELDS).apply_to(room)
    if update:
        publish('room_updated', room.to_dict(), room_id=room_id)
    return 1


def delete_room(room_id: str) -> int:
    """Delete a room and its participants together.

    Rounds, participations and scores of the room are kept as history.
    Returns the number of participants removed.
    """
    with transaction():
        room = _get_or_404(Room, room_id)
        removed = Participant.query.filter_by(room_id=room_id).delete()
        db.session.delete(room)
    current_app.logger.info(f"[cascade] room={room_id} participants={removed}")
    publish('room_deleted', {'id': room_id}, room_id=room_id)
    return removed


def fetch_room_detail(room_id: str) -> dict:
    room = _get_or_404(Room, room_id)
    participants = Participant.query.filter_by(room_id=room_id).all()
    rounds = Round.query.filter_by(room_id=room_id).order_by(Round.round_number.asc()).all()
    return {
        'room': room.to_dict(),
        'participants': [p.to_dict() for p in participants],
        'rounds': [r.to_dict() for r in rounds],
    }


# ---- Participants ----

def _name_taken(name: str, room_id: str, exclude_id: Optional[str] = None) -> bool:
    # Observed behaviour checks every room; 'room' scope is opt-in
    query = Participant.query.filter(Participant.name == name)
    if current_app.config.get('PARTICIPANT_NAME_SCOPE', 'global') == 'room':
        query = query.filter(Participant.room_id == room_id)
    if exclude_id:
        query = query.filter(Participant.id != exclude_id)
    return query.first() is not None


def create_participant(name, pronouns=None, room_id=None) -> Participant:
    if not name or not room_id:
        raise ValidationError('name and room_id are required')
    _require_name(name)
    with transaction():
        if _name_taken(name, room_id):
            raise ConflictError(f"Participant named {name!r} already exists")
        _get_or_404(Room, room_id)
        participant = Participant(name=name, pronouns=pronouns, room_id=room_id)
        db.session.add(participant)
    current_app.logger.info(f"[participant-create] participant={participant.id} room={room_id}")
    publish('participant_updated', participant.to_dict(), room_id=room_id)
    return participant


def update_participant(participant_id: str, update: PartialUpdate) -> int:
    if 'name' in update:
        _require_name(update.get('name'))
    with transaction():
        participant = _get_or_404(Participant, participant_id)
        if 'name' in update and _name_taken(update.get('name'), participant.room_id, exclude_id=participant.id):
            raise ConflictError(f"Participant named {update.get('name')!r} already exists")
        update.only(PARTICIPANT_FIELDS).apply_to(participant)
    if update:
        publish('participant_updated', participant.to_dict(), room_id=participant.room_id)
    return 1


def delete_participant(participant_id: str) -> int:
    with transaction():
        deleted = Participant.query.filter_by(id=participant_id).delete()
    current_app.logger.info(f"[participant-delete] participant={participant_id} deleted={deleted}")
    return deleted


def list_participants(room_id: Optional[str] = None):
    query = Participant.query
    if room_id:
        query = query.filter_by(room_id=room_id)
    return query.all()


# ---- Rounds & scores (read side) ----

def fetch_round_detail(round_id: str) -> dict:
    """Round plus its participations joined with their participant.

    Ordered by performance_order. A deleted participant shows up as None.
    """
    rnd = _get_or_404(Round, round_id)
    rows = (db.session.query(Participation, Participant)
            .outerjoin(Participant, Participant.id == Participation.participant_id)
            .filter(Participation.round_id == round_id)
            .order_by(Participation.performance_order.asc())
            .all())
    participations = []
    for participation, participant in rows:
        item = participation.to_dict()
        item['participant'] = participant.to_dict() if participant else None
        participations.append(item)
    return {'round': rnd.to_dict(), 'participations': participations}


def fetch_current_round(room_id: str) -> dict:
    room = _get_or_404(Room, room_id)
    if not room.current_round_id:
        raise NotFoundError('Current round for room', room_id)
    return fetch_round_detail(room.current_round_id)


def list_scores(participation_id: Optional[str] = None):
    query = Score.query
    if participation_id:
        query = query.filter_by(participation_id=participation_id)
    return query.all()
