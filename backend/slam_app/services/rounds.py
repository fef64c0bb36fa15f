from typing import Iterable, List, Optional

from flask import current_app

from slam_app import db
from slam_app.errors import NotFoundError, ValidationError
from slam_app.models import Participant, Participation, Round
from slam_app.notifications import publish
from slam_app.store import transaction, room_locks, locked_room


def latest_round(room_id: str) -> Optional[Round]:
    """Most recent round of a room, by round_number."""
    return (Round.query
            .filter_by(room_id=room_id)
            .order_by(Round.round_number.desc())
            .first())


def _participant_id(entry) -> str:
    if isinstance(entry, Participant):
        return entry.id
    if isinstance(entry, dict):
        entry = entry.get('id')
    if not isinstance(entry, str) or not entry:
        raise ValidationError('each participant must be an id or an object with an id')
    return entry


def advance_room(room_id: str, ordered_participants: Iterable) -> Round:
    """Start the next round of a room.

    ``performance_order`` is the position in ``ordered_participants``; the
    list is taken as-is (no reordering, no dedup). The round, its
    participations and the room's current-round pointer are written in one
    transaction, and advancement of one room is serialized.
    """
    participant_ids: List[str] = [_participant_id(p) for p in (ordered_participants or [])]

    with room_locks.hold(room_id):
        with transaction():
            room = locked_room(room_id).first()
            if room is None:
                raise NotFoundError('Room', room_id)

            known = set()
            if participant_ids:
                found = Participant.query.filter(Participant.id.in_(sorted(set(participant_ids)))).all()
                known = {p.id for p in found}
            for pid in participant_ids:
                if pid not in known:
                    raise NotFoundError('Participant', pid)

            previous = latest_round(room_id)
            new_round = Round(room_id=room_id, round_number=(previous.round_number + 1) if previous else 1)
            db.session.add(new_round)
            db.session.flush()

            for order, pid in enumerate(participant_ids):
                db.session.add(Participation(
                    round_id=new_round.id,
                    participant_id=pid,
                    performance_order=order,
                ))

            room.current_round_id = new_round.id
            room.current_participation_id = None

        current_app.logger.info(
            f"[advance] room={room_id} round={new_round.round_number} participations={len(participant_ids)}"
        )

    publish('round_started', new_round.to_dict(), room_id=room_id)
    return new_round
