from flask import Blueprint, jsonify, request
from slam_app.errors import ValidationError
from slam_app.services import rooms as room_service
from slam_app.services import rounds as round_service
from slam_app.services import scoring as scoring_service
from slam_app.services.updates import PartialUpdate


data = Blueprint('data', __name__)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError('Expected a JSON object')
    return payload


# ---- Rooms ----

@data.route('/room', methods=['GET'])
def get_rooms():
    return jsonify([r.to_dict() for r in room_service.list_rooms()])


@data.route('/room', methods=['POST'])
def post_room():
    payload = _json_body()
    room = room_service.create_room(payload.get('name'))
    return jsonify(room.to_dict()), 201


@data.route('/room/<string:room_id>', methods=['GET'])
def get_room(room_id):
    return jsonify(room_service.fetch_room_detail(room_id))


@data.route('/room/<string:room_id>', methods=['PATCH', 'PUT'])
def patch_room(room_id):
    update = PartialUpdate.from_payload(_json_body(), room_service.ROOM_FIELDS)
    updated = room_service.update_room(room_id, update)
    return jsonify({'updated': updated})


@data.route('/room/<string:room_id>', methods=['DELETE'])
def delete_room(room_id):
    removed = room_service.delete_room(room_id)
    return jsonify({'deleted': 1, 'participants_deleted': removed})


@data.route('/room/<string:room_id>/current_round', methods=['GET'])
def get_current_round(room_id):
    return jsonify(room_service.fetch_current_round(room_id))


@data.route('/room/<string:room_id>/advance', methods=['POST'])
def advance_room(room_id):
    payload = _json_body()
    ordered = payload.get('participants')
    if ordered is None:
        ordered = []
    if not isinstance(ordered, list):
        raise ValidationError('participants must be a list')
    new_round = round_service.advance_room(room_id, ordered)
    return jsonify(new_round.to_dict()), 201


# ---- Participants ----

@data.route('/participant', methods=['GET'])
def get_participants():
    result = room_service.list_participants(request.args.get('room_id'))
    return jsonify([p.to_dict() for p in result])


@data.route('/participant', methods=['POST'])
def post_participant():
    """Create a participant, or update one when the payload carries an id."""
    payload = _json_body()
    participant_id = payload.get('id')
    if participant_id:
        update = PartialUpdate.from_payload(payload, room_service.PARTICIPANT_FIELDS)
        updated = room_service.update_participant(participant_id, update)
        return jsonify({'updated': updated})

    participant = room_service.create_participant(
        payload.get('name'),
        payload.get('pronouns'),
        payload.get('room_id'),
    )
    return jsonify(participant.to_dict()), 201


@data.route('/participant/<string:participant_id>', methods=['DELETE'])
def delete_participant(participant_id):
    return jsonify({'deleted': room_service.delete_participant(participant_id)})


# ---- Rounds & participations ----

@data.route('/round/<string:round_id>', methods=['GET'])
def get_round(round_id):
    return jsonify(room_service.fetch_round_detail(round_id))


@data.route('/participation/<string:participation_id>', methods=['PATCH', 'PUT'])
def patch_participation(participation_id):
    update = PartialUpdate.from_payload(_json_body(), scoring_service.TIMING_FIELDS)
    deduction = scoring_service.record_timing(participation_id, update)
    return jsonify({'updated': 1, 'deduction': deduction})


# ---- Scores ----

@data.route('/score', methods=['GET'])
def get_scores():
    result = room_service.list_scores(request.args.get('participation_id'))
    return jsonify([s.to_dict() for s in result])


@data.route('/score', methods=['POST'])
def post_score():
    payload = _json_body()
    # Older clients send the participation under 'participant_id'
    participation_id = payload.get('participation_id') or payload.get('participant_id')
    value = payload.get('value')
    if not participation_id:
        raise ValidationError('participation_id is required')
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError('value must be a number')
    score = scoring_service.record_score(participation_id, float(value), payload.get('submitter_id'))
    return jsonify(score.to_dict()), 201
