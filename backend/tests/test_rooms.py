import pytest

from slam_app import db
from slam_app.errors import ConflictError, NotFoundError, ValidationError
from slam_app.models import Participant, Participation, Room, Round
from slam_app.services import rooms, rounds, scoring
from slam_app.services.updates import PartialUpdate


def test_partial_update_only_carries_sent_fields():
    update = PartialUpdate.from_payload({'name': 'New', 'id': 'ignored'}, ('name', 'pronouns'))
    assert update.fields == {'name': 'New'}
    assert 'pronouns' not in update
    assert not PartialUpdate.from_payload(None, ('name',))


def test_partial_update_never_nulls_untouched_fields(flask_app):
    room = rooms.create_room('Slam')
    poet = rooms.create_participant('Jo', 'he/him', room.id)
    rooms.update_participant(poet.id, PartialUpdate({'name': 'Joe'}))
    refreshed = db.session.get(Participant, poet.id)
    assert refreshed.name == 'Joe'
    assert refreshed.pronouns == 'he/him'

    rooms.update_participant(poet.id, PartialUpdate({'pronouns': None}))
    assert db.session.get(Participant, poet.id).pronouns is None


def test_room_detail_after_create(flask_app):
    room = rooms.create_room('Open Mic')
    detail = rooms.fetch_room_detail(room.id)
    assert detail['room']['name'] == 'Open Mic'
    assert detail['room']['id'] == room.id


def test_room_detail_unknown(flask_app):
    with pytest.raises(NotFoundError):
        rooms.fetch_room_detail('missing')


def test_create_room_validation(flask_app):
    with pytest.raises(ValidationError):
        rooms.create_room(None)


def test_update_room_validates(flask_app):
    room = rooms.create_room('Slam')
    with pytest.raises(ValidationError):
        rooms.update_room(room.id, PartialUpdate({'name': ''}))
    with pytest.raises(NotFoundError):
        rooms.update_room(room.id, PartialUpdate({'current_participation_id': 'missing'}))
    with pytest.raises(NotFoundError):
        rooms.update_room('missing', PartialUpdate({'name': 'x'}))
    assert db.session.get(Room, room.id).name == 'Slam'


def test_conflict_performs_no_insert(flask_app):
    room = rooms.create_room('Slam')
    rooms.create_participant('Kim', None, room.id)
    before = Participant.query.count()
    with pytest.raises(ConflictError):
        rooms.create_participant('Kim', 'she/her', room.id)
    assert Participant.query.count() == before


def test_conflict_is_checked_across_rooms(flask_app):
    first = rooms.create_room('First')
    second = rooms.create_room('Second')
    rooms.create_participant('Lou', None, first.id)
    with pytest.raises(ConflictError):
        rooms.create_participant('Lou', None, second.id)


def test_room_scoped_names_when_configured(flask_app):
    flask_app.config['PARTICIPANT_NAME_SCOPE'] = 'room'
    first = rooms.create_room('First')
    second = rooms.create_room('Second')
    rooms.create_participant('Lou', None, first.id)
    rooms.create_participant('Lou', None, second.id)
    with pytest.raises(ConflictError):
        rooms.create_participant('Lou', None, first.id)


def test_rename_into_taken_name_conflicts(flask_app):
    room = rooms.create_room('Slam')
    rooms.create_participant('Max', None, room.id)
    ned = rooms.create_participant('Ned', None, room.id)
    with pytest.raises(ConflictError):
        rooms.update_participant(ned.id, PartialUpdate({'name': 'Max'}))
    assert rooms.update_participant(ned.id, PartialUpdate({'name': 'Ned'})) == 1


def test_create_participant_missing_room(flask_app):
    with pytest.raises(NotFoundError):
        rooms.create_participant('Oli', None, 'missing')
    with pytest.raises(ValidationError):
        rooms.create_participant('', None, 'missing')
    assert Participant.query.count() == 0


def test_update_unknown_participant(flask_app):
    with pytest.raises(NotFoundError):
        rooms.update_participant('missing', PartialUpdate({'name': 'x'}))


def test_delete_room_cascades_one_hop(flask_app):
    room = rooms.create_room('Slam')
    poets = [rooms.create_participant(n, None, room.id) for n in ('Pat', 'Quinn')]
    rnd = rounds.advance_room(room.id, poets)
    participation = Participation.query.filter_by(round_id=rnd.id).first()
    scoring.record_score(participation.id, 7.5)
    poet_ids = [p.id for p in poets]

    assert rooms.delete_room(room.id) == 2
    with pytest.raises(NotFoundError):
        rooms.fetch_room_detail(room.id)
    assert all(db.session.get(Participant, pid) is None for pid in poet_ids)
    # Rounds and their history stay behind
    assert db.session.get(Round, rnd.id) is not None
    assert rooms.fetch_round_detail(rnd.id)['participations'][0]['participant'] is None
    assert len(rooms.list_scores(participation.id)) == 1


def test_delete_unknown_room(flask_app):
    with pytest.raises(NotFoundError):
        rooms.delete_room('missing')


def test_delete_participant_only_removes_row(flask_app):
    room = rooms.create_room('Slam')
    poet = rooms.create_participant('Rae', None, room.id)
    rnd = rounds.advance_room(room.id, [poet])
    assert rooms.delete_participant(poet.id) == 1
    assert rooms.delete_participant(poet.id) == 0
    assert Participation.query.filter_by(round_id=rnd.id).one().participant_id == poet.id


def test_round_detail_is_ordered_by_performance(flask_app):
    room = rooms.create_room('Slam')
    poets = [rooms.create_participant(n, None, room.id) for n in ('Sam', 'Tess', 'Uma')]
    rnd = rounds.advance_room(room.id, list(reversed(poets)))
    detail = rooms.fetch_round_detail(rnd.id)
    assert detail['round']['round_number'] == 1
    assert [p['participant']['name'] for p in detail['participations']] == ['Uma', 'Tess', 'Sam']


def test_round_detail_unknown(flask_app):
    with pytest.raises(NotFoundError):
        rooms.fetch_round_detail('missing')


def test_current_round(flask_app):
    room = rooms.create_room('Slam')
    with pytest.raises(NotFoundError):
        rooms.fetch_current_round(room.id)
    with pytest.raises(NotFoundError):
        rooms.fetch_current_round('missing')
    rounds.advance_room(room.id, [])
    second = rounds.advance_room(room.id, [])
    assert rooms.fetch_current_round(room.id)['round']['id'] == second.id


def test_list_filters(flask_app):
    first = rooms.create_room('First')
    second = rooms.create_room('Second')
    rooms.create_participant('Vic', None, first.id)
    rooms.create_participant('Wes', None, second.id)
    assert [p.name for p in rooms.list_participants(first.id)] == ['Vic']
    assert len(rooms.list_participants()) == 2
    assert rooms.list_scores() == []


def test_list_rooms_limit(flask_app):
    for i in range(3):
        rooms.create_room(f'Slam {i}')
    assert len(rooms.list_rooms(limit=2)) == 2
