from slam_app import db
from datetime import datetime, timezone
import uuid


def generate_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class Room(db.Model):
    __tablename__ = 'room'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    name = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    # Pointers only; rounds and participations outlive their room
    current_round_id = db.Column(db.String(36), nullable=True)
    current_participation_id = db.Column(db.String(36), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'current_round_id': self.current_round_id,
            'current_participation_id': self.current_participation_id,
        }


class Participant(db.Model):
    __tablename__ = 'participant'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    name = db.Column(db.String(128), nullable=False, index=True)
    pronouns = db.Column(db.String(64), nullable=True)
    room_id = db.Column(db.String(36), db.ForeignKey('room.id'), nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'pronouns': self.pronouns,
            'room_id': self.room_id,
        }


class Round(db.Model):
    __tablename__ = 'round'
    __table_args__ = (
        db.UniqueConstraint('room_id', 'round_number', name='uq_round_room_round_number'),
    )
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    round_number = db.Column(db.Integer, nullable=False)
    room_id = db.Column(db.String(36), nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'round_number': self.round_number,
            'room_id': self.room_id,
        }


class Participation(db.Model):
    __tablename__ = 'participation'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    round_id = db.Column(db.String(36), db.ForeignKey('round.id'), nullable=False, index=True)
    # No FK: deleting a participant keeps its historical performances
    participant_id = db.Column(db.String(36), nullable=False, index=True)
    performance_order = db.Column(db.Integer, nullable=False)
    performance_length_in_seconds = db.Column(db.Integer, nullable=True)
    performance_notes = db.Column(db.Text, nullable=True)
    deduction = db.Column(db.Float, nullable=True)
    score = db.Column(db.Float, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'round_id': self.round_id,
            'participant_id': self.participant_id,
            'performance_order': self.performance_order,
            'performance_length_in_seconds': self.performance_length_in_seconds,
            'performance_notes': self.performance_notes,
            'deduction': self.deduction,
            'score': self.score,
        }


class Score(db.Model):
    __tablename__ = 'score'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    participation_id = db.Column(db.String(36), db.ForeignKey('participation.id'), nullable=False, index=True)
    submitter_id = db.Column(db.String(64), nullable=True)
    value = db.Column(db.Float, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'participation_id': self.participation_id,
            'submitter_id': self.submitter_id,
            'value': self.value,
        }
