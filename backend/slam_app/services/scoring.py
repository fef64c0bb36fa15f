import math
from typing import Iterable, Optional

from flask import current_app

from slam_app import db
from slam_app.errors import NotFoundError, ValidationError
from slam_app.models import Participation, Round, Score
from slam_app.notifications import publish
from slam_app.services.updates import PartialUpdate
from slam_app.store import transaction, participation_locks, locked_participation

TIMING_FIELDS = ('performance_length_in_seconds', 'performance_notes')
# Largest value the INTEGER length column holds
MAX_LENGTH_SEC = 2 ** 31 - 1


def trimmed_sum(values: Iterable[float]) -> float:
    """Drop the lowest and highest value and sum the rest.

    This is a sum, not a mean: five judges produce a result on a 3x scale
    (``[8.0, 9.5, 7.0, 9.0, 6.5]`` gives ``24.0``).
    """
    ordered = sorted(values)
    if len(ordered) < 3:
        raise ValueError('need at least three values to trim')
    return float(sum(ordered[1:-1]))


def compute_deduction(length_seconds: Optional[int], limit: int = 190,
                      block: int = 10, per_block: float = 0.5) -> Optional[float]:
    """Penalty for running over time: ``per_block`` per full ``block`` over ``limit``.

    Returns None (no deduction) at or under the limit.
    """
    if length_seconds is None or length_seconds <= limit:
        return None
    return math.floor((length_seconds - limit) / block) * per_block


def record_score(participation_id: str, value: float, submitter_id: Optional[str] = None) -> Score:
    """Persist one judge score and aggregate once the threshold is reached.

    The score itself is never rejected for its value or for being a repeat.
    Aggregation fires only when the count equals the threshold exactly and
    the participation has no score yet, so later submissions leave it alone.
    """
    threshold = int(current_app.config.get('SCORE_AGGREGATION_THRESHOLD', 5))
    aggregated = None
    with participation_locks.hold(participation_id):
        with transaction():
            participation = locked_participation(participation_id).first()
            if participation is None:
                raise NotFoundError('Participation', participation_id)
            score = Score(participation_id=participation_id, value=value, submitter_id=submitter_id)
            db.session.add(score)
            db.session.flush()

            # value ascending; id breaks ties so the order never depends on storage
            values = [s.value for s in Score.query
                      .filter_by(participation_id=participation_id)
                      .order_by(Score.value.asc(), Score.id.asc())
                      .all()]
            if len(values) == threshold and participation.score is None:
                participation.score = trimmed_sum(values)
                aggregated = participation.score
        room_id = _room_id_for(participation)

    current_app.logger.info(
        f"[score] participation={participation_id} value={value} submitter={submitter_id} count={len(values)}"
    )
    publish('score_submitted', score.to_dict(), room_id=room_id)
    if aggregated is not None:
        current_app.logger.info(f"[aggregate] participation={participation_id} score={aggregated}")
        publish('participation_scored', participation.to_dict(), room_id=room_id)
    return score


def record_timing(participation_id: str, update: PartialUpdate) -> Optional[float]:
    """Apply a timing/notes update and return the deduction now in effect.

    Only a present ``performance_length_in_seconds`` recomputes the deduction,
    and it always overwrites the previous one. ``score`` is never touched.
    """
    length = update.get('performance_length_in_seconds')
    if 'performance_length_in_seconds' in update and length is not None:
        if isinstance(length, bool) or not isinstance(length, int) \
                or not 0 <= length <= MAX_LENGTH_SEC:
            raise ValidationError(
                f'performance_length_in_seconds must be an integer between 0 and {MAX_LENGTH_SEC}'
            )

    cfg = current_app.config
    with transaction():
        participation = db.session.get(Participation, participation_id)
        if participation is None:
            raise NotFoundError('Participation', participation_id)
        update.only(TIMING_FIELDS).apply_to(participation)
        if 'performance_length_in_seconds' in update:
            participation.deduction = compute_deduction(
                length,
                limit=int(cfg.get('PERFORMANCE_TIME_LIMIT_SEC', 190)),
                block=int(cfg.get('DEDUCTION_BLOCK_SEC', 10)),
                per_block=float(cfg.get('DEDUCTION_PER_BLOCK', 0.5)),
            )
        deduction = participation.deduction

    current_app.logger.info(f"[timing] participation={participation_id} length={length} deduction={deduction}")
    if update:
        publish('timing_updated', participation.to_dict(), room_id=_room_id_for(participation))
    return deduction


def _room_id_for(participation: Participation) -> Optional[str]:
    rnd = db.session.get(Round, participation.round_id)
    return rnd.room_id if rnd else None
