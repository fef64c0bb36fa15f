"""Transaction and locking helpers around the Flask-SQLAlchemy session.

Every mutating service runs inside ``transaction()`` so a request either
applies all of its writes or none of them.

Locking is two-layered:

- ``KeyedLocks`` serializes work on one key (a room id, a participation id)
  inside this process. SQLite has no row locks, so this is what actually
  protects the single-process deployment.
- ``locked_room`` / ``locked_participation`` add ``SELECT ... FOR UPDATE`` so
  several workers sharing a PostgreSQL database also serialize. Dialects
  without row locks render the plain SELECT.
"""
from contextlib import contextmanager
import threading

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from slam_app import db
from slam_app.errors import StoreError
from slam_app.models import Room, Participation


class KeyedLocks:
    """One ``threading.Lock`` per key, alive only while somebody holds or waits on it."""

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key):
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


room_locks = KeyedLocks()
participation_locks = KeyedLocks()


@contextmanager
def transaction():
    try:
        yield db.session
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[store] rolled back: {exc.__class__.__name__}")
        raise StoreError() from exc
    except Exception:
        db.session.rollback()
        raise


def locked_room(room_id: str):
    return Room.query.filter(Room.id == room_id).with_for_update()


def locked_participation(participation_id: str):
    return Participation.query.filter(Participation.id == participation_id).with_for_update()
