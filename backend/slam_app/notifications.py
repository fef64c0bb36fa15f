from flask import current_app
from slam_app import socketio

NAMESPACE = '/ws'


def room_channel(room_id: str) -> str:
    return f"room:{room_id}"


def publish(event: str, payload: dict, room_id=None) -> None:
    """Fire-and-forget broadcast of a domain event.

    Called after the write has committed. Delivery problems are logged and
    never surface to the request that triggered them.
    """
    try:
        if room_id:
            socketio.emit(event, payload, to=room_channel(room_id), namespace=NAMESPACE)
        else:
            socketio.emit(event, payload, namespace=NAMESPACE)
    except Exception as exc:
        current_app.logger.warning(f"[notify-fail] event={event} room={room_id} error={exc}")
