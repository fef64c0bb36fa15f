from flask_socketio import join_room, leave_room, emit, send
from slam_app import socketio
from slam_app.notifications import room_channel


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_room(data):
    room_id = (data or {}).get('room_id')
    if not room_id:
        emit('error', {'message': 'room_id is required'})
        return
    channel = room_channel(room_id)
    join_room(channel)
    emit('joined', {'room': channel})


def handle_leave_room(data):
    room_id = (data or {}).get('room_id')
    if not room_id:
        emit('error', {'message': 'room_id is required'})
        return
    channel = room_channel(room_id)
    leave_room(channel)
    emit('left', {'room': channel})


def handle_live_update(data):
    # Opaque text; relayed to every other listener, never back to the sender
    emit('live_update', data, broadcast=True, include_self=False)


def handle_message(data):
    # Plain socket.send() text gets the same relay, as a plain message
    send(data, broadcast=True, include_self=False)


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_room', handle_join_room, namespace=namespace)
        socketio.on_event('leave_room', handle_leave_room, namespace=namespace)
        socketio.on_event('live_update', handle_live_update, namespace=namespace)
        socketio.on_event('message', handle_message, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
