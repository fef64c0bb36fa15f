import os
import sys
import pytest

# Ensure the backend root (containing the `slam_app` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from slam_app import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = '*'
    FRONTEND_BUILD_DIR = os.path.join(CURRENT_DIR, 'no-build')
    LOG_LEVEL = 'DEBUG'
    ROOM_LIST_LIMIT = 10
    SCORE_AGGREGATION_THRESHOLD = 5
    PERFORMANCE_TIME_LIMIT_SEC = 190
    DEDUCTION_BLOCK_SEC = 10
    DEDUCTION_PER_BLOCK = 0.5
    PARTICIPANT_NAME_SCOPE = 'global'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import slam_app.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def file_app(tmp_path):
    """App on a file-backed SQLite database, so several threads get their own connections."""
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'slam.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {'connect_args': {'check_same_thread': False, 'timeout': 30}}

    application = create_app(FileConfig)
    with application.app_context():
        import slam_app.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def room(client):
    return client.post('/data/room', json={'name': 'Friday Slam'}).get_json()


@pytest.fixture()
def poets(client, room):
    names = ['Ada', 'Basil', 'Cleo']
    return [
        client.post('/data/participant', json={'name': n, 'room_id': room['id']}).get_json()
        for n in names
    ]
