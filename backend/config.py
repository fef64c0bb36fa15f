import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///slam.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173'
    ).split(',') if o.strip()]
    # Built frontend served for any non-API path
    FRONTEND_BUILD_DIR = os.environ.get('FRONTEND_BUILD_DIR', './build')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    ROOM_LIST_LIMIT = int(os.environ.get('ROOM_LIST_LIMIT', '10'))
    # Scores needed before a performance is aggregated
    SCORE_AGGREGATION_THRESHOLD = int(os.environ.get('SCORE_AGGREGATION_THRESHOLD', '5'))
    # Timing penalty: DEDUCTION_PER_BLOCK for every full DEDUCTION_BLOCK_SEC over the limit
    PERFORMANCE_TIME_LIMIT_SEC = int(os.environ.get('PERFORMANCE_TIME_LIMIT_SEC', '190'))
    DEDUCTION_BLOCK_SEC = int(os.environ.get('DEDUCTION_BLOCK_SEC', '10'))
    DEDUCTION_PER_BLOCK = float(os.environ.get('DEDUCTION_PER_BLOCK', '0.5'))
    # 'global' or 'room'
    PARTICIPANT_NAME_SCOPE = os.environ.get('PARTICIPANT_NAME_SCOPE', 'global')
