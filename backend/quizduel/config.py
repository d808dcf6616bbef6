import os


def _split_origins(value):
    origins = [o.strip() for o in value.split(',') if o.strip()]
    if origins == ['*']:
        return '*'
    return origins


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Round timers (seconds)
    ROUND_DURATION_SEC = float(os.environ.get('ROUND_DURATION_SEC', '10'))
    GRACE_DURATION_SEC = float(os.environ.get('GRACE_DURATION_SEC', '1'))
    # Optional JSON file with the question bank; the built-in bank is used when unset
    QUESTION_BANK_PATH = os.environ.get('QUESTION_BANK_PATH')
    CORS_ORIGINS = _split_origins(os.environ.get('CORS_ORIGINS', '*'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
