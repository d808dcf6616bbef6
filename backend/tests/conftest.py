import heapq
import itertools
import os
import sys
import pytest

# Ensure the backend root (containing the `quizduel` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizduel import create_app, socketio
from quizduel.services.duels.questions import load_question_bank
from quizduel.services.duels.service import DuelService


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ROUND_DURATION_SEC = 10
    GRACE_DURATION_SEC = 1
    QUESTION_BANK_PATH = None
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


class ManualTimers:
    """Deterministic clock: callbacks only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), callback))

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
        self.now = target

    @property
    def scheduled(self):
        return len(self._queue)


class Recorder:
    def __init__(self):
        self.messages = []

    def __call__(self, messages):
        self.messages.extend(messages)

    def events(self, name):
        return [m for m in self.messages if getattr(m, 'event', None) == name]

    def clear(self):
        self.messages.clear()


@pytest.fixture()
def timers():
    return ManualTimers()


@pytest.fixture()
def sent():
    return Recorder()


@pytest.fixture()
def duels(timers, sent):
    return DuelService(load_question_bank(), timers, dispatch=sent, round_duration=10, grace_duration=1)


@pytest.fixture()
def flask_app(timers):
    application = create_app(TestConfig, timers=timers)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    created = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _connect
    for test_client in created:
        if test_client.is_connected():
            test_client.disconnect()


@pytest.fixture()
def make_app(timers):
    default_timers = timers

    def _make(timers=default_timers, **overrides):
        config_class = type('OverrideConfig', (TestConfig,), overrides)
        return create_app(config_class, timers=timers)

    return _make
