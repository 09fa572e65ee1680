import os
import sys
import tempfile
import pytest

# Ensure the server root (containing the `wordle_engine` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
SERVER_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if SERVER_ROOT not in sys.path:
    sys.path.insert(0, SERVER_ROOT)

# Keep test logs out of the working tree; read when the package is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='wordle-logs-'))

from wordle_engine import create_app
from wordle_engine.config import TestingConfig
from wordle_engine.services.game_engine import GameEngine
from wordle_engine.services.game_service import GameService, get_game_service
from wordle_engine.services.history_store import InMemoryHistoryStore


VALID_WORDS = {
    'crane', 'trace', 'slate', 'ghost', 'lumpy', 'fizzy', 'pound',
    'brick', 'cigar', 'geese', 'hello',
}


class StubDictionary:
    """Fixed target and a small set of accepted words."""

    def __init__(self, target='crane'):
        self.target = target

    def pick_target_word(self):
        return self.target

    def is_valid_word(self, word):
        return word.lower() in VALID_WORDS


class FakeTimer:
    """threading.Timer stand-in that only fires when told to."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function(*self.args, **self.kwargs)


class FakeClock:
    def __init__(self, start=1_700_000_000_000, step=1000):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


def type_word(engine, word, enter=True):
    for letter in word:
        engine.submit_key(letter)
    if enter:
        engine.submit_key('Enter')


@pytest.fixture()
def timers():
    created = []

    def factory(interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        created.append(timer)
        return timer

    factory.created = created
    return factory


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def engine(timers, clock):
    dictionary = StubDictionary()
    game_engine = GameEngine(
        is_valid_word=dictionary.is_valid_word,
        pick_target_word=dictionary.pick_target_word,
        timer_factory=timers,
        clock=clock,
    )
    game_engine.start_game('crane')
    return game_engine


@pytest.fixture()
def store():
    return InMemoryHistoryStore()


@pytest.fixture()
def game_service(store, timers, clock):
    return GameService(
        dictionary=StubDictionary(),
        history_store=store,
        timer_factory=timers,
        clock=clock,
    )


class TestConfig(TestingConfig):
    INVALID_WORD_CLEAR_MS = 50


@pytest.fixture()
def flask_app():
    application, _ = create_app(TestConfig)
    get_game_service().dictionary = StubDictionary()
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = flask_app.socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client()
    )
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()
