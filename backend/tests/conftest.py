import os
import random
import sys
import pytest

# Ensure the backend root (containing the `colormatch` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from colormatch import create_app, socketio
from colormatch.models import Card
from colormatch.services import Lobby


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    HAND_SIZE = 7
    ROOM_CODE_LENGTH = 5
    DEFAULT_WILD_COLOR = 'red'
    LOG_LEVEL = 'DEBUG'


def card(text):
    """Build a card from shorthand like 'red 5', 'blue +2', 'wild+4'."""
    if text in ('wild', 'wild+4'):
        return Card('wild', text, 'wild')
    color, value = text.split(' ')
    kind = 'number' if value.isdigit() else 'action'
    return Card(color, value, kind)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def lobby_of(flask_app):
    return flask_app.extensions['colormatch']


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients named via the playerName query."""
    clients = []

    def _connect(name):
        test_client = socketio.test_client(flask_app, query_string=f'playerName={name}')
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def lobby():
    return Lobby(rng=random.Random(1234))


@pytest.fixture()
def seated(lobby):
    """A host and a guest sitting in the same room, game not started."""
    host = lobby.players.connect('sid-host', 'Alice')
    guest = lobby.players.connect('sid-guest', 'Bob')
    code = lobby.rooms.create_session(host.id, host.name)
    lobby.rooms.join_session(code, guest.id, guest.name)
    return code, host, guest


@pytest.fixture()
def started(lobby, seated):
    code, host, guest = seated
    lobby.engine.start_game(code, host.id)
    return lobby.rooms.get(code), host, guest


def rig(state, hands=None, deck=None, discard=None, color=None, value=None):
    """Replace parts of a game state with known cards.

    Cards taken out of play are moved to the deck so the 108 total holds
    unless a test explicitly replaces the deck as well.
    """
    from colormatch.services.games.deck import fresh_cards

    if hands is not None:
        for pid, names in hands.items():
            state.hands[pid] = [card(s) for s in names]
    if discard is not None:
        state.discard_pile = [card(s) for s in discard]
        top = state.discard_pile[-1]
        state.current_color = top.color
        state.current_value = top.value
    if deck is not None:
        state.deck = [card(s) for s in deck]
    else:
        # Refill the deck with whatever the universe is missing
        pool = fresh_cards()
        for c in state.discard_pile + [c for h in state.hands.values() for c in h]:
            if c in pool:
                pool.remove(c)
        state.deck = pool
    if color is not None:
        state.current_color = color
    if value is not None:
        state.current_value = value
