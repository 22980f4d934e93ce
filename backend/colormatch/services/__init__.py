import threading

from colormatch.services.games.engine import GameEngine
from colormatch.services.players import PlayerDirectory
from colormatch.services.rooms import SessionRegistry


class Lobby:
    """Process-wide game services, created once per application.

    ``lock`` serialises every intent: the registry and engine take it around
    each public operation and the transport holds it across
    validate, mutate and broadcast.
    """

    def __init__(self, hand_size=7, room_code_length=5, default_wild_color='red', rng=None):
        self.lock = threading.RLock()
        self.players = PlayerDirectory()
        self.rooms = SessionRegistry(self.players, code_length=room_code_length, rng=rng, lock=self.lock)
        self.engine = GameEngine(self.rooms, hand_size=hand_size, default_wild_color=default_wild_color, rng=rng,
                                 lock=self.lock)

    @classmethod
    def from_config(cls, config):
        return cls(
            hand_size=int(config.get('HAND_SIZE', 7)),
            room_code_length=int(config.get('ROOM_CODE_LENGTH', 5)),
            default_wild_color=config.get('DEFAULT_WILD_COLOR', 'red'),
        )
