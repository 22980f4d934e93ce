from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NewType, Optional
import random
import string

PlayerId = NewType('PlayerId', str)

COLORS = ('red', 'blue', 'green', 'yellow')
WILD = 'wild'
ACTION_VALUES = ('skip', 'reverse', '+2')
WILD_VALUES = ('wild', 'wild+4')


@dataclass(frozen=True)
class Card:
    color: str
    value: str
    kind: str  # number, action or wild

    @property
    def is_wild(self) -> bool:
        return self.kind == 'wild'

    @property
    def is_action(self) -> bool:
        return self.kind == 'action'

    def to_dict(self):
        return {
            'color': self.color,
            'value': self.value,
            'kind': self.kind,
        }

    def __str__(self):
        if self.is_wild:
            return self.value
        return f"{self.color} {self.value}"


@dataclass
class Player:
    """A live connection, as known to the player directory."""
    id: PlayerId
    sid: str
    name: str
    room_code: Optional[str] = None


@dataclass
class Participant:
    id: PlayerId
    name: str

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class Phase(Enum):
    AWAITING_MOVE = 'awaiting_move'
    AWAITING_MOVE_OR_END = 'awaiting_move_or_end'
    ENDED = 'ended'


@dataclass
class GameState:
    deck: List[Card]
    discard_pile: List[Card]
    hands: Dict[PlayerId, List[Card]]
    order: List[PlayerId]
    current_player: PlayerId
    current_color: str
    current_value: str
    phase: Phase = Phase.AWAITING_MOVE
    direction: int = 1
    # Kept for parity with the multi-player rules; a skip in a two player
    # game simply leaves the turn with the actor.
    skip_next: bool = False
    winner: Optional[PlayerId] = None

    @property
    def has_drawn(self) -> bool:
        return self.phase is Phase.AWAITING_MOVE_OR_END

    @property
    def is_over(self) -> bool:
        return self.phase is Phase.ENDED

    @property
    def discard_top(self) -> Card:
        return self.discard_pile[-1]

    def opponent_of(self, player_id: PlayerId) -> PlayerId:
        return next(pid for pid in self.order if pid != player_id)

    def card_count(self) -> int:
        return len(self.deck) + len(self.discard_pile) + sum(len(h) for h in self.hands.values())


@dataclass
class Room:
    code: str
    host_id: PlayerId
    participants: List[Participant] = field(default_factory=list)
    game_state: Optional[GameState] = None

    MAX_PARTICIPANTS = 2

    @property
    def started(self) -> bool:
        return self.game_state is not None

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= self.MAX_PARTICIPANTS


def generate_room_code(taken, length=5, rng=None):
    """Generate a short room code not present in ``taken``."""
    rng = rng or random
    alphabet = string.ascii_uppercase + string.digits
    while True:
        code = ''.join(rng.choices(alphabet, k=length))
        if code not in taken:
            return code
