import logging
import random
import threading
from dataclasses import dataclass
from typing import List, Optional

from colormatch.errors import AlreadyDrawn, IllegalMove, InvalidCard, NotYourTurn
from colormatch.models import COLORS, Card, GameState, Phase, PlayerId, Room
from colormatch.services.rooms import SessionRegistry
from .deck import build_deck, shuffle_cards

log = logging.getLogger(__name__)

# value -> number of cards the opponent must draw
PENALTIES = {'+2': 2, 'wild+4': 4}
# values after which the actor keeps the turn
SKIPPING_VALUES = frozenset({'skip', 'reverse', '+2', 'wild+4'})


@dataclass
class PlayOutcome:
    room: Room
    card: Card
    penalty_drawn: int = 0
    winner: Optional[PlayerId] = None


@dataclass
class DrawOutcome:
    room: Room
    card: Optional[Card]


class GameEngine:
    """Authoritative rules for a started room.

    Every public operation validates completely before mutating anything, so a
    rejected intent leaves the game exactly as it was.
    """

    def __init__(self, registry: SessionRegistry, hand_size: int = 7, default_wild_color: str = 'red',
                 rng: Optional[random.Random] = None, lock=None):
        self.registry = registry
        self.hand_size = hand_size
        self.default_wild_color = default_wild_color
        self._rng = rng
        self._lock = lock or threading.RLock()

    # ---- setup ----

    def deal(self, player_ids: List[PlayerId]) -> GameState:
        deck = build_deck(self._rng)
        hands = {pid: [] for pid in player_ids}
        for _ in range(self.hand_size):
            for pid in player_ids:
                hands[pid].append(deck.pop())

        # The opening discard must be a plain number card. Rejected cards go
        # back under the deck so the card count stays whole.
        set_aside = []
        first = deck.pop()
        while first.kind != 'number':
            set_aside.append(first)
            first = deck.pop()
        deck[0:0] = set_aside

        return GameState(
            deck=deck,
            discard_pile=[first],
            hands=hands,
            order=list(player_ids),
            current_player=player_ids[0],
            current_color=first.color,
            current_value=first.value,
        )

    def start_game(self, code: str, requester_id: PlayerId) -> Room:
        with self._lock:
            self.registry.start_session(code, requester_id, self.deal)
            return self.registry.get(code)

    # ---- intents ----

    def play_card(self, code: str, actor_id: PlayerId, card_index, chosen_color: Optional[str] = None) -> PlayOutcome:
        with self._lock:
            return self._play_card(code, actor_id, card_index, chosen_color)

    def _play_card(self, code, actor_id, card_index, chosen_color):
        room = self.registry.require_game(code)
        state = room.game_state
        if state.current_player != actor_id:
            raise NotYourTurn()
        hand = state.hands[actor_id]
        if isinstance(card_index, bool) or not isinstance(card_index, int) or not 0 <= card_index < len(hand):
            raise InvalidCard()
        card = hand[card_index]
        if not self.is_playable(state, card):
            raise IllegalMove()

        hand.pop(card_index)
        state.discard_pile.append(card)
        state.current_color = self._resolve_color(card, chosen_color)
        state.current_value = card.value

        opponent = state.opponent_of(actor_id)
        if card.value == 'reverse':
            state.direction *= -1
        state.skip_next = card.value in SKIPPING_VALUES
        drawn = 0
        if card.value in PENALTIES:
            drawn = self._give_cards(state, opponent, PENALTIES[card.value])
        log.debug(f"[play] room={room.code} player={actor_id} card={card} penalty={drawn}")

        if not hand:
            state.phase = Phase.ENDED
            state.winner = actor_id
            self.registry.destroy_session(room.code)
            log.info(f"[game-over] room={room.code} winner={actor_id}")
            return PlayOutcome(room, card, drawn, winner=actor_id)

        if not state.skip_next:
            state.current_player = opponent
        state.phase = Phase.AWAITING_MOVE
        return PlayOutcome(room, card, drawn)

    def draw_card(self, code: str, actor_id: PlayerId) -> DrawOutcome:
        with self._lock:
            room = self.registry.require_game(code)
            state = room.game_state
            if state.current_player != actor_id:
                raise NotYourTurn()
            if state.has_drawn:
                raise AlreadyDrawn()

            card = self._draw_one(state)
            if card is not None:
                state.hands[actor_id].append(card)
            state.phase = Phase.AWAITING_MOVE_OR_END
        log.debug(f"[draw] room={room.code} player={actor_id} drew={card is not None} deck={len(state.deck)}")
        return DrawOutcome(room, card)

    def end_turn(self, code: str, actor_id: PlayerId) -> bool:
        """Pass the turn after drawing. Anything else is silently ignored."""
        with self._lock:
            room = self.registry.get(code)
            if room is None or room.game_state is None:
                return False
            state = room.game_state
            if state.current_player != actor_id or not state.has_drawn:
                return False
            state.current_player = state.opponent_of(actor_id)
            state.phase = Phase.AWAITING_MOVE
            return True

    # ---- rules ----

    @staticmethod
    def is_playable(state: GameState, card: Card) -> bool:
        return card.is_wild or card.color == state.current_color or card.value == state.current_value

    def _resolve_color(self, card: Card, chosen_color: Optional[str]) -> str:
        if not card.is_wild:
            return card.color
        if chosen_color in COLORS:
            return chosen_color
        if chosen_color:
            log.warning(f"[wild-color] unknown color {chosen_color!r}, using {self.default_wild_color}")
        return self.default_wild_color

    def reshuffle(self, state: GameState) -> bool:
        """Turn the discard pile, minus its top card, into a new deck."""
        if len(state.discard_pile) <= 1:
            return False
        top = state.discard_pile.pop()
        new_deck = state.discard_pile
        shuffle_cards(new_deck, self._rng)
        state.deck.extend(new_deck)
        state.discard_pile = [top]
        log.debug(f"[reshuffle] deck={len(state.deck)}")
        return True

    def _draw_one(self, state: GameState) -> Optional[Card]:
        if not state.deck:
            self.reshuffle(state)
        if not state.deck:
            return None
        return state.deck.pop()

    def _give_cards(self, state: GameState, player_id: PlayerId, count: int) -> int:
        given = 0
        for _ in range(count):
            card = self._draw_one(state)
            if card is None:
                break
            state.hands[player_id].append(card)
            given += 1
        return given
