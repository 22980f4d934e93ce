import random
from typing import List, MutableSequence, Optional

from colormatch.models import ACTION_VALUES, COLORS, WILD, WILD_VALUES, Card

NUMBER_VALUES = tuple(str(n) for n in range(10))
UNIVERSE_SIZE = 108


def shuffle_cards(cards: MutableSequence[Card], rng: Optional[random.Random] = None) -> None:
    """Fisher-Yates shuffle in place."""
    rng = rng or random
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randrange(i + 1)
        cards[i], cards[j] = cards[j], cards[i]


def fresh_cards() -> List[Card]:
    """The full 108-card universe in build order."""
    cards = []
    for color in COLORS:
        for value in NUMBER_VALUES + ACTION_VALUES:
            kind = 'number' if value in NUMBER_VALUES else 'action'
            count = 1 if value == '0' else 2
            for _ in range(count):
                cards.append(Card(color, value, kind))

    for _ in range(4):
        for value in WILD_VALUES:
            cards.append(Card(WILD, value, 'wild'))
    return cards


def build_deck(rng: Optional[random.Random] = None) -> List[Card]:
    deck = fresh_cards()
    shuffle_cards(deck, rng)
    return deck
