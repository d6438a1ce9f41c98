"""Card abstractions and deck helpers for Chinchón."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Protocol, Sequence

from . import encoding


class Suit(str, Enum):
    """The four suits of the Spanish deck."""

    OROS = "oros"
    COPAS = "copas"
    ESPADAS = "espadas"
    BASTOS = "bastos"

    @property
    def index(self) -> int:
        return encoding.SUIT_TO_IDX[self.value]


class RandomSource(Protocol):
    """Minimal interface of the injected randomness provider."""

    def randrange(self, stop: int) -> int:  # pragma: no cover - protocol only
        ...


@dataclass(frozen=True, slots=True)
class Card:
    """Value object describing a physical Spanish card."""

    suit: Suit
    rank: int

    def __post_init__(self) -> None:
        if self.rank not in encoding.RANK_TO_IDX:
            raise ValueError(f"rank {self.rank} is not part of the Spanish deck")
        if not isinstance(self.suit, Suit):
            object.__setattr__(self, "suit", Suit(self.suit))

    @property
    def rank_idx(self) -> int:
        """Position of the rank in the run ordering (7 is followed by 10)."""

        return encoding.RANK_TO_IDX[self.rank]

    @property
    def index(self) -> int:
        return encoding.card_index(self.rank_idx, self.suit.index)

    @property
    def point_value(self) -> int:
        return encoding.POINTS[self.rank_idx]

    @property
    def code(self) -> str:
        """Stable identity string, e.g. ``"1-oros"``."""

        return f"{self.rank}-{self.suit.value}"

    def __str__(self) -> str:
        return self.code


def card_from_index(index: int) -> Card:
    decoded = encoding.decode_index(index)
    return Card(suit=Suit(decoded.suit), rank=decoded.rank)


def card_from_code(code: str) -> Card:
    """Parse a ``"<rank>-<suit>"`` code into a :class:`Card`."""

    rank_text, sep, suit_text = code.strip().partition("-")
    if not sep:
        raise ValueError(f"invalid card code '{code}'")
    try:
        rank = int(rank_text)
        suit = Suit(suit_text.lower())
    except ValueError:
        raise ValueError(f"invalid card code '{code}'") from None
    return Card(suit=suit, rank=rank)


def cards_from_codes(codes: Iterable[str]) -> List[Card]:
    return [card_from_code(code) for code in codes]


def build_deck() -> List[Card]:
    """Return the 40 canonical cards, suit by suit in ascending rank order."""

    return [Card(suit=suit, rank=rank) for suit in Suit for rank in encoding.RANKS]


def shuffle(deck: Sequence[Card], rng: RandomSource | None = None) -> List[Card]:
    """Return a uniformly shuffled copy of ``deck`` (Fisher-Yates).

    The input sequence is left untouched. ``rng`` only needs ``randrange``;
    pass a seeded ``random.Random`` for reproducible games.
    """

    if rng is None:
        rng = random.Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def mask_from_cards(cards: Iterable[Card]) -> int:
    return encoding.mask_from_indices(card.index for card in cards)


def cards_from_mask(mask: int) -> List[Card]:
    return [card_from_index(index) for index in encoding.iter_indices(mask)]


def hand_points(cards: Iterable[Card]) -> int:
    return sum(card.point_value for card in cards)
