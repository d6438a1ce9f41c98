"""Card index encoding utilities for Chinchón."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, Iterator

RANKS: Final[list[int]] = [1, 2, 3, 4, 5, 6, 7, 10, 11, 12]
SUITS: Final[list[str]] = ["oros", "copas", "espadas", "bastos"]
RANK_TO_IDX: Final[dict[int, int]] = {rank: idx for idx, rank in enumerate(RANKS)}
SUIT_TO_IDX: Final[dict[str, int]] = {suit: idx for idx, suit in enumerate(SUITS)}
POINTS: Final[list[int]] = [rank if rank <= 7 else 10 for rank in RANKS]
DECK_CARD_COUNT: Final[int] = len(RANKS) * len(SUITS)


@dataclass(frozen=True, slots=True)
class CardDecoding:
    """Typed container describing a decoded card index."""

    rank_idx: int
    suit_idx: int

    @property
    def rank(self) -> int:
        return RANKS[self.rank_idx]

    @property
    def suit(self) -> str:
        return SUITS[self.suit_idx]


def card_index(rank_idx: int, suit_idx: int) -> int:
    """Encode a rank and suit position into a dense card index."""

    if not 0 <= suit_idx < len(SUITS):
        raise ValueError("suit_idx out of range")
    if not 0 <= rank_idx < len(RANKS):
        raise ValueError("rank_idx out of range")
    return suit_idx * len(RANKS) + rank_idx


def decode_index(index: int) -> CardDecoding:
    """Decode a card index into its rank and suit positions."""

    _validate_index(index)
    suit_idx, rank_idx = divmod(index, len(RANKS))
    return CardDecoding(rank_idx=rank_idx, suit_idx=suit_idx)


def rank_points(rank: int) -> int:
    """Return the point value of ``rank`` (figures count ten)."""

    try:
        return POINTS[RANK_TO_IDX[rank]]
    except KeyError:
        raise ValueError(f"rank {rank} is not part of the Spanish deck") from None


def _validate_index(index: int) -> None:
    if index < 0 or index >= DECK_CARD_COUNT:
        raise ValueError(f"card index {index} out of range")


def mask_from_indices(indices: Iterable[int]) -> int:
    """Return a bit-mask representing the provided card indices."""

    mask = 0
    for index in indices:
        _validate_index(index)
        mask |= 1 << index
    return mask


def iter_indices(mask: int) -> Iterator[int]:
    """Yield all card indices present in ``mask``."""

    for index in range(DECK_CARD_COUNT):
        if (mask >> index) & 1:
            yield index


def points_from_mask(mask: int) -> int:
    """Return the total point value represented by ``mask``."""

    return sum(POINTS[decode_index(index).rank_idx] for index in iter_indices(mask))
