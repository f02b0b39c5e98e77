"""
Deterministic Random Selector.

Reproducible pseudo-random choices derived from a deck's content. The same
deck content plus the same salt always yields the same choices, so deck
transformations that pick arbitrarily among equivalent versions stay stable
across runs and machines.

INVARIANT: nothing here reads wall-clock time or host entropy, except
generate_salt(), which is one-off tooling for minting new salt constants.
"""

from __future__ import annotations

import hashlib
import secrets
import struct
from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from typing import TypeVar

from decksmith.models.card import Card, CardVersion
from decksmith.models.deck import SECTION_PRIORITY, Deck

T = TypeVar("T")

_MASK64 = (1 << 64) - 1
_MAX_LONG = (1 << 63) - 1


def _to_signed(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value > _MAX_LONG else value


def card_identity(card: Hashable) -> str:
    """Stable identity string for a card or version (its oracle id)."""
    if isinstance(card, CardVersion):
        return card.card.oracle_id
    if isinstance(card, Card):
        return card.oracle_id
    return str(card)


class MinimalRng(ABC):
    """Bounded integer draws plus the choices built on them."""

    @abstractmethod
    def generate_int(self, bound: int) -> int:
        """Uniform integer in [0, bound)."""

    def choose(self, items: Sequence[T]) -> T:
        return items[self.generate_int(len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Fisher-Yates shuffle into a new list."""
        shuffled = list(items)
        size = len(shuffled)
        for i in range(size - 1):
            j = i + self.generate_int(size - i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled


class SplitMix64(MinimalRng):
    """
    splitmix64 generator (Vigna, 2015, public domain).

    Chosen for good diffusion between adjacent seeds, which the seeds derived
    by DeckHasher.array_for_deck are.
    """

    def __init__(self, seed: int) -> None:
        self._state = seed & _MASK64

    def next_long(self) -> int:
        self._state = (self._state + 0x9E3779B97F4A7C15) & _MASK64
        z = self._state
        z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
        z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
        return z ^ (z >> 31)

    def generate_int(self, bound: int) -> int:
        """Uniform integer in [0, bound), rejecting draws that would bias the modulo."""
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        # Largest multiple of bound that fits in 63 bits
        limit = (_MAX_LONG + 1) - ((_MAX_LONG + 1) % bound)
        while True:
            choice = self.next_long() & _MAX_LONG
            if choice < limit:
                return choice % bound


class DeckRandomChoice(MinimalRng):
    """
    A seed derived from deck content.

    Each one-shot draw (generate_int, choose, shuffle) restarts from the seed,
    so repeated calls agree. Use stateful_rng() for a sequence of draws.
    """

    __slots__ = ("seed",)

    def __init__(self, seed: int) -> None:
        self.seed = _to_signed(seed)

    def for_card(self, card: Hashable) -> DeckRandomChoice:
        """Narrow the seed so different cards make independent-looking choices."""
        digest = hashlib.sha256(card_identity(card).encode("utf-8")).digest()
        (low,) = struct.unpack(">q", digest[-8:])
        return DeckRandomChoice(self.seed ^ low)

    def stateful_rng(self) -> SplitMix64:
        return SplitMix64(self.seed)

    def generate_int(self, bound: int) -> int:
        return self.stateful_rng().generate_int(bound)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        return self.stateful_rng().shuffle(items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DeckRandomChoice):
            return self.seed == other.seed
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.seed)

    def __repr__(self) -> str:
        return f"DeckRandomChoice(seed={self.seed:#x})"


class DeckHasher:
    """
    Derives seeds from deck content.

    The digest covers every section with its cards sorted by identity, so two
    decks with the same content hash alike however they were built.
    """

    def __init__(self, salt: int) -> None:
        self.salt = _to_signed(salt)

    def seed_for(self, deck: Deck[Hashable]) -> int:
        sink = hashlib.sha256()
        for section, cards in deck.sections():
            sink.update(struct.pack(">i", SECTION_PRIORITY.index(section)))
            entries = sorted(
                ((card_identity(card), count) for card, count in cards.items()),
            )
            for identity, count in entries:
                sink.update(struct.pack(">q", count))
                sink.update(identity.encode("utf-8"))
        (digest,) = struct.unpack(">q", sink.digest()[:8])
        return digest ^ self.salt

    def for_deck(self, deck: Deck[Hashable]) -> DeckRandomChoice:
        return DeckRandomChoice(self.seed_for(deck))

    def array_for_deck(self, deck: Deck[Hashable], length: int) -> list[DeckRandomChoice]:
        """`length` selectors with consecutive seeds."""
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        seed = self.seed_for(deck)
        return [DeckRandomChoice(seed + n) for n in range(length)]


def with_salt(salt: int) -> DeckHasher:
    return DeckHasher(salt)


def generate_salt() -> str:
    """Mint a new salt constant. Run once when adding a transformation."""
    return f"0x{secrets.randbits(64):016x}"
