"""
Availability Oracle.

An availability function reports how many copies of a version can be used.
It is either unlimited, or backed by an owned collection.

INVARIANT: Only versions with count > 0 may appear in an OwnedCollection.
This eliminates the Count == 0 vs absent ambiguity globally.
"""

import sys
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field

from decksmith.models.card import CardVersion
from decksmith.models.deck import Deck

# Effectively unlimited copies
UNLIMITED = sys.maxsize

Availability = Callable[[CardVersion], int]


def unlimited_availability() -> Availability:
    """Every version is available in any quantity."""
    return lambda version: UNLIMITED


def unlimited_availability_if(predicate: Callable[[CardVersion], bool]) -> Availability:
    """Unlimited copies of versions matching `predicate`, none of the rest."""
    return lambda version: UNLIMITED if predicate(version) else 0


class NotEnoughCopiesError(Exception):
    """Raised when consuming more copies than a collection holds."""

    def __init__(self, version: CardVersion, requested: int, available: int) -> None:
        self.version = version
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot use {requested} copies of '{version}': only {available} available"
        )


@dataclass(frozen=True, slots=True)
class OwnedCollection:
    """
    Immutable multiset of owned card versions.

    INVARIANT: Every version in the collection has count >= 1.
    Zero-count versions are rejected at construction time.

    Usage:
        collection = OwnedCollection.from_counts({forest_dmu: 12, forest_neo: 3})
        resolver = VersionResolver.builder(catalog).with_owned_collection(collection).build()
    """

    _cards: dict[CardVersion, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate all counts are positive."""
        for version, count in self._cards.items():
            if count <= 0:
                raise ValueError(f"Version '{version}' has invalid count {count} (must be > 0)")

    @classmethod
    def from_counts(cls, cards: Mapping[CardVersion, int]) -> "OwnedCollection":
        """
        Build a collection from version -> count.

        Filters out any versions with count <= 0.
        """
        return cls(_cards={version: count for version, count in cards.items() if count > 0})

    def __contains__(self, version: object) -> bool:
        return version in self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[CardVersion]:
        return iter(self._cards)

    def items(self) -> Iterator[tuple[CardVersion, int]]:
        return iter(self._cards.items())

    def count(self, version: CardVersion) -> int:
        """Owned copies of a version; 0 if not owned."""
        return self._cards.get(version, 0)

    def availability(self) -> Availability:
        """This collection as an availability function."""
        return self.count

    def consume(self, deck: Deck[CardVersion]) -> "OwnedCollection":
        """
        Create a new collection with the copies used by a deck removed.

        Raises:
            NotEnoughCopiesError: If the deck uses more copies than are owned
        """
        remaining = dict(self._cards)
        for version, used in deck.all_cards().items():
            owned = remaining.get(version, 0)
            if used > owned:
                raise NotEnoughCopiesError(version, used, owned)
            remaining[version] = owned - used
        return OwnedCollection.from_counts(remaining)

    def total_cards(self) -> int:
        """Total copies across all versions."""
        return sum(self._cards.values())

    def unique_cards(self) -> int:
        """Number of distinct versions."""
        return len(self._cards)


def availability_from(collection: OwnedCollection) -> Availability:
    """Availability backed by an owned collection."""
    return collection.availability()
