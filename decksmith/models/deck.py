"""
Deck Container.

An immutable multiset of cards per section. The same container holds
abstract cards before resolution and concrete versions after it.

INVARIANTS:
- Every count is a positive integer; zero-count cards are never exposed
- No section maps to an empty multiset (absent == empty)
- Decks are never mutated; every transformation returns a new Deck
- DeckBuilder is the only mutable form and never escapes its construction call
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, TypeVar

C = TypeVar("C", bound=Hashable)
D = TypeVar("D", bound=Hashable)


class Section(Enum):
    """
    A compartment of a deck.

    Members are declared in resolution priority order: the most restrictive
    sections come first and claim versions before the others.
    """

    COMMANDER = "Commander"
    COMPANION = "Companion"
    MAIN_DECK = "Deck"
    SIDEBOARD = "Sideboard"

    @property
    def label(self) -> str:
        """Header used by Arena-style text formats."""
        return self.value

    @classmethod
    def from_label(cls, label: str) -> Section | None:
        """Case-insensitive lookup by label; None if not a section header."""
        wanted = label.strip().rstrip(":").strip().lower()
        for section in cls:
            if section.value.lower() == wanted:
                return section
        return None


SECTION_PRIORITY: tuple[Section, ...] = tuple(Section)


class Multiset(Mapping[C, int], Generic[C]):
    """
    Immutable card -> count mapping with positive counts only.

    Iteration follows insertion order, which the Deck uses as display order.
    """

    __slots__ = ("_counts", "_hash")

    def __init__(self, counts: Mapping[C, int] | Iterable[tuple[C, int]] = ()) -> None:
        merged: dict[C, int] = {}
        items = counts.items() if isinstance(counts, Mapping) else counts
        for card, count in items:
            if count < 0:
                raise ValueError(f"Card {card!r} has invalid count {count} (must be >= 0)")
            if count:
                merged[card] = merged.get(card, 0) + count
        self._counts = merged
        self._hash: int | None = None

    def __getitem__(self, card: C) -> int:
        return self._counts[card]

    def __iter__(self) -> Iterator[C]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._counts.items()))
        return self._hash

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Multiset):
            return self._counts == other._counts
        return NotImplemented

    def __add__(self, other: Multiset[C]) -> Multiset[C]:
        return Multiset([*self._counts.items(), *other._counts.items()])

    def count(self, card: C) -> int:
        """Copies of a card; 0 if absent."""
        return self._counts.get(card, 0)

    @property
    def size(self) -> int:
        """Total copies across all cards."""
        return sum(self._counts.values())

    def elements(self) -> Iterator[C]:
        """Each card repeated by its count."""
        for card, count in self._counts.items():
            for _ in range(count):
                yield card

    def __repr__(self) -> str:
        body = "; ".join(f"{count}x {card}" for card, count in self._counts.items())
        return f"[{body}]"


_EMPTY: Multiset[Any] = Multiset()


@dataclass(frozen=True, slots=True)
class DeckEntry(Generic[C]):
    """
    Per-card aggregate of section counts.

    Attributes:
        card: The card this entry describes
        copies: (section, count) pairs in section priority order, counts > 0
    """

    card: C
    copies: tuple[tuple[Section, int], ...]

    def number_in(self, section: Section) -> int:
        for entry_section, count in self.copies:
            if entry_section is section:
                return count
        return 0

    @property
    def total(self) -> int:
        return sum(count for _, count in self.copies)


class DeckBuilder(Generic[C]):
    """Mutable accumulator used while constructing a Deck."""

    def __init__(self) -> None:
        self._sections: dict[Section, dict[C, int]] = {}

    def _section(self, section: Section) -> dict[C, int]:
        return self._sections.setdefault(section, {})

    def add_to(self, section: Section, card: C, copies: int = 1) -> DeckBuilder[C]:
        if copies < 0:
            raise ValueError(f"Cannot add {copies} copies of {card!r}")
        if copies:
            cards = self._section(section)
            cards[card] = cards.get(card, 0) + copies
        return self

    def add_all_to(self, section: Section, cards: Mapping[C, int] | Iterable[C]) -> DeckBuilder[C]:
        if isinstance(cards, Mapping):
            for card, copies in cards.items():
                self.add_to(section, card, copies)
        else:
            for card in cards:
                self.add_to(section, card)
        return self

    def add_deck(self, deck: Deck[C]) -> DeckBuilder[C]:
        for section, cards in deck.sections():
            self.add_all_to(section, cards)
        return self

    def get(self, section: Section) -> Mapping[C, int]:
        """Read-only view of one section so far."""
        return MappingProxyType(self._sections.get(section, {}))

    def count_in(self, section: Section) -> int:
        return sum(self._sections.get(section, {}).values())

    @property
    def size(self) -> int:
        return sum(sum(cards.values()) for cards in self._sections.values())

    def total_copies_of(self, card: C) -> int:
        return sum(cards.get(card, 0) for cards in self._sections.values())

    def build(self) -> Deck[C]:
        return Deck(self._sections)


class Deck(Generic[C]):
    """
    Immutable mapping from Section to a multiset of cards.

    Usage:
        deck = (
            DeckBuilder[Card]()
            .add_to(Section.MAIN_DECK, forest, 20)
            .add_to(Section.SIDEBOARD, naturalize, 2)
            .build()
        )
        for entry in deck.entries():
            ...
    """

    __slots__ = ("_sections",)

    def __init__(self, sections: Mapping[Section, Mapping[C, int] | Multiset[C]] | None = None) -> None:
        ordered: dict[Section, Multiset[C]] = {}
        sections = sections or {}
        for section in SECTION_PRIORITY:
            cards = sections.get(section)
            if cards is None:
                continue
            multiset = cards if isinstance(cards, Multiset) else Multiset(cards)
            if multiset:
                ordered[section] = multiset
        self._sections = ordered

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def simple(cls, cards: Iterable[C], copies_each: int = 1) -> Deck[C]:
        """A deck with only a main deck section."""
        builder: DeckBuilder[C] = DeckBuilder()
        for card in cards:
            builder.add_to(Section.MAIN_DECK, card, copies_each)
        return builder.build()

    @classmethod
    def combine(cls, decks: Iterable[Deck[C]]) -> Deck[C]:
        """Sum several decks section by section."""
        builder: DeckBuilder[C] = DeckBuilder()
        for deck in decks:
            builder.add_deck(deck)
        return builder.build()

    def to_builder(self) -> DeckBuilder[C]:
        builder: DeckBuilder[C] = DeckBuilder()
        return builder.add_deck(self)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, section: Section) -> Multiset[C]:
        return self._sections.get(section, _EMPTY)

    def sections(self) -> Iterator[tuple[Section, Multiset[C]]]:
        """Non-empty sections in priority order."""
        return iter(self._sections.items())

    def all_cards(self) -> Multiset[C]:
        return Multiset(
            (card, count) for cards in self._sections.values() for card, count in cards.items()
        )

    def legal_sideboard(self) -> Multiset[C]:
        """
        Everything outside the main deck.

        Commander and companion count against the sideboard for legality
        purposes even where a client displays them separately.
        """
        return Multiset(
            (card, count)
            for section, cards in self._sections.items()
            if section is not Section.MAIN_DECK
            for card, count in cards.items()
        )

    @property
    def size(self) -> int:
        return sum(cards.size for cards in self._sections.values())

    def total_copies_of(self, card: C) -> int:
        return sum(cards.count(card) for cards in self._sections.values())

    def entry_for(self, card: C) -> DeckEntry[C]:
        copies = tuple(
            (section, cards.count(card))
            for section, cards in self._sections.items()
            if cards.count(card)
        )
        return DeckEntry(card=card, copies=copies)

    def entries(self) -> Iterator[DeckEntry[C]]:
        """One entry per distinct card, in first-appearance order."""
        return (self.entry_for(card) for card in self.all_cards())

    # -------------------------------------------------------------------------
    # Transformations
    # -------------------------------------------------------------------------

    def transform(self, function: Callable[[C], D]) -> Deck[D]:
        """Map every card 1:1. Cards mapped to the same target merge counts."""
        return Deck(
            {
                section: Multiset((function(card), count) for card, count in cards.items())
                for section, cards in self._sections.items()
            }
        )

    def flat_transform(self, function: Callable[[C], D | None]) -> Deck[D]:
        """Map every card to a replacement, dropping cards mapped to None."""
        transformed: dict[Section, Multiset[D]] = {}
        for section, cards in self._sections.items():
            pairs = []
            for card, count in cards.items():
                replacement = function(card)
                if replacement is not None:
                    pairs.append((replacement, count))
            transformed[section] = Multiset(pairs)
        return Deck(transformed)

    def transform_cards(
        self, function: Callable[[C, int], Mapping[C, int] | None]
    ) -> Deck[C]:
        """
        Replace the group of copies of each card with a multiset of cards.

        `function` receives a card and its count within one section and returns
        the replacement multiset, or None to keep the group unchanged.
        """
        transformed: dict[Section, Multiset[C]] = {}
        for section, cards in self._sections.items():
            pairs: list[tuple[C, int]] = []
            for card, count in cards.items():
                replacement = function(card, count)
                if replacement is None:
                    pairs.append((card, count))
                else:
                    pairs.extend(replacement.items())
            transformed[section] = Multiset(pairs)
        return Deck(transformed)

    def sort_cards(self, key: Callable[[C], Any], reverse: bool = False) -> Deck[C]:
        """Reorder cards within each section; counts are unchanged."""
        return Deck(
            {
                section: Multiset(
                    sorted(cards.items(), key=lambda item: key(item[0]), reverse=reverse)
                )
                for section, cards in self._sections.items()
            }
        )

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Deck):
            return self._sections == other._sections
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._sections.items()))

    def __bool__(self) -> bool:
        return bool(self._sections)

    def __repr__(self) -> str:
        parts = ", ".join(f"{section.name}={cards!r}" for section, cards in self._sections.items())
        return f"Deck{{{parts}}}"
