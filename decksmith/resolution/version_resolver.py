"""
Version Resolution Engine.

Turns an abstract decklist (Deck[Card]) into a concrete one (Deck[CardVersion])
by choosing a printing for every copy, given how many copies of each printing
are available and a preference ordering over printings.

Each card is resolved independently through four tiers, stopping at the first
that assigns every copy:

1. EXACT_FIT    - one version covers the whole entry
2. SECTION_FIT  - one version per section, most restrictive section first
3. GREEDY_FILL  - spread remaining availability over sections
4. OVERFLOW     - assign what is still missing to a single version

INVARIANTS:
- Every card keeps its per-section counts (no copy is ever dropped)
- The same inputs always produce the same deck
- The only error raised is CardVersionNotFoundError, when a card has no
  versions at all. Availability shortfalls are reported, never raised.

PRECONDITION: preference and overflow orderings are valid total preorders.
Versions they rank equally keep catalog order, so catalogs must iterate
versions in a stable order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from decksmith.models.availability import Availability, OwnedCollection, unlimited_availability
from decksmith.models.card import Card, CardVersion
from decksmith.models.deck import SECTION_PRIORITY, Deck, DeckBuilder, DeckEntry
from decksmith.models.failure import CardVersionNotFoundError
from decksmith.resolution.preferences import Ordering

logger = logging.getLogger(__name__)

DeckTransformation = Callable[[Deck[Card]], Deck[Card]]
VersionTransformation = Callable[[CardVersion], CardVersion]
OutputTransformation = Callable[[Deck[CardVersion]], Deck[CardVersion]]
Fallback = Callable[[Card], Iterable[CardVersion]]


class VersionCatalog(Protocol):
    """Source of the versions that exist for a card."""

    def versions_of(self, card: Card) -> Sequence[CardVersion]:
        """Finite, and in the same order on every call."""
        ...


class ResolutionTier(str, Enum):
    """Which strategy satisfied a card."""

    EXACT_FIT = "exact_fit"
    SECTION_FIT = "section_fit"
    GREEDY_FILL = "greedy_fill"
    OVERFLOW = "overflow"


@dataclass(frozen=True, slots=True)
class EntryResolution:
    """
    The resolved copies of one card.

    Attributes:
        card: The abstract card
        deck: Its copies as versions, in the entry's original sections
        tier: The tier that completed the assignment
        shortage: Copies assigned beyond real availability (overflow only)
    """

    card: Card
    deck: Deck[CardVersion]
    tier: ResolutionTier
    shortage: int = 0


@dataclass(frozen=True)
class Resolution:
    """A resolved deck plus how each card got there."""

    deck: Deck[CardVersion]
    entries: tuple[EntryResolution, ...] = field(default_factory=tuple)

    @property
    def is_complete(self) -> bool:
        """True if no card needed copies beyond what is available."""
        return all(entry.shortage == 0 for entry in self.entries)

    def shortages(self) -> dict[Card, int]:
        """Copies still to acquire, per card."""
        return {entry.card: entry.shortage for entry in self.entries if entry.shortage}

    def tiers(self) -> dict[Card, ResolutionTier]:
        return {entry.card: entry.tier for entry in self.entries}


class ResolverBuilder:
    """
    Configures a VersionResolver.

    Usage:
        resolver = (
            VersionResolver.builder(catalog)
            .with_owned_collection(collection)
            .with_preference(default_arena_order())
            .build()
        )
    """

    def __init__(self, catalog: VersionCatalog) -> None:
        self._catalog = catalog
        self._availability: Availability = unlimited_availability()
        self._preference: Ordering[CardVersion] | None = None
        self._overflow: Ordering[CardVersion] | None = None
        self._deck_transformations: list[DeckTransformation] = []
        self._version_transformations: list[VersionTransformation] = []
        self._output_transformations: list[OutputTransformation] = []
        self._fallback: Fallback = lambda card: ()

    def with_availability(self, availability: Availability) -> ResolverBuilder:
        self._availability = availability
        return self

    def with_owned_collection(self, collection: OwnedCollection) -> ResolverBuilder:
        return self.with_availability(collection.availability())

    def with_preference(self, order: Ordering[CardVersion]) -> ResolverBuilder:
        if self._preference is not None:
            raise ValueError("Preference order has already been set")
        self._preference = order
        return self

    def override_preference(self, order: Ordering[CardVersion]) -> ResolverBuilder:
        """Put `order` ahead of the current preference, which becomes its tiebreak."""
        self._preference = order if self._preference is None else order.then(self._preference)
        return self

    def tiebreak_preference(self, order: Ordering[CardVersion]) -> ResolverBuilder:
        """Use `order` to break ties of the current preference."""
        self._preference = order if self._preference is None else self._preference.then(order)
        return self

    def with_overflow(self, order: Ordering[CardVersion]) -> ResolverBuilder:
        self._overflow = order
        return self

    def add_deck_transformation(self, transformation: DeckTransformation) -> ResolverBuilder:
        self._deck_transformations.append(transformation)
        return self

    def add_version_transformation(self, transformation: VersionTransformation) -> ResolverBuilder:
        self._version_transformations.append(transformation)
        return self

    def add_output_transformation(self, transformation: OutputTransformation) -> ResolverBuilder:
        self._output_transformations.append(transformation)
        return self

    def with_fallback(self, fallback: Fallback) -> ResolverBuilder:
        self._fallback = fallback
        return self

    def build(self) -> VersionResolver:
        preference = self._preference or Ordering.inactive()
        return VersionResolver(
            catalog=self._catalog,
            availability=self._availability,
            preference=preference,
            overflow=self._overflow or preference,
            deck_transformations=tuple(self._deck_transformations),
            version_transformations=tuple(self._version_transformations),
            output_transformations=tuple(self._output_transformations),
            fallback=self._fallback,
        )


class VersionResolver:
    """Resolves abstract decks to concrete versions. Stateless between calls."""

    def __init__(
        self,
        catalog: VersionCatalog,
        availability: Availability,
        preference: Ordering[CardVersion],
        overflow: Ordering[CardVersion],
        deck_transformations: tuple[DeckTransformation, ...] = (),
        version_transformations: tuple[VersionTransformation, ...] = (),
        output_transformations: tuple[OutputTransformation, ...] = (),
        fallback: Fallback | None = None,
    ) -> None:
        self._catalog = catalog
        self._availability = availability
        self._preference = preference
        self._overflow = overflow
        self._deck_transformations = deck_transformations
        self._version_transformations = version_transformations
        self._output_transformations = output_transformations
        self._fallback = fallback

    @classmethod
    def builder(cls, catalog: VersionCatalog) -> ResolverBuilder:
        return ResolverBuilder(catalog)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def resolve(self, deck: Deck[Card]) -> Deck[CardVersion]:
        """
        Resolve every card in `deck` to versions.

        Raises:
            CardVersionNotFoundError: If any card has no versions at all
        """
        return self.resolve_with_report(deck).deck

    def resolve_with_report(self, deck: Deck[Card]) -> Resolution:
        """Like resolve(), also reporting tiers and shortages per card."""
        for transformation in self._deck_transformations:
            deck = transformation(deck)

        entries = tuple(self.resolve_entry(entry) for entry in deck.entries())
        versioned = Deck.combine(entry.deck for entry in entries)

        for version_transformation in self._version_transformations:
            versioned = versioned.transform(version_transformation)
        for output_transformation in self._output_transformations:
            versioned = output_transformation(versioned)

        resolution = Resolution(deck=versioned, entries=entries)
        if not resolution.is_complete:
            logger.info(
                "Resolved deck is short %d copies across %d cards",
                sum(resolution.shortages().values()),
                len(resolution.shortages()),
            )
        return resolution

    def resolve_entry(self, entry: DeckEntry[Card]) -> EntryResolution:
        """Resolve the copies of a single card."""
        card = entry.card
        candidates = self._candidates(card)
        available = {version: self._availability(version) for version in candidates}

        # Tier 1: a single version covers every copy
        favorite = self._preference.min(v for v in candidates if available[v] >= entry.total)
        if favorite is not None:
            builder: DeckBuilder[CardVersion] = DeckBuilder()
            for section, count in entry.copies:
                builder.add_to(section, favorite, count)
            return self._finish(card, builder, ResolutionTier.EXACT_FIT)

        accumulation: DeckBuilder[CardVersion] = DeckBuilder()
        ordered = self._preference.sorted(v for v in candidates if available[v] > 0)

        # Tier 2: match whole sections, most restrictive first
        for section in SECTION_PRIORITY:
            wanted = entry.number_in(section)
            if not wanted:
                continue
            for version in ordered:
                remaining = available[version] - accumulation.total_copies_of(version)
                if remaining >= wanted:
                    accumulation.add_to(section, version, wanted)
                    break
        if accumulation.size == entry.total:
            return self._finish(card, accumulation, ResolutionTier.SECTION_FIT)

        # Tier 3: use whatever is left in preference order, splitting groups
        for version in ordered:
            remaining = available[version] - accumulation.total_copies_of(version)
            for section in SECTION_PRIORITY:
                wanted = entry.number_in(section) - accumulation.count_in(section)
                to_add = min(remaining, wanted)
                if to_add > 0:
                    accumulation.add_to(section, version, to_add)
                    remaining -= to_add
        if accumulation.size == entry.total:
            return self._finish(card, accumulation, ResolutionTier.GREEDY_FILL)

        # Tier 4: assign the shortfall to one overflow version
        overflow_version = ordered[0] if ordered else self._overflow.min(candidates)
        if overflow_version is None:
            raise CardVersionNotFoundError(card)
        shortage = entry.total - accumulation.size
        for section in SECTION_PRIORITY:
            missing = entry.number_in(section) - accumulation.count_in(section)
            accumulation.add_to(section, overflow_version, missing)
        logger.warning(
            "Not enough copies of %s: %d of %d assigned to overflow version %s",
            card,
            shortage,
            entry.total,
            overflow_version,
        )
        return self._finish(card, accumulation, ResolutionTier.OVERFLOW, shortage)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _candidates(self, card: Card) -> list[CardVersion]:
        """Catalog versions, then fallback versions, without duplicates."""
        candidates = list(dict.fromkeys(self._catalog.versions_of(card)))
        if self._fallback is not None:
            for version in self._fallback(card):
                if version not in candidates:
                    candidates.append(version)
        return candidates

    @staticmethod
    def _finish(
        card: Card,
        builder: DeckBuilder[CardVersion],
        tier: ResolutionTier,
        shortage: int = 0,
    ) -> EntryResolution:
        logger.debug("Resolved %s via %s", card, tier.value)
        return EntryResolution(card=card, deck=builder.build(), tier=tier, shortage=shortage)
