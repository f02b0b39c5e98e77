"""
Version-level deck transformations.

Output hooks that run after resolution and make stable arbitrary choices
among interchangeable versions, mostly for basic lands. All randomness comes
from DeckRandomChoice, so the same deck always gets the same choices.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from decksmith.config import BASIC_LAND_SALT, RANDOM_BASIC_LAND_SALT, RANDOM_LAND_SET_SALT
from decksmith.models.availability import Availability
from decksmith.models.card import Card, CardVersion
from decksmith.models.deck import Deck, Multiset
from decksmith.resolution.random_choice import DeckRandomChoice, MinimalRng, with_salt
from decksmith.resolution.version_resolver import VersionCatalog

logger = logging.getLogger(__name__)


def _group_by_card(versions: Iterable[CardVersion]) -> dict[Card, list[CardVersion]]:
    """Versions grouped per card, each group in catalog order, cards by name."""
    groups: dict[Card, list[CardVersion]] = {}
    for version in versions:
        groups.setdefault(version.card, []).append(version)
    return {
        card: sorted(groups[card], key=CardVersion.sort_key)
        for card in sorted(groups, key=lambda c: (c.name, c.oracle_id))
    }


class BasicLandReplacer:
    """
    Swaps the versions of basic lands in a resolved deck.

    Non-basic cards, and basics with no replacement, pass through unchanged.
    """

    def __init__(self, choose: Callable[[Deck[CardVersion]], dict[Card, CardVersion]]) -> None:
        self._choose = choose

    def __call__(self, deck: Deck[CardVersion]) -> Deck[CardVersion]:
        replacements = self._choose(deck)
        if not replacements:
            return deck

        def replace(version: CardVersion) -> CardVersion:
            if not version.card.is_basic_land:
                return version
            return replacements.get(version.card, version)

        return deck.transform(replace)

    @classmethod
    def from_versions(cls, versions: Iterable[CardVersion]) -> BasicLandReplacer:
        """Always use these versions (at most one per card)."""
        by_card: dict[Card, CardVersion] = {}
        for version in versions:
            if version.card in by_card:
                raise ValueError(f"More than one replacement version for {version.card}")
            by_card[version.card] = version
        return cls(lambda deck: by_card)

    @classmethod
    def chosen_randomly(cls, versions: Iterable[CardVersion]) -> BasicLandReplacer:
        """Per deck, pick one of the given versions for each basic land."""
        groups = _group_by_card(versions)

        def choose(deck: Deck[CardVersion]) -> dict[Card, CardVersion]:
            rng = with_salt(RANDOM_BASIC_LAND_SALT).for_deck(deck)
            return _random_choices(deck, groups, rng.stateful_rng())

        return cls(choose)

    @classmethod
    def choose_random_set(
        cls,
        version_groups: Sequence[Iterable[CardVersion]],
        default_versions: Iterable[CardVersion],
    ) -> BasicLandReplacer:
        """
        Per deck, pick one group of versions, then one version per basic from it.

        Cards a group lacks are filled in from `default_versions`.
        """
        defaults = list(default_versions)
        group_maps: list[dict[Card, list[CardVersion]]] = []
        for group in version_groups:
            by_card = _group_by_card(group)
            for version in defaults:
                by_card.setdefault(version.card, [version])
            group_maps.append(by_card)
        if not group_maps:
            raise ValueError("choose_random_set needs at least one version group")

        def choose(deck: Deck[CardVersion]) -> dict[Card, CardVersion]:
            group_rng, version_rng = with_salt(RANDOM_LAND_SET_SALT).array_for_deck(deck, 2)
            chosen = group_rng.choose(group_maps)
            return _random_choices(deck, chosen, version_rng.stateful_rng())

        return cls(choose)


def _random_choices(
    deck: Deck[CardVersion],
    groups: dict[Card, list[CardVersion]],
    rng: MinimalRng,
) -> dict[Card, CardVersion]:
    in_deck = {version.card for version in deck.all_cards()}
    return {card: rng.choose(versions) for card, versions in groups.items() if card in in_deck}


class BasicLandPreferenceSequence:
    """
    Tries groups of basic land versions in order until one fits the deck.

    A step fits when every basic land in the deck has a version in it with
    enough availability for all its copies. Within a step, versions are tried
    in an order shuffled per card. When no step fits the deck is unchanged,
    unless `mix_all` allows falling back to every version from every step.
    """

    def __init__(
        self,
        steps: Sequence[Iterable[CardVersion]],
        availability: Availability,
        mix_all: bool = False,
        salt: int = BASIC_LAND_SALT,
    ) -> None:
        self._steps = [_group_by_card(step) for step in steps]
        self._availability = availability
        self._mix_all = mix_all
        self._salt = salt
        combined: dict[Card, list[CardVersion]] = {}
        for step in self._steps:
            for card, versions in step.items():
                combined.setdefault(card, []).extend(versions)
        self._all = combined

    def __call__(self, deck: Deck[CardVersion]) -> Deck[CardVersion]:
        chosen = self._choose(deck)
        if chosen is None:
            return deck
        return deck.transform(lambda version: chosen.get(version.card, version))

    def _choose(self, deck: Deck[CardVersion]) -> dict[Card, CardVersion] | None:
        seed = with_salt(self._salt).for_deck(deck)
        needed: dict[Card, int] = {}
        for version, count in deck.all_cards().items():
            if version.card in self._all:
                needed[version.card] = needed.get(version.card, 0) + count

        for index, step in enumerate(self._steps):
            chosen = self._attempt(needed, step, seed)
            if chosen is not None:
                logger.debug("Basic lands chosen from preference step %d", index)
                return chosen
        return self._attempt(needed, self._all, seed) if self._mix_all else None

    def _attempt(
        self,
        needed: dict[Card, int],
        versions_by_card: dict[Card, list[CardVersion]],
        seed: DeckRandomChoice,
    ) -> dict[Card, CardVersion] | None:
        chosen: dict[Card, CardVersion] = {}
        for card in sorted(needed, key=lambda c: (c.name, c.oracle_id)):
            candidates = seed.for_card(card).shuffle(versions_by_card.get(card, []))
            match = next((v for v in candidates if self._availability(v) >= needed[card]), None)
            if match is None:
                return None
            chosen[card] = match
        return chosen


class GroupReplacementWithAvailability:
    """
    Moves every card onto a randomly chosen version from a preferred group.

    For each card, versions matching `group_predicate` are shuffled and the
    first with enough availability for all its copies wins. If any card has
    no such version, the deck is returned unchanged so it never ends up half
    converted.
    """

    def __init__(
        self,
        catalog: VersionCatalog,
        group_predicate: Callable[[CardVersion], bool],
        availability: Availability,
        salt: int,
    ) -> None:
        self._catalog = catalog
        self._group_predicate = group_predicate
        self._availability = availability
        self._salt = salt

    def __call__(self, deck: Deck[CardVersion]) -> Deck[CardVersion]:
        cards = deck.transform(lambda version: version.card).all_cards()
        replaceable = {
            card: [v for v in self._catalog.versions_of(card) if self._group_predicate(v)]
            for card in sorted(cards, key=lambda c: (c.name, c.oracle_id))
        }
        replaceable = {card: versions for card, versions in replaceable.items() if versions}
        seeds = with_salt(self._salt).array_for_deck(deck, len(replaceable))

        choices: dict[Card, CardVersion] = {}
        for seed, (card, versions) in zip(seeds, replaceable.items()):
            candidates = seed.shuffle(versions)
            match = next((v for v in candidates if self._availability(v) >= cards.count(card)), None)
            if match is None:
                logger.debug("No group version of %s has %d copies", card, cards.count(card))
                return deck
            choices[card] = match

        return deck.transform(lambda version: choices.get(version.card, version))


class SplitAcrossVersions:
    """
    Spreads a card's copies evenly over several acceptable versions.

    Any remainder goes to versions in an order shuffled per card, so the
    split is uneven in a stable way rather than always favoring the first.
    """

    def __init__(self, versions: Iterable[CardVersion], salt: int) -> None:
        self._groups = _group_by_card(versions)
        self._salt = salt

    def __call__(self, deck: Deck[CardVersion]) -> Deck[CardVersion]:
        seed = with_salt(self._salt).for_deck(deck)

        def split(version: CardVersion, count: int) -> Multiset[CardVersion] | None:
            group = self._groups.get(version.card)
            if not group or len(group) < 2:
                return None
            order = seed.for_card(version.card).shuffle(group)
            share, remainder = divmod(count, len(order))
            return Multiset(
                (alternative, share + (1 if index < remainder else 0))
                for index, alternative in enumerate(order)
            )

        return deck.transform_cards(split)
