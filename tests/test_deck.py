"""
Tests for the Deck container.

INVARIANT: counts are positive; absent and empty sections are the same.
INVARIANT: decks are values; transformations return new decks.
"""

import pytest

from decksmith.models.card import Card
from decksmith.models.deck import (
    SECTION_PRIORITY,
    Deck,
    DeckBuilder,
    DeckEntry,
    Multiset,
    Section,
)


class TestSection:
    def test_priority_order(self) -> None:
        assert SECTION_PRIORITY == (
            Section.COMMANDER,
            Section.COMPANION,
            Section.MAIN_DECK,
            Section.SIDEBOARD,
        )

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Deck", Section.MAIN_DECK),
            ("sideboard", Section.SIDEBOARD),
            ("Commander:", Section.COMMANDER),
            ("  COMPANION ", Section.COMPANION),
            ("About", None),
            ("4 Forest", None),
        ],
    )
    def test_from_label(self, label: str, expected: Section | None) -> None:
        assert Section.from_label(label) is expected


class TestMultiset:
    def test_zero_counts_are_dropped(self) -> None:
        multiset = Multiset({"a": 2, "b": 0})

        assert "b" not in multiset
        assert len(multiset) == 1
        assert multiset.count("b") == 0

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValueError, match="invalid count"):
            Multiset({"a": -1})

    def test_duplicate_pairs_merge(self) -> None:
        multiset = Multiset([("a", 2), ("b", 1), ("a", 3)])

        assert multiset["a"] == 5
        assert multiset.size == 6
        assert list(multiset) == ["a", "b"]

    def test_elements_repeat_by_count(self) -> None:
        assert list(Multiset({"a": 2, "b": 1}).elements()) == ["a", "a", "b"]

    def test_addition(self) -> None:
        total = Multiset({"a": 1}) + Multiset({"a": 2, "b": 1})

        assert total == Multiset({"a": 3, "b": 1})

    def test_equal_multisets_hash_alike(self) -> None:
        assert hash(Multiset({"a": 1, "b": 2})) == hash(Multiset({"b": 2, "a": 1}))


class TestDeckBuilder:
    def test_accumulates_per_section(self, forest: Card) -> None:
        builder: DeckBuilder[Card] = DeckBuilder()
        builder.add_to(Section.MAIN_DECK, forest, 3)
        builder.add_to(Section.MAIN_DECK, forest, 2)
        builder.add_to(Section.SIDEBOARD, forest)

        assert builder.count_in(Section.MAIN_DECK) == 5
        assert builder.total_copies_of(forest) == 6
        assert builder.size == 6

    def test_zero_copies_leave_no_section(self, forest: Card) -> None:
        deck = DeckBuilder[Card]().add_to(Section.COMMANDER, forest, 0).build()

        assert not deck
        assert list(deck.sections()) == []

    def test_negative_copies_rejected(self, forest: Card) -> None:
        with pytest.raises(ValueError):
            DeckBuilder[Card]().add_to(Section.MAIN_DECK, forest, -1)

    def test_get_is_read_only(self, forest: Card) -> None:
        builder = DeckBuilder[Card]().add_to(Section.MAIN_DECK, forest, 2)

        view = builder.get(Section.MAIN_DECK)

        with pytest.raises(TypeError):
            view[forest] = 99  # type: ignore[index]
        assert builder.count_in(Section.MAIN_DECK) == 2
        assert dict(builder.get(Section.COMMANDER)) == {}

    def test_add_all_to_accepts_iterables(self, forest: Card, island: Card) -> None:
        deck = DeckBuilder[Card]().add_all_to(Section.MAIN_DECK, [forest, forest, island]).build()

        assert deck.get(Section.MAIN_DECK) == Multiset({forest: 2, island: 1})


class TestDeck:
    @pytest.fixture
    def deck(self, forest: Card, island: Card, shock: Card) -> Deck[Card]:
        return (
            DeckBuilder[Card]()
            .add_to(Section.SIDEBOARD, shock, 2)
            .add_to(Section.MAIN_DECK, forest, 20)
            .add_to(Section.MAIN_DECK, shock, 4)
            .add_to(Section.COMMANDER, island, 1)
            .build()
        )

    def test_sections_in_priority_order(self, deck: Deck[Card]) -> None:
        assert [section for section, _ in deck.sections()] == [
            Section.COMMANDER,
            Section.MAIN_DECK,
            Section.SIDEBOARD,
        ]

    def test_absent_section_is_empty(self, deck: Deck[Card]) -> None:
        assert deck.get(Section.COMPANION) == Multiset()

    def test_size_and_totals(self, deck: Deck[Card], shock: Card) -> None:
        assert deck.size == 27
        assert deck.total_copies_of(shock) == 6

    def test_all_cards_merges_sections(self, deck: Deck[Card], forest: Card, shock: Card) -> None:
        cards = deck.all_cards()

        assert cards[shock] == 6
        assert cards[forest] == 20

    def test_legal_sideboard_includes_commander(
        self, deck: Deck[Card], island: Card, shock: Card
    ) -> None:
        assert deck.legal_sideboard() == Multiset({island: 1, shock: 2})

    def test_entries(self, deck: Deck[Card], shock: Card) -> None:
        entries = {entry.card: entry for entry in deck.entries()}

        assert entries[shock] == DeckEntry(
            card=shock,
            copies=((Section.MAIN_DECK, 4), (Section.SIDEBOARD, 2)),
        )
        assert entries[shock].total == 6
        assert entries[shock].number_in(Section.COMMANDER) == 0

    def test_equality_ignores_construction_order(
        self, deck: Deck[Card], forest: Card, island: Card, shock: Card
    ) -> None:
        same = Deck(
            {
                Section.MAIN_DECK: {shock: 4, forest: 20},
                Section.COMMANDER: {island: 1},
                Section.SIDEBOARD: {shock: 2},
                Section.COMPANION: {},
            }
        )

        assert same == deck
        assert hash(same) == hash(deck)

    def test_combine(self, forest: Card) -> None:
        combined = Deck.combine([Deck.simple([forest], 2), Deck.simple([forest], 3)])

        assert combined == Deck.simple([forest], 5)

    def test_to_builder_round_trip(self, deck: Deck[Card]) -> None:
        assert deck.to_builder().build() == deck


class TestDeckTransformations:
    def test_transform_merges_collisions(self, forest: Card, island: Card) -> None:
        deck = Deck.simple([forest, island], 3)

        merged = deck.transform(lambda card: "land")

        assert merged.get(Section.MAIN_DECK) == Multiset({"land": 6})

    def test_transform_leaves_original_untouched(self, forest: Card) -> None:
        deck = Deck.simple([forest], 3)

        deck.transform(lambda card: card.name)

        assert deck.get(Section.MAIN_DECK) == Multiset({forest: 3})

    def test_flat_transform_drops_none(self, forest: Card, shock: Card) -> None:
        deck = Deck.simple([forest, shock], 2)

        lands = deck.flat_transform(lambda card: card if card.is_basic_land else None)

        assert lands == Deck.simple([forest], 2)

    def test_flat_transform_to_nothing_is_empty(self, shock: Card) -> None:
        assert not Deck.simple([shock]).flat_transform(lambda card: None)

    def test_transform_cards_splits_groups(self, forest: Card, island: Card) -> None:
        deck = Deck.simple([forest], 5)

        split = deck.transform_cards(lambda card, count: {card: count - 2, island: 2})

        assert split.get(Section.MAIN_DECK) == Multiset({forest: 3, island: 2})
        assert split.size == deck.size

    def test_transform_cards_none_keeps_group(self, forest: Card) -> None:
        deck = Deck.simple([forest], 5)

        assert deck.transform_cards(lambda card, count: None) == deck

    def test_sort_cards(self, forest: Card, island: Card, shock: Card) -> None:
        deck = Deck.simple([shock, island, forest])

        ordered = deck.sort_cards(key=lambda card: card.name)

        assert list(ordered.get(Section.MAIN_DECK)) == [forest, island, shock]
        assert ordered == deck
