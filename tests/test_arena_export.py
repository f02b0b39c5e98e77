"""Tests for Arena text parsing and rendering."""

import logging

import pytest

from decksmith.models.card import Card, Platform
from decksmith.models.deck import Deck, DeckBuilder, Section
from decksmith.models.failure import FailureKind, UnknownCardError
from decksmith.parsers.arena_export import (
    ArenaParseError,
    parse_arena_collection,
    parse_arena_deck,
    parse_arena_lines,
)
from decksmith.resolution.preferences import default_arena_order
from decksmith.resolution.version_resolver import VersionResolver
from decksmith.services.arena_formatter import format_deck_for_arena
from decksmith.services.card_database import CardCatalog


@pytest.fixture
def arena_catalog(scryfall_catalog: CardCatalog) -> CardCatalog:
    return scryfall_catalog.restricted_to(Platform.ARENA)


def card(catalog: CardCatalog, name: str) -> Card:
    found = catalog.card_named(name)
    assert found is not None
    return found


class TestParseArenaLines:
    def test_full_and_simple_lines(self) -> None:
        lines = parse_arena_lines("4 Lightning Bolt (STA) 42\n20 Mountain\n2x Abrade")

        assert [(line.quantity, line.name) for line in lines] == [
            (4, "Lightning Bolt"),
            (20, "Mountain"),
            (2, "Abrade"),
        ]
        assert lines[0].set_code == "STA"
        assert lines[0].collector_number == "42"
        assert lines[1].set_code is None

    def test_lowercase_set_code_normalized(self) -> None:
        (line,) = parse_arena_lines("1 Mountain (neo) 290a")

        assert line.set_code == "NEO"
        assert line.collector_number == "290a"

    def test_sections(self) -> None:
        text = "Commander\n1 Atraxa\n\nDeck\n4 Shock\n\nSideboard:\n2 Abrade"

        lines = parse_arena_lines(text)

        assert [line.section for line in lines] == [
            Section.COMMANDER,
            Section.MAIN_DECK,
            Section.SIDEBOARD,
        ]

    def test_cards_before_header_are_main_deck(self) -> None:
        (line,) = parse_arena_lines("4 Shock")

        assert line.section is Section.MAIN_DECK

    def test_comments_and_about_skipped(self) -> None:
        text = "About\nName Mono Red\n\n// a comment\n# another\nDeck\n4 Shock"

        lines = parse_arena_lines(text)

        assert [line.name for line in lines] == ["Shock"]

    def test_line_numbers(self) -> None:
        lines = parse_arena_lines("Deck\n\n4 Shock")

        assert lines[0].line_number == 3

    def test_unparseable_line(self) -> None:
        with pytest.raises(ArenaParseError) as exc_info:
            parse_arena_lines("Deck\nfour Shock")

        assert exc_info.value.line_number == 2
        assert exc_info.value.line_content == "four Shock"
        assert exc_info.value.kind == FailureKind.INVALID_INPUT


class TestParseArenaDeck:
    def test_parse(self, arena_catalog: CardCatalog, sample_arena_export: str) -> None:
        deck = parse_arena_deck(sample_arena_export, arena_catalog)

        bolt = card(arena_catalog, "Lightning Bolt")
        assert deck.get(Section.MAIN_DECK).count(bolt) == 4
        assert deck.get(Section.MAIN_DECK).count(card(arena_catalog, "Mountain")) == 20
        assert deck.get(Section.SIDEBOARD).count(card(arena_catalog, "Abrade")) == 2
        assert deck.size == 26

    def test_repeated_lines_add_up(self, arena_catalog: CardCatalog) -> None:
        deck = parse_arena_deck("4 Mountain\n3 Mountain (DMU) 271", arena_catalog)

        assert deck == Deck.simple([card(arena_catalog, "Mountain")], 7)

    def test_unknown_cards(self, arena_catalog: CardCatalog) -> None:
        with pytest.raises(UnknownCardError) as exc_info:
            parse_arena_deck("4 Shock\n4 Mountain\n2 Shock\n1 Opt", arena_catalog)

        assert exc_info.value.card_names == ["Shock", "Opt"]


class TestParseArenaCollection:
    def test_collects_versions(self, arena_catalog: CardCatalog) -> None:
        collection = parse_arena_collection(
            "10 Mountain (NEO) 290\n5 Mountain (NEO) 290\n4 Lightning Bolt (STA) 42",
            arena_catalog,
        )

        mountain = arena_catalog.find_version(card(arena_catalog, "Mountain"), "NEO", "290")
        assert mountain is not None
        assert collection.count(mountain) == 15
        assert collection.total_cards() == 19

    def test_lines_without_printing_skipped(
        self, arena_catalog: CardCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="decksmith.parsers.arena_export"):
            collection = parse_arena_collection(
                "4 Abrade\n3 Abrade (XXX) 1", arena_catalog
            )

        assert len(collection) == 0
        assert "names no printing" in caplog.text
        assert "No arena version of Abrade" in caplog.text


class TestFormatDeckForArena:
    def test_format(self, arena_catalog: CardCatalog) -> None:
        bolt = arena_catalog.versions_of(card(arena_catalog, "Lightning Bolt"))[0]
        abrade = arena_catalog.versions_of(card(arena_catalog, "Abrade"))[0]
        deck = (
            DeckBuilder()
            .add_to(Section.SIDEBOARD, abrade, 2)
            .add_to(Section.MAIN_DECK, bolt, 4)
            .build()
        )

        assert format_deck_for_arena(deck) == (
            "Deck\n4 Lightning Bolt (STA) 42\n\nSideboard\n2 Abrade (VOW) 139"
        )

    def test_empty_deck(self) -> None:
        assert format_deck_for_arena(Deck()) == ""

    def test_resolved_export_parses_back(
        self, arena_catalog: CardCatalog, sample_arena_export: str
    ) -> None:
        deck = parse_arena_deck(sample_arena_export, arena_catalog)
        resolver = (
            VersionResolver.builder(arena_catalog).with_preference(default_arena_order()).build()
        )

        text = format_deck_for_arena(resolver.resolve(deck))

        assert "20 Mountain (DMU) 271" in text
        assert parse_arena_deck(text, arena_catalog) == deck
