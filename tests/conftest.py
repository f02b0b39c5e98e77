from collections.abc import Callable
from datetime import date

import pytest

from decksmith.models.card import Card, CardVersion, Edition, ExpansionType, Finish, Platform, Word
from decksmith.services.card_database import CardCatalog, build_catalog

VersionFactory = Callable[..., CardVersion]


@pytest.fixture
def make_version() -> VersionFactory:
    """Factory for card versions with sensible defaults."""

    def factory(
        card: Card,
        set_code: str,
        collector_number: str = "1",
        released_at: date | None = None,
        set_type: ExpansionType = ExpansionType.EXPANSION,
        finish: Finish = Finish.NONFOIL,
        platform: Platform = Platform.PAPER,
    ) -> CardVersion:
        return CardVersion(
            card=card,
            edition=Edition(
                set_code=set_code,
                collector_number=collector_number,
                released_at=released_at,
                set_type=Word.of(set_type),
            ),
            finish=Word.of(finish),
            platform=platform,
        )

    return factory


@pytest.fixture
def forest() -> Card:
    return Card(oracle_id="forest-oid", name="Forest", type_line="Basic Land — Forest")


@pytest.fixture
def island() -> Card:
    return Card(oracle_id="island-oid", name="Island", type_line="Basic Land — Island")


@pytest.fixture
def shock() -> Card:
    return Card(oracle_id="shock-oid", name="Shock", type_line="Instant")


@pytest.fixture
def bolt() -> Card:
    return Card(oracle_id="bolt-oid", name="Lightning Bolt", type_line="Instant")


@pytest.fixture
def ghost() -> Card:
    return Card(oracle_id="ghost-oid", name="Ghost Card", type_line="Creature — Spirit")


@pytest.fixture
def sample_scryfall_cards() -> list[dict]:
    """Sample Scryfall card data covering paper, Arena and MTGO printings."""
    return [
        {
            "oracle_id": "bolt-oid",
            "name": "Lightning Bolt",
            "type_line": "Instant",
            "set": "sta",
            "set_type": "masterpiece",
            "collector_number": "42",
            "released_at": "2021-04-23",
            "games": ["paper", "arena", "mtgo"],
            "finishes": ["nonfoil", "foil"],
            "arena_id": 75530,
            "mtgo_id": 90001,
            "mtgo_foil_id": 90002,
            "layout": "normal",
        },
        {
            "oracle_id": "bolt-oid",
            "name": "Lightning Bolt",
            "type_line": "Instant",
            "set": "m11",
            "set_type": "core",
            "collector_number": "149",
            "released_at": "2010-07-16",
            "games": ["paper", "mtgo"],
            "finishes": ["nonfoil", "foil"],
            "mtgo_id": 38000,
            "layout": "normal",
        },
        {
            "oracle_id": "mountain-oid",
            "name": "Mountain",
            "type_line": "Basic Land — Mountain",
            "set": "neo",
            "set_type": "expansion",
            "collector_number": "290",
            "released_at": "2022-02-18",
            "games": ["paper", "arena"],
            "finishes": ["nonfoil"],
            "arena_id": 79410,
            "layout": "normal",
        },
        {
            "oracle_id": "mountain-oid",
            "name": "Mountain",
            "type_line": "Basic Land — Mountain",
            "set": "dmu",
            "set_type": "expansion",
            "collector_number": "271",
            "released_at": "2022-09-09",
            "games": ["paper", "arena"],
            "finishes": ["nonfoil"],
            "arena_id": 82100,
            "layout": "normal",
        },
        {
            "oracle_id": "abrade-oid",
            "name": "Abrade",
            "type_line": "Instant",
            "set": "vow",
            "set_type": "expansion",
            "collector_number": "139",
            "released_at": "2021-11-19",
            "games": ["paper", "arena"],
            "finishes": ["nonfoil", "foil"],
            "arena_id": 79000,
            "layout": "normal",
        },
        {
            "oracle_id": "fire-ice-oid",
            "name": "Fire // Ice",
            "type_line": "Instant // Instant",
            "set": "mh2",
            "set_type": "masters",
            "collector_number": "290",
            "released_at": "2021-06-18",
            "games": ["paper"],
            "finishes": ["nonfoil"],
            "layout": "split",
        },
        {
            "name": "Goblin",
            "type_line": "Token Creature — Goblin",
            "set": "tneo",
            "collector_number": "5",
            "games": ["paper"],
            "layout": "token",
        },
    ]


@pytest.fixture
def scryfall_catalog(sample_scryfall_cards: list[dict]) -> CardCatalog:
    return build_catalog(sample_scryfall_cards)


@pytest.fixture
def sample_arena_export() -> str:
    """Sample Arena deck export for testing."""
    return """Deck
4 Lightning Bolt (STA) 42
20 Mountain (NEO) 290

Sideboard
2 Abrade (VOW) 139"""
