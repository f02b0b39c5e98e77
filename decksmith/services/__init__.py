"""
Decksmith services.

Card data loading and deck output rendering.
"""

from decksmith.services.arena_formatter import format_deck_for_arena
from decksmith.services.card_database import (
    CardCatalog,
    build_catalog,
    download_card_database,
    get_card_catalog,
    get_platform_catalog,
    load_card_database,
    versions_from_scryfall,
)

__all__ = [
    "CardCatalog",
    "build_catalog",
    "download_card_database",
    "format_deck_for_arena",
    "get_card_catalog",
    "get_platform_catalog",
    "load_card_database",
    "versions_from_scryfall",
]
