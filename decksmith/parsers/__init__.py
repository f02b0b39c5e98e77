from decksmith.parsers.arena_export import (
    ArenaLine,
    ArenaParseError,
    parse_arena_collection,
    parse_arena_deck,
    parse_arena_lines,
)

__all__ = [
    "ArenaLine",
    "ArenaParseError",
    "parse_arena_collection",
    "parse_arena_deck",
    "parse_arena_lines",
]
