"""
Parser for MTG Arena deck/collection export format.

Arena export format:
    <quantity> <card name> (<set_code>) <collector_number>

Example:
    Deck
    4 Lightning Bolt (STA) 42
    20 Mountain

    Sideboard
    2 Abrade (VOW) 139

Sections are separated by headers: Deck, Sideboard, Commander, Companion.
Cards before any header belong to the main deck. An "About" block (deck
name metadata) is skipped.
"""

import logging
import re
from dataclasses import dataclass

from decksmith.models.availability import OwnedCollection
from decksmith.models.card import Card, CardVersion, Platform
from decksmith.models.deck import Deck, DeckBuilder, Section
from decksmith.models.failure import FailureKind, KnownError, UnknownCardError
from decksmith.services.card_database import CardCatalog

logger = logging.getLogger(__name__)

# Pattern: "4 Lightning Bolt (LEB) 163" or "4 Card (SET) 290a"
# Groups: (quantity, card_name, set_code, collector_number)
# Collector number uses \S+ to match alphanumeric variants (e.g., "290a", "123s")
ARENA_FULL_PATTERN = re.compile(r"^(\d+)\s+(.+?)\s+\(([A-Za-z0-9]+)\)\s+(\S+)$")

# Pattern: "4 Lightning Bolt" (no set info)
# Groups: (quantity, card_name)
ARENA_SIMPLE_PATTERN = re.compile(r"^(\d+)x?\s+(.+)$")

ABOUT_HEADER = "about"


class ArenaParseError(KnownError):
    """Raised when a line is neither a section header nor a card line."""

    def __init__(self, line_number: int, line_content: str) -> None:
        self.line_number = line_number
        self.line_content = line_content
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Parse error at line {line_number}: not a card line",
            detail=line_content[:200],
            suggestion="Lines must look like '4 Card Name' or '4 Card Name (SET) 123'.",
            status_code=400,
        )


@dataclass(frozen=True, slots=True)
class ArenaLine:
    """One card line as written, before catalog lookup."""

    section: Section
    quantity: int
    name: str
    set_code: str | None = None
    collector_number: str | None = None
    line_number: int = 0


def parse_arena_lines(text: str) -> list[ArenaLine]:
    """
    Extract card lines with their sections.

    Raises:
        ArenaParseError: On the first line that cannot be parsed
    """
    lines: list[ArenaLine] = []
    section = Section.MAIN_DECK
    in_about = False

    for line_number, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()

        # Skip empty lines and comments
        if not line or line.startswith(("//", "#")):
            continue

        header = Section.from_label(line)
        if header is not None:
            section = header
            in_about = False
            continue
        if line.rstrip(":").lower() == ABOUT_HEADER:
            in_about = True
            continue
        if in_about:
            continue

        # Try full pattern first (with set code)
        match = ARENA_FULL_PATTERN.match(line)
        if match:
            quantity, name, set_code, collector_number = match.groups()
            lines.append(
                ArenaLine(
                    section=section,
                    quantity=int(quantity),
                    name=name.strip(),
                    set_code=set_code.upper(),
                    collector_number=collector_number,
                    line_number=line_number,
                )
            )
            continue

        # Try simple pattern (no set code)
        match = ARENA_SIMPLE_PATTERN.match(line)
        if match:
            quantity, name = match.groups()
            lines.append(
                ArenaLine(
                    section=section,
                    quantity=int(quantity),
                    name=name.strip(),
                    line_number=line_number,
                )
            )
            continue

        raise ArenaParseError(line_number, line)

    return lines


def _lookup_cards(lines: list[ArenaLine], catalog: CardCatalog) -> list[tuple[ArenaLine, Card]]:
    resolved: list[tuple[ArenaLine, Card]] = []
    unknown: list[str] = []
    for line in lines:
        card = catalog.card_named(line.name)
        if card is None:
            if line.name not in unknown:
                unknown.append(line.name)
        else:
            resolved.append((line, card))
    if unknown:
        raise UnknownCardError(unknown)
    return resolved


def parse_arena_deck(text: str, catalog: CardCatalog) -> Deck[Card]:
    """
    Parse Arena decklist text into an abstract deck.

    Set codes and collector numbers are ignored here: choosing printings is
    the resolver's job.

    Raises:
        ArenaParseError: If a line cannot be parsed
        UnknownCardError: If any card name is not in the catalog
    """
    builder: DeckBuilder[Card] = DeckBuilder()
    for line, card in _lookup_cards(parse_arena_lines(text), catalog):
        builder.add_to(line.section, card, line.quantity)
    return builder.build()


def parse_arena_collection(
    text: str,
    catalog: CardCatalog,
    platform: Platform = Platform.ARENA,
) -> OwnedCollection:
    """
    Parse Arena collection text into owned versions.

    Only lines with a set code and collector number identify a version;
    other lines are skipped with a warning. Section headers are ignored.

    Raises:
        ArenaParseError: If a line cannot be parsed
        UnknownCardError: If any card name is not in the catalog
    """
    owned: dict[CardVersion, int] = {}
    for line, card in _lookup_cards(parse_arena_lines(text), catalog):
        if line.set_code is None or line.collector_number is None:
            logger.warning("Line %d names no printing, skipping: %s", line.line_number, line.name)
            continue
        version = catalog.find_version(card, line.set_code, line.collector_number, platform)
        if version is None:
            logger.warning(
                "No %s version of %s (%s) %s, skipping",
                platform.value,
                card,
                line.set_code,
                line.collector_number,
            )
            continue
        owned[version] = owned.get(version, 0) + line.quantity
    return OwnedCollection.from_counts(owned)
