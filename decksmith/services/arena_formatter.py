"""
Arena Deck Formatter.

THIS MODULE HANDLES OUTPUT RENDERING ONLY.

Renders a resolved deck as Arena import text, one section per block in
section priority order.
"""

from decksmith.models.card import CardVersion
from decksmith.models.deck import Deck


def format_deck_for_arena(deck: Deck[CardVersion]) -> str:
    """
    Format a resolved deck as Arena import text.

    Args:
        deck: A deck of concrete versions

    Returns:
        Arena format string ready for import
    """
    blocks: list[str] = []
    for section, cards in deck.sections():
        lines = [section.label]
        for version, count in cards.items():
            lines.append(_format_card_line(version, count))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _format_card_line(version: CardVersion, count: int) -> str:
    """Format a single card line in Arena format."""
    edition = version.edition
    return f"{count} {version.name} ({edition.set_code}) {edition.collector_number}"
