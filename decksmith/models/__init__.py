from decksmith.models.availability import (
    UNLIMITED,
    Availability,
    NotEnoughCopiesError,
    OwnedCollection,
    availability_from,
    unlimited_availability,
    unlimited_availability_if,
)
from decksmith.models.card import (
    Card,
    CardVersion,
    Edition,
    ExpansionType,
    Finish,
    Platform,
    Word,
)
from decksmith.models.deck import (
    SECTION_PRIORITY,
    Deck,
    DeckBuilder,
    DeckEntry,
    Multiset,
    Section,
)
from decksmith.models.failure import (
    CardVersionNotFoundError,
    FailureDetail,
    FailureKind,
    KnownError,
    UnknownCardError,
)

__all__ = [
    "Availability",
    "Card",
    "CardVersion",
    "CardVersionNotFoundError",
    "Deck",
    "DeckBuilder",
    "DeckEntry",
    "Edition",
    "ExpansionType",
    "FailureDetail",
    "FailureKind",
    "Finish",
    "KnownError",
    "Multiset",
    "NotEnoughCopiesError",
    "OwnedCollection",
    "Platform",
    "SECTION_PRIORITY",
    "Section",
    "UNLIMITED",
    "UnknownCardError",
    "Word",
    "availability_from",
    "unlimited_availability",
    "unlimited_availability_if",
]
