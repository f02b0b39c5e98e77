"""
Card Models.

Abstract cards, their editions, and the concrete versions a deck resolves to.

INVARIANTS:
- Card identity is the oracle_id alone (name and type line are lookup data)
- CardVersion references exactly one Card
- All models are frozen (immutable after construction)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Generic, TypeVar

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True, slots=True)
class Word(Generic[E]):
    """
    A value from an upstream vocabulary that may grow over time.

    Recognized tokens carry their enum member. Unrecognized tokens are kept
    verbatim with `member` set to None, so parsing never fails on new values.
    """

    token: str
    member: E | None = None

    @classmethod
    def parse(cls, enum_type: type[E], token: str) -> Word[E]:
        """Look up a token by enum value, keeping it raw if unknown."""
        for member in enum_type:
            if member.value == token:
                return cls(token=token, member=member)
        return cls(token=token)

    @classmethod
    def of(cls, member: E) -> Word[E]:
        return cls(token=str(member.value), member=member)

    @property
    def is_recognized(self) -> bool:
        return self.member is not None

    def is_(self, member: E) -> bool:
        return self.member is member

    def __str__(self) -> str:
        return self.token


class Finish(str, Enum):
    """Physical or digital finish of a printing."""

    NONFOIL = "nonfoil"
    FOIL = "foil"
    ETCHED = "etched"


class Platform(str, Enum):
    """Where a version can be played."""

    PAPER = "paper"
    ARENA = "arena"
    MTGO = "mtgo"


class ExpansionType(str, Enum):
    """Scryfall set_type values the preference rules care about."""

    CORE = "core"
    EXPANSION = "expansion"
    MASTERS = "masters"
    ALCHEMY = "alchemy"
    MASTERPIECE = "masterpiece"
    DRAFT_INNOVATION = "draft_innovation"
    COMMANDER = "commander"
    PROMO = "promo"
    FUNNY = "funny"
    TOKEN = "token"
    MEMORABILIA = "memorabilia"

    @property
    def is_standard_release(self) -> bool:
        return self in (ExpansionType.CORE, ExpansionType.EXPANSION)


@dataclass(frozen=True, slots=True)
class Card:
    """
    A card independent of printing.

    Attributes:
        oracle_id: Scryfall oracle ID (stable across printings)
        name: Canonical card name
        type_line: Full type line (e.g., "Basic Land — Forest")
    """

    oracle_id: str
    name: str = field(compare=False)
    type_line: str = field(default="", compare=False)

    @property
    def is_basic_land(self) -> bool:
        return self.type_line.startswith("Basic ") or " Basic " in self.type_line

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Edition:
    """
    A card's appearance in one set.

    Attributes:
        set_code: Set code, upper case (e.g., "DMU")
        collector_number: Collector number within the set ("290a" is valid)
        released_at: Set release date, if known
        set_type: Kind of set this printing came from
    """

    set_code: str
    collector_number: str
    released_at: date | None = None
    set_type: Word[ExpansionType] = field(default_factory=lambda: Word("unknown"))

    def __str__(self) -> str:
        return f"({self.set_code}) {self.collector_number}"


@dataclass(frozen=True, slots=True)
class CardVersion:
    """
    One concrete printing of a card on one platform.

    Paper, Arena and MTGO printings share this type; `platform` is the tag and
    `platform_id` holds the Arena or MTGO catalog id where one exists.
    """

    card: Card
    edition: Edition
    finish: Word[Finish] = field(default_factory=lambda: Word.of(Finish.NONFOIL))
    platform: Platform = Platform.PAPER
    platform_id: int | None = None

    @property
    def name(self) -> str:
        return self.card.name

    def has_finish(self, finish: Finish) -> bool:
        return self.finish.is_(finish)

    def sort_key(self) -> tuple[str, str, str, str]:
        """Deterministic catalog order for versions of the same card."""
        return (
            self.edition.set_code,
            self.edition.collector_number,
            self.finish.token,
            self.platform.value,
        )

    def __str__(self) -> str:
        text = f"{self.card.name} {self.edition}"
        if not self.finish.is_(Finish.NONFOIL):
            text += f" [{self.finish}]"
        return text
