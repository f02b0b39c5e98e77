"""
Card database service.

Downloads Scryfall bulk data and builds the read-only version catalog the
resolver consults. Every printing becomes one CardVersion per platform and
finish it exists on.
"""

import json
import logging
from collections.abc import Iterable, Iterator, Sequence
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx

from decksmith.config import settings
from decksmith.models.card import Card, CardVersion, Edition, ExpansionType, Finish, Platform, Word

logger = logging.getLogger(__name__)

# Layouts that are not playable cards
SKIPPED_LAYOUTS = frozenset({"token", "double_faced_token", "art_series", "emblem"})


async def download_card_database(output_path: Path | None = None) -> Path:
    """
    Download latest Scryfall default-cards bulk data.

    Args:
        output_path: Where to save the file. Defaults to the configured path

    Returns:
        Path to downloaded file.

    Raises:
        ValueError: If bulk data URL not found
        httpx.HTTPError: If download fails
    """
    if output_path is None:
        output_path = settings.card_database_path

    output_path.parent.mkdir(parents=True, exist_ok=True)

    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(settings.scryfall_bulk_api)
        response.raise_for_status()
        data = response.json()

        download_url = None
        for item in data["data"]:
            if item["type"] == "default_cards":
                download_url = item["download_uri"]
                break

        if not download_url:
            raise ValueError("Could not find default_cards bulk data URL")

        # Stream download (file is large)
        async with client.stream("GET", download_url, timeout=300.0) as response:
            response.raise_for_status()
            with open(output_path, "wb") as f:
                async for chunk in response.aiter_bytes(8192):
                    f.write(chunk)

    return output_path


def load_card_database(path: Path | None = None) -> list[dict[str, Any]]:
    """
    Load raw Scryfall card objects from file.

    Raises:
        FileNotFoundError: If database file doesn't exist
    """
    if path is None:
        path = settings.card_database_path

    if not path.exists():
        raise FileNotFoundError(
            f"Card database not found at {path}. "
            "Run `python -m decksmith.jobs.download_cards` first."
        )

    with open(path, encoding="utf-8") as f:
        cards: list[dict[str, Any]] = json.load(f)
    return cards


class CardCatalog:
    """
    Read-only index of cards and their versions.

    Versions of each card are kept sorted by (set code, collector number,
    finish, platform), so versions_of() returns the same sequence on every
    call. The resolver relies on that order to break preference ties.
    """

    def __init__(self, versions: Iterable[CardVersion]) -> None:
        by_card: dict[Card, list[CardVersion]] = {}
        for version in versions:
            by_card.setdefault(version.card, []).append(version)
        self._versions: dict[Card, tuple[CardVersion, ...]] = {
            card: tuple(sorted(dict.fromkeys(group), key=CardVersion.sort_key))
            for card, group in by_card.items()
        }
        self._by_name: dict[str, Card] = {}
        for card in sorted(self._versions, key=lambda c: c.oracle_id):
            self._by_name.setdefault(card.name.lower(), card)
            if " // " in card.name:
                self._by_name.setdefault(card.name.split(" // ")[0].lower(), card)

    def versions_of(self, card: Card) -> Sequence[CardVersion]:
        return self._versions.get(card, ())

    def cards(self) -> Iterator[Card]:
        return iter(self._versions)

    def all_versions(self) -> Iterator[CardVersion]:
        for versions in self._versions.values():
            yield from versions

    def card_named(self, name: str) -> Card | None:
        """Case-insensitive lookup; split cards also match their front face."""
        return self._by_name.get(name.strip().lower())

    def find_version(
        self,
        card: Card,
        set_code: str,
        collector_number: str,
        platform: Platform | None = None,
        finish: Finish | None = None,
    ) -> CardVersion | None:
        """First version of `card` printed as (set_code) collector_number."""
        for version in self.versions_of(card):
            if version.edition.set_code != set_code.upper():
                continue
            if version.edition.collector_number != collector_number:
                continue
            if platform is not None and version.platform is not platform:
                continue
            if finish is not None and not version.has_finish(finish):
                continue
            return version
        return None

    def restricted_to(self, platform: Platform) -> "CardCatalog":
        """A catalog holding only one platform's versions."""
        return CardCatalog(v for v in self.all_versions() if v.platform is platform)

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, card: object) -> bool:
        return card in self._versions


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        logger.warning("Ignoring malformed release date %r", value)
        return None


def _oracle_id(card_data: dict[str, Any]) -> str | None:
    oracle_id = card_data.get("oracle_id")
    if oracle_id:
        return str(oracle_id)
    # Reversible cards keep the oracle id on their faces
    for face in card_data.get("card_faces", []):
        if face.get("oracle_id"):
            return str(face["oracle_id"])
    return None


def versions_from_scryfall(card_data: dict[str, Any]) -> list[CardVersion]:
    """
    Expand one Scryfall card object into its platform versions.

    Paper gets one version per finish; Arena gets a single nonfoil version;
    MTGO gets nonfoil and foil versions where it has catalog ids for them.
    """
    if card_data.get("layout") in SKIPPED_LAYOUTS:
        return []
    oracle_id = _oracle_id(card_data)
    name = card_data.get("name")
    if not oracle_id or not name:
        return []

    card = Card(
        oracle_id=oracle_id,
        name=str(name),
        type_line=str(card_data.get("type_line", "")),
    )
    edition = Edition(
        set_code=str(card_data.get("set", "")).upper(),
        collector_number=str(card_data.get("collector_number", "")),
        released_at=_parse_date(card_data.get("released_at")),
        set_type=Word.parse(ExpansionType, str(card_data.get("set_type", ""))),
    )
    games = set(card_data.get("games", ["paper"]))
    finishes = [Word.parse(Finish, str(f)) for f in card_data.get("finishes", ["nonfoil"])]

    versions: list[CardVersion] = []
    if "paper" in games:
        versions.extend(CardVersion(card=card, edition=edition, finish=f) for f in finishes)
    if "arena" in games:
        versions.append(
            CardVersion(
                card=card,
                edition=edition,
                platform=Platform.ARENA,
                platform_id=card_data.get("arena_id"),
            )
        )
    if "mtgo" in games:
        mtgo_ids = {Finish.NONFOIL: card_data.get("mtgo_id"), Finish.FOIL: card_data.get("mtgo_foil_id")}
        for finish in finishes:
            if finish.member is None or finish.member not in mtgo_ids:
                continue
            mtgo_id = mtgo_ids[finish.member]
            if mtgo_id is None:
                continue
            versions.append(
                CardVersion(
                    card=card,
                    edition=edition,
                    finish=finish,
                    platform=Platform.MTGO,
                    platform_id=int(mtgo_id),
                )
            )
    return versions


def build_catalog(cards: Iterable[dict[str, Any]]) -> CardCatalog:
    """Build the version catalog from raw Scryfall card objects."""
    versions: list[CardVersion] = []
    skipped = 0
    for card_data in cards:
        expanded = versions_from_scryfall(card_data)
        if not expanded:
            skipped += 1
        versions.extend(expanded)

    catalog = CardCatalog(versions)
    logger.info(
        "Built card catalog: %d cards, %d versions (%d entries skipped)",
        len(catalog),
        len(versions),
        skipped,
    )
    return catalog


@lru_cache(maxsize=1)
def get_card_catalog() -> CardCatalog:
    """
    Get cached card catalog.

    Raises:
        FileNotFoundError: If database file doesn't exist
    """
    return build_catalog(load_card_database())


@lru_cache(maxsize=4)
def get_platform_catalog(platform: Platform) -> CardCatalog:
    """Cached catalog holding one platform's versions."""
    return get_card_catalog().restricted_to(platform)
