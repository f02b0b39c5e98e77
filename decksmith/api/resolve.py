"""
Resolve API endpoint.

Turns a pasted decklist into a concrete Arena decklist, choosing printings
from the user's collection where it has enough copies.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from decksmith.config import settings
from decksmith.models.card import Platform
from decksmith.models.failure import KnownError
from decksmith.parsers.arena_export import parse_arena_collection, parse_arena_deck
from decksmith.resolution.preferences import default_arena_order, default_paper_order
from decksmith.resolution.version_resolver import VersionResolver
from decksmith.services.arena_formatter import format_deck_for_arena
from decksmith.services.card_database import CardCatalog, get_platform_catalog

router = APIRouter(prefix="/resolve", tags=["resolve"])


class ResolveRequest(BaseModel):
    """Request model for deck resolution."""

    decklist: str = Field(..., min_length=1, description="Decklist in Arena text format")
    collection: str | None = Field(
        default=None,
        description="Owned cards in Arena text format; omit for unlimited availability",
    )


class ResolveResponse(BaseModel):
    """Response model for a resolved deck."""

    decklist: str
    total_cards: int
    is_complete: bool
    shortages: dict[str, int] = Field(
        default_factory=dict,
        description="Copies beyond the collection, per card name",
    )
    tiers: dict[str, str] = Field(
        default_factory=dict,
        description="Resolution tier that placed each card",
    )


def get_catalog() -> CardCatalog:
    """Catalog for the configured platform."""
    try:
        return get_platform_catalog(settings.default_platform)
    except FileNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Card database not available. Please try again later.",
        ) from e


@router.post("", response_model=ResolveResponse)
async def resolve_deck(
    request: ResolveRequest,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> ResolveResponse:
    """
    Resolve a decklist to concrete printings.

    Unknown cards or unparseable lines return 400. A card with no printings
    at all returns 422. Missing copies are not an error: they are listed in
    `shortages` and assigned to the version worth acquiring.
    """
    try:
        deck = parse_arena_deck(request.decklist, catalog)
        builder = VersionResolver.builder(catalog)
        if request.collection is not None:
            collection = parse_arena_collection(
                request.collection, catalog, settings.default_platform
            )
            builder.with_owned_collection(collection)
        if settings.default_platform is Platform.ARENA:
            builder.with_preference(default_arena_order())
        else:
            builder.with_preference(default_paper_order())
        resolution = builder.build().resolve_with_report(deck)
    except KnownError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.to_detail().model_dump(mode="json"),
        ) from e

    return ResolveResponse(
        decklist=format_deck_for_arena(resolution.deck),
        total_cards=resolution.deck.size,
        is_complete=resolution.is_complete,
        shortages={card.name: count for card, count in resolution.shortages().items()},
        tiers={card.name: tier.value for card, tier in resolution.tiers().items()},
    )
