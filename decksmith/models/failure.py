"""
Failure Classification.

Every error that may leave the library boundary is a KnownError carrying a
FailureKind, a user-appropriate message and an optional suggestion. The API
layer renders these as FailureDetail payloads.

Only catalog-integrity failures escape the resolution engine. Availability
shortfalls are absorbed by its fallback tiers and are never exceptions.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    VALIDATION_FAILED = "validation_failed"

    # Resource failures
    NOT_FOUND = "not_found"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail payload."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class CardVersionNotFoundError(KnownError):
    """
    Raised when the catalog knows no version at all for a card.

    This is a data-integrity fault: the overflow tier has nothing to pick,
    so the whole resolution is aborted.
    """

    def __init__(self, card: object):
        self.card = card
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"No versions found for: {card}",
            detail="The card catalog returned no printings for this card.",
            suggestion="Refresh the card database, or check the card name.",
            status_code=422,
        )


class UnknownCardError(KnownError):
    """Raised when decklist text names cards the catalog does not know."""

    def __init__(self, card_names: list[str]):
        self.card_names = card_names
        shown = ", ".join(card_names[:5])
        if len(card_names) > 5:
            shown += f" (and {len(card_names) - 5} more)"
        super().__init__(
            kind=FailureKind.VALIDATION_FAILED,
            message="Decklist import failed: some cards could not be resolved.",
            detail=f"Unknown cards: {shown}",
            suggestion="Check that card names match exactly.",
            status_code=400,
        )
