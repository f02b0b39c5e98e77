"""
Version resolution.

Chooses a concrete printing for every copy of every card in a deck.
"""

from decksmith.resolution.basic_lands import (
    BasicLandPreferenceSequence,
    BasicLandReplacer,
    GroupReplacementWithAvailability,
    SplitAcrossVersions,
)
from decksmith.resolution.preferences import (
    Ordering,
    PreferenceBuilder,
    default_arena_order,
    default_paper_order,
    from_sets,
    has_finish,
    is_standard_release,
    newer_first,
    older_first,
    on_platform,
)
from decksmith.resolution.random_choice import (
    DeckHasher,
    DeckRandomChoice,
    MinimalRng,
    SplitMix64,
    generate_salt,
    with_salt,
)
from decksmith.resolution.version_resolver import (
    EntryResolution,
    Resolution,
    ResolutionTier,
    ResolverBuilder,
    VersionCatalog,
    VersionResolver,
)

__all__ = [
    "BasicLandPreferenceSequence",
    "BasicLandReplacer",
    "DeckHasher",
    "DeckRandomChoice",
    "EntryResolution",
    "GroupReplacementWithAvailability",
    "MinimalRng",
    "Ordering",
    "PreferenceBuilder",
    "Resolution",
    "ResolutionTier",
    "ResolverBuilder",
    "SplitAcrossVersions",
    "SplitMix64",
    "VersionCatalog",
    "VersionResolver",
    "default_arena_order",
    "default_paper_order",
    "from_sets",
    "generate_salt",
    "has_finish",
    "is_standard_release",
    "newer_first",
    "older_first",
    "on_platform",
    "with_salt",
]
