"""
Version preference orderings.

An Ordering ranks versions by desirability: a negative comparison means the
left version is preferred. The resolver uses one ordering to pick among
available versions and a second (overflow) ordering when nothing is
available at all.

PRECONDITION: orderings must be valid total preorders (no cycles among the
compared elements). This is not checked at runtime. Versions that compare
equal keep the catalog's iteration order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date
from functools import cmp_to_key
from typing import Any, Generic, TypeVar

from decksmith.models.card import CardVersion, ExpansionType, Finish, Platform

T = TypeVar("T")

Comparison = Callable[[T, T], int]


def _compare_values(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


class Ordering(Generic[T]):
    """A comparison function with combinators."""

    __slots__ = ("_compare",)

    def __init__(self, compare: Comparison[T]) -> None:
        self._compare = compare

    @classmethod
    def inactive(cls) -> Ordering[T]:
        """Every element ties."""
        return cls(lambda a, b: 0)

    @classmethod
    def comparing(cls, key: Callable[[T], Any], reverse: bool = False) -> Ordering[T]:
        """Order by a sort key, ascending unless `reverse`."""
        sign = -1 if reverse else 1
        return cls(lambda a, b: sign * _compare_values(key(a), key(b)))

    @classmethod
    def true_first(cls, predicate: Callable[[T], bool]) -> Ordering[T]:
        """Elements matching `predicate` come first."""
        return cls(lambda a, b: _compare_values(not predicate(a), not predicate(b)))

    @classmethod
    def false_first(cls, predicate: Callable[[T], bool]) -> Ordering[T]:
        return cls.true_first(predicate).reversed()

    def compare(self, a: T, b: T) -> int:
        return self._compare(a, b)

    def __call__(self, a: T, b: T) -> int:
        return self._compare(a, b)

    def reversed(self) -> Ordering[T]:
        compare = self._compare
        return Ordering(lambda a, b: compare(b, a))

    def then(self, tiebreak: Ordering[T] | Comparison[T]) -> Ordering[T]:
        """Break ties of this ordering with another."""
        first = self._compare
        second = tiebreak

        def chained(a: T, b: T) -> int:
            return first(a, b) or second(a, b)

        return Ordering(chained)

    def key(self) -> Callable[[T], Any]:
        return cmp_to_key(self._compare)

    def sorted(self, items: Iterable[T]) -> list[T]:
        """Stable sort: equal elements keep their input order."""
        return sorted(items, key=self.key())

    def min(self, items: Iterable[T]) -> T | None:
        """First most-preferred element, or None if `items` is empty."""
        best: T | None = None
        found = False
        for item in items:
            if not found or self._compare(item, best) < 0:  # type: ignore[arg-type]
                best = item
                found = True
        return best


class PreferenceBuilder(Generic[T]):
    """
    Chain of preference rules, consulted in the order they were added.

    Usage:
        order = (
            PreferenceBuilder[CardVersion]()
            .prefer(has_finish(Finish.NONFOIL))
            .add_rule(newer_first())
            .build()
        )
    """

    def __init__(self) -> None:
        self._rules: list[Comparison[T]] = []

    def add_rule(self, rule: Ordering[T] | Comparison[T]) -> PreferenceBuilder[T]:
        self._rules.append(rule)
        return self

    def prefer(self, predicate: Callable[[T], bool]) -> PreferenceBuilder[T]:
        return self.add_rule(Ordering.true_first(predicate))

    def prefer_with_rule(
        self, predicate: Callable[[T], bool], rule: Ordering[T] | Comparison[T]
    ) -> PreferenceBuilder[T]:
        """Prefer matching elements, ordering them among themselves by `rule`."""

        def compare(a: T, b: T) -> int:
            match_a, match_b = predicate(a), predicate(b)
            if match_a and match_b:
                return rule(a, b)
            return -1 if match_a else 1 if match_b else 0

        return self.add_rule(compare)

    def build(self) -> Ordering[T]:
        rules = tuple(self._rules)

        def compare(a: T, b: T) -> int:
            if a is b:
                return 0
            for rule in rules:
                result = rule(a, b)
                if result:
                    return result
            return 0

        return Ordering(compare)


# =============================================================================
# VERSION PREFERENCES
# =============================================================================


def _release_date(version: CardVersion) -> date:
    return version.edition.released_at or date.min


def older_first() -> Ordering[CardVersion]:
    return Ordering.comparing(_release_date)


def newer_first() -> Ordering[CardVersion]:
    return Ordering.comparing(_release_date, reverse=True)


def has_finish(finish: Finish) -> Callable[[CardVersion], bool]:
    return lambda version: version.has_finish(finish)


def on_platform(platform: Platform) -> Callable[[CardVersion], bool]:
    return lambda version: version.platform is platform


def from_sets(*set_codes: str) -> Callable[[CardVersion], bool]:
    wanted = frozenset(code.upper() for code in set_codes)
    return lambda version: version.edition.set_code.upper() in wanted


def is_standard_release() -> Callable[[CardVersion], bool]:
    """Printings from core or expansion sets."""

    def predicate(version: CardVersion) -> bool:
        member = version.edition.set_type.member
        return member is not None and ExpansionType(member).is_standard_release

    return predicate


def default_paper_order() -> Ordering[CardVersion]:
    """Newest release first, then set code, then finish."""
    return (
        newer_first()
        .then(Ordering.comparing(lambda v: v.edition.set_code))
        .then(Ordering.comparing(lambda v: v.finish.token))
    )


def default_arena_order() -> Ordering[CardVersion]:
    """Standard-release printings first, newest first within each group."""
    return (
        PreferenceBuilder[CardVersion]()
        .prefer(is_standard_release())
        .add_rule(newer_first())
        .build()
    )
