"""Compile a GameFilter into a parameterized predicate.

A Predicate is a conjunction of Terms. Each term names a whitelisted column,
an operator and a bound value; values only ever reach SQLite as ``?``
parameters. The same terms can be evaluated against in-memory Game objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from temporium.core.models import MIN_RATING, NO_RATING, Game, GameFilter

ORDER_BY = "ORDER BY name, id"

# Columns double as Game attribute names.
_COLUMNS = frozenset(
    {
        "user_id",
        "completed",
        "genre",
        "disk_space",
        "ram_usage",
        "vram_required",
        "tags",
        "is_favorite",
        "is_installed",
        "rating",
    }
)


class Operator(Enum):
    """Comparison operators a Term may use."""

    EQ = "="
    GE = ">="
    LE = "<="
    CONTAINS = "contains"


@dataclass(frozen=True)
class Term:
    """A single comparison: column <op> value."""

    column: str
    op: Operator
    value: Any

    def __post_init__(self) -> None:
        if self.column not in _COLUMNS:
            raise ValueError(f"Unknown filter column '{self.column}'")

    def to_sql(self) -> tuple[str, Any]:
        """Render as an SQL fragment with one placeholder, plus its parameter."""
        value = int(self.value) if isinstance(self.value, bool) else self.value
        if self.op is Operator.CONTAINS:
            # instr() is case-sensitive, unlike LIKE in SQLite
            return f"instr({self.column}, ?) > 0", value
        return f"{self.column} {self.op.value} ?", value

    def matches(self, game: Game) -> bool:
        actual = getattr(game, self.column)
        if self.op is Operator.EQ:
            return bool(actual == self.value)
        if self.op is Operator.GE:
            return bool(actual >= self.value)
        if self.op is Operator.LE:
            return bool(actual <= self.value)
        return str(self.value) in actual


@dataclass(frozen=True)
class Predicate:
    """Conjunction of terms."""

    terms: tuple[Term, ...]

    def to_sql(self) -> tuple[str, list[Any]]:
        """Return a WHERE clause body and its parameters, in order."""
        fragments: list[str] = []
        params: list[Any] = []
        for term in self.terms:
            fragment, param = term.to_sql()
            fragments.append(fragment)
            params.append(param)
        return " AND ".join(fragments) or "1", params

    def matches(self, game: Game) -> bool:
        return all(term.matches(game) for term in self.terms)

    def apply(self, games: list[Game]) -> list[Game]:
        """Filter games in memory, ordered like the SQL query."""
        return sorted((g for g in games if self.matches(g)), key=lambda g: (g.name, g.id))


def compile_filter(game_filter: GameFilter, owner_id: int) -> Predicate:
    """Build the predicate for game_filter, always scoped to owner_id."""
    f = game_filter
    terms = [Term("user_id", Operator.EQ, owner_id)]

    if f.completed is not None:
        terms.append(Term("completed", Operator.EQ, f.completed))
    if f.genre:
        terms.append(Term("genre", Operator.EQ, f.genre))

    ranges = [
        ("disk_space", f.disk_space_min, f.disk_space_max),
        ("ram_usage", f.ram_min, f.ram_max),
        ("vram_required", f.vram_min, f.vram_max),
    ]
    for column, low, high in ranges:
        if low is not None:
            terms.append(Term(column, Operator.GE, low))
        if high is not None:
            terms.append(Term(column, Operator.LE, high))

    # Substring match: "RPG" also matches a "RPGLike" tag.
    if f.tag:
        terms.append(Term("tags", Operator.CONTAINS, f.tag))
    if f.favorite is not None:
        terms.append(Term("is_favorite", Operator.EQ, f.favorite))
    if f.installed is not None:
        terms.append(Term("is_installed", Operator.EQ, f.installed))

    if f.rating_min is not None:
        terms.append(Term("rating", Operator.GE, f.rating_min))
    if f.rating_max is not None:
        terms.append(Term("rating", Operator.LE, f.rating_max))
        terms.append(Term("rating", Operator.GE, MIN_RATING))
    if f.has_rating is True:
        terms.append(Term("rating", Operator.GE, MIN_RATING))
    elif f.has_rating is False:
        terms.append(Term("rating", Operator.EQ, NO_RATING))

    return Predicate(tuple(terms))
