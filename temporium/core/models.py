"""Data models for Temporium."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from temporium.core.exceptions import ErrorKind, TemporiumError

NO_RATING = -1
MIN_RATING = 0
MAX_RATING = 10

# Bounds are advisory: the store accepts values outside them.
MIN_DISK_SPACE = 0.1
MAX_DISK_SPACE = 500.0
MIN_RAM_USAGE = 0.5
MAX_RAM_USAGE = 128.0
MIN_VRAM_REQUIRED = 0.5
MAX_VRAM_REQUIRED = 48.0


class Genre(Enum):
    """Genres offered for selection. Free-text genres are also stored."""

    ACTION = "Action"
    ADVENTURE = "Adventure"
    RPG = "RPG"
    STRATEGY = "Strategy"
    SIMULATION = "Simulation"
    SPORTS = "Sports"
    RACING = "Racing"
    PUZZLE = "Puzzle"
    HORROR = "Horror"
    SHOOTER = "Shooter"
    FIGHTING = "Fighting"
    PLATFORMER = "Platformer"
    SANDBOX = "Sandbox"
    MMO = "MMO"
    OTHER = "Other"


GENRES = tuple(genre.value for genre in Genre)


@dataclass
class Game:
    """A game in a user's catalog."""

    id: int
    name: str
    disk_space: float
    ram_usage: float
    vram_required: float
    genre: str
    completed: bool = False
    url: str = ""
    user_id: int = 0
    rating: int = NO_RATING
    is_favorite: bool = False
    is_installed: bool = False
    notes: str = ""
    tags: str = ""

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Game:
        """Create a Game from a database row."""
        return cls(
            id=row["id"],
            name=row["name"],
            disk_space=row["disk_space"],
            ram_usage=row["ram_usage"],
            vram_required=row["vram_required"],
            genre=row["genre"],
            completed=bool(row["completed"]),
            url=row["url"] or "",
            user_id=row["user_id"],
            rating=NO_RATING if row["rating"] is None else row["rating"],
            is_favorite=bool(row["is_favorite"]),
            is_installed=bool(row["is_installed"]),
            notes=row["notes"] or "",
            tags=row["tags"] or "",
        )

    @property
    def has_rating(self) -> bool:
        return self.rating != NO_RATING

    def bound_violations(self) -> list[str]:
        """Describe numeric attributes outside their documented ranges."""
        checks = [
            ("disk_space", self.disk_space, MIN_DISK_SPACE, MAX_DISK_SPACE),
            ("ram_usage", self.ram_usage, MIN_RAM_USAGE, MAX_RAM_USAGE),
            ("vram_required", self.vram_required, MIN_VRAM_REQUIRED, MAX_VRAM_REQUIRED),
        ]
        errors = [
            f"{field} must be between {low} and {high} GB (got {value})"
            for field, value, low, high in checks
            if not low <= value <= high
        ]
        if not NO_RATING <= self.rating <= MAX_RATING:
            errors.append(f"rating must be -1 or between 0 and 10 (got {self.rating})")
        return errors


@dataclass
class User:
    """A catalog owner."""

    id: int
    username: str
    password_hash: str
    is_admin: bool = False

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> User:
        """Create a User from a database row."""
        return cls(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            is_admin=bool(row["is_admin"]),
        )


@dataclass
class GameFilter:
    """Optional search criteria. A field left as None imposes no constraint."""

    completed: bool | None = None
    genre: str | None = None
    disk_space_min: float | None = None
    disk_space_max: float | None = None
    ram_min: float | None = None
    ram_max: float | None = None
    vram_min: float | None = None
    vram_max: float | None = None
    tag: str | None = None
    favorite: bool | None = None
    installed: bool | None = None
    rating_min: int | None = None
    rating_max: int | None = None
    has_rating: bool | None = None

    def is_empty(self) -> bool:
        return all(value is None for value in vars(self).values())


@dataclass
class GameStats:
    """Summary counts for a user's catalog."""

    total_games: int = 0
    favorites_count: int = 0
    completed_count: int = 0
    no_rating_count: int = 0
    installed_count: int = 0
    installed_disk_space: float = 0.0
    no_url_count: int = 0


@dataclass
class ExportSummary:
    """What an export wrote."""

    record_count: int
    digest: str
    size: int


@dataclass
class ImportFailure:
    """A record from an import file that could not be inserted."""

    name: str
    message: str


class ImportReport:
    """Outcome of importing a verified binary file."""

    def __init__(self) -> None:
        self.imported: list[Game] = []
        self.failures: list[ImportFailure] = []

    @property
    def total(self) -> int:
        return len(self.imported) + len(self.failures)

    def __repr__(self) -> str:
        return f"ImportReport(imported={len(self.imported)}, failures={len(self.failures)})"


T = TypeVar("T")


@dataclass(frozen=True)
class Failure:
    """Structured error returned across the store boundary."""

    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, error: TemporiumError) -> Failure:
        return cls(kind=error.kind, message=str(error))


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a Failure."""

    value: T | None = None
    error: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising if this result is a failure."""
        if self.error is not None:
            raise ValueError(f"{self.error.kind.value}: {self.error.message}")
        return self.value  # type: ignore[return-value]
