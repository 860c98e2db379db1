"""Game storage operations. Every query is scoped to an owner."""

from __future__ import annotations

from temporium.core.exceptions import ConstraintError, NotFoundError
from temporium.core.filters import ORDER_BY, Predicate
from temporium.core.models import MAX_RATING, NO_RATING, Game, GameStats
from temporium.core.storage.base import ConnectionFactory, sqlite_errors

_SELECT = """
SELECT id, name, disk_space, ram_usage, vram_required, genre, completed, url, user_id,
       rating, is_favorite, is_installed, notes, tags
FROM games
"""


def _check_rating(game: Game) -> None:
    if not NO_RATING <= game.rating <= MAX_RATING:
        raise ConstraintError(
            f"Rating for '{game.name}' must be -1 or between 0 and 10, got {game.rating}"
        )


class GameStorage:
    """Storage operations for games."""

    def __init__(self, get_connection: ConnectionFactory) -> None:
        self._get_connection = get_connection

    def insert(self, game: Game) -> int:
        """Insert a game owned by game.user_id and return its new ID. game.id is ignored."""
        _check_rating(game)
        conn = self._get_connection()
        with sqlite_errors("Add game error"), conn:
            cursor = conn.execute(
                """
                INSERT INTO games (name, disk_space, ram_usage, vram_required, genre, completed,
                                   url, user_id, rating, is_favorite, is_installed, notes, tags)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    game.name,
                    game.disk_space,
                    game.ram_usage,
                    game.vram_required,
                    game.genre,
                    int(game.completed),
                    game.url,
                    game.user_id,
                    game.rating,
                    int(game.is_favorite),
                    int(game.is_installed),
                    game.notes,
                    game.tags,
                ),
            )
        return cursor.lastrowid  # type: ignore[return-value]

    def update(self, game: Game) -> None:
        """Overwrite a game. Only matches if game.user_id owns game.id."""
        _check_rating(game)
        conn = self._get_connection()
        with sqlite_errors("Update game error", NotFoundError), conn:
            cursor = conn.execute(
                """
                UPDATE games SET name = ?, disk_space = ?, ram_usage = ?, vram_required = ?,
                       genre = ?, completed = ?, url = ?, rating = ?, is_favorite = ?,
                       is_installed = ?, notes = ?, tags = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    game.name,
                    game.disk_space,
                    game.ram_usage,
                    game.vram_required,
                    game.genre,
                    int(game.completed),
                    game.url,
                    game.rating,
                    int(game.is_favorite),
                    int(game.is_installed),
                    game.notes,
                    game.tags,
                    game.id,
                    game.user_id,
                ),
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Game with id {game.id} not found")

    def update_notes(self, game_id: int, user_id: int, notes: str) -> None:
        conn = self._get_connection()
        with sqlite_errors("Update notes error", NotFoundError), conn:
            cursor = conn.execute(
                "UPDATE games SET notes = ? WHERE id = ? AND user_id = ?",
                (notes, game_id, user_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Game with id {game_id} not found")

    def delete(self, game_id: int, user_id: int) -> None:
        conn = self._get_connection()
        with sqlite_errors("Delete game error", NotFoundError), conn:
            cursor = conn.execute(
                "DELETE FROM games WHERE id = ? AND user_id = ?", (game_id, user_id)
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Game with id {game_id} not found")

    def delete_by_name(self, name: str, user_id: int) -> None:
        conn = self._get_connection()
        with sqlite_errors("Delete game by name error", NotFoundError), conn:
            cursor = conn.execute(
                "DELETE FROM games WHERE name = ? AND user_id = ?", (name, user_id)
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Game '{name}' not found")

    def get_by_id(self, game_id: int, user_id: int) -> Game:
        """Get a game by its ID. A game owned by another user is not found."""
        conn = self._get_connection()
        with sqlite_errors("Get game by ID error", NotFoundError):
            row = conn.execute(
                _SELECT + "WHERE id = ? AND user_id = ?", (game_id, user_id)
            ).fetchone()
        if row is None:
            raise NotFoundError(f"Game with id {game_id} not found")
        return Game.from_row(row)

    def get_by_name(self, name: str, user_id: int) -> Game:
        conn = self._get_connection()
        with sqlite_errors("Get game by name error", NotFoundError):
            row = conn.execute(
                _SELECT + "WHERE name = ? AND user_id = ?", (name, user_id)
            ).fetchone()
        if row is None:
            raise NotFoundError(f"Game '{name}' not found")
        return Game.from_row(row)

    def get_all(self, user_id: int) -> list[Game]:
        """Get all of a user's games ordered by name."""
        conn = self._get_connection()
        with sqlite_errors("Get all games error"):
            rows = conn.execute(_SELECT + "WHERE user_id = ? " + ORDER_BY, (user_id,)).fetchall()
        return [Game.from_row(row) for row in rows]

    def query(self, predicate: Predicate) -> list[Game]:
        """Get the games matching a compiled predicate, ordered by name."""
        where, params = predicate.to_sql()
        conn = self._get_connection()
        with sqlite_errors("Get filtered games error"):
            rows = conn.execute(f"{_SELECT}WHERE {where} {ORDER_BY}", params).fetchall()
        return [Game.from_row(row) for row in rows]

    def count(self, user_id: int) -> int:
        conn = self._get_connection()
        with sqlite_errors("Count games error"):
            return conn.execute(
                "SELECT COUNT(*) FROM games WHERE user_id = ?", (user_id,)
            ).fetchone()[0]

    def tags(self, user_id: int) -> list[str]:
        """Unique trimmed tags across a user's games, sorted."""
        conn = self._get_connection()
        with sqlite_errors("Get user tags error"):
            rows = conn.execute(
                "SELECT DISTINCT tags FROM games WHERE user_id = ? AND tags != ''", (user_id,)
            ).fetchall()
        unique: set[str] = set()
        for row in rows:
            unique.update(tag.strip() for tag in row["tags"].split(",") if tag.strip())
        return sorted(unique)

    def stats(self, user_id: int) -> GameStats:
        """Summary counts for a user's catalog."""
        conn = self._get_connection()
        with sqlite_errors("Get stats error"):
            row = conn.execute(
                """
                SELECT COUNT(*) AS total_games,
                       COALESCE(SUM(is_favorite), 0) AS favorites_count,
                       COALESCE(SUM(completed), 0) AS completed_count,
                       COALESCE(SUM(rating = -1), 0) AS no_rating_count,
                       COALESCE(SUM(is_installed), 0) AS installed_count,
                       COALESCE(SUM(CASE WHEN is_installed THEN disk_space END), 0.0)
                           AS installed_disk_space,
                       COALESCE(SUM(url IS NULL OR url = ''), 0) AS no_url_count
                FROM games WHERE user_id = ?
                """,
                (user_id,),
            ).fetchone()
        return GameStats(
            total_games=row["total_games"],
            favorites_count=row["favorites_count"],
            completed_count=row["completed_count"],
            no_rating_count=row["no_rating_count"],
            installed_count=row["installed_count"],
            installed_disk_space=float(row["installed_disk_space"]),
            no_url_count=row["no_url_count"],
        )
