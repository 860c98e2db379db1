"""User storage operations."""

from __future__ import annotations

from temporium.core.exceptions import AuthError, ConstraintError, NotFoundError
from temporium.core.models import User
from temporium.core.storage.base import ConnectionFactory, sqlite_errors, write_transaction

_SELECT = "SELECT id, username, password_hash, is_admin FROM users "


class UserStorage:
    """Storage operations for users."""

    def __init__(self, get_connection: ConnectionFactory) -> None:
        self._get_connection = get_connection

    def insert(self, username: str, password_hash: str, is_admin: bool = False) -> int:
        """Insert a user and return its ID."""
        conn = self._get_connection()
        with sqlite_errors("Registration error"), write_transaction(conn):
            if self._username_taken(username):
                raise ConstraintError(f"User '{username}' already exists")
            cursor = conn.execute(
                "INSERT INTO users (username, password_hash, is_admin) VALUES (?, ?, ?)",
                (username, password_hash, int(is_admin)),
            )
        return cursor.lastrowid  # type: ignore[return-value]

    def get_by_id(self, user_id: int) -> User:
        conn = self._get_connection()
        with sqlite_errors("Get user error", NotFoundError):
            row = conn.execute(_SELECT + "WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            raise NotFoundError(f"User with id {user_id} not found")
        return User.from_row(row)

    def get_by_username(self, username: str) -> User:
        conn = self._get_connection()
        with sqlite_errors("Get user error"):
            row = conn.execute(_SELECT + "WHERE username = ?", (username,)).fetchone()
        if row is None:
            raise NotFoundError(f"User '{username}' not found")
        return User.from_row(row)

    def get_all(self) -> list[User]:
        conn = self._get_connection()
        with sqlite_errors("Get all users error"):
            rows = conn.execute(_SELECT + "ORDER BY username").fetchall()
        return [User.from_row(row) for row in rows]

    def count_admins(self) -> int:
        conn = self._get_connection()
        with sqlite_errors("Admin check error"):
            return conn.execute("SELECT COUNT(*) FROM users WHERE is_admin = 1").fetchone()[0]

    def first_admin(self) -> User | None:
        conn = self._get_connection()
        with sqlite_errors("Admin check error"):
            row = conn.execute(_SELECT + "WHERE is_admin = 1 ORDER BY id LIMIT 1").fetchone()
        return User.from_row(row) if row else None

    def insert_admin_if_missing(self, username: str, password_hash: str) -> bool:
        """Create an admin unless one exists. Returns True if one was created."""
        conn = self._get_connection()
        with sqlite_errors("Admin bootstrap error"), write_transaction(conn):
            if self.count_admins():
                return False
            if self._username_taken(username):
                raise ConstraintError(
                    f"Cannot create default admin: user '{username}' already exists"
                )
            conn.execute(
                "INSERT INTO users (username, password_hash, is_admin) VALUES (?, ?, 1)",
                (username, password_hash),
            )
        return True

    def rename(self, user_id: int, new_username: str, new_password_hash: str) -> None:
        """Change a username and its password hash together.

        Both columns change in one transaction: the old hash is only valid for
        the old username.
        """
        conn = self._get_connection()
        with sqlite_errors("Change username error", NotFoundError), write_transaction(conn):
            taken = conn.execute(
                "SELECT COUNT(*) FROM users WHERE username = ? AND id != ?",
                (new_username, user_id),
            ).fetchone()[0]
            if taken:
                raise ConstraintError(f"User '{new_username}' already exists")
            cursor = conn.execute(
                "UPDATE users SET username = ?, password_hash = ? WHERE id = ?",
                (new_username, new_password_hash, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"User with id {user_id} not found")

    def set_password_hash(self, user_id: int, password_hash: str) -> None:
        conn = self._get_connection()
        with sqlite_errors("Change password error", NotFoundError), conn:
            cursor = conn.execute(
                "UPDATE users SET password_hash = ? WHERE id = ?", (password_hash, user_id)
            )
        if cursor.rowcount == 0:
            raise NotFoundError(f"User with id {user_id} not found")

    def delete(self, user_id: int) -> None:
        """Delete a user and their games. The last admin cannot be deleted."""
        conn = self._get_connection()
        with sqlite_errors("Delete user error", NotFoundError), write_transaction(conn):
            row = conn.execute("SELECT is_admin FROM users WHERE id = ?", (user_id,)).fetchone()
            if row is None:
                raise NotFoundError(f"User with id {user_id} not found")
            if row["is_admin"] and self.count_admins() <= 1:
                raise AuthError("Cannot delete the last admin user")
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    def _username_taken(self, username: str) -> bool:
        conn = self._get_connection()
        row = conn.execute("SELECT COUNT(*) FROM users WHERE username = ?", (username,)).fetchone()
        return bool(row[0])
