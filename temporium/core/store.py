"""Public store API.

Every method returns a Result: either the value or a Failure with an
ErrorKind and message. Exceptions raised by the storage, codec and verifier
layers stop here.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any, TypeVar

import structlog

from temporium.core.binary import (
    VerificationResult,
    build_file,
    decode_records,
    load_verified,
    verify_file,
)
from temporium.core.credentials import CredentialService
from temporium.core.exceptions import ConstraintError, FileAccessError, TemporiumError
from temporium.core.filters import compile_filter
from temporium.core.models import (
    ExportSummary,
    Failure,
    Game,
    GameFilter,
    GameStats,
    ImportFailure,
    ImportReport,
    Result,
    User,
)
from temporium.core.storage import CatalogRepository

log = structlog.stdlib.get_logger()

T = TypeVar("T")


class Store:
    """Owner-scoped catalog operations over a SQLite database."""

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        """Open the catalog at db_path.

        timeout is how many seconds a write waits for another connection's
        lock before failing with a connectivity error.
        """
        self._repo = CatalogRepository(db_path, timeout)
        self._credentials = CredentialService(self._repo)

    @property
    def db_path(self) -> Path:
        return self._repo.db_path

    def close(self) -> None:
        self._repo.close()

    def __enter__(self) -> Store:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    def _run(self, action: str, func: Callable[..., T], *args: Any) -> Result[T]:
        try:
            return Result(value=func(*args))
        except TemporiumError as e:
            log.warning("Store operation failed", action=action, kind=e.kind.value, error=str(e))
            return Result(error=Failure.from_exception(e))

    # Accounts

    def ensure_admin_exists(self) -> Result[bool]:
        """Open the database and create the default admin if none exists."""
        return self._run("ensure_admin_exists", self._credentials.ensure_admin_exists)

    def register(self, username: str, password: str, is_admin: bool = False) -> Result[User]:
        return self._run("register", self._credentials.register, username, password, is_admin)

    def authenticate(self, username: str, password: str) -> Result[User]:
        return self._run("authenticate", self._credentials.authenticate, username, password)

    def rename_owner(self, owner_id: int, new_username: str, password: str) -> Result[User]:
        return self._run(
            "rename_owner", self._credentials.rename_owner, owner_id, new_username, password
        )

    def change_password(self, owner_id: int, new_password: str) -> Result[None]:
        return self._run(
            "change_password", self._credentials.change_password, owner_id, new_password
        )

    def reset_admin_credentials(self) -> Result[User]:
        return self._run("reset_admin_credentials", self._credentials.reset_admin_credentials)

    def delete_owner(self, owner_id: int) -> Result[None]:
        return self._run("delete_owner", self._credentials.delete_owner, owner_id)

    def list_owners(self) -> Result[list[User]]:
        return self._run("list_owners", self._credentials.list_owners)

    def is_admin(self, owner_id: int) -> Result[bool]:
        return self._run("is_admin", self._credentials.is_admin, owner_id)

    # Games

    def add_game(self, game: Game) -> Result[Game]:
        """Insert game for game.user_id; the returned copy carries the new id."""

        def add() -> Game:
            game_id = self._repo.games.insert(game)
            return self._repo.games.get_by_id(game_id, game.user_id)

        return self._run("add_game", add)

    def update_game(self, game: Game) -> Result[None]:
        return self._run("update_game", self._repo.games.update, game)

    def update_notes(self, game_id: int, owner_id: int, notes: str) -> Result[None]:
        return self._run("update_notes", self._repo.games.update_notes, game_id, owner_id, notes)

    def delete_game(self, game_id: int, owner_id: int) -> Result[None]:
        return self._run("delete_game", self._repo.games.delete, game_id, owner_id)

    def delete_game_by_name(self, name: str, owner_id: int) -> Result[None]:
        return self._run("delete_game_by_name", self._repo.games.delete_by_name, name, owner_id)

    def get_game(self, game_id: int, owner_id: int) -> Result[Game]:
        return self._run("get_game", self._repo.games.get_by_id, game_id, owner_id)

    def get_game_by_name(self, name: str, owner_id: int) -> Result[Game]:
        return self._run("get_game_by_name", self._repo.games.get_by_name, name, owner_id)

    def get_all(self, owner_id: int) -> Result[list[Game]]:
        return self._run("get_all", self._repo.games.get_all, owner_id)

    def query(self, owner_id: int, game_filter: GameFilter) -> Result[list[Game]]:
        """Games matching every set field of game_filter, ordered by name then id."""
        predicate = compile_filter(game_filter, owner_id)
        return self._run("query", self._repo.games.query, predicate)

    def count_games(self, owner_id: int) -> Result[int]:
        return self._run("count_games", self._repo.games.count, owner_id)

    def user_tags(self, owner_id: int) -> Result[list[str]]:
        return self._run("user_tags", self._repo.games.tags, owner_id)

    def stats(self, owner_id: int) -> Result[GameStats]:
        return self._run("stats", self._repo.games.stats, owner_id)

    # Binary export / import

    def export_file(
        self, path: Path, owner_id: int, game_filter: GameFilter | None = None
    ) -> Result[ExportSummary]:
        """Write the owner's games (optionally filtered) to an export file."""

        def export() -> ExportSummary:
            if game_filter is None:
                games = self._repo.games.get_all(owner_id)
            else:
                games = self._repo.games.query(compile_filter(game_filter, owner_id))
            header, data = build_file(games)
            try:
                path.write_bytes(data)
            except OSError as e:
                raise FileAccessError(f"Cannot open file for writing: {path}: {e}") from e
            log.info("Exported games", path=str(path), owner_id=owner_id, count=len(games))
            return ExportSummary(
                record_count=header.record_count, digest=header.hash, size=len(data)
            )

        return self._run("export_file", export)

    def verify_file(self, path: Path) -> VerificationResult:
        """Check an export file without decoding its records."""
        return verify_file(path)

    def read_file(self, path: Path) -> Result[list[Game]]:
        """Decode a verified export file without touching the database."""

        def read() -> list[Game]:
            verified = load_verified(path)
            return decode_records(verified.payload, verified.header.record_count)

        return self._run("read_file", read)

    def import_file(self, path: Path, owner_id: int) -> Result[ImportReport]:
        """Insert every record of a verified export file as a new game of owner_id.

        Nothing is written unless the file verifies. After that each record is
        inserted on its own: a duplicate name is reported in the report's
        failures and does not undo the records already inserted.
        """

        def import_() -> ImportReport:
            verified = load_verified(path)
            games = decode_records(verified.payload, verified.header.record_count)
            report = ImportReport()
            for game in games:
                owned = replace(game, id=0, user_id=owner_id)
                try:
                    new_id = self._repo.games.insert(owned)
                except ConstraintError as e:
                    report.failures.append(ImportFailure(name=game.name, message=str(e)))
                    continue
                report.imported.append(replace(owned, id=new_id))
            log.info(
                "Imported games",
                path=str(path),
                owner_id=owner_id,
                imported=len(report.imported),
                failed=len(report.failures),
            )
            return report

        return self._run("import_file", import_)
