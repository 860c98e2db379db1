"""Tests for error handling paths."""

import sqlite3
import tempfile
from pathlib import Path

import pytest

from temporium.core.exceptions import (
    AuthError,
    ConnectivityError,
    ConstraintError,
    ErrorKind,
    NotFoundError,
)
from temporium.core.hashing import hash_password
from temporium.core.models import Failure, Game, Result
from temporium.core.storage import CatalogRepository, get_default_db_path
from temporium.core.storage.base import sqlite_errors
from temporium.core.store import Store


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def repository(temp_dir: Path):
    """Create a repository for testing."""
    repo = CatalogRepository(get_default_db_path(temp_dir))
    yield repo
    repo.close()


def add_user(repository: CatalogRepository, username: str, is_admin: bool = False) -> int:
    return repository.users.insert(username, hash_password("pw", username), is_admin)


def make_game(name: str, user_id: int, **overrides: object) -> Game:
    """Create a test game."""
    fields: dict[str, object] = {
        "id": 0,
        "name": name,
        "disk_space": 10.0,
        "ram_usage": 8.0,
        "vram_required": 4.0,
        "genre": "RPG",
        "user_id": user_id,
    }
    fields.update(overrides)
    return Game(**fields)  # type: ignore[arg-type]


class TestStorageErrors:
    """Tests for storage error handling."""

    def test_game_not_found_by_id(self, repository: CatalogRepository) -> None:
        """Test that getting a nonexistent game by ID raises NotFoundError."""
        user_id = add_user(repository, "alice")
        with pytest.raises(NotFoundError) as exc_info:
            repository.games.get_by_id(999, user_id)

        assert "999" in str(exc_info.value)

    def test_game_of_other_owner_not_found(self, repository: CatalogRepository) -> None:
        """Test that another owner's game looks exactly like a missing one."""
        alice = add_user(repository, "alice")
        bob = add_user(repository, "bob")
        game_id = repository.games.insert(make_game("Doom", alice))

        with pytest.raises(NotFoundError):
            repository.games.get_by_id(game_id, bob)
        with pytest.raises(NotFoundError):
            repository.games.delete(game_id, bob)
        with pytest.raises(NotFoundError):
            repository.games.update_notes(game_id, bob, "mine now")

        assert repository.games.get_by_id(game_id, alice).notes == ""

    def test_game_not_found_by_name(self, repository: CatalogRepository) -> None:
        """Test that deleting a missing name raises NotFoundError naming it."""
        user_id = add_user(repository, "alice")
        with pytest.raises(NotFoundError) as exc_info:
            repository.games.delete_by_name("Nothing", user_id)

        assert "Nothing" in str(exc_info.value)

    def test_update_missing_game(self, repository: CatalogRepository) -> None:
        """Test that updating a nonexistent game raises NotFoundError."""
        user_id = add_user(repository, "alice")
        game = make_game("Ghost", user_id, id=42)
        with pytest.raises(NotFoundError):
            repository.games.update(game)

    def test_duplicate_game_name(self, repository: CatalogRepository) -> None:
        """Test that the same name twice for one owner is a constraint error."""
        user_id = add_user(repository, "alice")
        repository.games.insert(make_game("Doom", user_id))
        with pytest.raises(ConstraintError):
            repository.games.insert(make_game("Doom", user_id))

    def test_rating_out_of_range(self, repository: CatalogRepository) -> None:
        """Test that ratings outside -1..10 are rejected before SQL."""
        user_id = add_user(repository, "alice")
        with pytest.raises(ConstraintError) as exc_info:
            repository.games.insert(make_game("Doom", user_id, rating=11))

        assert "Rating" in str(exc_info.value)
        with pytest.raises(ConstraintError):
            repository.games.insert(make_game("Quake", user_id, rating=-2))

    def test_duplicate_username(self, repository: CatalogRepository) -> None:
        """Test that registering a taken username raises ConstraintError."""
        add_user(repository, "alice")
        with pytest.raises(ConstraintError) as exc_info:
            add_user(repository, "alice")

        assert "already exists" in str(exc_info.value)

    def test_user_not_found(self, repository: CatalogRepository) -> None:
        """Test user lookups that find nothing."""
        with pytest.raises(NotFoundError):
            repository.users.get_by_id(999)
        with pytest.raises(NotFoundError):
            repository.users.get_by_username("nobody")
        with pytest.raises(NotFoundError):
            repository.users.delete(999)

    def test_last_admin_cannot_be_deleted(self, repository: CatalogRepository) -> None:
        """Test that deleting the only admin raises AuthError."""
        admin_id = add_user(repository, "admin", is_admin=True)
        with pytest.raises(AuthError) as exc_info:
            repository.users.delete(admin_id)

        assert "last admin" in str(exc_info.value)
        assert repository.users.count_admins() == 1

    def test_rename_to_taken_username(self, repository: CatalogRepository) -> None:
        """Test that a rename cannot take another owner's username."""
        alice = add_user(repository, "alice")
        add_user(repository, "bob")
        with pytest.raises(ConstraintError):
            repository.users.rename(alice, "bob", hash_password("pw", "bob"))

        assert repository.users.get_by_id(alice).username == "alice"

    def test_bad_password_hash_rejected(self, repository: CatalogRepository) -> None:
        """Test that the schema only stores 64 character hashes."""
        with pytest.raises(ConstraintError):
            repository.users.insert("alice", "short")


class TestConnectivityErrors:
    """Tests for databases that cannot be opened."""

    def test_unreachable_path(self, temp_dir: Path) -> None:
        """Test that a database under a regular file raises ConnectivityError."""
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")
        repo = CatalogRepository(blocker / "nested" / "catalog.db")

        with pytest.raises(ConnectivityError) as exc_info:
            repo.users.count_admins()

        assert "Cannot open database" in str(exc_info.value)

    def test_sqlite_errors_mapping(self) -> None:
        """Test how sqlite3 exceptions are translated."""
        with pytest.raises(ConstraintError, match="Insert: boom"):
            with sqlite_errors("Insert"):
                raise sqlite3.IntegrityError("boom")
        with pytest.raises(ConnectivityError, match="Query: locked"):
            with sqlite_errors("Query"):
                raise sqlite3.OperationalError("locked")

    def test_integer_overflow_mapping(self) -> None:
        """Test that integers too large for SQLite become Temporium errors."""
        with pytest.raises(ConstraintError):
            with sqlite_errors("Insert"):
                raise OverflowError("Python int too large to convert to SQLite INTEGER")
        with pytest.raises(NotFoundError):
            with sqlite_errors("Lookup", NotFoundError):
                raise OverflowError("Python int too large to convert to SQLite INTEGER")


class TestStoreBoundary:
    """Tests that the store reports failures instead of raising."""

    def test_failure_result(self, temp_dir: Path) -> None:
        """Test that a missing game becomes a NOT_FOUND failure."""
        with Store(get_default_db_path(temp_dir)) as store:
            result = store.get_game(999, 1)

        assert not result.ok
        assert result.value is None
        assert result.error is not None
        assert result.error.kind is ErrorKind.NOT_FOUND

    def test_oversized_integers(self, temp_dir: Path) -> None:
        """Test that ids beyond 64 bits come back as failures, not exceptions."""
        huge = 2**64
        with Store(get_default_db_path(temp_dir)) as store:
            store.ensure_admin_exists().unwrap()
            owner = store.register("alice", "pw").unwrap()

            assert store.get_game(huge, owner.id).error.kind is ErrorKind.NOT_FOUND
            assert store.get_game(1, huge).error.kind is ErrorKind.NOT_FOUND
            assert store.delete_game(huge, owner.id).error.kind is ErrorKind.NOT_FOUND
            assert store.update_notes(huge, owner.id, "x").error.kind is ErrorKind.NOT_FOUND
            assert store.delete_owner(huge).error.kind is ErrorKind.NOT_FOUND
            assert store.is_admin(huge).error.kind is ErrorKind.NOT_FOUND
            assert store.rename_owner(huge, "bob", "pw").error.kind is ErrorKind.NOT_FOUND

            added = store.add_game(make_game("Doom", huge))
            assert added.error.kind is ErrorKind.CONSTRAINT
            assert store.count_games(owner.id).unwrap() == 0

    def test_connectivity_failure_result(self, temp_dir: Path) -> None:
        """Test that an unreachable database is reported, not raised."""
        blocker = temp_dir / "blocker"
        blocker.write_text("")
        store = Store(blocker / "catalog.db")

        result = store.ensure_admin_exists()

        assert result.error is not None
        assert result.error.kind is ErrorKind.CONNECTIVITY

    def test_unwrap(self) -> None:
        """Test unwrap on success and failure."""
        assert Result(value=3).unwrap() == 3
        failed: Result[int] = Result(error=Failure(ErrorKind.AUTH, "nope"))
        with pytest.raises(ValueError, match="auth: nope"):
            failed.unwrap()
