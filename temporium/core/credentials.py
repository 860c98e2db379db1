"""Account operations built on the username-salted password hash."""

from __future__ import annotations

import structlog

from temporium.core.exceptions import AuthError, ConstraintError, NotFoundError
from temporium.core.hashing import hash_password, verify_password
from temporium.core.models import User
from temporium.core.storage import CatalogRepository

log = structlog.stdlib.get_logger()

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"


class CredentialService:
    """Registers, authenticates and maintains catalog owners.

    The salt for every password hash is the owner's current username, so any
    operation that changes a username must re-hash the password with it.
    """

    def __init__(self, repo: CatalogRepository) -> None:
        self._repo = repo

    def register(self, username: str, password: str, is_admin: bool = False) -> User:
        """Create an owner.

        Raises:
            ConstraintError: empty credentials or the username is taken
        """
        if not username.strip():
            raise ConstraintError("Username must not be empty")
        if not password:
            raise ConstraintError("Password must not be empty")
        user_id = self._repo.users.insert(username, hash_password(password, username), is_admin)
        log.info("User registered", user_id=user_id, username=username, is_admin=is_admin)
        return self._repo.users.get_by_id(user_id)

    def authenticate(self, username: str, password: str) -> User:
        """Return the owner if the password matches.

        Raises:
            AuthError: unknown username or wrong password
        """
        try:
            user = self._repo.users.get_by_username(username)
        except NotFoundError:
            raise AuthError("Invalid username or password") from None
        if not verify_password(password, user.password_hash, user.username):
            raise AuthError("Invalid username or password")
        return user

    def rename_owner(self, owner_id: int, new_username: str, current_password: str) -> User:
        """Rename an owner and re-hash their password under the new name.

        The plaintext password must be supplied because the stored hash
        cannot be reversed. It is checked against the current hash first.

        Raises:
            NotFoundError: no such owner
            AuthError: current_password is wrong
            ConstraintError: new_username is empty or used by another owner
        """
        if not new_username.strip():
            raise ConstraintError("Username must not be empty")
        user = self._repo.users.get_by_id(owner_id)
        if not verify_password(current_password, user.password_hash, user.username):
            raise AuthError("Current password is incorrect")
        self._repo.users.rename(
            owner_id, new_username, hash_password(current_password, new_username)
        )
        log.info("User renamed", user_id=owner_id, old=user.username, new=new_username)
        return self._repo.users.get_by_id(owner_id)

    def change_password(self, owner_id: int, new_password: str) -> None:
        """Store a new password hashed with the owner's current username."""
        if not new_password:
            raise ConstraintError("Password must not be empty")
        user = self._repo.users.get_by_id(owner_id)
        self._repo.users.set_password_hash(owner_id, hash_password(new_password, user.username))
        log.info("Password changed", user_id=owner_id)

    def ensure_admin_exists(self) -> bool:
        """Create the default admin if no admin exists. Returns True if created."""
        created = self._repo.users.insert_admin_if_missing(
            DEFAULT_ADMIN_USERNAME,
            hash_password(DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME),
        )
        if created:
            log.warning("Default admin account created", username=DEFAULT_ADMIN_USERNAME)
        return created

    def reset_admin_credentials(self) -> User:
        """Put the first admin back to the default username and password."""
        admin = self._repo.users.first_admin()
        if admin is None:
            self.ensure_admin_exists()
            return self._repo.users.get_by_username(DEFAULT_ADMIN_USERNAME)
        self._repo.users.rename(
            admin.id,
            DEFAULT_ADMIN_USERNAME,
            hash_password(DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME),
        )
        log.warning("Admin credentials reset", user_id=admin.id)
        return self._repo.users.get_by_id(admin.id)

    def delete_owner(self, owner_id: int) -> None:
        """Delete an owner and their games.

        Raises:
            NotFoundError: no such owner
            AuthError: owner is the last admin
        """
        self._repo.users.delete(owner_id)
        log.info("User deleted", user_id=owner_id)

    def list_owners(self) -> list[User]:
        return self._repo.users.get_all()

    def is_admin(self, owner_id: int) -> bool:
        return self._repo.users.get_by_id(owner_id).is_admin
