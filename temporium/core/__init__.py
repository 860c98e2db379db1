"""
Core module: data models, exceptions, hashing, filters, storage and the store API.

Models (models.py):
    - Game: A catalog record owned by one user
    - User: A catalog owner with a username-salted password hash
    - GameFilter: Optional search criteria, combined with AND
    - Result/Failure: Values returned by the Store instead of exceptions

Exceptions (exceptions.py):
    - TemporiumError: Base exception, carries an ErrorKind
    - ConnectivityError, ConstraintError, NotFoundError, AuthError
    - DecodeError/TruncatedInputError, VerificationError, FileAccessError

Binary (binary/):
    - Fixed-width export format, codec and integrity verifier

Storage (storage/):
    - CatalogRepository: SQLite facade for users and games

Store (store.py):
    - Store: Owner-scoped public API returning Result values
"""

from temporium.core.binary import VerificationResult, describe
from temporium.core.credentials import CredentialService
from temporium.core.exceptions import (
    AuthError,
    ConnectivityError,
    ConstraintError,
    DecodeError,
    ErrorKind,
    FileAccessError,
    NotFoundError,
    TemporiumError,
    TruncatedInputError,
    VerificationError,
)
from temporium.core.filters import Predicate, Term, compile_filter
from temporium.core.hashing import EMPTY_DIGEST, digest, hash_password
from temporium.core.models import (
    GENRES,
    ExportSummary,
    Failure,
    Game,
    GameFilter,
    GameStats,
    Genre,
    ImportReport,
    Result,
    User,
)
from temporium.core.storage import CatalogRepository, get_default_db_path
from temporium.core.store import Store

__all__ = [
    # Models
    "Game",
    "User",
    "GameFilter",
    "GameStats",
    "Genre",
    "GENRES",
    "ExportSummary",
    "ImportReport",
    "Result",
    "Failure",
    # Exceptions
    "TemporiumError",
    "ErrorKind",
    "ConnectivityError",
    "ConstraintError",
    "NotFoundError",
    "AuthError",
    "DecodeError",
    "TruncatedInputError",
    "VerificationError",
    "FileAccessError",
    # Hashing and filters
    "EMPTY_DIGEST",
    "digest",
    "hash_password",
    "Predicate",
    "Term",
    "compile_filter",
    # Binary
    "VerificationResult",
    "describe",
    # Storage
    "CatalogRepository",
    "CredentialService",
    "Store",
    "get_default_db_path",
]
