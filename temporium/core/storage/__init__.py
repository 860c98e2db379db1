"""
Storage layer: SQLite persistence for the catalog.

Components:
    - CatalogRepository: Main facade that owns the connection and schema
    - UserStorage: users table (credentials, admin flag)
    - GameStorage: games table, always scoped by owner

Database Schema:
    users: id, username, password_hash, is_admin, created_at
    games: id, name, disk_space, ram_usage, vram_required, genre, completed, url,
           user_id, rating, is_favorite, is_installed, notes, tags, created_at

Writes run inside ``with connection:`` so each call commits or rolls back as a unit.
"""

from temporium.core.storage.games import GameStorage
from temporium.core.storage.repository import CatalogRepository, get_default_db_path
from temporium.core.storage.users import UserStorage

__all__ = [
    "CatalogRepository",
    "GameStorage",
    "UserStorage",
    "get_default_db_path",
]
