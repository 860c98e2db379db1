"""
Temporium: a personal game catalog.

Temporium keeps each user's games in SQLite and lets you:
- Filter the catalog on any combination of attributes
- Export it to a checksummed binary file and import it elsewhere
- Manage accounts whose password hashes are salted with the username

Usage:
    from temporium.core import GameFilter, Store, get_default_db_path

    with Store(get_default_db_path()) as store:
        store.ensure_admin_exists()
        user = store.authenticate("admin", "admin123").unwrap()
        games = store.query(user.id, GameFilter(favorite=True)).unwrap()
"""

__version__ = "0.1.0"
