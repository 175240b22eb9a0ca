from .sqlite_store import DEFAULT_DB_DIR, SQLiteStore

__all__ = ["DEFAULT_DB_DIR", "SQLiteStore"]
