"""Opening the SQLite mapping store."""

from pathlib import Path
from typing import Optional, Union

from ledgersync.database.sqlalchemy_db import SQLAlchemyDatabase

DB_FILENAME = "ledgersync.db"


def default_database_path() -> Path:
    """Return ``~/.ledgersync/ledgersync.db``.

    ``LEDGERSYNC_DB_PATH`` is read by the ``--db-path`` option, so only the
    fallback lives here.
    """
    return Path.home() / ".ledgersync" / DB_FILENAME


def open_mapping_store(database_path: Optional[Union[str, Path]] = None) -> SQLAlchemyDatabase:
    """Open the mapping store, creating its directory and table when missing.

    Args:
        database_path: SQLite file; ``default_database_path()`` when empty

    Returns:
        Connected SQLAlchemyDatabase with the ``accounts`` table in place
    """
    path = Path(database_path) if database_path else default_database_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    db = SQLAlchemyDatabase(f"sqlite:///{path}")
    db.connect()
    db.initialize_schema()
    return db
