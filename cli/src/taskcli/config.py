"""Config module - loads settings, initializes DB lazily."""

import os

_config = None
_db_initialized = False


def get_config():
    """Load config on first access."""
    global _config
    if _config is None:
        from taskcli.settings import load_config
        _config = load_config()
    return _config


def get_database():
    """Initialize the database from config on first access."""
    global _db_initialized
    from taskstore.database.base import get_db, init_db
    if not _db_initialized:
        cfg = get_config()
        url = cfg['database_url']
        if url.startswith("sqlite:///") and ":memory:" not in url:
            os.makedirs(os.path.dirname(url[len("sqlite:///"):]) or ".", exist_ok=True)
        init_db(url, pool_size=cfg['pool_size'], pool_timeout=cfg['pool_timeout']).create_schema()
        _db_initialized = True
    return get_db()


def reset():
    """Forget loaded config and database (used when the environment changes)."""
    global _config, _db_initialized
    if _db_initialized:
        from taskstore.database.base import close_db
        close_db()
    _config = None
    _db_initialized = False
