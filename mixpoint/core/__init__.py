from mixpoint.core.config import settings
from mixpoint.core.db import Database, get_db

__all__ = ["settings", "Database", "get_db"]
