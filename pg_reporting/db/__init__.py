from pg_reporting.db.base import Base
from pg_reporting.db.session import Database

__all__ = ["Base", "Database"]
