from .schema import SCHEMA_SQL, INDEXES_SQL
from .client import get_admin_client

__all__ = [
    "SCHEMA_SQL",
    "INDEXES_SQL",
    "get_admin_client",
]
