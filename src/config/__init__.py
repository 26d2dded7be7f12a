from .settings import settings
from .database import get_async_session, engine, async_session_maker
from .table_names import TableNames

__all__ = [
    "settings",
    "get_async_session",
    "engine",
    "async_session_maker",
    "TableNames",
]
