"""Database package."""

from .db import (
    configure_engine,
    delete_value,
    get_session,
    init_db,
    load_number,
    load_string,
    save_number,
    save_string,
)
from .models import StoredValue

__all__ = [
    "configure_engine",
    "delete_value",
    "get_session",
    "init_db",
    "load_number",
    "load_string",
    "save_number",
    "save_string",
    "StoredValue",
]
