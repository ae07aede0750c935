"""Table store boundary used by the professor and student views."""

from pulse.store.interface import DataService, StoreError, ACTIVITIES, FEEDBACK
from pulse.store.sql import SQLDataService, fetch_rows, insert_row

__all__ = [
    "DataService",
    "StoreError",
    "ACTIVITIES",
    "FEEDBACK",
    "SQLDataService",
    "fetch_rows",
    "insert_row",
]
