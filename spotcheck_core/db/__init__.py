from .cache import (
    init_database,
    compute_text_hash,
    save_reference,
    get_latest_reference,
    get_references,
    get_reference_bill_ids,
    save_bill,
    get_bill,
)
from .store import SqliteDocumentStore, SqliteBillRepository

__all__ = [
    "init_database",
    "compute_text_hash",
    "save_reference",
    "get_latest_reference",
    "get_references",
    "get_reference_bill_ids",
    "save_bill",
    "get_bill",
    "SqliteDocumentStore",
    "SqliteBillRepository",
]
