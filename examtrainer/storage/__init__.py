from .schema import SCHEMA_VERSION, AttemptRow, BestRow, CategoryStatRow, StatsDocument
from .store import DEFAULT_STATS_FILE, StatsStore, from_document, to_document

__all__ = [
    "SCHEMA_VERSION",
    "AttemptRow",
    "BestRow",
    "CategoryStatRow",
    "StatsDocument",
    "DEFAULT_STATS_FILE",
    "StatsStore",
    "from_document",
    "to_document",
]
