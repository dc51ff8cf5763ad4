"""Filter/query layer over event snapshots.

Submodules:
    filters    -- Predicate matching and newest-first ordering.
    formatting -- Display strings shared by search and presentation.
"""

from pipewatch.query.filters import matches, query, validate_criteria
from pipewatch.query.formatting import bucket_label, format_duration, format_timestamp

__all__ = [
    "bucket_label",
    "format_duration",
    "format_timestamp",
    "matches",
    "query",
    "validate_criteria",
]
