"""Read path: direct, read-only queries against Bear's SQLite store."""

from .queries import TagJoin, casefold_contains, discover_tag_join
from .rows import row_to_note, row_to_tag
from .sqlite import BearDatabase
from .timestamps import (
    CORE_DATA_EPOCH,
    CORE_DATA_EPOCH_OFFSET,
    core_data_cutoff,
    from_core_data,
    to_core_data,
)

__all__ = [
    "BearDatabase",
    "TagJoin",
    "discover_tag_join",
    "casefold_contains",
    "row_to_note",
    "row_to_tag",
    "CORE_DATA_EPOCH",
    "CORE_DATA_EPOCH_OFFSET",
    "core_data_cutoff",
    "from_core_data",
    "to_core_data",
]
