"""Table Grouper - Combine CSV and spreadsheet files with compatible headers."""

from .consolidator import SearchPathError, TableConsolidator
from .formats import TableReadError, UnsupportedFormatError, read_table, write_table
from .grouper import (
    SourceTable,
    TableGroup,
    compute_similarity,
    group_headers,
    header_hash,
    headers_are_compatible,
    merge_headers,
    output_name,
    remap_rows,
)

__all__ = [
    "SearchPathError",
    "SourceTable",
    "TableConsolidator",
    "TableGroup",
    "TableReadError",
    "UnsupportedFormatError",
    "compute_similarity",
    "group_headers",
    "header_hash",
    "headers_are_compatible",
    "merge_headers",
    "output_name",
    "read_table",
    "remap_rows",
    "write_table",
]
__version__ = "0.1.0"
