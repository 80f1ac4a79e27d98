"""Core table grouping functionality."""

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Sequence

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.5


@dataclass
class SourceTable:
    """Represents a tabular file with its header and data rows."""

    path: str
    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)

    @property
    def field_set(self) -> frozenset[str]:
        """Return headers as a frozen set for comparison."""
        return frozenset(self.headers)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @classmethod
    def from_rows(cls, path: str, rows: list[list[str]]) -> "SourceTable":
        """Create from reader output, where row 0 is the header."""
        if not rows:
            raise ValueError(f"No rows to build a table from: {path}")
        return cls(path=path, headers=list(rows[0]), rows=rows[1:])


@dataclass
class TableGroup:
    """A group of tables with compatible field structures."""

    files: list[SourceTable]
    merged_headers: list[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.merged_headers:
            self.merged_headers = merge_headers([f.headers for f in self.files])

    @property
    def is_single(self) -> bool:
        return len(self.files) == 1

    @property
    def file_paths(self) -> list[str]:
        """Return list of file paths in this group."""
        return [f.path for f in self.files]

    def output_name(self, extension: str = "csv") -> str:
        return output_name(self.merged_headers, len(self.files), extension)

    def rows(self) -> list[list[str]]:
        """Return every member's rows remapped to the merged headers, in member order."""
        combined = []
        for source in self.files:
            combined.extend(remap_rows(source.headers, self.merged_headers, source.rows))
        return combined


def compute_similarity(headers1: Sequence[str], headers2: Sequence[str]) -> float:
    """
    Compute Jaccard similarity between two headers' field sets.

    Returns:
        Float between 0.0 and 1.0 (1.0 = identical fields). Two empty
        headers score 0.0.
    """
    set1 = set(headers1)
    set2 = set(headers2)

    union = len(set1 | set2)
    if not union:
        return 0.0

    return len(set1 & set2) / union


def headers_are_compatible(
    headers1: Sequence[str],
    headers2: Sequence[str],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> bool:
    """Return True when the two headers overlap by at least ``threshold``."""
    if not set(headers1) | set(headers2):
        return False
    return compute_similarity(headers1, headers2) >= threshold


def validate_threshold(threshold: float) -> float:
    if not 0.0 <= threshold <= 1.0:
        raise ValueError("Threshold must be between 0.0 and 1.0")
    return threshold


def group_headers(
    headers: Sequence[Sequence[str]],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[list[int]]:
    """
    Partition header indices into compatible groups.

    Each index joins the first existing group whose first member is
    compatible with it, otherwise it starts a new group. Only the first
    member is compared, so later members of a group are not checked
    against each other.

    Args:
        headers: One header per file, in discovery order.
        threshold: Minimum Jaccard similarity (0.0 to 1.0).

    Returns:
        List of groups, each a list of indices into ``headers``.
    """
    validate_threshold(threshold)

    groups: list[list[int]] = []
    for index, header in enumerate(headers):
        for group in groups:
            if headers_are_compatible(header, headers[group[0]], threshold):
                group.append(index)
                break
        else:
            groups.append([index])

    return groups


def merge_headers(headers: Sequence[Sequence[str]]) -> list[str]:
    """Return the union of ``headers`` with each name kept at its first position seen."""
    merged = []
    seen = set()

    for header in headers:
        for column in header:
            if column not in seen:
                seen.add(column)
                merged.append(column)

    return merged


def remap_rows(
    old_headers: Sequence[str],
    new_headers: Sequence[str],
    rows: Sequence[Sequence[str]],
) -> list[list[str]]:
    """
    Realign rows laid out by ``old_headers`` to the ``new_headers`` layout.

    Columns missing from the old header, and cells missing from short rows,
    become empty strings. When the old header repeats a name, the last
    occurrence supplies the value.
    """
    # Later duplicates overwrite earlier ones.
    old_index = {column: idx for idx, column in enumerate(old_headers)}
    positions = [old_index.get(column) for column in new_headers]

    mapped = []
    for row in rows:
        if len(row) > len(old_headers):
            logger.debug(
                "Dropping %d cells beyond the header width", len(row) - len(old_headers)
            )
        mapped.append(
            [row[idx] if idx is not None and idx < len(row) else "" for idx in positions]
        )

    return mapped


def header_hash(headers: Sequence[str]) -> str:
    """Return a stable 16 hex character hash of the ordered header."""
    digest = hashlib.blake2b(digest_size=8)
    for column in headers:
        encoded = column.encode("utf-8")
        digest.update(len(encoded).to_bytes(8, "big"))
        digest.update(encoded)
    return digest.hexdigest()


def output_name(headers: Sequence[str], file_count: int, extension: str = "csv") -> str:
    """Name the output artifact for a group with ``headers`` and ``file_count`` members."""
    prefix = "single" if file_count == 1 else "combined"
    return f"{prefix}_{header_hash(headers)}.{extension}"
