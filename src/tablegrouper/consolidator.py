"""Find tabular files, group them by header compatibility and write one table per group."""

import logging
from pathlib import Path

from . import formats
from .formats import TableReadError
from .grouper import (
    DEFAULT_SIMILARITY_THRESHOLD,
    SourceTable,
    TableGroup,
    group_headers,
    validate_threshold,
)

logger = logging.getLogger(__name__)


class SearchPathError(ValueError):
    """The search path is neither a file nor a directory."""


class TableConsolidator:
    """Main class for consolidating tabular files by field structure."""

    def __init__(
        self,
        output_dir: str | Path | None = None,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ):
        """
        Initialize the consolidator.

        Args:
            output_dir: Directory the combined tables are written to.
                Defaults to the working directory at write time.
            similarity_threshold: Minimum Jaccard similarity for two
                headers to share a group (0.0 to 1.0).
        """
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.similarity_threshold = validate_threshold(similarity_threshold)
        self._paths: list[Path] = []
        self._tables: list[SourceTable] = []
        self._groups: list[TableGroup] = []

    def find_files(self, search_path: str | Path) -> list[Path]:
        """
        Find candidate files under a directory, or accept a single file.

        Args:
            search_path: Directory to walk recursively, or one file.

        Returns:
            Paths in sorted discovery order.
        """
        search_path = Path(search_path)
        if search_path.is_dir():
            return sorted(p for p in search_path.rglob("*") if formats.is_supported(p))
        if search_path.is_file():
            if formats.is_supported(search_path):
                return [search_path]
            logger.warning("Ignoring file with unsupported extension: %s", search_path)
            return []
        raise SearchPathError(f"{search_path} is not a file nor is a directory")

    def load_files(self, paths: list[Path]) -> list[SourceTable]:
        """Read every path, skipping unreadable and empty files."""
        self._tables = []

        for path in paths:
            logger.info("Reading: %s", path)
            try:
                rows = formats.read_table(path)
            except TableReadError as e:
                logger.warning("Failed to read file %s: %s", path, e)
                continue

            if not rows:
                logger.warning("File is empty: %s", path)
                continue

            self._tables.append(SourceTable.from_rows(str(path), rows))

        return self._tables

    def group_files(self) -> list[TableGroup]:
        """Group the loaded tables by header compatibility."""
        indices = group_headers(
            [table.headers for table in self._tables], self.similarity_threshold
        )
        self._groups = [TableGroup(files=[self._tables[i] for i in group]) for group in indices]
        logger.info("Found %d compatible header groups", len(self._groups))
        return self._groups

    def write_group(self, group: TableGroup) -> Path:
        """Write one group's combined table and return its path."""
        output_dir = self.output_dir if self.output_dir is not None else Path.cwd()
        output_path = output_dir / group.output_name(formats.OUTPUT_FORMAT.name)

        logger.info(
            "Processing group with merged headers: %s (%d files)",
            ", ".join(group.merged_headers),
            len(group.files),
        )
        if group.is_single:
            logger.info("Copying single file: %s", group.files[0].path)
        else:
            logger.info("Combining %d compatible files into: %s", len(group.files), output_path.name)
            for table in group.files:
                logger.info("  - Including: %s (headers: %s)", table.path, ", ".join(table.headers))

        rows = group.rows()
        formats.write_table(output_path, group.merged_headers, rows)
        logger.info(
            "Created: %s (%d files, %d data rows)", output_path.name, len(group.files), len(rows)
        )
        return output_path

    def consolidate(self, search_path: str | Path) -> list[Path]:
        """
        Run the whole pipeline over ``search_path``.

        Returns:
            Paths of the output tables created.

        Raises:
            SearchPathError: ``search_path`` is neither a file nor a directory.
            OSError: An output table could not be written.
        """
        logger.info("Searching for files in: %s", search_path)
        self._paths = self.find_files(search_path)
        logger.info("Found %d files to process", len(self._paths))

        if not self._paths:
            logger.warning("No CSV or Excel files found!")
            self._tables = []
            self._groups = []
            return []

        self.load_files(self._paths)
        self.group_files()
        return [self.write_group(group) for group in self._groups]

    def get_files(self) -> list[Path]:
        """Return the paths discovered by the last run."""
        return self._paths

    def get_tables(self) -> list[SourceTable]:
        """Return the tables loaded by the last run."""
        return self._tables

    def get_groups(self) -> list[TableGroup]:
        """Return current groups."""
        return self._groups

    def summary(self) -> str:
        """Return a human-readable summary of current groupings."""
        lines = [
            "Table Grouper Summary",
            "=====================",
            f"Total files: {len(self._tables)}",
            f"Total groups: {len(self._groups)}",
            "",
        ]

        for group in self._groups:
            lines.append(f"Group: {group.output_name(formats.OUTPUT_FORMAT.name)}")
            lines.append(f"  Files: {len(group.files)}")
            lines.append(f"  Headers: {', '.join(group.merged_headers[:5])}")
            if len(group.merged_headers) > 5:
                lines.append(f"    ... and {len(group.merged_headers) - 5} more")
            lines.append("")

        return "\n".join(lines)
