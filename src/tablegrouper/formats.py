"""Readers and writers for the supported tabular file formats."""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

SNIFF_SAMPLE_SIZE = 4096
SNIFF_DELIMITERS = ",;\t|"


class TableReadError(Exception):
    """A single file could not be read into rows."""


class UnsupportedFormatError(TableReadError):
    """The file extension has no registered reader."""


Rows = list[list[str]]


@dataclass(frozen=True)
class TableFormat:
    """A file format with its extensions and read/write callables."""

    name: str
    extensions: tuple[str, ...]
    reader: Callable[[Path], Rows]
    writer: Optional[Callable[[Path, Sequence[str], Sequence[Sequence[str]]], None]] = None


def _detect_delimiter(file_path: Path, default: str) -> str:
    """Detect the delimiter used in a delimited text file."""
    with open(file_path, "r", newline="", encoding="utf-8-sig") as f:
        sample = f.read(SNIFF_SAMPLE_SIZE)
    if not sample:
        return default
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS)
        return dialect.delimiter
    except csv.Error:
        return default


def _delimited_reader(default_delimiter: str) -> Callable[[Path], Rows]:
    def read(file_path: Path) -> Rows:
        delimiter = _detect_delimiter(file_path, default_delimiter)
        with open(file_path, "r", newline="", encoding="utf-8-sig") as f:
            return [row for row in csv.reader(f, delimiter=delimiter)]

    return read


def _cell_text(value) -> str:
    # Only blank cells are empty; text such as "NA" or "null" is kept.
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value)


def read_spreadsheet(file_path: Path) -> Rows:
    """Read the first sheet of a spreadsheet workbook as text rows."""
    with pd.ExcelFile(file_path) as workbook:
        sheet_names = workbook.sheet_names
        if not sheet_names:
            raise TableReadError(f"Excel file has no sheets: {file_path}")

        sheet_name = sheet_names[0]
        logger.info("Reading sheet: %s", sheet_name)
        frame = workbook.parse(
            sheet_name, header=None, dtype=object, keep_default_na=False, na_filter=False
        )

    return [[_cell_text(value) for value in row] for row in frame.itertuples(index=False)]


def write_csv(
    output_path: Path, header: Sequence[str], rows: Sequence[Sequence[str]]
) -> None:
    """Write ``header`` then ``rows`` as a CSV file."""
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(header)
        writer.writerows(rows)


CSV = TableFormat("csv", (".csv",), _delimited_reader(","), write_csv)
TSV = TableFormat("tsv", (".tsv",), _delimited_reader("\t"))
SPREADSHEET = TableFormat(
    "spreadsheet", (".xlsx", ".xlsm", ".xls", ".xlsb", ".ods"), read_spreadsheet
)

FORMATS: dict[str, TableFormat] = {
    extension: table_format
    for table_format in (CSV, TSV, SPREADSHEET)
    for extension in table_format.extensions
}

OUTPUT_FORMAT = CSV


def is_supported(file_path: str | Path) -> bool:
    """Return True for an existing regular file with a registered extension."""
    file_path = Path(file_path)
    return file_path.is_file() and file_path.suffix.lower() in FORMATS


def format_for(file_path: str | Path) -> TableFormat:
    file_path = Path(file_path)
    if not file_path.suffix:
        raise UnsupportedFormatError(f"File has no extension: {file_path}")
    try:
        return FORMATS[file_path.suffix.lower()]
    except KeyError:
        raise UnsupportedFormatError(
            f"Unsupported file extension: {file_path.suffix!r}"
        ) from None


def read_table(file_path: str | Path) -> Rows:
    """
    Read a tabular file into rows of text cells, row 0 being the header.

    Raises:
        TableReadError: The file is missing, unreadable, corrupt or of an
            unsupported format.
    """
    file_path = Path(file_path)
    table_format = format_for(file_path)

    try:
        return table_format.reader(file_path)
    except TableReadError:
        raise
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise TableReadError(f"Could not read {file_path}: {e}") from e
    except Exception as e:
        # Spreadsheet engines raise their own exception types for corrupt files.
        raise TableReadError(f"Could not parse {file_path}: {e}") from e


def write_table(
    output_path: str | Path, header: Sequence[str], rows: Sequence[Sequence[str]]
) -> Path:
    """Write ``header`` and ``rows`` to ``output_path`` in the output format."""
    output_path = Path(output_path)
    OUTPUT_FORMAT.writer(output_path, header, rows)
    return output_path
