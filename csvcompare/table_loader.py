"""
Table Loader - Reads CSV uploads with pandas and normalizes them into Tables.
"""

import csv
import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import pandas as pd

from .config import settings
from .errors import NoColumnsError, ParseError
from .models import Table
from .table_normalizer import TableNormalizer

logger = logging.getLogger(__name__)

CSV_SUFFIX = ".csv"
SNIFF_BYTES = 4096
DELIMITERS = ",;\t|"


@dataclass
class RawTable:
    """Parser output: header text plus rows keyed by that text."""
    headers: List[Any] = field(default_factory=list)
    rows: List[Dict[Any, Any]] = field(default_factory=list)


def detect_delimiter(sample_text: str) -> str:
    """Guess the delimiter from a sample of the file, defaulting to a comma."""
    try:
        return csv.Sniffer().sniff(sample_text, delimiters=DELIMITERS).delimiter
    except csv.Error:
        return ","


def raw_table_from_dataframe(df: pd.DataFrame) -> RawTable:
    headers = list(df.columns)
    rows = [dict(zip(headers, values)) for values in df.itertuples(index=False, name=None)]
    return RawTable(headers=headers, rows=rows)


def parse_csv(content: Union[bytes, str], file_name: str, encoding: Optional[str] = None) -> RawTable:
    """
    Parse CSV content into header text and raw rows.

    Args:
        content: Uploaded file content
        file_name: Name of the uploaded file, must end in .csv
        encoding: Text encoding, defaults to the configured one

    Returns:
        RawTable whose first parsed line supplies the headers

    Raises:
        ParseError: Not a CSV file, undecodable or malformed content
        NoColumnsError: The file has no content at all
    """
    if not file_name or not file_name.lower().endswith(CSV_SUFFIX):
        raise ParseError("Please select a CSV file")

    if isinstance(content, bytes):
        try:
            text = content.decode(encoding or settings.csv_encoding)
        except UnicodeDecodeError as e:
            raise ParseError(f"CSV parsing error: {e}") from e
    else:
        text = content

    delimiter = detect_delimiter(text[:SNIFF_BYTES])

    try:
        # header=None keeps header text verbatim (no 'Unnamed: n' or '.1' suffixes)
        df = pd.read_csv(io.StringIO(text), sep=delimiter, header=None, dtype=str,
                         keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError as e:
        raise NoColumnsError() from e
    except (pd.errors.ParserError, ValueError) as e:
        raise ParseError(f"CSV parsing error: {e}") from e

    if df.empty:
        raise NoColumnsError()

    headers = list(df.iloc[0])
    body = df.iloc[1:]
    rows = [dict(zip(headers, values)) for values in body.itertuples(index=False, name=None)]
    return RawTable(headers=headers, rows=rows)


class TableLoader:
    """Loads one file slot's content into a canonical Table."""

    def __init__(self, normalizer: Optional[TableNormalizer] = None):
        self.normalizer = normalizer or TableNormalizer()

    def load_table(self, raw: Union[RawTable, pd.DataFrame, bytes, str], file_name: str) -> Table:
        """
        Build a Table from parsed or raw data.

        Args:
            raw: A RawTable, a DataFrame (columns are headers) or CSV content
            file_name: Name of the source file

        Returns:
            Normalized Table

        Raises:
            ParseError, EmptyFileError, NoColumnsError
        """
        if isinstance(raw, pd.DataFrame):
            raw = raw_table_from_dataframe(raw)
        elif isinstance(raw, (bytes, str)):
            raw = parse_csv(raw, file_name)

        table = self.normalizer.normalize(raw.rows, raw.headers, file_name)
        logger.info(f"Loaded {file_name}: {table.row_count} rows, {table.column_count} columns")
        return table

    def load_file(self, path: Union[str, Path]) -> Table:
        """Read a CSV file from disk and load it."""
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise ParseError(f"Could not read {path}: {e}") from e
        return self.load_table(content, path.name)


_default_loader = TableLoader()


def load_table(raw: Union[RawTable, pd.DataFrame, bytes, str], file_name: str) -> Table:
    return _default_loader.load_table(raw, file_name)


def load_file(path: Union[str, Path]) -> Table:
    return _default_loader.load_file(path)
