"""
Table Normalizer - Turns raw parsed rows into a canonical Table.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging

import pandas as pd

from .config import settings, REJECT
from .errors import EmptyFileError, NoColumnsError, ParseError
from .models import Table

logger = logging.getLogger(__name__)


def normalize_value(value: Any) -> str:
    """Coerce one raw cell to a trimmed string; missing values become ''."""
    if value is None:
        return ""
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return ""
    return str(value).strip()


class TableNormalizer:
    """Builds canonical tables from raw field mappings and a header list."""

    def __init__(self, duplicate_headers: Optional[str] = None):
        self.duplicate_headers = duplicate_headers or settings.duplicate_headers

    def normalize(self, raw_rows: Sequence[Mapping[str, Any]], raw_headers: Sequence[Any],
                  file_name: str) -> Table:
        """
        Normalize one parsed file.

        Args:
            raw_rows: Rows as mappings from raw header text to raw value
            raw_headers: Header text as produced by the parser
            file_name: Name of the source file

        Returns:
            Table with trimmed, de-duplicated headers and non-empty rows

        Raises:
            NoColumnsError: No non-empty header remains
            EmptyFileError: No row has a non-empty value
            ParseError: Duplicate headers while the policy is 'reject'
        """
        headers, sources = self._resolve_headers(raw_headers, file_name)
        if not headers:
            raise NoColumnsError()

        rows = []
        for raw_row in raw_rows:
            record = self._build_record(raw_row, headers, sources)
            if any(record.values()):
                rows.append(record)

        if not rows:
            raise EmptyFileError()

        return Table(headers=tuple(headers), rows=tuple(rows), source_name=file_name)

    def _resolve_headers(self, raw_headers: Sequence[Any], file_name: str):
        """Map each canonical header to the raw headers that feed it, in raw order."""
        headers: List[str] = []
        sources: Dict[str, List[Any]] = {}

        for raw_header in raw_headers:
            name = normalize_value(raw_header)
            if not name:
                continue
            if name not in sources:
                headers.append(name)
                sources[name] = []
            sources[name].append(raw_header)

        duplicated = [name for name in headers if len(sources[name]) > 1]
        if duplicated:
            if self.duplicate_headers == REJECT:
                raise ParseError(f"Duplicate column names in {file_name}: {', '.join(duplicated)}")
            logger.warning(f"Collapsing duplicate columns in {file_name}: {duplicated} (last value wins)")

        return headers, sources

    @staticmethod
    def _build_record(raw_row: Mapping[str, Any], headers: List[str],
                      sources: Dict[str, List[Any]]) -> Dict[str, str]:
        record = {}
        for name in headers:
            value = ""
            for raw_header in sources[name]:
                if raw_header in raw_row:
                    value = normalize_value(raw_row[raw_header])
            record[name] = value
        return record


_default_normalizer = TableNormalizer()


def normalize(raw_rows: Sequence[Mapping[str, Any]], raw_headers: Sequence[Any],
              file_name: str) -> Table:
    """Normalize with the configured duplicate-header policy."""
    return _default_normalizer.normalize(raw_rows, raw_headers, file_name)
