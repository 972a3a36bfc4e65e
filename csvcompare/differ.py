"""
Differ - Positional, cell-level comparison of two canonical tables.

Rows are aligned by index, not by key: row i of the first table is compared
with row i of the second. An inserted or deleted row therefore shows up as a
difference on every following line.
"""

from typing import Dict, List, Optional
import logging

from .models import CellDiff, MissingSide, Record, RowDiff, Table
from .schema_check import check_compatible

logger = logging.getLogger(__name__)


def _missing_row_cells(headers, row_a: Optional[Record], row_b: Optional[Record]) -> Dict[str, CellDiff]:
    side = MissingSide.LEFT if row_a is None else MissingSide.RIGHT
    row_a = row_a or {}
    row_b = row_b or {}
    return {
        column: CellDiff(
            left=row_a.get(column, ""),
            right=row_b.get(column, ""),
            is_different=True,
            missing_side=side,
        )
        for column in headers
    }


def _row_cells(headers, row_a: Record, row_b: Record) -> Dict[str, CellDiff]:
    cells = {}
    for column in headers:
        left = row_a[column]
        right = row_b[column]
        cells[column] = CellDiff(left=left, right=right, is_different=left != right)
    return cells


def diff(a: Table, b: Table) -> List[RowDiff]:
    """
    Compare two tables row by row.

    Args:
        a: First (original) table; its header order is used for the output
        b: Second (comparison) table with the same column set

    Returns:
        RowDiffs in ascending row order, one per row position that has at
        least one differing cell or exists on one side only

    Raises:
        SchemaMismatchError: The tables do not share the same columns
    """
    check_compatible(a, b)

    headers = a.headers
    differences = []
    for i in range(max(len(a.rows), len(b.rows))):
        row_a = a.rows[i] if i < len(a.rows) else None
        row_b = b.rows[i] if i < len(b.rows) else None

        if row_a is None or row_b is None:
            cells = _missing_row_cells(headers, row_a, row_b)
        else:
            cells = _row_cells(headers, row_a, row_b)
            if not any(cell.is_different for cell in cells.values()):
                continue

        differences.append(RowDiff(row_index=i + 1, cells=cells))

    return differences


def compare(a: Table, b: Table) -> List[RowDiff]:
    """Check the schemas and diff the two tables. An empty list means no differences."""
    differences = diff(a, b)
    logger.debug(f"Compared {a.source_name} with {b.source_name}: {len(differences)} differing rows")
    return differences
