from typing import Dict, List, Sequence

import pandas as pd

from csvcompare.models import CellDiff, MissingSide, RowDiff

EMPTY = "(empty)"


def display_value(v):
    return v if v else EMPTY


def missing_label(side, short=False):
    if side is MissingSide.LEFT:
        return "Missing in File 1" if short else "Missing in first file"
    return "Missing in File 2" if short else "Missing in second file"


def summary_lines(differences: Sequence[RowDiff]) -> List[str]:
    """Plain-text summary: one block per differing line, changed columns only."""
    lines = []
    for row in differences:
        lines.append(f"Line {row.line_number}:")
        for column, cell in row.cells.items():
            if not cell.is_different:
                continue
            if cell.missing_side is not MissingSide.NONE:
                lines.append(f"    {column}: {missing_label(cell.missing_side)}")
            else:
                lines.append(f"    {column}:")
                lines.append(f"      - {display_value(cell.left)}")
                lines.append(f"      + {display_value(cell.right)}")
    return lines


def summary_header(differences, first_name, second_name):
    return f"Found {len(differences)} differences in files:\n{first_name} ↔ {second_name}"


def cell_text(cell: CellDiff) -> str:
    if not cell.is_different:
        return cell.left
    if cell.missing_side is not MissingSide.NONE:
        return missing_label(cell.missing_side, short=True)
    return f"{display_value(cell.left)} → {display_value(cell.right)}"


def differences_frame(differences: Sequence[RowDiff], headers: Sequence[str]) -> pd.DataFrame:
    """Detailed comparison table: Line column first, then one column per header."""
    records: List[Dict[str, str]] = []
    for row in differences:
        record = {"Line": row.line_number}
        for column in headers:
            record[column] = cell_text(row.cells[column])
        records.append(record)
    return pd.DataFrame(records, columns=["Line", *headers])


def differing_mask(differences: Sequence[RowDiff], headers: Sequence[str]) -> pd.DataFrame:
    """Boolean frame aligned with differences_frame, True where a cell differs."""
    flags = [[False] + [row.cells[c].is_different for c in headers] for row in differences]
    return pd.DataFrame(flags, columns=["Line", *headers])


def row_diff_to_dict(row: RowDiff) -> dict:
    return {
        "row_index": row.row_index,
        "line_number": row.line_number,
        "cells": {
            column: {
                "left": cell.left,
                "right": cell.right,
                "is_different": cell.is_different,
                "missing_side": cell.missing_side.value,
            }
            for column, cell in row.cells.items()
        },
    }


def row_diff_from_dict(data: dict) -> RowDiff:
    cells = {
        column: CellDiff(
            left=cell["left"],
            right=cell["right"],
            is_different=cell["is_different"],
            missing_side=MissingSide(cell["missing_side"]),
        )
        for column, cell in data["cells"].items()
    }
    return RowDiff(row_index=data["row_index"], cells=cells)
