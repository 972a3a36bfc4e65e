"""
Models - Canonical table and diff records shared by the comparison core.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Tuple

# A row bound to its table's headers: column name -> normalized string
Record = Mapping[str, str]


@dataclass(frozen=True)
class Table:
    """One loaded file's content after normalization.

    Every record holds exactly the keys in ``headers``; no record is
    entirely empty.
    """
    headers: Tuple[str, ...]
    rows: Tuple[Record, ...]
    source_name: str

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)


class MissingSide(str, Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class CellDiff:
    left: str
    right: str
    is_different: bool
    missing_side: MissingSide = MissingSide.NONE


@dataclass(frozen=True)
class RowDiff:
    """Column-level differences for one aligned row position.

    ``cells`` is copied into a read-only mapping on creation.
    """
    row_index: int
    cells: Mapping[str, CellDiff] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))

    def __hash__(self):
        return hash((self.row_index, tuple(self.cells.items())))

    @property
    def line_number(self) -> int:
        # The header occupies line 1
        return self.row_index + 1

    @property
    def is_missing(self) -> bool:
        return any(cell.missing_side is not MissingSide.NONE for cell in self.cells.values())

    def changed_columns(self) -> List[str]:
        return [column for column, cell in self.cells.items() if cell.is_different]


ComparisonResult = List[RowDiff]
