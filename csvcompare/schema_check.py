"""
Schema Check - Verifies that two tables share the same set of columns.
"""

from typing import List, Tuple

from .errors import SchemaMismatchError
from .models import Table


def describe_schema_difference(a: Table, b: Table) -> Tuple[List[str], List[str]]:
    """
    List the columns that appear in only one of the two tables.

    Args:
        a: First table
        b: Second table

    Returns:
        Tuple of (columns only in a, columns only in b), each sorted
    """
    cols_a = set(a.headers)
    cols_b = set(b.headers)
    return sorted(cols_a - cols_b), sorted(cols_b - cols_a)


def check_compatible(a: Table, b: Table) -> None:
    """Raise SchemaMismatchError unless both tables have the same column set.

    Column order is not checked.
    """
    only_in_a, only_in_b = describe_schema_difference(a, b)
    if only_in_a or only_in_b or len(a.headers) != len(b.headers):
        raise SchemaMismatchError(only_in_first=only_in_a, only_in_second=only_in_b)
