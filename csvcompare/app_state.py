"""
App State - Immutable front-end state and the pure transitions that drive it.

The front end keeps one AppState and replaces it with the value returned by
each transition. Loads are tagged with a per-slot revision so that a result
arriving after the slot was re-uploaded is ignored (last write wins).
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from .differ import compare
from .errors import CompareError, SchemaMismatchError
from .models import RowDiff, Table
from .schema_check import check_compatible

FIRST = 1
SECOND = 2

NO_DIFFERENCES = "No differences found between the files"


@dataclass(frozen=True)
class AppState:
    first: Optional[Table] = None
    second: Optional[Table] = None
    differences: Tuple[RowDiff, ...] = ()
    error: Optional[str] = None
    info: Optional[str] = None
    show_summary: bool = True
    is_comparing: bool = False
    revisions: Tuple[int, int] = (0, 0)
    compared_revisions: Optional[Tuple[int, int]] = None

    def table(self, slot: int) -> Optional[Table]:
        return self.first if slot == FIRST else self.second


def _check_slot(slot: int) -> None:
    if slot not in (FIRST, SECOND):
        raise ValueError(f"Unknown file slot: {slot}")


def _with_table(state: AppState, slot: int, table: Optional[Table]) -> AppState:
    if slot == FIRST:
        return replace(state, first=table)
    return replace(state, second=table)


def begin_load(state: AppState, slot: int) -> Tuple[AppState, int]:
    """Start loading a file into a slot; returns the new state and the load token."""
    _check_slot(slot)
    revisions = list(state.revisions)
    revisions[slot - 1] += 1
    token = revisions[slot - 1]
    return replace(state, revisions=tuple(revisions), error=None, info=None, is_comparing=True), token


def on_file_loaded(state: AppState, slot: int, token: int,
                   result: Union[Table, CompareError]) -> AppState:
    """
    Apply the outcome of a load started with begin_load.

    Args:
        state: Current state
        slot: FIRST or SECOND
        token: Token returned by begin_load
        result: The loaded Table, or the error raised while loading

    Returns:
        New state; unchanged if a newer load for the slot has started
    """
    _check_slot(slot)
    if token != state.revisions[slot - 1]:
        return state

    if isinstance(result, Table) and slot == SECOND and state.first is not None:
        try:
            check_compatible(state.first, result)
        except SchemaMismatchError as e:
            result = e

    # Any load into a slot invalidates earlier results
    if isinstance(result, CompareError):
        state = _with_table(state, slot, None)
        return replace(state, error=str(result), differences=(), info=None,
                       compared_revisions=None, is_comparing=False)

    if slot == FIRST:
        # A new original also invalidates the comparison file
        return replace(state, first=result, second=None, differences=(), info=None,
                       compared_revisions=None, is_comparing=False)
    return replace(state, second=result, differences=(), info=None,
                   compared_revisions=None, is_comparing=False)


def on_slot_cleared(state: AppState, slot: int) -> AppState:
    _check_slot(slot)
    revisions = list(state.revisions)
    revisions[slot - 1] += 1
    state = _with_table(state, slot, None)
    return replace(state, revisions=tuple(revisions), differences=(), info=None,
                   compared_revisions=None)


def can_compare(state: AppState) -> bool:
    return state.first is not None and state.second is not None and not state.is_comparing


def has_current_results(state: AppState) -> bool:
    """True when the stored differences belong to the tables now in both slots."""
    return (bool(state.differences)
            and state.first is not None and state.second is not None
            and state.compared_revisions == state.revisions)


def begin_compare(state: AppState) -> Tuple[AppState, Tuple[int, int]]:
    """Mark a comparison as in flight; the token captures the slot revisions."""
    return replace(state, is_comparing=True, error=None, info=None), state.revisions


def on_compare_finished(state: AppState, token: Tuple[int, int],
                        result: Union[Tuple[RowDiff, ...], list, CompareError]) -> AppState:
    """Store a comparison result unless either slot was reloaded meanwhile."""
    if token != state.revisions:
        return state

    if isinstance(result, CompareError):
        return replace(state, differences=(), error=str(result), is_comparing=False,
                       compared_revisions=None)

    differences = tuple(result)
    return replace(state, differences=differences, is_comparing=False, compared_revisions=token,
                   info=None if differences else NO_DIFFERENCES)


def on_compare_requested(state: AppState) -> AppState:
    """Run the comparison for the two loaded tables."""
    if state.first is None or state.second is None:
        return state

    state, token = begin_compare(state)
    try:
        result = compare(state.first, state.second)
    except CompareError as e:
        return on_compare_finished(state, token, e)
    return on_compare_finished(state, token, result)


def on_view_toggled(state: AppState) -> AppState:
    return replace(state, show_summary=not state.show_summary)
