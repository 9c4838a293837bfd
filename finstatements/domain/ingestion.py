"""Ingestion pipeline states and the transitions allowed between them.

The pipeline only moves forward::

    ACQUIRING → TEXT_EXTRACTED → DATA_EXTRACTED → INCONSISTENCIES_CHECKED → PERSISTED

and may drop to FAILED from any non-terminal state.

Usage:
    from finstatements.domain.ingestion import IngestionState, advance

    state = advance(IngestionState.ACQUIRING, IngestionState.TEXT_EXTRACTED)
"""

from enum import Enum


class IngestionState(str, Enum):
    ACQUIRING = "acquiring"
    TEXT_EXTRACTED = "text_extracted"
    DATA_EXTRACTED = "data_extracted"
    INCONSISTENCIES_CHECKED = "inconsistencies_checked"
    PERSISTED = "persisted"
    FAILED = "failed"


_NEXT: dict[IngestionState, IngestionState] = {
    IngestionState.ACQUIRING: IngestionState.TEXT_EXTRACTED,
    IngestionState.TEXT_EXTRACTED: IngestionState.DATA_EXTRACTED,
    IngestionState.DATA_EXTRACTED: IngestionState.INCONSISTENCIES_CHECKED,
    IngestionState.INCONSISTENCIES_CHECKED: IngestionState.PERSISTED,
}

TERMINAL_STATES = frozenset({IngestionState.PERSISTED, IngestionState.FAILED})


def can_transition(current: IngestionState, target: IngestionState) -> bool:
    """Return True if ``current → target`` is a legal move.

    Examples:
        >>> can_transition(IngestionState.ACQUIRING, IngestionState.TEXT_EXTRACTED)
        True
        >>> can_transition(IngestionState.ACQUIRING, IngestionState.PERSISTED)
        False
        >>> can_transition(IngestionState.DATA_EXTRACTED, IngestionState.FAILED)
        True
    """
    if current in TERMINAL_STATES:
        return False
    if target is IngestionState.FAILED:
        return True
    return _NEXT.get(current) is target


def advance(current: IngestionState, target: IngestionState) -> IngestionState:
    """Validate and perform a transition, returning the new state.

    Raises:
        ValueError: If the transition skips a step, goes backwards, or
            leaves a terminal state.
    """
    if not can_transition(current, target):
        raise ValueError(
            f"Illegal ingestion transition {current.value} -> {target.value}"
        )
    return target
