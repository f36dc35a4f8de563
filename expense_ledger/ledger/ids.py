"""
Expense identifiers.

Ids look like "1709251200000-0000000001": epoch milliseconds, then a
sequence number, both zero-padded to a fixed width. String comparison of
two ids from the same generator therefore follows creation order.
"""

import re
import threading
import time
from typing import Callable, Optional

_MILLIS_WIDTH = 13
_SEQUENCE_WIDTH = 10
_MAX_MILLIS = 10 ** _MILLIS_WIDTH - 1

_ID_SHAPE = re.compile(r"([0-9]{13})-([0-9]{10})")


def format_id(millis: int, sequence: int) -> str:
    return f"{millis:0{_MILLIS_WIDTH}d}-{sequence:0{_SEQUENCE_WIDTH}d}"


def parse_id(expense_id: str) -> Optional[tuple[int, int]]:
    """(millis, sequence) for ids in our format, None for anything else."""
    match = _ID_SHAPE.fullmatch(expense_id) if isinstance(expense_id, str) else None
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


class IdGenerator:
    """
    Produces unique, creation-ordered ids for one ledger.

    The millisecond part never moves backwards, even if the clock does, and
    the sequence part increases on every call, so two ids minted within the
    same millisecond still differ and still sort correctly.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Args:
            clock: Returns seconds since the epoch. Injectable for tests.
        """
        self._clock = clock
        self._last_millis = 0
        self._sequence = 0
        self._lock = threading.Lock()

    def _now_millis(self) -> int:
        millis = int(self._clock() * 1000)
        return min(max(millis, 0), _MAX_MILLIS)

    def next_id(self) -> str:
        with self._lock:
            self._last_millis = max(self._now_millis(), self._last_millis)
            self._sequence += 1
            return format_id(self._last_millis, self._sequence)

    def observe(self, expense_id: str) -> None:
        """
        Advance past an id that already exists (e.g. loaded from storage).

        Ids in a foreign format are ignored; the ledger checks those for
        collisions itself.
        """
        parsed = parse_id(expense_id)
        if parsed is None:
            return
        millis, sequence = parsed
        with self._lock:
            self._last_millis = max(self._last_millis, millis)
            self._sequence = max(self._sequence, sequence)
