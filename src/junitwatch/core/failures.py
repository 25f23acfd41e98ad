"""Ordered record of failing results for a run."""

from __future__ import annotations

from typing import Iterator, List, Optional

from junitwatch.core.models import Result


class Failures:
    """Append-only pool of results with a flagged, failing subset.

    Every started suite and case is added to the pool and stays open until
    close_result() is called for it. A failure or error element flags the
    most recently added entry that is still open. Entries are never removed.
    """

    def __init__(self) -> None:
        self._pool: List[Result] = []
        self._open: List[int] = []  # Pool indexes of open entries, ascending
        self._flagged: List[int] = []  # Pool indexes in flagging order

    def add_result(self, result: Result) -> None:
        self._open.append(len(self._pool))
        self._pool.append(result)

    def close_result(self, result: Result) -> None:
        """Mark ``result`` as ended; it can no longer become the current one."""
        for position in range(len(self._open) - 1, -1, -1):
            if self._pool[self._open[position]] is result:
                del self._open[position]
                return

    def mark_current_result_as_failure(self) -> None:
        """Flag the most recently added open result as failing.

        Flagging the same result twice (a failure followed by an error in
        the same case) keeps a single entry.
        """
        if self._open:
            index = self._open[-1]
        elif self._pool:
            index = len(self._pool) - 1
        else:
            return
        if index in self._flagged:
            return
        self._flagged.append(index)

    @property
    def current(self) -> Optional[Result]:
        """The result a failure would be attributed to right now."""
        if self._open:
            return self._pool[self._open[-1]]
        return None

    @property
    def results(self) -> List[Result]:
        """Failing results in the order they were flagged."""
        return [self._pool[index] for index in self._flagged]

    @property
    def count(self) -> int:
        return len(self._flagged)

    def __len__(self) -> int:
        return len(self._flagged)

    def __iter__(self) -> Iterator[Result]:
        return iter(self.results)

    def __contains__(self, result: object) -> bool:
        return any(self._pool[index] is result for index in self._flagged)

    def find_next(self, result: Optional[Result] = None) -> Optional[Result]:
        """Return the first failing result after ``result`` in pool order.

        Args:
            result: Any result in the pool, or None to start from the top.

        Returns:
            The next failing result, or None.
        """
        position = self._position(result)
        candidates = [index for index in self._flagged if index > position]
        return self._pool[min(candidates)] if candidates else None

    def find_previous(self, result: Optional[Result] = None) -> Optional[Result]:
        """Return the last failing result before ``result`` in pool order.

        Args:
            result: Any result in the pool, or None to start from the bottom.

        Returns:
            The previous failing result, or None.
        """
        position = len(self._pool) if result is None else self._position(result)
        candidates = [index for index in self._flagged if index < position]
        return self._pool[max(candidates)] if candidates else None

    def _position(self, result: Optional[Result]) -> int:
        if result is None:
            return -1
        for index, candidate in enumerate(self._pool):
            if candidate is result:
                return index
        raise ValueError(f"{result!r} was never added to the failure pool")
