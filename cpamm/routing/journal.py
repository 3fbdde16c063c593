"""Compensating-action journal for all-or-nothing pool operations.

Each effect an operation applies (reserve counter change, base transfer,
share mint or burn, incoming token pull) is recorded together with the
action that reverses it. If the operation raises, the journal replays the
reversals newest-first and lets the original exception propagate, so a
failed operation leaves no observable trace.
"""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType

import structlog

logger = structlog.get_logger()


class Journal:
    """Ordered record of undo actions for effects already applied.

    Usage:
        with Journal() as journal:
            ledger.send(caller, pool, amount)
            journal.record("receive_base", lambda: ledger.send(pool, caller, amount))
            ...  # any exception here undoes the send

    Attributes:
        failures: (label, error) for each undo that raised during rollback
    """

    def __init__(self) -> None:
        self._entries: list[tuple[str, Callable[[], None]]] = []
        self.failures: list[tuple[str, Exception]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, label: str, undo: Callable[[], None]) -> None:
        """Register the reversal of an effect that has just been applied."""
        self._entries.append((label, undo))

    def rollback(self) -> list[str]:
        """Undo every recorded effect, newest first.

        An undo that raises does not stop the ones recorded before it; its
        error is kept in failures.

        Returns:
            Labels of the reversed effects, in the order they were undone
        """
        undone: list[str] = []
        while self._entries:
            label, undo = self._entries.pop()
            try:
                undo()
            except Exception as err:
                self.failures.append((label, err))
            else:
                undone.append(label)
        return undone

    def commit(self) -> None:
        """Forget recorded effects; they are now permanent."""
        self._entries.clear()

    def __enter__(self) -> Journal:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc_type is None:
            self.commit()
            return False
        if not self._entries:
            return False

        undone = self.rollback()
        if not self.failures:
            logger.info("operation_rolled_back", steps=undone, error=exc_type.__name__)
            return False

        failed = [label for label, _ in self.failures]
        logger.error(
            "operation_rolled_back",
            steps=undone,
            failed=failed,
            error=exc_type.__name__,
        )
        if exc is not None:
            for label, err in self.failures:
                exc.add_note(f"rollback of {label} failed: {err!r}")
        return False
