"""Base classes for remote board services."""

import logging
import time
from abc import ABC, abstractmethod

from ..core.models import (
    AuditEntry,
    Board,
    BoardList,
    Card,
    CheckItem,
    Checklist,
)

logger = logging.getLogger(__name__)


class BoardService(ABC):
    """
    Operations the reconciliation core needs from a task-board service.

    Every method is a blocking round trip and may raise DataSourceError.
    Owning identifiers travel on the models themselves (a CheckItem knows its
    checklist id), so callers never need a handle back to the parent object.
    """

    @abstractmethod
    def fetch_board(self, board_id: str) -> Board:
        """Fetch a board by id."""

    @abstractmethod
    def fetch_lists(self, board: Board) -> list[BoardList]:
        """Fetch the open lists on a board."""

    @abstractmethod
    def fetch_cards(self, board_list: BoardList) -> list[Card]:
        """Fetch the open cards on a list, in list order."""

    @abstractmethod
    def fetch_checklists(self, card: Card) -> list[Checklist]:
        """Fetch every checklist on a card, items included."""

    @abstractmethod
    def create_checklist(self, card: Card, name: str) -> Checklist:
        """Create an empty checklist on a card."""

    @abstractmethod
    def create_checklist_item(self, checklist: Checklist, label: str) -> CheckItem:
        """Append an unchecked item to a checklist."""

    @abstractmethod
    def delete_checklist_item(self, item: CheckItem) -> None:
        """Delete an item from its checklist."""

    def get_audit_trail(self) -> list[AuditEntry]:
        """Return the remote calls recorded so far."""
        return []

    def clear_audit_trail(self) -> None:
        """Forget recorded remote calls."""


class BaseProvider(BoardService):
    """Board service backed by a rate-limited remote API."""

    # Subclasses must define their source name
    SOURCE: str = "unknown"

    def __init__(
        self,
        rate_limit_calls: int = 100,
        rate_limit_period: int = 10,
    ):
        """
        Initialize provider with rate limiting.

        Args:
            rate_limit_calls: Maximum calls per period
            rate_limit_period: Period in seconds
        """
        self.rate_limit_calls = rate_limit_calls
        self.rate_limit_period = rate_limit_period
        self._call_timestamps: list[float] = []
        self._audit_entries: list[AuditEntry] = []

    def _wait_for_rate_limit(self) -> None:
        """Enforce rate limiting by sleeping if necessary."""
        now = time.time()
        # Clean old timestamps
        self._call_timestamps = [
            ts for ts in self._call_timestamps if now - ts < self.rate_limit_period
        ]

        if len(self._call_timestamps) >= self.rate_limit_calls:
            sleep_time = self._call_timestamps[0] + self.rate_limit_period - now
            if sleep_time > 0:
                logger.debug(f"[{self.SOURCE}] Rate limit: sleeping {sleep_time:.1f}s")
                time.sleep(sleep_time)

        self._call_timestamps.append(time.time())

    def _record_audit(
        self,
        action: str,
        endpoint: str | None = None,
        success: bool = True,
        error_message: str | None = None,
        duration_ms: int | None = None,
    ) -> AuditEntry:
        """Record an audit entry for this provider call."""
        entry = AuditEntry(
            action=action,
            endpoint=endpoint,
            success=success,
            error_message=error_message,
            duration_ms=duration_ms,
        )
        self._audit_entries.append(entry)
        return entry

    def get_audit_trail(self) -> list[AuditEntry]:
        """Return all audit entries recorded by this provider."""
        return self._audit_entries.copy()

    def clear_audit_trail(self) -> None:
        """Clear the audit trail."""
        self._audit_entries.clear()
