"""Checklist reconciliation.

Brings a named checklist on a card to contain exactly one item per desired
label. Item labels are the identity: an item whose label is still wanted is
left alone, checked state included. The diff is recomputed from the remote
checklist on every call, so repeating a call (or retrying one that failed
halfway) converges without duplicating items.
"""

import logging
from collections.abc import Iterable

from ..core.models import Card, CheckItem, Checklist, ReconcileResult
from ..providers.base import BoardService

logger = logging.getLogger(__name__)


class ChecklistReconciler:
    """Applies the create/delete diff between a checklist and a label set."""

    def __init__(self, service: BoardService):
        self.service = service

    def find_or_create_checklist(self, card: Card, checklist_name: str) -> tuple[Checklist, bool]:
        """
        Return the card's first checklist named `checklist_name` (any casing).

        Creates an empty one with the exact given name if none exists.

        Returns:
            (checklist, created)
        """
        wanted = checklist_name.lower()
        for checklist in self.service.fetch_checklists(card):
            if checklist.name.lower() == wanted:
                return checklist, False

        logger.info(f"Creating checklist '{checklist_name}' on '{card.name}'")
        return self.service.create_checklist(card, checklist_name), True

    def reconcile(
        self,
        card: Card,
        checklist_name: str,
        desired_labels: Iterable[str],
    ) -> ReconcileResult:
        """
        Make the named checklist's item labels equal `desired_labels`.

        Args:
            card: Card carrying the checklist
            checklist_name: Checklist to reconcile, matched case-insensitively
            desired_labels: Labels that should be present; duplicates collapse

        Returns:
            ReconcileResult listing the labels created and deleted

        Raises:
            DataSourceError: On any remote failure. Mutations already applied
                are kept; calling again resumes from the remote state.
        """
        desired = list(dict.fromkeys(desired_labels))
        wanted = set(desired)

        checklist, checklist_created = self.find_or_create_checklist(card, checklist_name)

        current: dict[str, CheckItem] = {}
        stale: list[CheckItem] = []
        for item in checklist.check_items:
            if item.name in wanted and item.name not in current:
                current[item.name] = item
            else:
                stale.append(item)

        deleted = []
        for item in stale:
            logger.debug(f"[{card.name}/{checklist.name}] delete: {item.name}")
            self.service.delete_checklist_item(item)
            deleted.append(item.name)

        created = []
        for label in desired:
            if label in current:
                continue
            logger.debug(f"[{card.name}/{checklist.name}] add: {label}")
            self.service.create_checklist_item(checklist, label)
            created.append(label)

        if created or deleted:
            logger.info(
                f"Checklist '{checklist.name}' on '{card.name}': "
                f"+{len(created)} -{len(deleted)}"
            )

        return ReconcileResult(
            card_id=card.id,
            card_name=card.name,
            checklist_name=checklist.name,
            checklist_id=checklist.id,
            checklist_created=checklist_created,
            created=created,
            deleted=deleted,
        )
