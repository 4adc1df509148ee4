"""Board processor - one reconciliation pass over one board.

Coordinates the classifier and the reconciler:
1. Index the board's lists by lower-cased name
2. Index the "Work Buckets" cards by lower-cased title (the rollup cards)
3. Classify the configured source columns into buckets
4. Reconcile each rollup card's "Open Cards" checklist with its bucket
5. Reconcile the "none" rollup card's "Unknown Buckets" checklist
"""

import logging
from collections.abc import Mapping, Sequence

from .bucketing.classifier import BucketClassifier
from .bucketing.reconciler import ChecklistReconciler
from .core.models import Board, BoardList, BoardResult, Card, ReconcileResult
from .core.types import (
    FALLBACK_BUCKET,
    OPEN_CARDS_CHECKLIST,
    UNKNOWN_BUCKETS_CHECKLIST,
    WORK_BUCKETS_LIST,
    BucketKey,
)
from .providers.base import BoardService

logger = logging.getLogger(__name__)


class BoardProcessor:
    """Runs the bucket rollup for a single board."""

    def __init__(
        self,
        service: BoardService,
        columns: Sequence[str],
        classifier: BucketClassifier | None = None,
        reconciler: ChecklistReconciler | None = None,
    ):
        """
        Initialize the processor.

        Args:
            service: Board service for all remote calls
            columns: Source column names to scan for tagged cards
            classifier: Optional classifier override
            reconciler: Optional reconciler override
        """
        self.service = service
        self.classifier = classifier or BucketClassifier(service, columns)
        self.reconciler = reconciler or ChecklistReconciler(service)

    def index_lists(self, board: Board) -> dict[str, BoardList]:
        """Fetch the board's lists keyed by lower-cased name."""
        lists: dict[str, BoardList] = {}
        for board_list in self.service.fetch_lists(board):
            lists[board_list.name.lower()] = board_list
        return lists

    def get_rollup_cards(self, lists_by_name: Mapping[str, BoardList]) -> dict[BucketKey, Card]:
        """
        Fetch the rollup cards keyed by lower-cased title.

        A board without a "Work Buckets" list simply has no rollup cards.
        """
        work_buckets = lists_by_name.get(WORK_BUCKETS_LIST)
        if work_buckets is None:
            logger.debug("No 'Work Buckets' list on board")
            return {}

        rollup_cards: dict[BucketKey, Card] = {}
        for card in self.service.fetch_cards(work_buckets):
            rollup_cards[card.name.lower()] = card
        return rollup_cards

    @staticmethod
    def find_unknown_buckets(
        buckets: Mapping[BucketKey, list[Card]],
        rollup_cards: Mapping[BucketKey, Card],
    ) -> list[BucketKey]:
        """Buckets that have members but no rollup card."""
        return [bucket for bucket in buckets if bucket not in rollup_cards]

    def process_board(self, board: Board) -> BoardResult:
        """
        Reconcile every rollup checklist on a board.

        Raises:
            DataSourceError: On the first remote failure; the board is left
                as far as it got.
        """
        logger.info(f"Processing board '{board.name or board.id}'")

        lists_by_name = self.index_lists(board)
        rollup_cards = self.get_rollup_cards(lists_by_name)
        buckets = self.classifier.classify(lists_by_name, rollup_cards)

        reconciliations: list[ReconcileResult] = []
        for bucket, rollup_card in rollup_cards.items():
            members = buckets.get(bucket, [])
            reconciliations.append(
                self.reconciler.reconcile(
                    rollup_card,
                    OPEN_CARDS_CHECKLIST,
                    [card.url for card in members],
                )
            )

        unknown = self.find_unknown_buckets(buckets, rollup_cards)
        fallback_card = rollup_cards.get(FALLBACK_BUCKET)
        if fallback_card is not None:
            reconciliations.append(
                self.reconciler.reconcile(fallback_card, UNKNOWN_BUCKETS_CHECKLIST, unknown)
            )
        elif unknown:
            logger.debug(f"No 'None' rollup card; unknown buckets not recorded: {unknown}")

        result = BoardResult(
            board_id=board.id,
            board_name=board.name,
            buckets={bucket: len(members) for bucket, members in buckets.items()},
            unknown_buckets=unknown,
            reconciliations=reconciliations,
        )
        logger.info(
            f"Board '{board.name or board.id}': {len(buckets)} buckets, "
            f"{result.mutation_count} changes"
        )
        return result
