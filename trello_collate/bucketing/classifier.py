"""Bucket classification - groups source-column cards by their tags.

Every tag on a card creates (or extends) a bucket, whether or not a rollup
card exists for it, so buckets without a rollup card can be reported later.
A card none of whose tags has a rollup card also lands in the fallback
bucket. Bucket keys are lower-cased; display casing is not preserved.
"""

import logging
from collections.abc import Mapping, Sequence

from ..core.models import BoardList, Card
from ..core.types import FALLBACK_BUCKET, BucketKey
from ..providers.base import BoardService
from .tags import TagExtractor

logger = logging.getLogger(__name__)


class BucketClassifier:
    """Partitions cards from the configured source columns into buckets."""

    def __init__(
        self,
        service: BoardService,
        columns: Sequence[str],
        extractor: TagExtractor | None = None,
    ):
        """
        Initialize classifier.

        Args:
            service: Board service used to fetch column cards
            columns: Source column names, scanned in this order
            extractor: Tag extractor (default: bracket tags)
        """
        self.service = service
        self.columns = list(columns)
        self.extractor = extractor or TagExtractor()

    def classify(
        self,
        lists_by_name: Mapping[str, BoardList],
        rollup_cards: Mapping[BucketKey, Card],
    ) -> dict[BucketKey, list[Card]]:
        """
        Fetch the source columns and assign their cards to buckets.

        Args:
            lists_by_name: Board lists keyed by lower-cased name
            rollup_cards: Rollup cards keyed by bucket

        Returns:
            Bucket -> member cards, in discovery order
        """
        buckets: dict[BucketKey, list[Card]] = {}

        for column in self.columns:
            board_list = lists_by_name.get(column.lower())
            if board_list is None:
                logger.debug(f"Column '{column}' not on board, skipping")
                continue

            for card in self.service.fetch_cards(board_list):
                self.assign(card, rollup_cards, buckets)

        return buckets

    def assign(
        self,
        card: Card,
        rollup_cards: Mapping[BucketKey, Card],
        buckets: dict[BucketKey, list[Card]],
    ) -> list[BucketKey]:
        """
        Add one card to every bucket it belongs to.

        Returns:
            The buckets the card was added to
        """
        tags = self.extractor.extract(card.name)
        targets = list(tags)
        if not any(tag in rollup_cards for tag in tags):
            targets.append(FALLBACK_BUCKET)

        added = []
        for bucket in targets:
            members = buckets.setdefault(bucket, [])
            # "[none]" on a card with no rollup match would otherwise add it twice
            if any(member.id == card.id for member in members):
                continue
            members.append(card)
            added.append(bucket)
        return added
