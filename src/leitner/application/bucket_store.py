"""In-memory bucket store: which cards sit in which bucket, and the current day."""

import logging
import threading
from collections.abc import Iterable

from leitner.application.scheduler import find_card_bucket
from leitner.domain.errors import InvariantViolationError
from leitner.domain.models import BucketMap, Flashcard

logger = logging.getLogger(__name__)


class BucketStore:
    """
    Authoritative bucket assignment plus the day counter.

    Holds no scheduling logic. Snapshots handed out are frozen sets inside a
    fresh dict, so callers can never edit the stored state in place.
    """

    def __init__(self, buckets: BucketMap | None = None, day: int = 0):
        if day < 0:
            raise ValueError(f"day must be non-negative, got {day}")
        self._lock = threading.Lock()
        self._buckets: dict[int, frozenset[Flashcard]] = {}
        self._day = day
        if buckets:
            self.set_buckets(buckets)

    @classmethod
    def with_cards(cls, cards: Iterable[Flashcard]) -> "BucketStore":
        """Create a store with every card in bucket 0 on day 0."""
        return cls({0: frozenset(cards)})

    def get_buckets(self) -> dict[int, frozenset[Flashcard]]:
        with self._lock:
            return dict(self._buckets)

    def set_buckets(self, new: BucketMap) -> None:
        """
        Replace the whole assignment.

        Raises:
            InvariantViolationError: If a bucket index is negative or a card
                appears in more than one bucket.
        """
        frozen = {index: frozenset(cards) for index, cards in new.items()}
        _check_one_bucket_per_card(frozen)
        with self._lock:
            self._buckets = frozen

    def get_day(self) -> int:
        with self._lock:
            return self._day

    def advance_day(self) -> int:
        with self._lock:
            self._day += 1
            day = self._day
        logger.info(f"Advanced to day {day}")
        return day

    def find_card_bucket(self, card: Flashcard) -> int | None:
        return find_card_bucket(self.get_buckets(), card)


def _check_one_bucket_per_card(buckets: dict[int, frozenset[Flashcard]]) -> None:
    seen: dict[Flashcard, int] = {}
    for index in sorted(buckets):
        if index < 0:
            raise InvariantViolationError(f"Bucket index must be non-negative, got {index}")
        for card in buckets[index]:
            if card in seen:
                raise InvariantViolationError(
                    f"Card '{card.front}' is in buckets {seen[card]} and {index}"
                )
            seen[card] = index
