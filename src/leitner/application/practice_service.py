"""
Practice Service — Application layer orchestrator.

Owns the mutable state of a practice run (bucket store, day counter, review
history) and funnels every read-compute-write sequence through one lock.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable

from leitner.application.bucket_store import BucketStore
from leitner.application.config import AppConfig
from leitner.application.deck import default_deck, load_deck
from leitner.application.history import ReviewHistory
from leitner.application.progress import compute_progress
from leitner.application.scheduler import (
    advance_card,
    find_card_bucket,
    get_hint,
    is_retired,
    select_due,
)
from leitner.domain.constants import MAX_ACTIVE_BUCKET
from leitner.domain.errors import CardNotFoundError
from leitner.domain.models import (
    AnswerDifficulty,
    Flashcard,
    PracticeSession,
    ProgressStats,
    ReviewRecord,
)

logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class PracticeService:
    """
    Single coordinating owner of the scheduler state.

    The scheduler and progress functions are pure; this class supplies them
    with snapshots and writes results back. A review submission (read buckets,
    compute the move, store the new buckets, append the history record) runs
    as one critical section so the history never disagrees with the buckets.
    """

    def __init__(
        self,
        cards: Iterable[Flashcard],
        store: BucketStore | None = None,
        history: ReviewHistory | None = None,
        max_active_bucket: int = MAX_ACTIVE_BUCKET,
        clock: Callable[[], int] = _epoch_millis,
    ):
        """
        Args:
            cards: Every card known to the system. Looked up by (front, back).
            store: Optional pre-populated store; defaults to all cards in bucket 0.
            history: Optional existing history.
            max_active_bucket: Highest bucket before a card retires.
            clock: Returns the review timestamp in epoch milliseconds.
        """
        self._cards: dict[tuple[str, str], Flashcard] = {}
        for card in cards:
            self._cards.setdefault((card.front, card.back), card)

        self._store = store if store is not None else BucketStore.with_cards(self._cards.values())
        self._history = history if history is not None else ReviewHistory()
        self._max_active_bucket = max_active_bucket
        self._clock = clock
        self._lock = threading.RLock()

        logger.info(
            f"Initial state loaded. {len(self._cards)} cards, current day: {self._store.get_day()}"
        )

    @classmethod
    def from_config(cls, config: AppConfig) -> "PracticeService":
        """Build a service from the deck configured in `config` (or the sample deck)."""
        cards = load_deck(config.deck_file) if config.deck_file else default_deck()
        return cls(cards, max_active_bucket=config.max_active_bucket)

    @property
    def store(self) -> BucketStore:
        return self._store

    @property
    def day(self) -> int:
        return self._store.get_day()

    def cards(self) -> list[Flashcard]:
        return list(self._cards.values())

    def find_card(self, front: str, back: str) -> Flashcard:
        card = self._cards.get((front, back))
        if card is None:
            raise CardNotFoundError(front, back)
        return card

    def practice_session(self) -> PracticeSession:
        """Cards due today, with a flag telling whether every active bucket is empty."""
        with self._lock:
            day = self._store.get_day()
            buckets = self._store.get_buckets()

        retired = is_retired(buckets, self._max_active_bucket)
        due = select_due(buckets, day)
        # Stable order for clients: by bucket, then by front text
        ordered = sorted(due, key=lambda c: (find_card_bucket(buckets, c), c.front, c.back))
        logger.info(f"Practice session for day {day}. Found {len(ordered)} cards.")
        return PracticeSession(cards=ordered, day=day, retired=retired)

    def submit_review(
        self, front: str, back: str, difficulty: AnswerDifficulty
    ) -> ReviewRecord:
        """
        Apply a review outcome to a card and record it.

        Raises:
            CardNotFoundError: No card with this identity.
            InvariantViolationError: The card is known but sits in no bucket.
        """
        card = self.find_card(front, back)

        with self._lock:
            transition = advance_card(
                self._store.get_buckets(), card, difficulty, self._max_active_bucket
            )
            self._store.set_buckets(transition.buckets)
            record = ReviewRecord(
                card=card,
                difficulty=difficulty,
                previous_bucket=transition.previous_bucket,
                new_bucket=transition.new_bucket,
                timestamp=self._clock(),
            )
            self._history.append(record)

        if record.retired:
            logger.warning(
                f"Card '{card.front}' retired after {difficulty.name} from bucket "
                f"{record.previous_bucket}"
            )
        else:
            logger.info(
                f"Updated card '{card.front}'. Difficulty: {difficulty.name}. "
                f"Moved from bucket {record.previous_bucket} to {record.new_bucket}."
            )
        return record

    def hint(self, front: str, back: str) -> str:
        card = self.find_card(front, back)
        hint = get_hint(card)
        logger.info(f"Hint requested for card '{card.front}'")
        return hint

    def advance_day(self) -> int:
        with self._lock:
            return self._store.advance_day()

    def progress(self) -> ProgressStats:
        with self._lock:
            buckets = self._store.get_buckets()
            history = self._history.snapshot()
        return compute_progress(buckets, history)

    def history(self) -> tuple[ReviewRecord, ...]:
        with self._lock:
            return self._history.snapshot()

