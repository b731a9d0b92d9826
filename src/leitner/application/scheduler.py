"""
Leitner scheduling rules.

Pure functions over a bucket snapshot: which cards are due on a given day,
where a card moves after a review, and a couple of views of the bucket
layout. Nothing here mutates its arguments; every transition builds a new
mapping so the previous snapshot stays valid for history bookkeeping.
"""

import logging
from dataclasses import dataclass

from leitner.domain.constants import MAX_ACTIVE_BUCKET, NO_HINT_MESSAGE
from leitner.domain.errors import InvariantViolationError
from leitner.domain.models import AnswerDifficulty, BucketMap, Flashcard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BucketTransition:
    """Result of moving one card after a review."""

    buckets: dict[int, frozenset[Flashcard]]
    previous_bucket: int
    new_bucket: int | None  # None when the card retired


@dataclass(frozen=True)
class BucketRange:
    """Lowest and highest non-empty bucket, a rough measure of progress."""

    min_bucket: int
    max_bucket: int


def to_bucket_sets(buckets: BucketMap) -> list[frozenset[Flashcard]]:
    """
    Convert a bucket mapping into a dense list where element i is bucket i.

    Indices missing from the mapping become empty sets.
    """
    if not buckets:
        return []

    result: list[frozenset[Flashcard]] = [frozenset()] * (max(buckets) + 1)
    for index, cards in buckets.items():
        result[index] = frozenset(cards)
    return result


def get_bucket_range(bucket_sets: list[frozenset[Flashcard]]) -> BucketRange | None:
    """Return the range of non-empty buckets, or None if every bucket is empty."""
    populated = [i for i, cards in enumerate(bucket_sets) if cards]
    if not populated:
        return None
    return BucketRange(min_bucket=populated[0], max_bucket=populated[-1])


def find_card_bucket(buckets: BucketMap, card: Flashcard) -> int | None:
    """Return the index of the bucket holding `card`, or None if retired/unknown."""
    for index in sorted(buckets):
        if card in buckets[index]:
            return index
    return None


def select_due(buckets: BucketMap, day: int) -> set[Flashcard]:
    """
    Select the cards to practice on `day`.

    Bucket i is due whenever day is a multiple of 2**i, so bucket 0 comes up
    every day, bucket 1 every other day, bucket 2 every fourth day and so on.
    """
    if day < 0:
        raise ValueError(f"day must be non-negative, got {day}")

    due: set[Flashcard] = set()
    for index, cards in buckets.items():
        if day % (2**index) == 0:
            due.update(cards)
    return due


def is_retired(buckets: BucketMap, max_active_bucket: int = MAX_ACTIVE_BUCKET) -> bool:
    """True when every active bucket (0..max_active_bucket) is empty."""
    return all(not buckets.get(i) for i in range(max_active_bucket + 1))


def next_bucket(current: int, difficulty: AnswerDifficulty) -> int:
    """Target bucket for a card in `current` after a review with `difficulty`."""
    if difficulty is AnswerDifficulty.WRONG:
        return 0
    if difficulty is AnswerDifficulty.HARD:
        return max(0, current - 1)
    return current + 1


def advance_card(
    buckets: BucketMap,
    card: Flashcard,
    difficulty: AnswerDifficulty,
    max_active_bucket: int = MAX_ACTIVE_BUCKET,
) -> BucketTransition:
    """
    Move `card` according to the review outcome.

    Returns a new mapping together with the buckets the card moved between.
    A card promoted past `max_active_bucket` is dropped from every bucket.

    Raises:
        InvariantViolationError: If the card is not in any bucket.
    """
    current = find_card_bucket(buckets, card)
    if current is None:
        raise InvariantViolationError(
            f"Card '{card.front}' is not in any bucket; cannot apply a review to it."
        )

    updated: dict[int, frozenset[Flashcard]] = {
        index: frozenset(cards) for index, cards in buckets.items()
    }
    updated[current] = updated[current] - {card}

    target = next_bucket(current, difficulty)
    if target > max_active_bucket:
        logger.debug(f"Card '{card.front}' retired from bucket {current}")
        return BucketTransition(buckets=updated, previous_bucket=current, new_bucket=None)

    updated[target] = updated.get(target, frozenset()) | {card}
    return BucketTransition(buckets=updated, previous_bucket=current, new_bucket=target)


def get_hint(card: Flashcard) -> str:
    """Return the card's authored hint, or a fixed fallback when it has none."""
    if card.hint:
        return card.hint
    return NO_HINT_MESSAGE
