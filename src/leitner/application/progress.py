"""
Progress aggregation over the current buckets and the review history.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable

from leitner.domain.models import BucketMap, ProgressStats, ReviewRecord


def compute_progress(buckets: BucketMap, history: Iterable[ReviewRecord]) -> ProgressStats:
    """
    Compute learning progress statistics.

    Args:
        buckets: Current bucket snapshot.
        history: Every review recorded so far, in order.

    Returns:
        ProgressStats where:
        - total_flashcards counts cards currently in a bucket,
        - bucket_distribution lists every bucket index in the snapshot (empty ones as 0),
        - accuracy_rate is the share of hard/easy answers (0.0 for no history),
        - reviews_per_bucket counts reviews by the bucket the card was taken from.
    """
    bucket_distribution: dict[int, int] = {}
    reviews_per_bucket: dict[int, int] = {}
    total_flashcards = 0

    for index in sorted(buckets):
        count = len(buckets[index])
        bucket_distribution[index] = count
        reviews_per_bucket[index] = 0
        total_flashcards += count

    reviewed = 0
    correct = 0
    for record in history:
        reviewed += 1
        source = record.previous_bucket
        reviews_per_bucket[source] = reviews_per_bucket.get(source, 0) + 1
        if record.difficulty.is_correct:
            correct += 1

    accuracy_rate = correct / reviewed if reviewed else 0.0

    return ProgressStats(
        total_flashcards=total_flashcards,
        bucket_distribution=bucket_distribution,
        accuracy_rate=accuracy_rate,
        reviews_per_bucket=reviews_per_bucket,
    )
