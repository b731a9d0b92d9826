from leitner.application.progress import compute_progress
from leitner.domain.models import AnswerDifficulty, Flashcard, ReviewRecord


def _record(difficulty, previous_bucket=0, new_bucket=0):
    return ReviewRecord(
        card=Flashcard("Q", "A"),
        difficulty=difficulty,
        previous_bucket=previous_bucket,
        new_bucket=new_bucket,
        timestamp=0,
    )


def test_empty_inputs():
    stats = compute_progress({}, [])

    assert stats.total_flashcards == 0
    assert stats.bucket_distribution == {}
    assert stats.accuracy_rate == 0.0
    assert stats.reviews_per_bucket == {}


def test_accuracy_counts_hard_and_easy_as_correct():
    history = [
        _record(AnswerDifficulty.WRONG),
        _record(AnswerDifficulty.EASY),
        _record(AnswerDifficulty.HARD),
        _record(AnswerDifficulty.WRONG),
    ]
    assert compute_progress({}, history).accuracy_rate == 0.5


def test_totals_and_distribution_from_current_buckets(capital, water, prime):
    buckets = {0: frozenset({capital, water}), 1: frozenset(), 3: frozenset({prime})}

    stats = compute_progress(buckets, [])

    assert stats.total_flashcards == 3
    assert stats.bucket_distribution == {0: 2, 1: 0, 3: 1}


def test_reviews_per_bucket_counts_source_bucket(capital, water, prime):
    buckets = {0: frozenset({capital}), 1: frozenset({water}), 2: frozenset({prime})}
    history = [
        _record(AnswerDifficulty.EASY, previous_bucket=0, new_bucket=1),
        _record(AnswerDifficulty.WRONG, previous_bucket=0, new_bucket=0),
        _record(AnswerDifficulty.HARD, previous_bucket=2, new_bucket=1),
    ]

    stats = compute_progress(buckets, history)

    assert stats.reviews_per_bucket == {0: 2, 1: 0, 2: 1}


def test_reviews_from_buckets_no_longer_present(capital):
    # Card was reviewed out of bucket 4 and retired; bucket 4 is not in the snapshot
    history = [_record(AnswerDifficulty.EASY, previous_bucket=4, new_bucket=None)]

    stats = compute_progress({0: frozenset({capital})}, history)

    assert stats.reviews_per_bucket == {0: 0, 4: 1}
    assert stats.total_flashcards == 1


def test_inputs_are_not_modified(capital):
    buckets = {0: frozenset({capital})}
    history = [_record(AnswerDifficulty.EASY)]

    compute_progress(buckets, history)

    assert buckets == {0: frozenset({capital})}
    assert len(history) == 1


def test_accepts_any_iterable_history():
    records = (_record(d) for d in [AnswerDifficulty.EASY, AnswerDifficulty.WRONG])
    assert compute_progress({}, records).accuracy_rate == 0.5
