"""
Domain models for the Leitner scheduler.

These are pure data structures with no I/O or external dependencies.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum


class AnswerDifficulty(IntEnum):
    """Outcome of a single review. Values match the HTTP wire format."""

    WRONG = 0
    HARD = 1
    EASY = 2

    @property
    def is_correct(self) -> bool:
        # Hard still counts as recalled
        return self is not AnswerDifficulty.WRONG

    @classmethod
    def from_name(cls, name: str) -> "AnswerDifficulty":
        """Parse 'wrong' / 'hard' / 'easy' (case-insensitive) or a numeric string."""
        key = name.strip()
        if key.isdigit():
            return cls(int(key))
        try:
            return cls[key.upper()]
        except KeyError:
            valid = ", ".join(d.name.lower() for d in cls)
            raise ValueError(f"Unknown difficulty '{name}'. Expected one of: {valid}") from None


@dataclass(frozen=True)
class Flashcard:
    """
    A single flashcard.

    Identity is structural: two cards with the same front and back are the
    same card. Hint and tags are carried along but take no part in equality
    or hashing.

    Attributes:
        front: Prompt side.
        back: Answer side.
        hint: Optional author-supplied hint.
        tags: Unordered set of tag strings.
    """

    front: str
    back: str
    hint: str | None = field(default=None, compare=False)
    tags: frozenset[str] = field(default_factory=frozenset, compare=False)

    def __post_init__(self):
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))


# Bucket index -> cards currently in that bucket. Unlisted indices are empty.
BucketMap = Mapping[int, frozenset[Flashcard]]


@dataclass(frozen=True)
class ReviewRecord:
    """
    One entry of the review history.

    Attributes:
        card: The card that was reviewed.
        difficulty: Outcome reported by the learner.
        previous_bucket: Bucket the card occupied before the review.
        new_bucket: Bucket after the review, None if the card retired.
        timestamp: Epoch milliseconds of the review.
    """

    card: Flashcard
    difficulty: AnswerDifficulty
    previous_bucket: int
    new_bucket: int | None
    timestamp: int

    @property
    def retired(self) -> bool:
        return self.new_bucket is None


@dataclass(frozen=True)
class ProgressStats:
    """
    Summary statistics derived from the current buckets and the full history.

    Attributes:
        total_flashcards: Cards currently in any bucket (retired cards excluded).
        bucket_distribution: Bucket index -> current card count.
        accuracy_rate: Share of reviews answered hard or easy, 0.0 with no history.
        reviews_per_bucket: Bucket index -> reviews taken from that bucket.
    """

    total_flashcards: int
    bucket_distribution: dict[int, int]
    accuracy_rate: float
    reviews_per_bucket: dict[int, int]


@dataclass(frozen=True)
class PracticeSession:
    """Cards due on a given day, plus whether every active bucket is empty."""

    cards: list[Flashcard]
    day: int
    retired: bool = False
