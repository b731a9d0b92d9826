# Domain Package
from .errors import CardNotFoundError, DeckFormatError, InvariantViolationError
from .models import AnswerDifficulty, BucketMap, Flashcard, ProgressStats, ReviewRecord

__all__ = [
    "AnswerDifficulty",
    "BucketMap",
    "CardNotFoundError",
    "DeckFormatError",
    "Flashcard",
    "InvariantViolationError",
    "ProgressStats",
    "ReviewRecord",
]
