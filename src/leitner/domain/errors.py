"""Exceptions raised by the scheduling core and its service layer."""


class InvariantViolationError(RuntimeError):
    """
    Internal-consistency fault.

    Raised when the bucket bookkeeping contradicts itself, e.g. a review is
    submitted for a card that sits in no bucket, or a card appears in two
    buckets at once. Signals a bug in the caller, never retried.
    """


class CardNotFoundError(LookupError):
    """No card with the given (front, back) identity exists."""

    def __init__(self, front: str, back: str):
        super().__init__(f"Flashcard not found: {front!r} / {back!r}")
        self.front = front
        self.back = back


class DeckFormatError(ValueError):
    """A deck file could not be turned into flashcards."""
