"""Append-only review history."""

from collections.abc import Iterator

from leitner.domain.models import ReviewRecord


class ReviewHistory:
    """Ordered log of review records. Records are only ever appended."""

    def __init__(self):
        self._records: list[ReviewRecord] = []

    def append(self, record: ReviewRecord) -> None:
        self._records.append(record)

    def snapshot(self) -> tuple[ReviewRecord, ...]:
        return tuple(self._records)

    def __iter__(self) -> Iterator[ReviewRecord]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._records)
