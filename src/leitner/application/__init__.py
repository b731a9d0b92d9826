# Application Package
from .bucket_store import BucketStore
from .practice_service import PracticeService
from .progress import compute_progress
from .scheduler import advance_card, get_hint, is_retired, select_due

__all__ = [
    "BucketStore",
    "PracticeService",
    "advance_card",
    "compute_progress",
    "get_hint",
    "is_retired",
    "select_due",
]
