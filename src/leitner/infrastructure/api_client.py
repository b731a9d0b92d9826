"""HTTP client for a running leitner server."""

import logging
from typing import Any

import httpx

from leitner.domain.constants import REQUEST_TIMEOUT, RESPONSIVENESS_TIMEOUT
from leitner.domain.models import AnswerDifficulty, Flashcard, PracticeSession, ProgressStats

logger = logging.getLogger(__name__)


class LeitnerApiError(Exception):
    """Raised when the server is unreachable or answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class LeitnerClient:
    """Synchronous client for the /api endpoints. Usable as a context manager."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:3001",
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "LeitnerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def is_responsive(self) -> bool:
        """Check if the server answers its health endpoint."""
        try:
            resp = self._client.get("/health", timeout=RESPONSIVENESS_TIMEOUT)
            return resp.status_code == 200 and resp.json().get("status") == "ok"
        except httpx.HTTPError:
            return False

    def fetch_practice_cards(self) -> PracticeSession:
        data = self._request("GET", "/api/practice")
        return PracticeSession(
            cards=[_card_from_json(c) for c in data["cards"]],
            day=data["day"],
            retired=data.get("retired", False),
        )

    def submit_answer(
        self, card_front: str, card_back: str, difficulty: AnswerDifficulty
    ) -> dict[str, Any]:
        """Report a review outcome. Returns the server's response (with bucket move)."""
        payload = {
            "cardFront": card_front,
            "cardBack": card_back,
            "difficulty": int(difficulty),
        }
        return self._request("POST", "/api/update", json=payload)

    def fetch_hint(self, card_front: str, card_back: str) -> str:
        data = self._request(
            "GET", "/api/hint", params={"cardFront": card_front, "cardBack": card_back}
        )
        return data["hint"]

    def fetch_progress(self) -> ProgressStats:
        data = self._request("GET", "/api/progress")
        return ProgressStats(
            total_flashcards=data["totalFlashcards"],
            bucket_distribution=_int_keys(data["bucketDistribution"]),
            accuracy_rate=data["accuracyRate"],
            reviews_per_bucket=_int_keys(data["reviewsPerBucket"]),
        )

    def advance_day(self) -> int:
        data = self._request("POST", "/api/day/next")
        return data["newDay"]

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise LeitnerApiError(f"Could not reach leitner server at {self.base_url}: {e}") from e

        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = None
            detail = body.get("detail", resp.text) if isinstance(body, dict) else resp.text
            logger.error(f"{method} {path} returned {resp.status_code}: {detail}")
            raise LeitnerApiError(str(detail), status_code=resp.status_code)

        return resp.json()


def _card_from_json(data: dict[str, Any]) -> Flashcard:
    return Flashcard(
        front=data["front"],
        back=data["back"],
        hint=data.get("hint"),
        tags=frozenset(data.get("tags") or []),
    )


def _int_keys(data: dict[str, int]) -> dict[int, int]:
    # JSON object keys are always strings
    return {int(k): v for k, v in data.items()}
