import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from leitner.application.config import AppConfig, resolve_config
from leitner.application.practice_service import PracticeService
from leitner.consts import VERSION
from leitner.domain.constants import RETIRED_BUCKET
from leitner.domain.errors import CardNotFoundError, InvariantViolationError
from leitner.domain.models import AnswerDifficulty, Flashcard, ReviewRecord

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("leitner.server")


class ApiModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase in JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class CardModel(ApiModel):
    front: str
    back: str
    hint: str | None = None
    tags: list[str] = []

    @classmethod
    def from_card(cls, card: Flashcard) -> "CardModel":
        return cls(front=card.front, back=card.back, hint=card.hint, tags=sorted(card.tags))


class PracticeSessionResponse(ApiModel):
    cards: list[CardModel]
    day: int
    retired: bool


class UpdateRequest(ApiModel):
    card_front: str
    card_back: str
    difficulty: AnswerDifficulty


class UpdateResponse(ApiModel):
    message: str
    previous_bucket: int
    new_bucket: int  # RETIRED_BUCKET when the card left the active buckets


class HintResponse(ApiModel):
    hint: str


class ProgressResponse(ApiModel):
    total_flashcards: int
    bucket_distribution: dict[int, int]
    accuracy_rate: float
    reviews_per_bucket: dict[int, int]


class DayResponse(ApiModel):
    message: str
    new_day: int


class ReviewRecordResponse(ApiModel):
    card_front: str
    card_back: str
    difficulty: AnswerDifficulty
    previous_bucket: int
    new_bucket: int
    timestamp: int

    @classmethod
    def from_record(cls, record: ReviewRecord) -> "ReviewRecordResponse":
        return cls(
            card_front=record.card.front,
            card_back=record.card.back,
            difficulty=record.difficulty,
            previous_bucket=record.previous_bucket,
            new_bucket=RETIRED_BUCKET if record.new_bucket is None else record.new_bucket,
            timestamp=record.timestamp,
        )


def get_service(request: Request) -> PracticeService:
    return request.app.state.practice


def create_app(
    config: AppConfig | None = None, service: PracticeService | None = None
) -> FastAPI:
    """
    Build the API application.

    The practice state lives on `app.state.practice`; pass `service` to share
    an existing one (tests do this), otherwise one is built from `config`.
    """
    config = config or resolve_config()
    start_time = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Leitner Server v{VERSION} starting up...")
        yield
        logger.info("Leitner Server shutting down...")

    application = FastAPI(
        title="Leitner Server",
        description="Leitner-box spaced repetition scheduler.",
        version=VERSION,
        lifespan=lifespan,
    )
    application.state.practice = service or PracticeService.from_config(config)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Invalid request for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"detail": f"Invalid request: {exc.errors()}"},
        )

    @application.get("/health", response_model=HealthResponse)
    async def health_check():
        """
        Simple health check to verify server is reachable.
        """
        return HealthResponse(
            status="ok", version=VERSION, uptime_seconds=time.time() - start_time
        )

    @application.get("/version")
    async def get_version():
        return {"version": VERSION}

    @application.get("/api/practice", response_model=PracticeSessionResponse)
    async def practice(service: PracticeService = Depends(get_service)):
        """Cards scheduled for the current day."""
        try:
            session = service.practice_session()
        except Exception as e:
            logger.error(f"Practice session retrieval failed: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=str(e)) from e

        return PracticeSessionResponse(
            cards=[CardModel.from_card(c) for c in session.cards],
            day=session.day,
            retired=session.retired,
        )

    @application.post("/api/update", response_model=UpdateResponse)
    async def update(req: UpdateRequest, service: PracticeService = Depends(get_service)):
        """Move a card after a practice trial and record the review."""
        if not req.card_front.strip() or not req.card_back.strip():
            raise HTTPException(
                status_code=400, detail="cardFront and cardBack must be non-empty."
            )

        try:
            record = service.submit_review(req.card_front, req.card_back, req.difficulty)
        except CardNotFoundError as e:
            logger.error(str(e))
            raise HTTPException(status_code=404, detail="Flashcard not found.") from e
        except InvariantViolationError as e:
            logger.error(f"Bucket bookkeeping is inconsistent: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal error: {e}") from e

        return UpdateResponse(
            message="Card updated successfully.",
            previous_bucket=record.previous_bucket,
            new_bucket=RETIRED_BUCKET if record.new_bucket is None else record.new_bucket,
        )

    @application.get("/api/hint", response_model=HintResponse)
    async def hint(
        card_front: str = Query(alias="cardFront"),
        card_back: str = Query(alias="cardBack"),
        service: PracticeService = Depends(get_service),
    ):
        if not card_front.strip() or not card_back.strip():
            raise HTTPException(
                status_code=400, detail="cardFront and cardBack must be non-empty."
            )
        try:
            return HintResponse(hint=service.hint(card_front, card_back))
        except CardNotFoundError as e:
            logger.error(str(e))
            raise HTTPException(status_code=404, detail="Flashcard not found.") from e

    @application.get("/api/progress", response_model=ProgressResponse)
    async def progress(service: PracticeService = Depends(get_service)):
        """Learning progress statistics."""
        try:
            stats = service.progress()
        except Exception as e:
            logger.error(f"Progress calculation failed: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"Progress stats calculated: {stats}")
        return ProgressResponse(
            total_flashcards=stats.total_flashcards,
            bucket_distribution=stats.bucket_distribution,
            accuracy_rate=stats.accuracy_rate,
            reviews_per_bucket=stats.reviews_per_bucket,
        )

    @application.get("/api/history", response_model=list[ReviewRecordResponse])
    async def history(service: PracticeService = Depends(get_service)):
        return [ReviewRecordResponse.from_record(r) for r in service.history()]

    @application.post("/api/day/next", response_model=DayResponse)
    async def next_day(service: PracticeService = Depends(get_service)):
        """Advance the current learning day by one."""
        new_day = service.advance_day()
        return DayResponse(message="Day advanced successfully.", new_day=new_day)

    return application

