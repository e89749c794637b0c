"""
FastAPI routes for the trivia service.

We expose:
- POST /api/v1/generate-signed-url   (mint a quiz token)
- GET  /api/v1/generate-trivia       (question set for `title`, gated by header `quiz_token`)

Rejections are 403 bodies, not exceptions. Unexpected faults become
ServiceFault and are rendered as 500 by the handler registered in main.py.
"""
from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import JSONResponse

from schemas import (
    FaultResponse,
    QuestionPayload,
    RejectionData, RejectionResponse,
    SignedTokenData, SignedTokenResponse,
    TriviaData, TriviaResponse,
)
from service.admission import Rejected
from service.core import PublicItem, TriviaService, UnknownTitleError
from service.tokens import now_millis

log = logging.getLogger("trivia.api")

router = APIRouter(tags=["trivia"])

AVAILABLE_ENDPOINTS = {
    "GET /": "API information",
    "POST /api/v1/generate-signed-url": "Generate a quiz access token",
    "GET /api/v1/generate-trivia": "Get trivia questions (header quiz_token, query title)",
}


class ServiceFault(Exception):
    """An unexpected failure while building a response."""

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(message)
        self.message = message
        self.details = str(cause)


def get_service(request: Request) -> TriviaService:
    return request.app.state.trivia


def get_now() -> int:
    return now_millis()


def _map_public_item(p: PublicItem) -> QuestionPayload:
    return QuestionPayload(
        id=p.item_id,
        question=p.question,
        answers=p.answers,
        answer_token=p.answer_token,
        correct_index=p.correct_index,
    )


def _rejection(status_code: int, code: str, message: str) -> JSONResponse:
    body = RejectionResponse(data=RejectionData(messages=message, code=code))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "/generate-signed-url",
    response_model=SignedTokenResponse,
    responses={500: {"model": FaultResponse}},
)
def generate_signed_url(
    service: TriviaService = Depends(get_service),
    now_ms: int = Depends(get_now),
) -> SignedTokenResponse:
    try:
        token = service.issue_token(now_ms)
        body = SignedTokenResponse(data=SignedTokenData(signed_token=service.token_json(token)))
    except Exception as e:
        log.exception("Error generating signed token")
        raise ServiceFault("Failed to generate signed URL", e) from e
    return body


@router.get(
    "/generate-trivia",
    response_model=TriviaResponse,
    response_model_exclude_none=True,
    responses={
        403: {"model": RejectionResponse},
        404: {"model": RejectionResponse},
        500: {"model": FaultResponse},
    },
)
def generate_trivia(
    title: Optional[str] = Query(default=None),
    quiz_token: Optional[str] = Header(default=None, convert_underscores=False),
    service: TriviaService = Depends(get_service),
    now_ms: int = Depends(get_now),
):
    try:
        result = service.fetch_trivia(quiz_token, title, now_ms)
    except UnknownTitleError as e:
        known = ", ".join(e.known) or "none"
        return _rejection(404, "unknown_title", f"Unknown title '{e.title}'. Available titles: {known}")
    except Exception as e:
        log.exception("Error fetching trivia questions")
        raise ServiceFault("Failed to fetch trivia questions", e) from e

    if isinstance(result, Rejected):
        return _rejection(403, result.reason.value, result.message)

    items = [_map_public_item(p) for p in result.items]
    return TriviaResponse(data=TriviaData(count=len(items), items=items))
