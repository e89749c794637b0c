"""
Pydantic models for the trivia API.

Every body is wrapped as {"data": ..., "meta": {}} except faults and
unmatched routes, which keep their flat error shape.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


# ---- Token issue ----

class SignedTokenData(BaseModel):
    signed_token: Union[int, str]                 # issuance time in ms for the timestamp codec


class SignedTokenResponse(BaseModel):
    data: SignedTokenData
    meta: Dict[str, Any] = Field(default_factory=dict)


# ---- Trivia ----

class QuestionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    question: str
    answers: List[str]                            # Option texts in label order A..D
    answer_token: str = Field(alias="answerToken")
    correct_index: Optional[int] = Field(default=None, alias="correctIndex")


class TriviaData(BaseModel):
    count: int
    items: List[QuestionPayload]


class TriviaResponse(BaseModel):
    data: TriviaData
    meta: Dict[str, Any] = Field(default_factory=dict)


# ---- Rejections / errors ----

class RejectionData(BaseModel):
    messages: str
    code: str


class RejectionResponse(BaseModel):
    data: RejectionData
    meta: Dict[str, Any] = Field(default_factory=dict)


class FaultResponse(BaseModel):
    error: str
    details: Optional[str] = None
