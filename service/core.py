"""
Core orchestration that binds the token issuer, the admission gate and the
question bank. The web layer only translates results into HTTP responses.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Union

from dataset import QuestionBank, QuestionRecord, UnknownTitleError
from service.admission import AdmissionGate, Rejected
from service.tokens import IssuedToken, TimestampTokenCodec, TokenIssuer


@dataclass
class PublicItem:
    item_id: str
    question: str
    answers: List[str]
    answer_token: str
    # None when the deployment hides answers.
    correct_index: Optional[int]


@dataclass
class TriviaResult:
    title: str
    items: List[PublicItem]

    @property
    def count(self) -> int:
        return len(self.items)


def _public_item(rec: QuestionRecord, expose_correct_index: bool) -> PublicItem:
    return PublicItem(
        item_id=rec.item_id,
        question=rec.prompt,
        answers=list(rec.choices),
        answer_token=rec.answer_token,
        correct_index=rec.correct_index if expose_correct_index else None,
    )


class TriviaService:
    def __init__(
        self,
        issuer: TokenIssuer,
        gate: AdmissionGate,
        bank: QuestionBank,
        expose_correct_index: bool = True,
    ) -> None:
        self._issuer = issuer
        self._gate = gate
        self._bank = bank
        self._expose_correct_index = expose_correct_index

    @classmethod
    def from_settings(cls, settings) -> "TriviaService":
        codec = TimestampTokenCodec()
        return cls(
            issuer=TokenIssuer(codec),
            gate=AdmissionGate(codec, window_ms=settings.token_window_ms),
            bank=QuestionBank(settings.dataset_dir).load(),
            expose_correct_index=settings.expose_correct_index,
        )

    @property
    def bank(self) -> QuestionBank:
        return self._bank

    def issue_token(self, now_ms: int) -> IssuedToken:
        return self._issuer.issue(now_ms)

    def token_json(self, token: IssuedToken) -> Union[int, str]:
        return self._issuer.codec.to_json(token.value)

    def fetch_trivia(
        self,
        quiz_token: Optional[str],
        title: Optional[str],
        now_ms: int,
    ) -> Union[TriviaResult, Rejected]:
        """
        Admit the request, then look up the question set.

        Returns the Rejected verdict as-is so callers can report its reason.
        Raises UnknownTitleError for an admitted request naming no known set.
        """
        verdict = self._gate.admit(quiz_token, title, now_ms)
        if isinstance(verdict, Rejected):
            return verdict

        qs = self._bank.get_question_set(title)
        items = [_public_item(rec, self._expose_correct_index) for rec in qs.items]
        return TriviaResult(title=qs.title, items=items)


__all__ = ["PublicItem", "TriviaResult", "TriviaService", "UnknownTitleError"]
