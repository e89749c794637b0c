"""
Admission gate for the trivia endpoint.

Checks run in a fixed order and stop at the first failure:
1. the title parameter must be present and non-blank
2. the token must be present, decodable, and still inside the window

A token is fresh while `issued_at + window_ms >= now`, so the boundary
instant itself is still admitted. Rejections are ordinary return values.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from service.tokens import MalformedTokenError, TokenCodec

log = logging.getLogger("trivia.admission")

DEFAULT_WINDOW_MS = 60_000


class RejectionReason(str, Enum):
    MISSING_TITLE = "missing_title"
    MISSING_TOKEN = "missing_token"
    MALFORMED_TOKEN = "malformed_token"
    TOKEN_EXPIRED = "token_expired"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    RejectionReason.MISSING_TITLE: "Title is required in query string",
    RejectionReason.MISSING_TOKEN: "Authorization Error. Token Missing",
    RejectionReason.MALFORMED_TOKEN: "Authorization Error. Token Invalid",
    RejectionReason.TOKEN_EXPIRED: "Authorization Error. Token Expired",
}


@dataclass(frozen=True)
class Admitted:
    issued_at_ms: int
    admitted = True


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    admitted = False

    @property
    def message(self) -> str:
        return self.reason.message


Verdict = Union[Admitted, Rejected]


class AdmissionGate:
    def __init__(self, codec: TokenCodec, window_ms: int = DEFAULT_WINDOW_MS) -> None:
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        self._codec = codec
        self._window_ms = window_ms

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def admit(self, presented_token: Optional[str], required_parameter: Optional[str], now_ms: int) -> Verdict:
        if not required_parameter or not required_parameter.strip():
            return self._reject(RejectionReason.MISSING_TITLE)

        if not presented_token or not presented_token.strip():
            return self._reject(RejectionReason.MISSING_TOKEN)

        try:
            issued_at = self._codec.decode(presented_token)
        except MalformedTokenError:
            return self._reject(RejectionReason.MALFORMED_TOKEN)

        if issued_at + self._window_ms < now_ms:
            return self._reject(RejectionReason.TOKEN_EXPIRED, age_ms=now_ms - issued_at)

        return Admitted(issued_at_ms=issued_at)

    @staticmethod
    def _reject(reason: RejectionReason, age_ms: Optional[int] = None) -> Rejected:
        if age_ms is None:
            log.info("Admission rejected: %s", reason.value)
        else:
            log.info("Admission rejected: %s (age=%dms)", reason.value, age_ms)
        return Rejected(reason=reason)
