"""
Quiz access tokens.

A token stands for "issued at this instant". Nothing is stored server-side:
the value carries its own issuance time, so any instance can redeem a token
minted by any other instance.

The timestamp codec offers no authenticity at all. Anyone who knows the time
can mint a valid token, and a token can be replayed until it goes stale.
Swap in a signing codec behind `TokenCodec` if that matters.
"""
from __future__ import annotations
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Union

Clock = Callable[[], int]

# ASCII digits only; 20 digits covers any millisecond timestamp.
_INTEGER = re.compile(r"[+-]?[0-9]{1,20}")


def now_millis() -> int:
    """Wall-clock time in integer milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


class MalformedTokenError(ValueError):
    """Raised by a codec when a presented value cannot be decoded."""


class TokenCodec(ABC):
    @abstractmethod
    def encode(self, issued_at_ms: int) -> str:
        ...

    @abstractmethod
    def decode(self, raw: str) -> int:
        """Return the issuance time carried by `raw`. Raises MalformedTokenError."""

    def to_json(self, value: str) -> Union[int, str]:
        """Render an encoded token for a JSON response body."""
        return value


class TimestampTokenCodec(TokenCodec):
    """The token is the issuance time itself, as a decimal string."""

    def encode(self, issued_at_ms: int) -> str:
        return str(int(issued_at_ms))

    def decode(self, raw: str) -> int:
        text = raw.strip()
        if not _INTEGER.fullmatch(text):
            raise MalformedTokenError(f"not an integer timestamp: {raw[:32]!r}")
        try:
            return int(text)
        except ValueError as e:
            raise MalformedTokenError(f"not an integer timestamp: {raw[:32]!r}") from e

    def to_json(self, value: str) -> int:
        return int(value)


@dataclass(frozen=True)
class IssuedToken:
    value: str
    issued_at_ms: int


class TokenIssuer:
    def __init__(self, codec: TokenCodec, clock: Clock = now_millis) -> None:
        self._codec = codec
        self._clock = clock

    @property
    def codec(self) -> TokenCodec:
        return self._codec

    def issue(self, now_ms: int | None = None) -> IssuedToken:
        issued_at = self._clock() if now_ms is None else now_ms
        return IssuedToken(value=self._codec.encode(issued_at), issued_at_ms=issued_at)
