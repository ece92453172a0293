from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class OutcomeKind(str, Enum):
    OK = "ok"
    INVALID_INPUT = "invalid_input"
    NOT_CONFIGURED = "not_configured"
    NOT_FOUND = "not_found"
    REJECTED = "rejected"
    PROVIDER_ERROR = "provider_error"
    STORE_ERROR = "store_error"


HTTP_STATUS_BY_KIND: dict[OutcomeKind, int] = {
    OutcomeKind.OK: 200,
    OutcomeKind.INVALID_INPUT: 400,
    OutcomeKind.REJECTED: 400,
    OutcomeKind.NOT_CONFIGURED: 404,
    OutcomeKind.NOT_FOUND: 404,
    OutcomeKind.PROVIDER_ERROR: 500,
    OutcomeKind.STORE_ERROR: 500,
}


@dataclass(frozen=True)
class Outcome:
    """
    Result of one relay operation: either `ok` with a value, or a failure kind with a message.
    """

    kind: OutcomeKind
    value: Any = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    @classmethod
    def success(cls, value: Any = None) -> Outcome:
        return cls(OutcomeKind.OK, value=value)

    @classmethod
    def invalid_input(cls, message: str) -> Outcome:
        return cls(OutcomeKind.INVALID_INPUT, message=message)

    @classmethod
    def not_configured(cls, message: str) -> Outcome:
        return cls(OutcomeKind.NOT_CONFIGURED, message=message)

    @classmethod
    def not_found(cls, message: str) -> Outcome:
        return cls(OutcomeKind.NOT_FOUND, message=message)

    @classmethod
    def rejected(cls, message: str) -> Outcome:
        return cls(OutcomeKind.REJECTED, message=message)

    @classmethod
    def provider_error(cls, message: str) -> Outcome:
        return cls(OutcomeKind.PROVIDER_ERROR, message=message)

    @classmethod
    def store_error(cls, message: str) -> Outcome:
        return cls(OutcomeKind.STORE_ERROR, message=message)
