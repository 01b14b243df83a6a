"""Result types returned by the draft and dispatch pipelines.

Pipelines never raise across their boundary. Each returns either its
success value (`Draft`, `SendResult`) or a `PipelineError` whose `kind`
selects the HTTP status the API layer responds with. Callers branch with
`isinstance` or `match`, so every error kind is handled in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    INVALID_INPUT = "invalid_input"
    VALIDATION_ERROR = "validation_error"
    CONFIGURATION_ERROR = "configuration_error"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_ERROR = "upstream_error"
    UPSTREAM_INVALID_RESPONSE = "upstream_invalid_response"
    UPSTREAM_EMPTY_RESPONSE = "upstream_empty_response"
    NO_VALID_RECIPIENTS = "no_valid_recipients"
    TRANSPORT_CONNECT_ERROR = "transport_connect_error"
    SEND_ERROR = "send_error"
    SERVER_ERROR = "server_error"


# UPSTREAM_ERROR is absent: it reuses the provider's status (see status_code).
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.NO_VALID_RECIPIENTS: 400,
    ErrorKind.CONFIGURATION_ERROR: 500,
    ErrorKind.SEND_ERROR: 500,
    ErrorKind.SERVER_ERROR: 500,
    ErrorKind.UPSTREAM_INVALID_RESPONSE: 502,
    ErrorKind.UPSTREAM_EMPTY_RESPONSE: 502,
    ErrorKind.TRANSPORT_CONNECT_ERROR: 502,
    ErrorKind.UPSTREAM_TIMEOUT: 504,
}

BAD_GATEWAY = 502


@dataclass(frozen=True, slots=True)
class PipelineError:
    """A terminal pipeline failure.

    Attributes:
        kind: Error category; determines the HTTP status.
        message: Human-readable text shown to the user verbatim.
        details: Optional diagnostic payload (validation errors, provider text).
        upstream_status: Status code the language-model provider replied with,
            set only for `ErrorKind.UPSTREAM_ERROR`.
    """

    kind: ErrorKind
    message: str
    details: Any | None = None
    upstream_status: int | None = None

    @property
    def status_code(self) -> int:
        if self.kind is ErrorKind.UPSTREAM_ERROR:
            # Provider error codes pass through; anything that is not an
            # error status (e.g. a 3xx that was not followed) becomes 502.
            status = self.upstream_status
            if status is not None and 400 <= status <= 599:
                return status
            return BAD_GATEWAY
        return STATUS_BY_KIND[self.kind]


@dataclass(frozen=True, slots=True)
class Draft:
    subject: str
    body: str


@dataclass(frozen=True, slots=True)
class SendResult:
    success: bool
    message_id: str


type DraftResult = Draft | PipelineError
type SendOutcome = SendResult | PipelineError
