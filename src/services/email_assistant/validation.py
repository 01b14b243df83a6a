"""Input validation for the draft and dispatch pipelines."""

from __future__ import annotations

import re
from typing import Any

from pydantic import ValidationError

from schemas.email import SendEmailRequest

from .results import ErrorKind, PipelineError


# Permissive shape check: something@something.tld with no whitespace and a
# single "@". Full RFC 5322 addresses (quoted local parts, IP literals) are
# not accepted, and valid-looking but undeliverable ones are not rejected.
EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
RECIPIENT_SEPARATORS = re.compile(r"[\n,;]+")

INVALID_PROMPT_MESSAGE = "Invalid prompt. Please provide a valid string."

# Friendlier wording for the constraint violations users actually hit.
_FIELD_MESSAGES: dict[tuple[str, str], str] = {
    ("recipients", "string_too_short"): "At least one recipient is required",
    ("subject", "string_too_short"): "Subject is required",
    ("body", "string_too_short"): "Email body is required",
}


def parse_recipients(raw: str) -> list[str]:
    """Split a free-text recipient field into well-formed addresses.

    Commas, semicolons and newlines all separate entries. Entries are
    trimmed and anything not shaped like an address is dropped. Order is
    kept and duplicates are not removed, so joining the result with ", "
    and parsing again returns the same list.
    """
    candidates = (part.strip() for part in RECIPIENT_SEPARATORS.split(raw))
    return [address for address in candidates if EMAIL_SHAPE.match(address)]


def validate_prompt(prompt: object) -> str | PipelineError:
    if not isinstance(prompt, str) or not prompt:
        return PipelineError(ErrorKind.INVALID_INPUT, INVALID_PROMPT_MESSAGE)
    return prompt


def flatten_validation_errors(exc: ValidationError) -> dict[str, Any]:
    """Group pydantic errors by field.

    Errors without a field location (e.g. the payload is not an object)
    go to `form_errors`; every violated field appears under `field_errors`
    with all of its messages, so one response reports every problem.
    """
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        if not loc:
            form_errors.append(error["msg"])
            continue
        field = str(loc[0])
        message = _FIELD_MESSAGES.get((field, error["type"]), error["msg"])
        field_errors.setdefault(field, []).append(message)
    return {"form_errors": form_errors, "field_errors": field_errors}


def validate_send_request(payload: object) -> SendEmailRequest | PipelineError:
    try:
        return SendEmailRequest.model_validate(payload)
    except ValidationError as exc:
        return PipelineError(
            ErrorKind.VALIDATION_ERROR,
            "Validation failed",
            details=flatten_validation_errors(exc),
        )
