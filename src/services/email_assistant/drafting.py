"""Draft generation: prompt in, {subject, body} out.

One chat-completion request is made per call. Neither the prompt nor the
generated text is logged.
"""

from __future__ import annotations

import asyncio
import logging
import re

import httpx
from pydantic import ValidationError

from core.config import Settings
from schemas.llm import ChatCompletion, ChatMessage

from .results import Draft, DraftResult, ErrorKind, PipelineError
from .validation import validate_prompt


logger = logging.getLogger(__name__)

GENERATION_TIMEOUT_SECONDS = 15.0
DEFAULT_SUBJECT = "Your AI-generated email"
SYSTEM_INSTRUCTION = (
    "You write concise, professional emails. Start with "
    '"Subject: [subject]" on the first line, followed by the email body.'
)

_SUBJECT_LINE = re.compile(r"^Subject:\s*(.+)$", re.IGNORECASE | re.MULTILINE)


def split_subject(content: str) -> Draft:
    """Separate a leading `Subject:` line from the generated text.

    The first line (anywhere in the text) starting with `Subject:` supplies
    the subject and is removed from the body. Without one, the default
    subject is used and the whole trimmed text is the body.
    """
    text = content.strip()
    match = _SUBJECT_LINE.search(text)
    if match is None:
        return Draft(subject=DEFAULT_SUBJECT, body=text)
    subject = match.group(1).strip()
    body = (text[: match.start()] + text[match.end() :]).strip()
    return Draft(subject=subject, body=body)


def build_payload(prompt: str, settings: Settings) -> dict[str, object]:
    messages = [
        ChatMessage(role="system", content=SYSTEM_INSTRUCTION),
        ChatMessage(role="user", content=prompt),
    ]
    return {
        "model": settings.GROQ_MODEL,
        "messages": [m.model_dump() for m in messages],
        "temperature": settings.GROQ_TEMPERATURE,
        "max_tokens": settings.GROQ_MAX_TOKENS,
    }


def _upstream_error(response: httpx.Response) -> PipelineError:
    text = response.text.strip()
    return PipelineError(
        ErrorKind.UPSTREAM_ERROR,
        f"AI service error ({response.status_code}): {text or 'No response body'}",
        upstream_status=response.status_code,
    )


def _parse_completion(response: httpx.Response) -> DraftResult:
    try:
        data = response.json()
    except ValueError:
        return PipelineError(
            ErrorKind.UPSTREAM_INVALID_RESPONSE, "Invalid response from AI service"
        )

    try:
        content = ChatCompletion.model_validate(data).first_content()
    except ValidationError:
        content = ""

    if not content.strip():
        return PipelineError(
            ErrorKind.UPSTREAM_EMPTY_RESPONSE, "AI service returned empty content"
        )
    return split_subject(content)


async def generate_draft(prompt: object, settings: Settings) -> DraftResult:
    """Ask the language model for an email and split it into subject and body.

    Args:
        prompt: User-supplied description of the email; must be a non-empty
            string. Anything else fails before any network call.
        settings: Process-wide configuration holding the provider credential.

    Returns:
        The draft, or a `PipelineError` describing why none was produced.
        Timeouts are never retried.
    """
    checked = validate_prompt(prompt)
    if isinstance(checked, PipelineError):
        return checked

    if not settings.GROQ_API_KEY:
        logger.error("Language-model provider credential is not configured")
        return PipelineError(
            ErrorKind.CONFIGURATION_ERROR,
            "Server configuration error: Missing GROQ_API_KEY",
        )

    try:
        async with (
            asyncio.timeout(GENERATION_TIMEOUT_SECONDS),
            httpx.AsyncClient(timeout=GENERATION_TIMEOUT_SECONDS) as client,
        ):
            response = await client.post(
                settings.GROQ_API_URL,
                json=build_payload(checked, settings),
                headers={"Authorization": f"Bearer {settings.GROQ_API_KEY}"},
            )
    except (httpx.TimeoutException, TimeoutError):
        logger.warning(
            "Language-model request timed out after %.0fs",
            GENERATION_TIMEOUT_SECONDS,
        )
        return PipelineError(
            ErrorKind.UPSTREAM_TIMEOUT, "AI service timed out. Please try again."
        )
    except httpx.HTTPError as exc:
        logger.warning("Language-model request failed: %s", type(exc).__name__)
        return PipelineError(ErrorKind.SERVER_ERROR, f"Server error: {exc}")

    if not response.is_success:
        logger.warning(
            "Language-model provider returned status %s", response.status_code
        )
        return _upstream_error(response)

    return _parse_completion(response)
