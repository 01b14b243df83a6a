"""Draft generation and dispatch endpoints."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from core.config import Settings, get_settings
from schemas.api import ErrorBody
from schemas.email import GeneratedDraftResponse, SendEmailResponse
from services.email_assistant import (
    Draft,
    PipelineError,
    SendResult,
    generate_draft,
    send_email,
)


logger = logging.getLogger(__name__)

router = APIRouter(tags=["email"])

SEND_SUCCESS_MESSAGE = (
    "Email sent successfully. If not received, check the spam folder."
)
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorBody},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorBody},
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorBody},
}


async def _read_json(request: Request, message: str) -> Any:
    """Decode the request body, answering 400 when it is not JSON."""
    try:
        return await request.json()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=message
        ) from exc


def _error_response(error: PipelineError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=ErrorBody(error=error.message, details=error.details).to_content(),
    )


@router.post(
    "/generate",
    response_model=GeneratedDraftResponse,
    responses={
        **ERROR_RESPONSES,
        status.HTTP_504_GATEWAY_TIMEOUT: {"model": ErrorBody},
    },
)
async def generate(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> GeneratedDraftResponse | JSONResponse:
    """Draft an email (subject and body) from a natural-language prompt."""
    payload = await _read_json(
        request, "Request body must be JSON with { prompt: string }"
    )
    prompt = payload.get("prompt") if isinstance(payload, dict) else None

    match await generate_draft(prompt, settings):
        case Draft(subject=subject, body=body):
            return GeneratedDraftResponse(subject=subject, body=body)
        case PipelineError() as error:
            logger.info("Draft generation failed: %s", error.kind)
            return _error_response(error)


@router.post(
    "/send",
    response_model=SendEmailResponse,
    response_model_by_alias=True,
    responses=ERROR_RESPONSES,
)
async def send(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> SendEmailResponse | JSONResponse:
    """Send the (possibly edited) draft to every valid recipient."""
    payload = await _read_json(request, "Request body must be JSON")

    match await send_email(payload, settings):
        case SendResult(message_id=message_id):
            return SendEmailResponse(
                success=True, message=SEND_SUCCESS_MESSAGE, message_id=message_id
            )
        case PipelineError() as error:
            logger.info("Email dispatch failed: %s", error.kind)
            return _error_response(error)
