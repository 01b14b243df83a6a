"""Request and response schemas for draft generation and dispatch."""

from pydantic import BaseModel, ConfigDict, Field


SUBJECT_MAX_LENGTH = 200
BODY_MAX_LENGTH = 10_000
RECIPIENTS_MIN_LENGTH = 3


class GeneratedDraftResponse(BaseModel):
    """Response body of `POST /api/generate`."""

    subject: str
    body: str


class SendEmailRequest(BaseModel):
    """Request body of `POST /api/send`.

    Only lengths are checked here. Recipient addresses are checked for shape
    separately, after configuration is known to be complete.
    """

    recipients: str = Field(..., min_length=RECIPIENTS_MIN_LENGTH)
    subject: str = Field(..., min_length=1, max_length=SUBJECT_MAX_LENGTH)
    body: str = Field(..., min_length=1, max_length=BODY_MAX_LENGTH)

    model_config = ConfigDict(strict=True)


class SendEmailResponse(BaseModel):
    """Response body of a successful `POST /api/send`."""

    success: bool = True
    message: str
    message_id: str = Field(..., serialization_alias="messageId")
