"""Email assistant pipelines: draft generation and SMTP dispatch."""

from .dispatch import send_email
from .drafting import generate_draft, split_subject
from .results import (
    Draft,
    DraftResult,
    ErrorKind,
    PipelineError,
    SendOutcome,
    SendResult,
)
from .validation import parse_recipients


__all__ = [
    "Draft",
    "DraftResult",
    "ErrorKind",
    "PipelineError",
    "SendOutcome",
    "SendResult",
    "generate_draft",
    "parse_recipients",
    "send_email",
    "split_subject",
]
