"""Unit tests for pipeline result types and status mapping."""

from __future__ import annotations

import pytest

from services.email_assistant.results import (
    STATUS_BY_KIND,
    Draft,
    ErrorKind,
    PipelineError,
    SendResult,
)


@pytest.mark.parametrize(
    ("kind", "status"),
    [
        (ErrorKind.INVALID_INPUT, 400),
        (ErrorKind.VALIDATION_ERROR, 400),
        (ErrorKind.NO_VALID_RECIPIENTS, 400),
        (ErrorKind.CONFIGURATION_ERROR, 500),
        (ErrorKind.SEND_ERROR, 500),
        (ErrorKind.SERVER_ERROR, 500),
        (ErrorKind.UPSTREAM_INVALID_RESPONSE, 502),
        (ErrorKind.UPSTREAM_EMPTY_RESPONSE, 502),
        (ErrorKind.TRANSPORT_CONNECT_ERROR, 502),
        (ErrorKind.UPSTREAM_TIMEOUT, 504),
    ],
)
def test_status_by_kind(kind: ErrorKind, status: int) -> None:
    assert PipelineError(kind, "x").status_code == status


def test_every_kind_has_a_status() -> None:
    assert set(STATUS_BY_KIND) | {ErrorKind.UPSTREAM_ERROR} == set(ErrorKind)


@pytest.mark.parametrize("upstream", [400, 401, 429, 500, 503])
def test_upstream_error_statuses_pass_through(upstream: int) -> None:
    error = PipelineError(ErrorKind.UPSTREAM_ERROR, "x", upstream_status=upstream)
    assert error.status_code == upstream


@pytest.mark.parametrize("upstream", [None, 204, 302, 600])
def test_non_error_upstream_statuses_become_bad_gateway(upstream: int | None) -> None:
    error = PipelineError(ErrorKind.UPSTREAM_ERROR, "x", upstream_status=upstream)
    assert error.status_code == 502


def test_results_are_immutable() -> None:
    draft = Draft(subject="s", body="b")
    with pytest.raises(AttributeError):
        draft.subject = "changed"  # type: ignore[misc]
    assert SendResult(success=True, message_id="<id@x>") == SendResult(
        True, "<id@x>"
    )
