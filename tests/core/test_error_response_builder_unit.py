import json

from core.error_handler import _build_error_response


def test_build_error_response_production_hides_optional_fields():
    resp = _build_error_response(
        message="An internal error occurred",
        environment="production",
        details=None,
        traceback_str="trace",
        exception_type="ValueError",
        status_code=500,
    )
    # The JSONResponse produced here stores the rendered bytes in `body`
    body = json.loads(resp.body)

    assert resp.status_code == 500
    assert body == {"error": "An internal error occurred"}
    assert resp.headers["X-Correlation-ID"]


def test_build_error_response_development_includes_optional_fields():
    resp = _build_error_response(
        message="An internal error occurred",
        environment="development",
        details={"debug": True},
        traceback_str="trace",
        exception_type="ValueError",
        status_code=500,
    )
    body = json.loads(resp.body)

    assert resp.status_code == 500
    assert body["error"] == "An internal error occurred"
    assert body["details"] == {
        "detail": {"debug": True},
        "traceback": "trace",
        "exception_type": "ValueError",
    }


def test_build_error_response_keeps_details_in_production():
    resp = _build_error_response(
        message="Validation failed",
        environment="production",
        details=[{"loc": ["body", "subject"]}],
        status_code=400,
    )
    body = json.loads(resp.body)

    assert resp.status_code == 400
    assert body == {
        "error": "Validation failed",
        "details": [{"loc": ["body", "subject"]}],
    }
