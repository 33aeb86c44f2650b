from __future__ import annotations

from atelier.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError
from atelier.domain.errors import BusyError, GENERIC_FAILURE_MESSAGE
from atelier.usecases.error_mapping import map_service_error


def test_use_case_errors_pass_through() -> None:
    err = BusyError()

    assert map_service_error(err) is err


def test_timeout_maps_to_service_failure_with_text() -> None:
    mapped = map_service_error(ApiTimeoutError("Timeout contacting https://x", context="POST"))

    assert mapped.code == "SERVICE_FAILURE"
    assert mapped.message == "Timeout contacting https://x"


def test_client_error_prefers_envelope_message() -> None:
    err = ApiClientError(
        "ctx: HTTP 403",
        status=403,
        payload='{"error": {"code": 403, "message": "Permission denied."}}',
    )

    assert map_service_error(err).message == "Permission denied."


def test_server_error_without_body_falls_back_to_own_text() -> None:
    err = ApiServerError("generate_video: HTTP 502", status=502)

    assert map_service_error(err).message == "generate_video: HTTP 502"


def test_plain_api_error_uses_message() -> None:
    assert map_service_error(ApiError("The model returned no image.")).message == (
        "The model returned no image."
    )


def test_generic_exception_without_text_uses_default() -> None:
    assert map_service_error(RuntimeError()).message == GENERIC_FAILURE_MESSAGE
    assert map_service_error(RuntimeError(), default_message="Edit failed.").message == "Edit failed."
