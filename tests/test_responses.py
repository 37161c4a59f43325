"""
Tests for response helper functions and standard format validation.

Verifies that the response envelope used by every caller is properly implemented.
"""

from dataclasses import asdict

from research_orchestrator.core.responses import (
    RESPONSE_VERSION,
    ErrorCode,
    ErrorType,
    ToolResponse,
    error_response,
    success_response,
)


class TestToolResponse:
    """Tests for the ToolResponse dataclass."""

    def test_success_response_structure(self):
        """Test that success responses have correct structure."""
        response = ToolResponse(success=True, data={"question": "q", "count": 5}, error=None)
        assert response.success is True
        assert response.data == {"question": "q", "count": 5}
        assert response.error is None

    def test_default_data_and_meta(self):
        """Test that data defaults to empty dict and meta carries the version."""
        response = ToolResponse(success=True)
        assert response.data == {}
        assert response.meta == {"version": RESPONSE_VERSION}


class TestSuccessResponse:
    """Tests for the success_response helper function."""

    def test_creates_success_true(self):
        response = success_response()
        assert response.success is True
        assert response.error is None
        assert response.data == {}

    def test_data_and_fields_are_merged(self):
        """Test that the data mapping and keyword fields are combined."""
        response = success_response({"question": "q"}, count=10)
        assert response.data == {"question": "q", "count": 10}

    def test_meta_includes_warnings_and_telemetry(self):
        response = success_response(
            warnings=["wikipedia timed out"],
            telemetry={"duration_ms": 12},
            request_id="run-abc",
        )
        assert response.meta == {
            "version": RESPONSE_VERSION,
            "request_id": "run-abc",
            "warnings": ["wikipedia timed out"],
            "telemetry": {"duration_ms": 12},
        }

    def test_empty_warnings_omitted(self):
        response = success_response(warnings=[])
        assert "warnings" not in response.meta


class TestErrorResponse:
    """Tests for the error_response helper function."""

    def test_defaults_to_internal_error(self):
        """Test that the code and type default to the internal category."""
        response = error_response("Something went wrong")
        assert response.success is False
        assert response.error == "Something went wrong"
        assert response.data == {"error_code": "INTERNAL_ERROR", "error_type": "internal"}

    def test_enum_values_serialized(self):
        response = error_response(
            "Provide a more detailed research question (>= 8 characters).",
            error_code=ErrorCode.VALIDATION_ERROR,
            error_type=ErrorType.VALIDATION,
            remediation="Ask a longer question.",
        )
        assert response.data["error_code"] == "VALIDATION_ERROR"
        assert response.data["error_type"] == "validation"
        assert response.data["remediation"] == "Ask a longer question."

    def test_string_codes_accepted(self):
        response = error_response("nope", error_code="CUSTOM", error_type="custom")
        assert response.data["error_code"] == "CUSTOM"
        assert response.data["error_type"] == "custom"

    def test_details_included(self):
        response = error_response("broken", details={"violations": ["a", "b"]})
        assert response.data["details"] == {"violations": ["a", "b"]}

    def test_explicit_data_not_overwritten(self):
        response = error_response("x", data={"error_code": "KEEP"}, error_code=ErrorCode.PROVIDER_ERROR)
        assert response.data["error_code"] == "KEEP"

    def test_meta_has_no_warnings(self):
        response = error_response("x", telemetry={"duration_ms": 3})
        assert response.meta == {"version": RESPONSE_VERSION, "telemetry": {"duration_ms": 3}}


class TestEnvelopeSerialization:
    """The envelope must serialize to plain dicts for the CLI."""

    def test_asdict_shape(self):
        envelope = asdict(success_response({"question": "q"}))
        assert set(envelope) == {"success", "data", "error", "meta"}
        assert envelope["meta"]["version"] == RESPONSE_VERSION
