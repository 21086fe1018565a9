"""Unit tests for custom exception classes.

Tests the exception hierarchy, default error codes, message handling,
and details propagation.
"""

import pytest

from rfp_responder.exceptions import (
    ProposalPipelineError,
    UnsupportedMediaTypeError,
    ExtractionError,
    GenerationError,
    ModelInvocationError,
    ServiceUnavailableError,
    NotFoundError,
    InvalidTransitionError,
    StorageError,
    InputValidationError,
)


class TestProposalPipelineError:
    def test_base_error_attributes(self):
        err = ProposalPipelineError("Something failed", error_code="ERR_TEST", details={"key": "value"})
        assert err.message == "Something failed"
        assert err.error_code == "ERR_TEST"
        assert err.details == {"key": "value"}
        assert str(err) == "Something failed"

    def test_base_error_defaults(self):
        err = ProposalPipelineError("Minimal error")
        assert err.error_code == "ERR_UNKNOWN"
        assert err.details is None


class TestSubclassErrorCodes:
    """Each subclass must carry its own default error_code."""

    @pytest.mark.parametrize(
        "error_class, code",
        [
            (UnsupportedMediaTypeError, "ERR_MEDIA_001"),
            (ExtractionError, "ERR_EXTRACT_001"),
            (GenerationError, "ERR_GEN_001"),
            (ModelInvocationError, "ERR_MODEL_001"),
            (ServiceUnavailableError, "ERR_MODEL_503"),
            (NotFoundError, "ERR_NOTFOUND_001"),
            (InvalidTransitionError, "ERR_STATE_001"),
            (StorageError, "ERR_STORE_001"),
            (InputValidationError, "ERR_INPUT_001"),
        ],
    )
    def test_codes(self, error_class, code):
        err = error_class("msg", details={"a": 1})
        assert err.error_code == code
        assert err.details == {"a": 1}
        assert isinstance(err, ProposalPipelineError)


def test_service_unavailable_is_an_invocation_error():
    assert isinstance(ServiceUnavailableError("x"), ModelInvocationError)


def test_extraction_error_keeps_cause():
    cause = ValueError("bad xref")
    try:
        try:
            raise cause
        except ValueError as e:
            raise ExtractionError("failed") from e
    except ExtractionError as err:
        assert err.__cause__ is cause
