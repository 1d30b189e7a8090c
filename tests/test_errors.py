"""Tests for error classification."""

import asyncio

import pytest

from rrcache import (
    ClassifiedError,
    ErrorKind,
    FetchError,
    NetworkError,
    RemoteGenerationError,
    StorageError,
    ValidationError,
    classify,
)


class TestErrorKind:
    """Tests for the retryable policy of each kind."""

    @pytest.mark.parametrize(
        ("kind", "retryable"),
        [
            (ErrorKind.NETWORK, True),
            (ErrorKind.STORAGE, True),
            (ErrorKind.REMOTE_GENERATION, True),
            (ErrorKind.VALIDATION, False),
            (ErrorKind.UNKNOWN, False),
        ],
    )
    def test_retryable(self, kind: ErrorKind, retryable: bool) -> None:
        assert kind.retryable is retryable

    def test_classified_error_derives_retryable(self) -> None:
        """Retryable follows the kind and cannot be set independently."""
        assert ClassifiedError(ErrorKind.STORAGE, "x").retryable is True
        assert ClassifiedError(ErrorKind.VALIDATION, "x").retryable is False
        with pytest.raises(TypeError):
            ClassifiedError(ErrorKind.UNKNOWN, "x", True)  # type: ignore[call-arg]


class TestClassifyTagged:
    """Tagged failures pass through with their own kind."""

    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (NetworkError("link down"), ErrorKind.NETWORK),
            (StorageError("File not found"), ErrorKind.STORAGE),
            (RemoteGenerationError("model overloaded"), ErrorKind.REMOTE_GENERATION),
            (ValidationError("bad id"), ErrorKind.VALIDATION),
            (FetchError("empty body"), ErrorKind.UNKNOWN),
        ],
    )
    def test_tagged(self, error: FetchError, kind: ErrorKind) -> None:
        result = classify(error)
        assert result.kind is kind
        assert result.message == error.message

    def test_tag_wins_over_message(self) -> None:
        """A tagged storage error mentioning the network stays a storage error."""
        assert classify(StorageError("network share offline")).kind is ErrorKind.STORAGE

    def test_already_classified_unchanged(self) -> None:
        classified = ClassifiedError(ErrorKind.STORAGE, "quota")
        assert classify(classified) is classified

    def test_details_kept_on_error(self) -> None:
        error = StorageError("File not found", details={"status_code": 404})
        assert error.details == {"status_code": 404}
        assert str(error) == "File not found"


class TestClassifyUntagged:
    """Untagged failures fall back to type and message inspection."""

    def test_timeout_error(self) -> None:
        result = classify(TimeoutError())
        assert result.kind is ErrorKind.NETWORK
        assert result.message == "TimeoutError"

    def test_asyncio_timeout_error(self) -> None:
        assert classify(asyncio.TimeoutError()).kind is ErrorKind.NETWORK

    def test_connection_error(self) -> None:
        assert classify(ConnectionResetError("reset by peer")).kind is ErrorKind.NETWORK

    @pytest.mark.parametrize(
        "message",
        ["Network unreachable", "Failed to fetch", "read timeout", "Request timed out"],
    )
    def test_network_wording(self, message: str) -> None:
        assert classify(RuntimeError(message)).kind is ErrorKind.NETWORK

    @pytest.mark.parametrize(
        "message",
        ["Quota exceeded", "Invalid API key", "Blocked by safety filters"],
    )
    def test_remote_generation_wording(self, message: str) -> None:
        assert classify(RuntimeError(message)).kind is ErrorKind.REMOTE_GENERATION

    def test_network_checked_before_remote_generation(self) -> None:
        """Priority order: network wording wins over quota wording."""
        result = classify(RuntimeError("network error while checking quota"))
        assert result.kind is ErrorKind.NETWORK

    def test_validation_wording(self) -> None:
        result = classify(ValueError("Manual validation failed: missing id"))
        assert result.kind is ErrorKind.VALIDATION

    def test_unknown(self) -> None:
        result = classify(RuntimeError("boom"))
        assert result.kind is ErrorKind.UNKNOWN
        assert result.retryable is False
        assert result.message == "boom"

    def test_non_exception_failure(self) -> None:
        assert classify("fetch failed").kind is ErrorKind.NETWORK
        assert classify(42).kind is ErrorKind.UNKNOWN
