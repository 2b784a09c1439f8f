"""Tests for the Code Styler exception hierarchy."""

import pytest

from code_styler.exceptions import (
    AnalysisError,
    CodeStylerError,
    CommandExecutionError,
    ConfigFileError,
    ConfigurationError,
    InvalidConfigError,
    ReceiveCancelledError,
    ReceiveDecodeError,
    ReceiveError,
    SendTimeoutError,
    SourceBranchNotFoundError,
    TransportError,
)


class TestHierarchy:
    """Every error can be caught as CodeStylerError."""

    @pytest.mark.parametrize(
        "error,parent",
        [
            (SourceBranchNotFoundError("/repo"), AnalysisError),
            (CommandExecutionError(["git"], "non-zero exit"), AnalysisError),
            (InvalidConfigError("key", 1, "bad"), ConfigurationError),
            (ConfigFileError("a.toml", "missing"), ConfigurationError),
            (SendTimeoutError("127.0.0.1:1", 1.0), TransportError),
            (ReceiveDecodeError("bad json"), ReceiveError),
            (ReceiveCancelledError(), ReceiveError),
        ],
    )
    def test_parents(self, error, parent):
        assert isinstance(error, parent)
        assert isinstance(error, CodeStylerError)


class TestMessages:
    """Details are appended to the message."""

    def test_plain_message(self):
        assert str(CodeStylerError("boom")) == "boom"

    def test_details_keep_native_values(self):
        error = CommandExecutionError(["git", "diff"], "non-zero exit", returncode=128, stderr="fatal\n")

        assert error.details["returncode"] == 128
        assert error.details["command"] == ["git", "diff"]
        assert str(error) == (
            "Command failed: git "
            "(command=git diff, reason=non-zero exit, returncode=128, stderr=fatal)"
        )

    def test_missing_details_are_dropped(self):
        error = CommandExecutionError(["flake8"], "cannot launch")
        assert set(error.details) == {"command", "reason"}

    def test_receive_decode_payload_size(self):
        assert ReceiveDecodeError("bad", payload_size=7).details["payload_size"] == 7
        assert "payload_size" not in ReceiveDecodeError("bad").details

    def test_invalid_value_is_shown_with_its_type(self):
        assert "value='5'" in str(InvalidConfigError("transport_port", "5", "expected an integer"))


class TestHints:
    """Some errors carry the next step for the user."""

    def test_hints(self):
        assert "receive" in SendTimeoutError("127.0.0.1:1", 1.0).hint
        assert SourceBranchNotFoundError("/repo").hint

    def test_no_hint_by_default(self):
        assert CodeStylerError("boom").hint is None
        assert CodeStylerError("boom", hint="retry").hint == "retry"

