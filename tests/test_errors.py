"""
Tests for change_desk.errors
"""

from change_desk.errors import (
    UNKNOWN_ERROR,
    ConflictError,
    RemoteCallError,
    extract_error_message,
)


class TestExtractErrorMessage:
    """Tests for extract_error_message."""

    def test_none(self):
        """Test a missing error gives the generic message."""
        assert extract_error_message(None) == UNKNOWN_ERROR

    def test_structured_body_message(self):
        """Test the server message wins."""
        assert extract_error_message({"body": {"message": "DUPLICATE"}}) == "DUPLICATE"

    def test_body_message_beats_message(self):
        """Test body.message is checked before message."""
        err = {"body": {"message": "DUPLICATE"}, "message": "Bad request"}
        assert extract_error_message(err) == "DUPLICATE"

    def test_generic_message(self):
        """Test the generic message field is the second choice."""
        assert extract_error_message({"body": {}, "message": "Timed out"}) == "Timed out"

    def test_stringified_fallback(self):
        """Test an error without messages is stringified."""
        assert extract_error_message({"code": 42}) == '{"code": 42}'

    def test_remote_call_error(self):
        """Test exception attributes are used like mapping keys."""
        err = RemoteCallError("POST /x returned 400", body={"message": "New value is required"})
        assert extract_error_message(err) == "New value is required"

    def test_remote_call_error_without_body(self):
        """Test the exception message is used without a body."""
        assert extract_error_message(ConflictError("already Approved")) == "already Approved"

    def test_plain_exception(self):
        """Test a plain exception uses its text."""
        assert extract_error_message(ValueError("boom")) == "boom"

    def test_plain_exception_without_text(self):
        """Test an empty exception falls back to its repr."""
        assert extract_error_message(RuntimeError()) == "RuntimeError()"

    def test_string_error(self):
        """Test a bare string is returned as is."""
        assert extract_error_message("offline") == "offline"

    def test_unserializable(self):
        """Test objects JSON cannot encode fall back to str()."""

        class Opaque:
            def __str__(self):
                return "opaque failure"

        assert extract_error_message(Opaque()) == "opaque failure"
