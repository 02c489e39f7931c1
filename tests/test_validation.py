"""
Tests for request validation and the error types
"""

import pytest

from carousel.config import Settings
from carousel.errors import InvalidInput, RenderFailed, RequestTimeout, ResourceUnavailable, TextTooLong
from carousel.services.validation import validate_input


class TestValidateInput:
    """Tests for validate_input."""

    def test_valid(self, settings):
        options = {
            "brandColor": "#FF5733",
            "authorUsername": "@me",
            "authorFullName": "Me Myself",
            "avatarUrl": "https://example.com/me.png",
        }
        assert validate_input("# Title", options, settings) == []

    @pytest.mark.parametrize("text", [None, "", 42, ["# list"]])
    def test_text_required(self, text, settings):
        assert validate_input(text, {}, settings) == ["Text is required and must be a string"]

    def test_whitespace_only(self, settings):
        assert validate_input("   \n", {}, settings) == ["Text cannot be empty"]

    def test_too_long(self):
        settings = Settings(max_text_length=10)
        assert validate_input("x" * 11, {}, settings) == ["Text is too long (maximum 10 characters)"]

    def test_collects_every_error(self, settings):
        options = {
            "brandColor": "red",
            "authorUsername": "u" * 51,
            "authorFullName": "n" * 101,
            "avatarUrl": "ftp://example.com/a.png",
        }
        errors = validate_input("text", options, settings)
        assert len(errors) == 4
        assert "brandColor must be in #RRGGBB format" in errors
        assert "avatarUrl must be a valid URL" in errors

    def test_non_strict_only_requires_text(self):
        settings = Settings(strict_validation=False)
        assert validate_input("   ", {"brandColor": "red"}, settings) == []
        assert validate_input(None, {}, settings) == ["Text is required and must be a string"]


class TestErrors:
    """Tests for error codes and payloads."""

    @pytest.mark.parametrize("error_class,code,status", [
        (InvalidInput, "INVALID_INPUT", 400),
        (TextTooLong, "TEXT_TOO_LONG", 400),
        (ResourceUnavailable, "AVATAR_LOAD_FAILED", 502),
        (RenderFailed, "RENDER_FAILED", 500),
        (RequestTimeout, "TIMEOUT_ERROR", 408),
    ])
    def test_codes(self, error_class, code, status):
        error = error_class("message")
        assert error.code == code
        assert error.status_code == status
        assert error.to_dict("abc1234")["code"] == code

    def test_invalid_input_errors(self):
        error = InvalidInput("bad", errors=["a", "b"])
        assert error.to_dict("r1") == {
            "error": "bad",
            "code": "INVALID_INPUT",
            "requestId": "r1",
            "details": {"errors": ["a", "b"]},
        }

    def test_render_failed_details(self):
        error = RenderFailed("failed", slide_type="quote", slide_index=3)
        assert error.details == {"slideType": "quote", "slideNumber": 3}
