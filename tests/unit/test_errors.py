"""Unit tests for error envelopes and validation messages."""
import pytest

from userbase.errors import describe_error, error_body, first_error_message


class TestErrorBody:

    def test_uses_status_phrase(self):
        assert error_body(404, "User doesn't exist") == {
            "statusCode": 404,
            "error": "Not Found",
            "message": "User doesn't exist",
        }

    def test_unknown_status(self):
        assert error_body(599, "odd")["error"] == "Error"


class TestDescribeError:

    @pytest.mark.parametrize("error, message", [
        ({"type": "missing", "loc": ("body", "firstName")}, '"firstName" is required'),
        ({"type": "extra_forbidden", "loc": ("body", "karma")}, '"karma" is not allowed'),
        ({"type": "url_parsing", "loc": ("body", "profileURL")}, '"profileURL" must be a valid uri'),
        ({"type": "int_parsing", "loc": ("query", "size")}, '"size" must be a number'),
        ({"type": "string_type", "loc": ("body", "city")}, '"city" must be a string'),
        (
            {"type": "string_too_short", "loc": ("body", "city"), "ctx": {"min_length": 1}},
            '"city" is not allowed to be empty'
        ),
        (
            {"type": "string_too_short", "loc": ("skills",), "ctx": {"min_length": 5}},
            '"skills" length must be at least 5 characters long'
        ),
        (
            {"type": "less_than_equal", "loc": ("numberOfHours",), "ctx": {"le": 100}},
            '"numberOfHours" must be less than or equal to 100'
        ),
        (
            {"type": "literal_error", "loc": ("body", "status"),
             "ctx": {"expected": "'ooo', 'idle' or 'active'"}},
            '"status" must be one of [ooo, idle, active]'
        ),
    ])
    def test_messages(self, error, message):
        assert describe_error(error) == message

    def test_custom_errors_keep_their_message(self):
        error = {"type": "cursor_conflict", "loc": (), "msg": "Both prev and next can't be passed"}

        assert describe_error(error) == "Both prev and next can't be passed"

    def test_nested_location_uses_last_name(self):
        error = {"type": "missing", "loc": ("body", "intro", "city")}

        assert describe_error(error) == '"city" is required'


class TestFirstErrorMessage:

    def test_only_first_error_is_reported(self):
        errors = [
            {"type": "missing", "loc": ("firstName",)},
            {"type": "missing", "loc": ("lastName",)},
        ]

        assert first_error_message(errors) == '"firstName" is required'

    def test_no_errors(self):
        assert first_error_message([]) == "Invalid request"
