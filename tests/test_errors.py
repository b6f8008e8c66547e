"""Tests for waypoint.errors — exception hierarchy and messages."""

import pytest

from waypoint.errors import (
    ConfigurationError,
    HTTPError,
    NotFound,
    PatternError,
    ResponseError,
    UnhandledError,
    WaypointError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ConfigurationError, HTTPError, ResponseError, UnhandledError],
    )
    def test_waypoint_errors(self, cls: type) -> None:
        assert issubclass(cls, WaypointError)

    def test_pattern_error_is_configuration_error(self) -> None:
        assert issubclass(PatternError, ConfigurationError)

    def test_not_found_is_http_error(self) -> None:
        assert issubclass(NotFound, HTTPError)


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request body")) == "400: Bad request body"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]

    def test_not_found_defaults(self) -> None:
        err = NotFound()
        assert err.status == 404
        assert err.detail == "Not Found"


class TestUnhandledError:
    def test_keeps_value(self) -> None:
        err = UnhandledError({"code": 7})
        assert err.value == {"code": 7}
        assert "{'code': 7}" in str(err)
