"""Tests for lib/result.py - Result type for cache operations."""

import pytest

from cached_struct.lib.result import Err, Ok, unwrap


class TestOkErr:
    """Tests for Ok and Err constructors."""

    def test_ok_holds_value(self) -> None:
        assert Ok(42).value == 42

    def test_err_holds_error(self) -> None:
        assert Err("something went wrong").error == "something went wrong"

    def test_ok_with_none_is_valid(self) -> None:
        assert Ok(None).value is None

    def test_results_compare_by_value(self) -> None:
        assert Ok(1) == Ok(1)
        assert Ok(1) != Err(1)


class TestUnwrap:
    """Tests for unwrap."""

    def test_unwrap_ok(self) -> None:
        assert unwrap(Ok("value")) == "value"

    def test_unwrap_err_raises(self) -> None:
        with pytest.raises(ValueError, match="Called unwrap on Err"):
            unwrap(Err("error"))
