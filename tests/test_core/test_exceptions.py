"""Tests for virustiter.core.exceptions."""

import pytest

from virustiter.core.exceptions import (
    AmbiguousGroupingError,
    FitError,
    InvalidParameterError,
    MissingVariableError,
    NoPositiveDoseError,
    VirusTiterError,
    ZeroCountGroupError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_virus_titer_error(self):
        for exc_cls in (InvalidParameterError, MissingVariableError, AmbiguousGroupingError,
                        ZeroCountGroupError, NoPositiveDoseError, FitError):
            assert issubclass(exc_cls, VirusTiterError)

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            raise InvalidParameterError("width", "must be > 1")

    def test_catch_all_with_base(self):
        with pytest.raises(VirusTiterError):
            raise NoPositiveDoseError(3)

    def test_invalid_parameter_message(self):
        exc = InvalidParameterError("width", "must be > 1, got 1")
        assert "width" in str(exc)
        assert "got 1" in str(exc)
        assert exc.name == "width"
        assert exc.reason == "must be > 1, got 1"

    def test_invalid_parameter_default_message(self):
        assert "Invalid parameter" in str(InvalidParameterError())

    def test_missing_variable_name(self):
        exc = MissingVariableError("moi")
        assert "moi" in str(exc)
        assert exc.name == "moi"

    def test_missing_variable_candidates(self):
        exc = MissingVariableError(candidates=("moi", "x"))
        assert "'moi'" in str(exc)
        assert "'x'" in str(exc)
        assert exc.candidates == ("moi", "x")

    def test_ambiguous_grouping_found(self):
        exc = AmbiguousGroupingError(("well", "file"))
        assert "'well'" in str(exc)
        assert exc.found == ("well", "file")

    def test_ambiguous_grouping_none_found(self):
        assert "no grouping column" in str(AmbiguousGroupingError())

    def test_zero_count_group(self):
        exc = ZeroCountGroupError("B7")
        assert "B7" in str(exc)
        assert exc.group == "B7"

    def test_no_positive_dose(self):
        exc = NoPositiveDoseError(4)
        assert "4" in str(exc)
        assert exc.n_rows == 4
