"""
Unit tests for hydrostab/errors

Tests structured error records, factories and the exception hierarchy.
"""

import pytest

from hydrostab.errors import (
    EngineError,
    ErrorCode,
    ErrorCategory,
    ErrorSeverity,
    create_validation_error,
    create_bounds_error,
    create_numerical_warning,
    create_config_error,
    summarize,
    HydrostabError,
    ValidationError,
    GeometryValidationError,
    LoadcaseValidationError,
    DraftRangeError,
    IntegrationInputError,
    ConfigurationError,
)


class TestEngineError:

    def test_defaults(self):
        error = EngineError()
        assert error.code is ErrorCode.VAL_FAILED
        assert error.category is ErrorCategory.VALIDATION
        assert error.severity is ErrorSeverity.ERROR

    def test_str_includes_field_and_location(self):
        error = create_validation_error("half-breadth is negative", "test", field="offsets", row=3, column=1)
        assert str(error) == "offsets: half-breadth is negative (station=3, waterline=1)"

    def test_to_dict(self):
        error = create_validation_error("bad", "test", field="x", actual=1, expected=2)
        data = error.to_dict()
        assert data["code"] == ErrorCode.VAL_FAILED.value
        assert data["category"] == "validation"
        assert data["actual_value"] == 1
        assert data["expected_value"] == 2


class TestFactories:

    def test_bounds_below_minimum(self):
        error = create_bounds_error("too low", "test", field="draft", actual=0.0, min_val=0.0, max_val=10.0)
        assert error.code is ErrorCode.BND_MINIMUM
        assert error.category is ErrorCategory.BOUNDS

    def test_bounds_above_maximum(self):
        error = create_bounds_error("too high", "test", field="draft", actual=11.0, min_val=0.0, max_val=10.0)
        assert error.code is ErrorCode.BND_MAXIMUM

    def test_numerical_warning(self):
        warning = create_numerical_warning("zero volume", "test")
        assert warning.severity is ErrorSeverity.WARNING
        assert warning.category is ErrorCategory.NUMERICAL

    def test_config_error(self):
        error = create_config_error("bad value", "test", field="trim.max_iterations", actual=0)
        assert error.code is ErrorCode.SYS_CONFIG


class TestSummaries:

    def test_empty(self):
        assert summarize([]) == "no errors"

    def test_many(self):
        errors = [create_validation_error("a", "t"), create_validation_error("b", "t")]
        assert summarize(errors) == "2 errors: a; b"


class TestExceptions:

    def test_hierarchy(self):
        for cls in (GeometryValidationError, LoadcaseValidationError, DraftRangeError, IntegrationInputError):
            assert issubclass(cls, ValidationError)
            assert issubclass(cls, ValueError)
        assert issubclass(ConfigurationError, HydrostabError)
        assert not issubclass(ConfigurationError, ValueError)

    def test_message_from_errors(self):
        exc = GeometryValidationError([create_validation_error("too few stations", "t", field="stations")])
        assert str(exc) == "stations: too few stations"

    def test_to_dict(self):
        exc = DraftRangeError([create_validation_error("out of range", "t", field="draft")])
        data = exc.to_dict()
        assert data["type"] == "DraftRangeError"
        assert len(data["errors"]) == 1

    def test_raise_and_catch_as_value_error(self):
        with pytest.raises(ValueError):
            raise LoadcaseValidationError([create_validation_error("rho", "t")])
