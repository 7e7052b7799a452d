"""
Unit tests for argument validation against tool parameter schemas.
"""
import pytest

from hostsense.tools import ToolDefinition, ToolParameter, ValidationError
from hostsense.tools.validation import build_model, validate_arguments


@pytest.fixture
def forecast_definition():
    return ToolDefinition(
        name="get_forecast",
        description="Forecast",
        parameters=[
            ToolParameter(name="location", type="string", description="Where"),
            ToolParameter(
                name="days",
                type="integer",
                description="How many days",
                required=False,
                default=3,
            ),
        ],
    )


class TestRequiredFields:
    """Tests for required parameters."""

    def test_missing_required_field_names_it(self, forecast_definition):
        with pytest.raises(ValidationError) as exc_info:
            validate_arguments(forecast_definition, {})

        assert str(exc_info.value) == "missing field: location"
        assert exc_info.value.field == "location"

    def test_none_arguments_treated_as_empty(self, forecast_definition):
        with pytest.raises(ValidationError, match="missing field: location"):
            validate_arguments(forecast_definition, None)

    def test_no_parameters_accepts_none(self):
        definition = ToolDefinition(name="list_processes", description="List")
        assert validate_arguments(definition, None) == {}


class TestDefaultsAndCoercion:
    """Tests for defaults, extras and lax coercion."""

    def test_optional_default_applied(self, forecast_definition):
        args = validate_arguments(forecast_definition, {"location": "Paris"})
        assert args == {"location": "Paris", "days": 3}

    def test_unknown_fields_dropped(self, forecast_definition):
        args = validate_arguments(
            forecast_definition, {"location": "Paris", "units": "metric"}
        )
        assert "units" not in args

    def test_null_falls_back_to_default(self, forecast_definition):
        args = validate_arguments(forecast_definition, {"location": "Oslo", "days": None})
        assert args == {"location": "Oslo", "days": 3}

    def test_null_on_bounded_field_takes_default(self):
        definition = ToolDefinition(
            name="get_git_log",
            description="Log",
            parameters=[
                ToolParameter(
                    name="count",
                    type="integer",
                    description="Commits",
                    required=False,
                    default=10,
                    minimum=1,
                    maximum=100,
                ),
            ],
        )
        assert validate_arguments(definition, {"count": None}) == {"count": 10}

    def test_numeric_string_coerced_to_integer(self, forecast_definition):
        args = validate_arguments(forecast_definition, {"location": "Oslo", "days": "2"})
        assert args["days"] == 2

    def test_optional_without_default_is_none(self):
        definition = ToolDefinition(
            name="get_git_status",
            description="Status",
            parameters=[
                ToolParameter(
                    name="path", type="string", description="Repo", required=False
                ),
            ],
        )
        assert validate_arguments(definition, {}) == {"path": None}


class TestInvalidValues:
    """Tests for type and range errors."""

    def test_wrong_type_reported(self, forecast_definition):
        with pytest.raises(ValidationError) as exc_info:
            validate_arguments(forecast_definition, {"location": "Rome", "days": "soon"})

        assert "invalid type for field 'days'" in str(exc_info.value)
        assert exc_info.value.field == "days"

    def test_range_violation_reported(self):
        definition = ToolDefinition(
            name="get_git_log",
            description="Log",
            parameters=[
                ToolParameter(
                    name="count",
                    type="integer",
                    description="Commits",
                    required=False,
                    default=10,
                    minimum=1,
                    maximum=100,
                ),
            ],
        )
        with pytest.raises(ValidationError, match="invalid value for field 'count'"):
            validate_arguments(definition, {"count": 0})

        assert validate_arguments(definition, {"count": 100}) == {"count": 100}

    def test_enum_violation_reported(self):
        definition = ToolDefinition(
            name="pick",
            description="Pick",
            parameters=[
                ToolParameter(
                    name="color", type="string", description="Color", enum=["red", "green"]
                ),
            ],
        )
        with pytest.raises(ValidationError) as exc_info:
            validate_arguments(definition, {"color": "blue"})
        assert exc_info.value.field == "color"

    def test_non_object_arguments_rejected(self, forecast_definition):
        with pytest.raises(ValidationError, match="arguments must be an object, got list"):
            validate_arguments(forecast_definition, ["Paris"])


class TestBuildModel:
    """Tests for the compiled argument model."""

    def test_prebuilt_model_reused(self, forecast_definition):
        model = build_model(forecast_definition)
        args = validate_arguments(forecast_definition, {"location": "Lima"}, model)
        assert args == {"location": "Lima", "days": 3}

    def test_model_named_after_tool(self, forecast_definition):
        assert build_model(forecast_definition).__name__ == "get_forecast_args"
