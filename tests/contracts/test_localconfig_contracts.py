# tests/contracts/test_localconfig_contracts.py
"""Tests for schema, result and error contracts."""

from pathlib import Path

import pytest

from localconfig.contracts import (
    ConfigIOError,
    ConfigLoadError,
    LiteralDefault,
    LocalconfigError,
    ProviderDefault,
    ReconciliationResult,
    ReviewRequiredError,
    ValueShape,
    VariableDescriptor,
    shape_of,
)


class TestVariableDescriptor:
    """Tests for VariableDescriptor construction rules."""

    def test_defaults_to_scalar_with_none_literal(self) -> None:
        var = VariableDescriptor("db_host")

        assert var.shape == ValueShape.SCALAR
        assert var.default == LiteralDefault(None)
        assert var.lazy is False

    def test_is_immutable(self) -> None:
        var = VariableDescriptor("db_host", LiteralDefault("localhost"))

        with pytest.raises(AttributeError):
            var.name = "other"  # type: ignore[misc]

    @pytest.mark.parametrize("name", ["", "1abc", "db-host", "db host", "a::b", "class"])
    def test_rejects_non_identifier_names(self, name: str) -> None:
        with pytest.raises(ValueError, match="valid identifier"):
            VariableDescriptor(name)

    def test_lazy_variable_cannot_declare_default(self) -> None:
        with pytest.raises(ValueError, match="cannot declare a default"):
            VariableDescriptor("canonical_urlbase", LiteralDefault("https://x/"), lazy=True)

    def test_lazy_variable_cannot_declare_provider(self) -> None:
        with pytest.raises(ValueError, match="cannot declare a default"):
            VariableDescriptor("canonical_urlbase", ProviderDefault(lambda: "x"), lazy=True)

    def test_lazy_variable_without_default_is_allowed(self) -> None:
        var = VariableDescriptor("canonical_urlbase", lazy=True)

        assert var.lazy is True


class TestShapeOf:
    """Tests for shape inference of loaded values."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", ValueShape.SCALAR),
            (0, ValueShape.SCALAR),
            (1.5, ValueShape.SCALAR),
            (True, ValueShape.SCALAR),
            (["a"], ValueShape.SEQUENCE),
            (("a",), ValueShape.SEQUENCE),
            ([], ValueShape.SEQUENCE),
            ({"a": 1}, ValueShape.MAPPING),
            ({}, ValueShape.MAPPING),
        ],
    )
    def test_infers_shape(self, value: object, expected: ValueShape) -> None:
        assert shape_of(value) == expected

    def test_none_has_no_shape(self) -> None:
        assert shape_of(None) is None


class TestReconciliationResult:
    def test_empty_result_has_no_changes(self) -> None:
        assert ReconciliationResult().has_changes is False

    def test_new_vars_are_changes(self) -> None:
        assert ReconciliationResult(new_vars=("db_host",)).has_changes is True

    def test_old_vars_are_changes(self) -> None:
        assert ReconciliationResult(old_vars=("legacy",)).has_changes is True


class TestErrors:
    """Error types carry the path and cause the CLI shows to the user."""

    def test_load_error_carries_path_and_cause(self) -> None:
        cause = ValueError("bad line")
        error = ConfigLoadError(Path("/etc/localconfig"), cause)

        assert error.path == Path("/etc/localconfig")
        assert error.cause is cause
        assert "/etc/localconfig" in str(error)
        assert "bad line" in str(error)

    def test_io_error_carries_path_and_cause(self) -> None:
        cause = PermissionError("denied")
        error = ConfigIOError(Path("/etc/localconfig.old"), cause)

        assert error.path == Path("/etc/localconfig.old")
        assert "denied" in str(error)

    def test_review_required_lists_new_vars(self) -> None:
        result = ReconciliationResult(new_vars=("db_host", "db_port"))
        error = ReviewRequiredError(result, Path("localconfig"))

        assert error.result is result
        assert "db_host, db_port" in str(error)

    def test_all_errors_share_base_class(self) -> None:
        assert issubclass(ConfigLoadError, LocalconfigError)
        assert issubclass(ConfigIOError, LocalconfigError)
        assert issubclass(ReviewRequiredError, LocalconfigError)
