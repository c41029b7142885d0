"""Tests for input validation module."""

import math
import warnings

import numpy as np
import pytest

from network_layout.validation import (
    ConfigurationError,
    DanglingReferenceError,
    DuplicateLinkIdWarning,
    InvalidLinkError,
    InvalidNodeError,
    ValidationError,
    coerce_position,
    get_field,
    validate_center,
    validate_distance_range,
    validate_iterations,
    validate_link_references,
    validate_node_ids,
    validate_number,
    warn_duplicate_link_ids,
)


class TestExceptionHierarchy:
    """Tests for the exception types."""

    def test_all_are_value_errors(self):
        """Every validation error is a ValueError."""
        for exc in (ConfigurationError, InvalidNodeError, InvalidLinkError, DanglingReferenceError):
            assert issubclass(exc, ValidationError)
            assert issubclass(exc, ValueError)

    def test_dangling_is_link_error(self):
        """Dangling references are a kind of invalid link."""
        assert issubclass(DanglingReferenceError, InvalidLinkError)


class TestGetField:
    """Tests for dict/object field reads."""

    def test_dict(self):
        assert get_field({"id": 3}, "id") == 3

    def test_object(self):
        class Item:
            id = "x"

        assert get_field(Item(), "id") == "x"

    def test_default(self):
        assert get_field({}, "id", None) is None

    def test_missing_raises_key_error(self):
        with pytest.raises(KeyError):
            get_field({}, "id")


class TestNodeIdValidation:
    """Tests for node id validation."""

    def test_valid_ids(self):
        """Ids are returned in input order."""
        assert validate_node_ids([{"id": "b"}, {"id": "a"}, {"id": 3}]) == ["b", "a", 3]

    def test_missing_id_raises(self):
        """A node without id raises InvalidNodeError."""
        with pytest.raises(InvalidNodeError, match="Node 1: missing id"):
            validate_node_ids([{"id": "a"}, {"label": "no id"}])

    def test_duplicate_id_raises(self):
        """A repeated id raises InvalidNodeError."""
        with pytest.raises(InvalidNodeError, match="duplicate id 'a'"):
            validate_node_ids([{"id": "a"}, {"id": "a"}])

    def test_unhashable_id_raises(self):
        """An unhashable id raises InvalidNodeError."""
        with pytest.raises(InvalidNodeError, match="not hashable"):
            validate_node_ids([{"id": ["a"]}])


class TestLinkReferenceValidation:
    """Tests for link reference validation."""

    def test_valid_references(self):
        """Valid references return no issues."""
        links = [{"source": "a", "target": "b"}]
        assert validate_link_references(links, ["a", "b"]) == []

    def test_unknown_target_raises(self):
        """Unknown target raises DanglingReferenceError."""
        with pytest.raises(DanglingReferenceError, match="target id 'z' not found"):
            validate_link_references([{"source": "a", "target": "z"}], ["a"])

    def test_none_source_raises(self):
        """A missing source raises DanglingReferenceError."""
        with pytest.raises(DanglingReferenceError, match="source is None"):
            validate_link_references([{"target": "a"}], ["a"])

    def test_non_strict_returns_issues(self):
        """Non-strict mode collects every issue."""
        links = [{"source": "a", "target": "z"}, {"source": "y", "target": "x"}]
        issues = validate_link_references(links, ["a"], strict=False)
        assert [i for i, _ in issues] == [0, 1, 1]


class TestDuplicateLinkIds:
    """Tests for parallel link warnings."""

    def test_warns_on_duplicates(self):
        with pytest.warns(DuplicateLinkIdWarning):
            assert warn_duplicate_link_ids(["a.b", "b.c", "a.b"]) == ["a.b"]

    def test_no_warning_for_unique_ids(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert warn_duplicate_link_ids(["a.b", "b.a"]) == []


class TestIterationsValidation:
    """Tests for iterations validation."""

    def test_valid(self):
        assert validate_iterations(120) == 120

    def test_numpy_integer(self):
        result = validate_iterations(np.int64(300))
        assert result == 300
        assert type(result) is int

    @pytest.mark.parametrize("value", [0, -5])
    def test_not_positive_raises(self, value):
        with pytest.raises(ConfigurationError, match=">= 1"):
            validate_iterations(value)

    @pytest.mark.parametrize("value", [1.5, "10", True, None])
    def test_not_int_raises(self, value):
        with pytest.raises(ConfigurationError, match="must be an integer"):
            validate_iterations(value)


class TestNumberValidation:
    """Tests for numeric parameter validation."""

    def test_valid(self):
        assert validate_number(3, "repulsivity") == 3.0

    def test_numpy_scalars(self):
        assert validate_number(np.float32(2.5), "repulsivity") == 2.5
        assert validate_center(np.array([10, 20])) == (10.0, 20.0)
        assert coerce_position(np.float64(4.0)) == 4.0

    @pytest.mark.parametrize("value", [math.nan, math.inf, "3", None, False])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError, match="repulsivity"):
            validate_number(value, "repulsivity")


class TestDistanceRangeValidation:
    """Tests for charge distance clamp validation."""

    def test_valid(self):
        assert validate_distance_range(1, 100) == (1.0, 100.0)

    def test_numpy_bounds(self):
        assert validate_distance_range(np.int64(2), np.float64(50.0)) == (2.0, 50.0)

    def test_infinite_max(self):
        assert validate_distance_range(0, math.inf) == (0.0, math.inf)

    def test_negative_min_raises(self):
        with pytest.raises(ConfigurationError, match="distance_min must be >= 0"):
            validate_distance_range(-1, 10)

    def test_max_not_greater_raises(self):
        with pytest.raises(ConfigurationError, match="greater than distance_min"):
            validate_distance_range(10, 10)

    def test_nan_max_raises(self):
        with pytest.raises(ConfigurationError, match="NaN"):
            validate_distance_range(1, math.nan)


class TestCenterValidation:
    """Tests for center point validation."""

    def test_valid(self):
        assert validate_center([400, 300]) == (400.0, 300.0)

    def test_wrong_length_raises(self):
        with pytest.raises(ConfigurationError, match="must have 2 elements"):
            validate_center([1])

    def test_not_sequence_raises(self):
        with pytest.raises(ConfigurationError, match="pair"):
            validate_center(5)

    def test_non_finite_raises(self):
        with pytest.raises(ConfigurationError, match="center y"):
            validate_center((0, math.nan))


class TestCoercePosition:
    """Tests for optional starting positions."""

    def test_number(self):
        assert coerce_position(3) == 3.0

    @pytest.mark.parametrize("value", [None, math.nan, math.inf, "1", True])
    def test_ignored(self, value):
        assert coerce_position(value) is None
