"""Tests for array, tuple_, record, map_ and set_."""

import pytest

from vetted import (
    Custom,
    Field,
    Index,
    InvalidType,
    TooBig,
    TooSmall,
    array,
    map_,
    number,
    object_,
    record,
    set_,
    string,
    tuple_,
)


class TestArray:
    def test_valid_elements(self):
        assert array(number().int()).parse([1, 2.0, 3]) == [1, 2, 3]

    def test_empty_array_only_reports_length(self):
        result = array(number().int().positive()).min_len(1).parse_result([])
        assert result.is_err()
        assert len(result.error) == 1
        assert result.error.issues[0].code == TooSmall(1)
        assert result.error.issues[0].message == "Array must have at least 1 elements"

    def test_every_failing_element_reported_with_index(self):
        result = array(string().min(2)).parse_result(["ok", "x", "fine", "y"])
        assert [i.path for i in result.error] == [(Index(1),), (Index(3),)]

    def test_length_and_elements_accumulate(self):
        result = array(number()).max_len(1).parse_result([1, "two"])
        codes = [i.code for i in result.error]
        assert codes == [TooBig(1), InvalidType("number", "string")]

    def test_exact_length(self):
        issue = array(number()).length(2).parse_result([1]).error.issues[0]
        assert issue.code == Custom("invalid_length")
        assert issue.message == "Array must have exactly 2 elements"

    def test_non_empty(self):
        assert array(number()).non_empty().parse_result([]).is_err()

    def test_non_list(self):
        issue = array(number()).parse_result({"a": 1}).error.issues[0]
        assert issue.message == "Expected array, received object"

    def test_nested_paths(self):
        schema = array(object_({"name": string().min(1)}))
        issue = schema.parse_result([{"name": "a"}, {"name": ""}]).error.issues[0]
        assert issue.path_str == "[1].name"


class TestTuple:
    def test_output_is_tuple(self):
        assert tuple_(string(), number()).parse(["a", 1]) == ("a", 1)

    def test_python_tuple_input_accepted(self):
        assert tuple_(number()).parse((1,)) == (1,)
        assert array(number()).parse({2}) == [2]

    def test_length_mismatch(self):
        issue = tuple_(string(), number()).parse_result(["a"]).error.issues[0]
        assert issue.code == Custom("invalid_tuple_length")
        assert issue.message == "Expected tuple of 2 elements, received 1"

    def test_non_list(self):
        issue = tuple_(string()).parse_result("a").error.issues[0]
        assert issue.message == "Expected array (tuple), received string"

    def test_positions_prefixed(self):
        result = tuple_(string(), number()).parse_result([1, "a"])
        assert [i.path for i in result.error] == [(Index(0),), (Index(1),)]

    @pytest.mark.parametrize("count", [0, 7])
    def test_arity_bounds(self, count):
        with pytest.raises(ValueError):
            tuple_(*[string()] * count)


class TestRecord:
    def test_values_validated(self):
        assert record(number()).parse({"a": 1, "b": 2}) == {"a": 1, "b": 2}
        issue = record(number()).parse_result({"a": 1, "b": "x"}).error.issues[0]
        assert issue.path == (Field("b"),)

    def test_key_count(self):
        schema = record(number()).min_keys(2).max_keys(3)
        assert schema.parse_result({"a": 1}).error.issues[0].message == "Record must have at least 2 keys"
        too_many = {k: 1 for k in "abcd"}
        assert schema.parse_result(too_many).error.issues[0].message == "Record must have at most 3 keys"

    def test_key_schema(self):
        schema = record(number()).keys(string().min(2))
        issue = schema.parse_result({"ok": 1, "x": 2}).error.issues[0]
        assert issue.path == (Field("x"),)
        assert issue.code == TooSmall(2)


class TestMap:
    def test_pairs_become_tuples(self):
        assert map_(string(), number()).parse([["a", 1], ["b", 2]]) == [("a", 1), ("b", 2)]

    def test_bad_entry(self):
        issue = map_(string(), number()).parse_result([["a", 1], ["b"]]).error.issues[0]
        assert issue.code == Custom("invalid_map_entry")
        assert issue.path == (Index(1),)

    def test_non_list(self):
        issue = map_(string(), number()).parse_result({"a": 1}).error.issues[0]
        assert issue.message == "Expected array of [key, value] pairs, received object"

    def test_key_and_value_issues(self):
        result = map_(string(), number()).parse_result([[1, "x"]])
        assert len(result.error) == 2
        assert all(i.path == (Index(0),) for i in result.error)


class TestSet:
    def test_duplicates_dropped_in_order(self):
        assert set_(number()).parse([3, 1, 3, 2, 1]) == [3, 1, 2]

    def test_structural_equality(self):
        schema = set_(object_({"a": number(), "b": number()}))
        assert schema.parse([{"a": 1, "b": 2}, {"b": 2, "a": 1}]) == [{"a": 1, "b": 2}]

    def test_size_counts_unique(self):
        issue = set_(string()).min_size(2).parse_result(["a", "a"]).error.issues[0]
        assert issue.message == "Set must have at least 2 unique elements"

    def test_unique_items_reports_duplicates(self):
        result = set_(string()).unique_items().parse_result(["a", "b", "a"])
        issue = result.error.issues[0]
        assert issue.code == Custom("not_unique")
        assert issue.message == "Duplicate element"
        assert issue.path == (Index(2),)
