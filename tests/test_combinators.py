"""Tests for union, discriminated_union, intersection, lazy, custom and preprocess."""

import pytest

from vetted import (
    AppError,
    Custom,
    CustomIssue,
    Err,
    ErrorCode,
    Field,
    InvalidType,
    MalformedInput,
    MissingField,
    Ok,
    RecursionLimitExceeded,
    TooSmall,
    array,
    custom,
    discriminated_union,
    intersection,
    lazy,
    literal,
    number,
    object_,
    parse,
    preprocess,
    string,
    union,
)


class TestUnion:
    def test_accepts_either_branch(self):
        schema = union(string(), number())
        assert schema.parse("a") == "a"
        assert schema.parse(1) == 1

    def test_double_failure_is_single_issue(self):
        result = union(string().min(5), number().positive()).parse_result(True)
        assert len(result.error) == 1
        issue = result.error.issues[0]
        assert issue.code == Custom("invalid_union")
        assert issue.message == "Input did not match any variant of the union"

    def test_first_success_wins(self):
        schema = union(number().int(), number())
        assert isinstance(schema.parse(2.0), int)

    def test_operator(self):
        assert (string() | number()).parse(3) == 3

    @pytest.mark.parametrize("count", [1, 7])
    def test_branch_count(self, count):
        with pytest.raises(ValueError):
            union(*[string()] * count)

    def test_closest_match_prefers_deeper_branch(self):
        schema = union(
            string(),
            object_({"user": object_({"name": string().min(2)})}),
        ).closest_match()
        result = schema.parse_result({"user": {"name": "a"}})
        assert len(result.error) == 2
        assert result.error.issues[1].path_str == ".user.name"

    def test_closest_match_tie_goes_to_first(self):
        schema = union(string(), number()).closest_match()
        issues = schema.parse_result(None).error.issues
        assert issues[1].code == InvalidType("string", "null")


class TestDiscriminatedUnion:
    schema = discriminated_union(
        "kind",
        object_({"kind": literal("circle"), "radius": number().positive()}),
        object_({"kind": literal("square"), "side": number().positive()}),
    )

    def test_dispatches(self):
        assert self.schema.parse({"kind": "square", "side": 2}) == {"kind": "square", "side": 2}

    def test_unknown_discriminator_single_issue(self):
        result = self.schema.parse_result({"kind": "triangle", "side": -1})
        assert len(result.error) == 1
        issue = result.error.issues[0]
        assert issue.code == Custom("invalid_discriminator")
        assert issue.path == (Field("kind"),)
        assert issue.message == 'Invalid discriminator value "triangle". Expected one of: "circle", "square"'

    def test_only_selected_branch_reports(self):
        result = self.schema.parse_result({"kind": "circle", "radius": -1, "side": "x"})
        assert [i.path_str for i in result.error] == [".radius"]

    def test_missing_discriminator(self):
        issue = self.schema.parse_result({"radius": 1}).error.issues[0]
        assert issue.code == MissingField()
        assert issue.message == 'Missing discriminator field "kind"'

    def test_non_object(self):
        assert self.schema.parse_result("circle").error.issues[0].code == InvalidType("object", "string")

    def test_branch_without_literal_rejected(self):
        with pytest.raises(ValueError):
            discriminated_union("kind", object_({"kind": string()}))


class TestIntersection:
    def test_left_wins_shared_path(self):
        result = intersection(string().min(3), string().email()).parse_result("ab")
        assert len(result.error) == 1
        assert result.error.issues[0].code == TooSmall(3)

    def test_both_pass(self):
        assert intersection(string().min(3), string().email()).parse("a@b.co") == "a@b.co"

    def test_object_outputs_merge_right_wins(self):
        left = object_({"id": number(), "tag": string()})
        right = object_({"tag": string().to_uppercase(), "name": string()})
        assert (left & right).parse({"id": 1, "tag": "x", "name": "n"}) == {"id": 1, "tag": "X", "name": "n"}

    def test_distinct_paths_kept_from_both(self):
        left = object_({"a": number()}).passthrough()
        right = object_({"b": number()}).passthrough()
        result = intersection(left, right).parse_result({"a": "x", "b": "y"})
        assert [i.path_str for i in result.error] == [".a", ".b"]


def make_tree(depth: int) -> dict:
    node = {"value": 1}
    for _ in range(depth - 1):
        node = {"value": 1, "children": [node]}
    return node


class TestLazy:
    tree = lazy(lambda: object_({"value": number(), "children": array(TestLazy.tree).optional()}))

    def test_recursive_structure(self):
        assert self.tree.parse(make_tree(5), max_depth=5)["children"][0]["value"] == 1

    def test_depth_over_limit(self):
        result = self.tree.parse_result(make_tree(6), max_depth=5)
        assert result.is_err()
        issue = next(i for i in result.error if isinstance(i.code, RecursionLimitExceeded))
        assert issue.message == "Maximum recursion depth of 5 exceeded"

    def test_deep_input_never_overflows_stack(self):
        result = self.tree.parse_result(make_tree(2000))
        assert any(isinstance(i.code, RecursionLimitExceeded) for i in result.error)

    def test_deep_input_through_parse_entry_point(self):
        result = parse(self.tree, make_tree(2000))
        assert any(isinstance(i.code, RecursionLimitExceeded) for i in result.error)

    def test_deep_json_text_is_malformed(self):
        text = '{"value": 1, "children": [' * 100_000 + '{"value": 1}' + "]}" * 100_000
        with pytest.raises(MalformedInput) as exc_info:
            parse(self.tree, text, fmt="json")
        assert exc_info.value.error.code is ErrorCode.E2021_INVALID_JSON

    def test_deep_yaml_text_is_malformed(self):
        with pytest.raises(MalformedInput) as exc_info:
            parse(self.tree, "[" * 5000 + "]" * 5000, fmt="yaml")
        assert exc_info.value.error.code is ErrorCode.E2022_INVALID_YAML

    def test_limit_logged(self, captured_logs):
        self.tree.parse_result(make_tree(3), max_depth=1)
        assert any(e["event"] == "recursion_limit_exceeded" for e in captured_logs)

    def test_settings_limit(self, monkeypatch):
        monkeypatch.setenv("VETTED_MAX_LAZY_DEPTH", "2")
        assert self.tree.parse_result(make_tree(3)).is_err()
        assert self.tree.parse_result(make_tree(2)).is_ok()


class TestCustom:
    def test_value_returned(self):
        assert custom(lambda v: int(v) * 2, "Not numeric").parse("21") == 42

    def test_err_returned(self):
        schema = custom(lambda v: Ok(v) if v == "yes" else Err("must say yes"))
        assert schema.parse("yes") == "yes"
        issue = schema.parse_result("no").error.issues[0]
        assert issue.code == Custom("custom")
        assert issue.message == "must say yes"

    def test_empty_err_uses_fallback_text(self):
        schema = custom(lambda v: Err(""), "Must be yes")
        assert schema.parse_result("no").error.issues[0].message == "Must be yes"

    def test_app_error_message_used(self):
        reject = AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message="not allowed")
        issue = custom(lambda v: Err(reject)).parse_result("x").error.issues[0]
        assert issue.message == "not allowed"

    def test_custom_issue_raised(self):
        def positive(value):
            if value <= 0:
                raise CustomIssue()
            return value

        assert custom(positive, "Must be positive").parse_result(-1).error.issues[0].message == "Must be positive"

    def test_other_exceptions_propagate(self):
        with pytest.raises(ValueError):
            custom(lambda v: int(v)).parse("abc")


class TestPreprocess:
    def test_runs_before_inner(self):
        schema = preprocess(lambda v: v.strip() if isinstance(v, str) else v, string().min(2))
        assert schema.parse("  ab ") == "ab"
        assert schema.parse_result("  a ").is_err()
