"""Tests for placeholder scanning and rewriting."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_template.placeholders import (
    drop_fit_auto,
    find_placeholders,
    has_constant,
    parse_directive,
    parse_placeholder,
    prefix_root,
    references_root,
    strip_constants,
)


class TestFindPlaceholders:
    def test_finds_all_tokens_in_order(self):
        found = find_placeholders("a %x% b %y/border:0101% c")
        assert [p.path for p in found] == ["x", "y"]
        assert found[0].directive is None
        assert found[1].directive.border == "0101"

    def test_non_text_has_no_placeholders(self):
        assert find_placeholders(42) == []
        assert find_placeholders(None) == []

    def test_single_percent_is_not_a_token(self):
        assert find_placeholders("50% off") == []

    def test_dotted_path(self):
        (p,) = find_placeholders("%records.date%")
        assert p.path == "records.date"
        assert p.token == "%records.date%"


class TestDirectives:
    def test_border_and_fit(self):
        p = parse_placeholder("%d/border:0101;fit:auto%")
        assert p.path == "d"
        assert p.directive.border == "0101"
        assert p.directive.fit == "auto"
        assert p.directive.autosize

    def test_fit_other_value_is_noop(self):
        assert not parse_directive("fit:none").autosize

    def test_invalid_border_is_ignored(self):
        assert parse_directive("border:01").border is None
        assert parse_directive("border:0102").border is None

    def test_unknown_keys_ignored(self):
        directive = parse_directive("colour:red;border:1111")
        assert directive.border == "1111"
        assert directive.fit is None


class TestConstants:
    def test_constant_detection(self):
        p = parse_placeholder('%"Total"%')
        assert p.is_constant
        assert p.literal == "Total"

    def test_constant_with_slash(self):
        p = parse_placeholder('%"a/b"%')
        assert p.is_constant
        assert p.literal == "a/b"
        assert p.directive is None

    def test_strip_constants_keeps_other_tokens(self):
        assert strip_constants('x %"A"% y %z%') == "x A y %z%"

    def test_has_constant(self):
        assert has_constant('%"A"%')
        assert not has_constant("%A%")

    def test_constant_never_references_root(self):
        assert not references_root('%"records.a"%', "records")


class TestRewriting:
    def test_prefix_only_root_tokens(self):
        text = "%records.a% and %other%"
        assert prefix_root(text, "records", 2) == "%2.records.a% and %other%"

    def test_prefix_keeps_directive(self):
        assert prefix_root("%records.a/fit:auto%", "records", 1) == "%1.records.a/fit:auto%"

    def test_references_root_needs_dot(self):
        assert references_root("%records.a%", "records")
        assert not references_root("%recordsX.a%", "records")
        assert not references_root("%records%", "records")

    @pytest.mark.parametrize("text, expected", [
        ("%r.a/fit:auto%", "%r.a%"),
        ("%r.a/border:0101;fit:auto%", "%r.a/border:0101%"),
        ("%r.a/fit:auto;border:0101%", "%r.a/border:0101%"),
        ("%r.a/border:0101%", "%r.a/border:0101%"),
        ("plain", "plain"),
    ])
    def test_drop_fit_auto(self, text, expected):
        assert drop_fit_auto(text) == expected

    def test_rewrites_leave_non_text_alone(self):
        assert strip_constants(5) == 5
        assert prefix_root(None, "r", 0) is None
