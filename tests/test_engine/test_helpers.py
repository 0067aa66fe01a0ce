"""Tests for the template helper library.

Covers:
- Word splitting and case conversions (incl. acronyms and digits)
- Pluralisation suffix rules
- Comparison and logic helpers, including absent operands
- includes / json / join
- HelperRegistry immutability and extension
"""

from __future__ import annotations

import pytest

from saas_playbook.engine.context import ABSENT
from saas_playbook.engine.helpers import (
    DEFAULT_HELPERS,
    HelperRegistry,
    and_,
    camel_case,
    eq,
    gt,
    gte,
    includes,
    join,
    kebab_case,
    lt,
    lte,
    neq,
    not_,
    or_,
    pascal_case,
    pluralize,
    singularize,
    snake_case,
    to_json,
    upper_snake,
    words,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------


class TestWords:
    def test_splits_on_separators(self):
        assert words("user-profile_settings page") == ["user", "profile", "settings", "page"]

    def test_splits_on_case_boundaries(self):
        assert words("userProfile") == ["user", "Profile"]

    def test_acronym_run(self):
        assert words("HTMLParser") == ["HTML", "Parser"]

    def test_digits_stay_with_word(self):
        assert words("oauth2Client") == ["oauth2", "Client"]

    def test_none_is_empty(self):
        assert words(None) == []


class TestCaseConversions:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("user profile", "UserProfile"),
            ("user-profile", "UserProfile"),
            ("user_profile", "UserProfile"),
            ("userProfile", "UserProfile"),
            ("HTMLParser", "HtmlParser"),
        ],
    )
    def test_pascal_case(self, value, expected):
        assert pascal_case(value) == expected

    def test_camel_case(self):
        assert camel_case("User Profile") == "userProfile"
        assert camel_case("invoice-line-item") == "invoiceLineItem"

    def test_kebab_case(self):
        assert kebab_case("UserProfile") == "user-profile"
        assert kebab_case("user_profile") == "user-profile"

    def test_snake_and_upper_snake(self):
        assert snake_case("UserProfile") == "user_profile"
        assert upper_snake("userProfile") == "USER_PROFILE"

    def test_empty_and_absent_inputs(self):
        assert pascal_case("") == ""
        assert camel_case(None) == ""
        assert kebab_case(ABSENT) == ""

    @pytest.mark.parametrize(
        "value", ["user profile", "UserProfile", "HTMLParser", "v2-api", "billing_plan_id"]
    )
    def test_kebab_of_pascal_is_stable(self, value):
        assert kebab_case(pascal_case(value)) == kebab_case(value)


# ---------------------------------------------------------------------------
# Pluralisation
# ---------------------------------------------------------------------------


class TestPluralize:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("company", "companies"),
            ("day", "days"),
            ("box", "boxes"),
            ("status", "statuses"),
            ("branch", "branches"),
            ("user", "users"),
        ],
    )
    def test_suffix_rules(self, value, expected):
        assert pluralize(value) == expected

    def test_irregular_nouns_use_suffix_rule(self):
        assert pluralize("person") == "persons"

    def test_empty(self):
        assert pluralize("") == ""
        assert pluralize(None) == ""

    @pytest.mark.parametrize(
        "value,expected",
        [("companies", "company"), ("boxes", "box"), ("users", "user"), ("class", "class")],
    )
    def test_singularize(self, value, expected):
        assert singularize(value) == expected


# ---------------------------------------------------------------------------
# Comparison & logic
# ---------------------------------------------------------------------------


class TestComparisons:
    def test_eq_neq(self):
        assert eq("jwt", "jwt")
        assert not eq("jwt", "session")
        assert neq(1, 2)

    def test_numeric_ordering(self):
        assert gt(10, 9)
        assert gte(3, 3)
        assert lt(2, 10)
        assert lte(2.5, 3)

    def test_string_ordering_when_not_both_numbers(self):
        # "10" < "9" lexically
        assert lt("10", 9)

    def test_absent_operand_is_false(self):
        assert not gt(None, 1)
        assert not lt(1, None)
        assert not gte(None, None)

    def test_logic(self):
        assert and_(True, 1, "x")
        assert not and_(True, 0)
        assert or_(0, "", "x")
        assert not or_()
        assert not_(ABSENT)


class TestIncludes:
    def test_sequence_membership(self):
        assert includes(["google", "github"], "github")
        assert not includes(("google",), "discord")

    def test_comma_delimited_string(self):
        assert includes("google, github", "github")
        assert not includes("google,github", "git")

    def test_mapping_tests_keys(self):
        assert includes({"auth": {"enabled": True}}, "auth")

    def test_absent_or_unhashable(self):
        assert not includes(None, "x")
        assert not includes(frozenset({"a"}), ["unhashable"])


class TestStructural:
    def test_json_default_indent(self):
        assert to_json({"a": [1, 2]}) == '{\n  "a": [\n    1,\n    2\n  ]\n}'

    def test_json_compact(self):
        assert to_json(("owner", "admin"), 0) == '["owner", "admin"]'

    def test_json_serialises_read_only_mappings(self):
        from types import MappingProxyType

        assert to_json(MappingProxyType({"k": 1}), 0) == '{"k": 1}'

    def test_join(self):
        assert join(["a", "b"]) == "a, b"
        assert join(("a", "b"), " | ") == "a | b"

    def test_join_non_sequence(self):
        assert join("abc") == ""
        assert join(None) == ""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestHelperRegistry:
    def test_default_names(self):
        for name in ("camel_case", "pascal_case", "kebab_case", "pluralize", "eq",
                     "includes", "json", "join", "and_", "or_", "not_"):
            assert name in DEFAULT_HELPERS

    def test_predicates(self):
        assert "includes" in DEFAULT_HELPERS.predicates
        assert "pascal_case" not in DEFAULT_HELPERS.predicates

    def test_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_HELPERS["shout"] = str.upper  # type: ignore[index]

    def test_extend_returns_new_registry(self):
        extended = DEFAULT_HELPERS.extend({"shout": lambda v: str(v).upper() + "!"})
        assert "shout" in extended
        assert "shout" not in DEFAULT_HELPERS
        assert extended.predicates == DEFAULT_HELPERS.predicates

    def test_unknown_predicate_rejected(self):
        with pytest.raises(ValueError):
            HelperRegistry({"eq": eq}, frozenset({"missing"}))
