"""Tests for --key=value option parsing and coercion."""

from __future__ import annotations

import pytest

from saas_playbook.features.options import (
    OptionsError,
    as_bool,
    as_int,
    as_list,
    as_str,
    parse_options,
)

pytestmark = pytest.mark.unit


class TestParseOptions:
    def test_values_are_coerced(self):
        options = parse_options(
            ["--providers=google,github", "--strategy=jwt", "--trial=14", "--checklist=false"]
        )
        assert options == {
            "providers": ["google", "github"],
            "strategy": "jwt",
            "trial": 14,
            "checklist": False,
        }

    def test_keys_normalised_to_snake_case(self):
        options = parse_options(["--emailProvider=resend", "--auto-deploy=true"])
        assert options == {"email_provider": "resend", "auto_deploy": True}

    def test_bare_flag_is_true(self):
        assert parse_options(["--docker"]) == {"docker": True}

    def test_value_may_contain_equals(self):
        assert parse_options(["--description=a=b"]) == {"description": "a=b"}

    def test_list_items_are_stripped(self):
        assert parse_options(["--plans= free , pro ,"]) == {"plans": ["free", "pro"]}

    def test_positional_token_rejected(self):
        with pytest.raises(OptionsError):
            parse_options(["google"])

    def test_nameless_flag_rejected(self):
        with pytest.raises(OptionsError):
            parse_options(["--=x"])


class TestCoercers:
    def test_as_list(self):
        assert as_list(None, "free,pro") == ["free", "pro"]
        assert as_list("a, b") == ["a", "b"]
        assert as_list(["a", " b "]) == ["a", "b"]
        assert as_list(True, "x") == ["x"]
        assert as_list(14) == ["14"]
        assert as_list(None) == []

    def test_as_bool(self):
        assert as_bool(None, True) is True
        assert as_bool("yes") is True
        assert as_bool("off", True) is False
        assert as_bool(0) is False
        assert as_bool("maybe", True) is True

    def test_as_int(self):
        assert as_int(7, 14) == 7
        assert as_int("30", 14) == 30
        assert as_int(False, 14) == 14
        assert as_int("soon", 14) == 14

    def test_as_str(self):
        assert as_str(None, "jwt") == "jwt"
        assert as_str(True, "jwt") == "jwt"
        assert as_str("session", "jwt") == "session"
        assert as_str(["a", "b"], "x") == "a,b"
