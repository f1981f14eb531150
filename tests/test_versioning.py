"""Tests for version parsing and constraint matching."""

import pytest

from wtf.errors import ConstraintError, VersionParseError
from wtf.versioning.constraint import Constraint
from wtf.versioning.models import (
    compare_versions,
    format_version,
    parse_version,
    sort_versions,
    try_parse_version,
)


class TestParseVersion:
    """Tests for parse_version normalisation."""

    def test_full_version(self):
        v = parse_version("1.6.2")
        assert (v.major, v.minor, v.patch) == (1, 6, 2)
        assert format_version(v) == "1.6.2"

    def test_missing_segments_default_to_zero(self):
        assert parse_version("1.0") == parse_version("1.0.0")
        assert parse_version("2") == parse_version("2.0.0")

    def test_leading_zeros_normalise(self):
        assert parse_version("01.02.03") == parse_version("1.2.3")
        assert format_version(parse_version("01.02.03")) == "1.2.3"

    def test_leading_v_accepted(self):
        assert parse_version("v1.5.0") == parse_version("1.5.0")

    def test_prerelease_and_build(self):
        v = parse_version("2.0.0-alpha.1+abc")
        assert v.prerelease == ("alpha", "1")
        assert v.build == ("abc",)
        assert format_version(v) == "2.0.0-alpha.1+abc"

    @pytest.mark.parametrize("text", [".DS_Store", "", "latest", "1.2.3.4", "1..2", "1.2.3-", "terraform"])
    def test_invalid_strings_raise(self, text):
        with pytest.raises(VersionParseError):
            parse_version(text)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_version("nope")

    def test_try_parse_returns_none(self):
        assert try_parse_version("README.md") is None
        assert try_parse_version("1.0.0") == parse_version("1.0.0")


class TestOrdering:
    """Tests for the total order over versions."""

    def test_numeric_not_lexical(self):
        assert parse_version("1.10.0") > parse_version("1.9.0")

    def test_prerelease_before_release(self):
        assert parse_version("2.0.0-alpha") < parse_version("2.0.0")
        assert parse_version("2.0.0-alpha") < parse_version("2.0.0-beta")
        assert parse_version("2.0.0-alpha") > parse_version("1.9.9")

    def test_sort_versions_dedupes(self):
        versions = [parse_version(s) for s in ["1.2.0", "1.0.0", "1.2", "0.9.0"]]
        assert [format_version(v) for v in sort_versions(versions)] == ["0.9.0", "1.0.0", "1.2.0"]


def _ok(constraint, version):
    return Constraint.parse(constraint).check(parse_version(version))


class TestConstraint:
    """Tests for Constraint parsing and checks."""

    def test_empty_matches_everything(self):
        c = Constraint.parse("")
        assert c.is_empty()
        assert c.check(parse_version("0.1.0"))
        assert c.check(parse_version("99.0.0"))
        assert c.check(parse_version("2.0.0-alpha"))
        assert Constraint().check(parse_version("2.0.0-alpha"))
        assert str(c) == ""

    def test_none_is_empty(self):
        assert Constraint.parse(None).is_empty()

    @pytest.mark.parametrize("constraint,version,expected", [
        ("= 1.1.0", "1.1.0", True),
        ("= 1.1.0", "1.1.1", False),
        ("1.1.0", "1.1.0", True),
        ("!= 1.2.0", "1.2.0", False),
        ("!= 1.2.0", "1.1.0", True),
        ("> 1.0.0", "1.0.0", False),
        ("> 1.0.0", "1.0.1", True),
        (">= 1.0.0", "1.0.0", True),
        ("< 2.0.0", "2.0.0", False),
        ("<= 2.0.0", "2.0.0", True),
        (">= 1.0.0, < 2.0.0", "1.9.9", True),
        (">= 1.0.0, < 2.0.0", "2.0.0", False),
        (">=1.0.0,<2.0.0", "1.5.0", True),
    ])
    def test_operators(self, constraint, version, expected):
        assert _ok(constraint, version) is expected

    def test_pessimistic_minor(self):
        assert _ok("~> 1.0", "1.0.0")
        assert _ok("~> 1.0", "1.9.9")
        assert not _ok("~> 1.0", "2.0.0")
        assert not _ok("~> 1.0", "0.9.0")

    def test_pessimistic_patch(self):
        assert _ok("~> 1.0.0", "1.0.9")
        assert not _ok("~> 1.0.0", "1.1.0")

    def test_pessimistic_major_only_is_lower_bound(self):
        assert _ok("~> 1", "7.0.0")
        assert not _ok("~> 1", "0.9.0")

    def test_prerelease_excluded_from_release_constraint(self):
        assert not _ok(">= 1.0.0", "2.0.0-alpha")
        assert not _ok("~> 1.0", "1.1.0-alpha")
        assert not _ok("!= 1.2.0", "1.3.0-rc1")

    def test_prerelease_selected_when_targeted(self):
        assert _ok(">= 2.0.0-alpha", "2.0.0-beta")
        assert _ok(">= 2.0.0-alpha", "2.0.0")
        assert not _ok(">= 2.0.0-alpha", "2.1.0-beta")

    def test_exact_prerelease(self):
        assert _ok("= 1.5.0-rc1", "1.5.0-rc1")
        assert not _ok("= 1.5.0-rc1", "1.5.0-rc2")

    def test_contains_operator(self):
        assert parse_version("1.2.0") in Constraint.parse("~> 1.0")

    def test_render(self):
        assert str(Constraint.parse(">= 1.0.0,< 2.0.0")) == ">= 1.0.0, < 2.0.0"
        assert str(Constraint.parse("~> 1.5.0")) == "~> 1.5.0"
        assert str(Constraint.parse("1.2.3")) == "= 1.2.3"

    def test_equality(self):
        assert Constraint.parse(">= 1.0") == Constraint.parse(">=1.0")
        assert Constraint.parse(">= 1.0") != Constraint.parse("> 1.0")

    @pytest.mark.parametrize("text", ["not-a-constraint", "=> 1.0", ">= 1.0.0 < 2.0.0", ">=", "1.0,,2.0"])
    def test_invalid_constraints(self, text):
        with pytest.raises(ConstraintError):
            Constraint.parse(text)


class TestBuildMetadataOrder:
    """Tests for the total order used when build metadata differs."""

    def test_build_breaks_ties(self):
        a, b = parse_version("1.0.0+a"), parse_version("1.0.0+b")
        assert compare_versions(a, b) == -1
        assert compare_versions(b, a) == 1
        assert compare_versions(a, parse_version("1.0.0+a")) == 0

    def test_precedence_before_build(self):
        assert compare_versions(parse_version("1.0.1+a"), parse_version("1.0.0+z")) == 1

    def test_sort_versions_deterministic(self):
        forward = sort_versions([parse_version("1.0.0+b"), parse_version("1.0.0+a")])
        backward = sort_versions([parse_version("1.0.0+a"), parse_version("1.0.0+b")])
        assert [format_version(v) for v in forward] == ["1.0.0+a", "1.0.0+b"]
        assert forward == backward
