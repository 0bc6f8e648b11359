"""Tests for version spec classification and matching."""

import pytest

from gha_pin.versions import (
    SpecKind,
    classify_version_spec,
    ensure_leading_v,
    is_full_commit_sha,
    match_version_spec,
)


# ---------------------------------------------------------------------------
# classify_version_spec
# ---------------------------------------------------------------------------

class TestClassifyVersionSpec:
    @pytest.mark.parametrize("spec, kind, normalized", [
        ("v1.2.3", SpecKind.EXACT, "v1.2.3"),
        ("1.2.3", SpecKind.EXACT, "v1.2.3"),
        ("V1.2.3", SpecKind.EXACT, "v1.2.3"),
        ("v1.2.3-rc.1", SpecKind.EXACT, "v1.2.3-rc.1"),
        ("1.2.3+build.5", SpecKind.EXACT, "v1.2.3+build.5"),
        ("v1.2", SpecKind.MINOR, "v1.2"),
        ("1.2", SpecKind.MINOR, "v1.2"),
        ("v1", SpecKind.MAJOR, "v1"),
        ("1", SpecKind.MAJOR, "v1"),
        ("main", SpecKind.UNKNOWN, "main"),
    ])
    def test_known_shapes(self, spec, kind, normalized):
        assert classify_version_spec(spec) == (kind, normalized)

    def test_trims_whitespace(self):
        assert classify_version_spec("  v4  ") == (SpecKind.MAJOR, "v4")

    def test_empty(self):
        assert classify_version_spec("") == (SpecKind.UNKNOWN, "")
        assert classify_version_spec("   ") == (SpecKind.UNKNOWN, "")

    def test_unknown_keeps_original_case(self):
        assert classify_version_spec("Release-2024") == (SpecKind.UNKNOWN, "Release-2024")

    def test_prerelease_suffix_only_for_exact(self):
        assert classify_version_spec("v1.2-beta")[0] is SpecKind.UNKNOWN
        assert classify_version_spec("v1-beta")[0] is SpecKind.UNKNOWN

    def test_four_components_is_unknown(self):
        assert classify_version_spec("v1.2.3.4")[0] is SpecKind.UNKNOWN


# ---------------------------------------------------------------------------
# ensure_leading_v
# ---------------------------------------------------------------------------

class TestEnsureLeadingV:
    @pytest.mark.parametrize("spec, expected", [
        ("v1.2.3", "v1.2.3"),
        ("1.2.3", "v1.2.3"),
        ("V2", "v2"),
        ("alpha", "alpha"),
    ])
    def test_cases(self, spec, expected):
        assert ensure_leading_v(spec) == expected


# ---------------------------------------------------------------------------
# match_version_spec
# ---------------------------------------------------------------------------

class TestMatchVersionSpec:
    def test_major_matches_patch_release(self):
        assert match_version_spec("v2.3.4", "v2", SpecKind.MAJOR) is True

    def test_minor_matches_patch_release(self):
        assert match_version_spec("v2.3.4", "v2.3", SpecKind.MINOR) is True

    def test_minor_mismatch(self):
        assert match_version_spec("v2.3.4", "v2.4", SpecKind.MINOR) is False

    def test_major_requires_dot_boundary(self):
        assert match_version_spec("v20.1.0", "v2", SpecKind.MAJOR) is False
        assert match_version_spec("v1.20.0", "v1.2", SpecKind.MINOR) is False

    def test_major_matches_bare_tag(self):
        assert match_version_spec("v2", "v2", SpecKind.MAJOR) is True
        assert match_version_spec("2", "v2", SpecKind.MAJOR) is True

    def test_exact_ignores_leading_v(self):
        assert match_version_spec("v2.3.4", "v2.3.4", SpecKind.EXACT) is True
        assert match_version_spec("2.3.4", "v2.3.4", SpecKind.EXACT) is True

    def test_unknown_is_literal(self):
        assert match_version_spec("v1.2.3", "main", SpecKind.UNKNOWN) is False
        assert match_version_spec("main", "main", SpecKind.UNKNOWN) is True


# ---------------------------------------------------------------------------
# is_full_commit_sha
# ---------------------------------------------------------------------------

class TestIsFullCommitSha:
    def test_lowercase_sha(self):
        assert is_full_commit_sha("af513c7a016048ae468971c52ed77d9562c7c819") is True

    def test_uppercase_sha(self):
        assert is_full_commit_sha("AF513C7A016048AE468971C52ED77D9562C7C819") is True

    def test_39_chars(self):
        assert is_full_commit_sha("a" * 39) is False

    def test_non_hex(self):
        assert is_full_commit_sha("g" * 40) is False

    def test_trailing_newline(self):
        assert is_full_commit_sha("a" * 40 + "\n") is False
