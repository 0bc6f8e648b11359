"""
Version spec classification and matching.

A version spec is the human-readable text written after `#` on a pinned
`uses:` line, e.g. `v4`, `v4.1` or `v4.1.7`. It decides which release or
tag a pin has to track.
"""

import re
from enum import Enum


class SpecKind(Enum):
    UNKNOWN = "unknown"
    EXACT = "exact"
    MINOR = "minor"
    MAJOR = "major"


COMMIT_SHA_RE = re.compile(r"^[0-9a-fA-F]{40}$")
SEMVER_EXACT_RE = re.compile(r"^v?\d+\.\d+\.\d+([-+][\w.-]+)?$", re.IGNORECASE)
SEMVER_MINOR_RE = re.compile(r"^v?\d+\.\d+$", re.IGNORECASE)
SEMVER_MAJOR_RE = re.compile(r"^v?\d+$", re.IGNORECASE)


def is_full_commit_sha(ref: str) -> bool:
    """True if `ref` is a full 40-character hex commit SHA (any case)."""
    return bool(COMMIT_SHA_RE.fullmatch(ref or ""))


def ensure_leading_v(spec: str) -> str:
    if spec.startswith("v"):
        return spec
    if spec.startswith("V"):
        return "v" + spec[1:]
    if spec[:1].isdigit():
        return "v" + spec
    return spec


def classify_version_spec(spec: str) -> tuple[SpecKind, str]:
    """
    Classify a free-form version spec.

    Returns:
        (kind, normalized). Recognized kinds are normalized to lowercase with
        a leading `v`; UNKNOWN specs are returned trimmed but otherwise as-is.
    """
    spec = (spec or "").strip()
    if not spec:
        return SpecKind.UNKNOWN, ""

    lower = spec.lower()
    if SEMVER_EXACT_RE.match(lower):
        return SpecKind.EXACT, ensure_leading_v(lower)
    if SEMVER_MINOR_RE.match(lower):
        return SpecKind.MINOR, ensure_leading_v(lower)
    if SEMVER_MAJOR_RE.match(lower):
        return SpecKind.MAJOR, ensure_leading_v(lower)
    return SpecKind.UNKNOWN, spec


def _strip_v(text: str) -> str:
    return text[1:] if text.startswith("v") else text


def match_version_spec(tag: str, normalized: str, kind: SpecKind) -> bool:
    """Check whether a release/tag name satisfies a classified spec."""
    tag_lower = tag.lower()
    spec_lower = normalized.lower()
    tag_trimmed = _strip_v(tag_lower)
    spec_trimmed = _strip_v(spec_lower)

    if kind is SpecKind.EXACT:
        return tag_trimmed == spec_trimmed
    if kind in (SpecKind.MINOR, SpecKind.MAJOR):
        return tag_trimmed == spec_trimmed or tag_trimmed.startswith(spec_trimmed + ".")
    return tag_lower == spec_lower
