"""
Tag Classification Module

Pure functions for classifying Git references and formatting tag segments.
This module contains no side effects - only reference analysis logic.
"""

import re
from typing import Optional

from .config import SHORT_SHA_LENGTH
from .models import RefKind

SEMVER_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")
SHA_PATTERN = re.compile(r"^[0-9a-f]{7,40}$")
REF_PATH_PATTERN = re.compile(r"^refs/(?:heads|tags)/(.+)$")
UNSAFE_TAG_CHARS = re.compile(r"[/:]")

BRANCH_PREFIX = "refs/heads/"


def detect_ref_kind(ref: str) -> RefKind:
    """
    Determine the kind of a Git reference based on its format.

    Pure function; the first matching pattern wins, in this order:
    semver, commit SHA, full branch/tag ref path.

    Args:
        ref: The raw Git reference

    Returns:
        RefKind enum value
    """
    if SEMVER_PATTERN.match(ref):
        return RefKind.SEMVER

    if SHA_PATTERN.match(ref):
        return RefKind.COMMIT_SHA

    if REF_PATH_PATTERN.match(ref):
        return RefKind.BRANCH_OR_TAG_REF

    return RefKind.UNRECOGNIZED


def format_sha(sha: str) -> str:
    """Return the first seven characters of a hash, or the hash if shorter."""
    return sha[:SHORT_SHA_LENGTH]


def sanitize_tag(value: str) -> str:
    """Replace characters that are not allowed in a registry tag segment."""
    return UNSAFE_TAG_CHARS.sub("-", value)


def ref_path_name(ref: str) -> Optional[str]:
    """
    Extract the branch or tag name from a full ref path.

    Args:
        ref: A reference such as refs/heads/main or refs/tags/v1

    Returns:
        The name with the refs/heads/ or refs/tags/ prefix removed,
        or None if the reference is not a ref path
    """
    match = REF_PATH_PATTERN.match(ref)
    if not match:
        return None
    return match.group(1)


def parse_branch_name(ref: str) -> str:
    """Strip a leading refs/heads/ from a reference."""
    if not ref.startswith(BRANCH_PREFIX):
        return ref
    return ref[len(BRANCH_PREFIX):]


def tag_for_static_ref(ref: str, kind: RefKind) -> str:
    """
    Build the tag for a reference that needs no repository access.

    Args:
        ref: The raw Git reference
        kind: Its classification, anything but UNRECOGNIZED

    Returns:
        The formatted tag
    """
    if kind == RefKind.SEMVER:
        return ref
    if kind == RefKind.COMMIT_SHA:
        return f"sha-{format_sha(ref)}"
    if kind == RefKind.BRANCH_OR_TAG_REF:
        return sanitize_tag(ref_path_name(ref))
    raise ValueError(f"Reference {ref!r} needs a checkout to be tagged")


def commit_tag_prefix(ref: str) -> str:
    """Return the sanitized ref name that prefixes a fallback tag.

    Raises:
        ValueError: If nothing is left of the reference once refs/heads/ is stripped
    """
    name = sanitize_tag(parse_branch_name(ref))
    if not name.strip():
        raise ValueError(f"Reference {ref!r} does not name a branch")
    return name


def tag_for_commit(ref: str, commit_hash: str) -> str:
    """Build the fallback tag '<ref name>-<short hash>'."""
    return f"{commit_tag_prefix(ref)}-{format_sha(commit_hash)}"
