"""
Reference Tag Resolver

Turns a raw Git reference into a normalized image tag. Semver, commit SHA and
full ref paths are tagged from the reference alone; anything else is checked
out so the tag can carry the commit it points to.

The checkout capability is any object providing:
    checkout(repository, ref) -> working copy
    head_commit_hash(working_copy) -> str
    release(working_copy)   (optional, called once the hash is read)
"""

import logging
import re

from .exceptions import InvalidArgument, CheckoutFailure, CommitResolutionFailure
from .models import RefKind, ReferenceClassification
from .tag_classification import (
    detect_ref_kind,
    tag_for_static_ref,
    tag_for_commit,
    commit_tag_prefix,
)

logger = logging.getLogger(__name__)

# full or abbreviated object names
COMMIT_HASH_PATTERN = re.compile(r"^[0-9a-f]+$")


def classify_reference(raw_ref: str, repository: str, checkout) -> ReferenceClassification:
    """
    Classify a reference and compute its tag.

    Args:
        raw_ref: Branch name, tag name, full ref path or commit SHA
        repository: Repository locator used if a checkout is needed
        checkout: Checkout capability, only used for unrecognized references

    Returns:
        ReferenceClassification with the resolved tag

    Raises:
        InvalidArgument: If raw_ref or repository is empty
        CheckoutFailure: If the reference cannot be checked out
        CommitResolutionFailure: If the checked out HEAD cannot be read
    """
    if not raw_ref or not raw_ref.strip():
        raise InvalidArgument("ref value is required", ref=raw_ref, repository=repository)
    if not repository or not repository.strip():
        raise InvalidArgument("repository value is required", ref=raw_ref, repository=repository)

    kind = detect_ref_kind(raw_ref)
    if kind != RefKind.UNRECOGNIZED:
        tag = tag_for_static_ref(raw_ref, kind)
        logger.debug("Resolved %s (%s) to tag %s", raw_ref, kind.value, tag)
        return ReferenceClassification(raw_ref=raw_ref, kind=kind, resolved_tag=tag)

    try:
        commit_tag_prefix(raw_ref)
    except ValueError as e:
        raise InvalidArgument(str(e), ref=raw_ref, repository=repository) from e

    commit_hash = _resolve_head_commit(raw_ref, repository, checkout)
    tag = tag_for_commit(raw_ref, commit_hash)
    logger.info("Resolved %s in %s at %s to tag %s", raw_ref, repository, commit_hash, tag)
    return ReferenceClassification(raw_ref=raw_ref, kind=kind, resolved_tag=tag)


def resolve_tag(raw_ref: str, repository: str, checkout) -> str:
    """Resolve a reference into an image tag. See classify_reference."""
    return classify_reference(raw_ref, repository, checkout).resolved_tag


def _resolve_head_commit(raw_ref: str, repository: str, checkout) -> str:
    """Check out the reference and return its HEAD commit hash.

    The working copy is handed back to the capability's optional
    release(working_copy) once the hash has been read.
    """
    try:
        working_copy = checkout.checkout(repository, raw_ref)
    except CheckoutFailure as e:
        _attach_context(e, raw_ref, repository)
        raise
    except Exception as e:
        raise CheckoutFailure(
            f"Failed to check out {raw_ref} from {repository}: {e}",
            ref=raw_ref,
            repository=repository,
        ) from e

    try:
        commit_hash = checkout.head_commit_hash(working_copy)
    except CommitResolutionFailure as e:
        _attach_context(e, raw_ref, repository)
        raise
    except Exception as e:
        raise CommitResolutionFailure(
            f"Failed to read HEAD commit of {raw_ref} from {repository}: {e}",
            ref=raw_ref,
            repository=repository,
        ) from e
    finally:
        release = getattr(checkout, "release", None)
        if release is not None:
            release(working_copy)

    commit_hash = (commit_hash or "").strip()
    if not COMMIT_HASH_PATTERN.match(commit_hash):
        raise CommitResolutionFailure(
            f"Unexpected HEAD commit {commit_hash!r} for {raw_ref} from {repository}",
            ref=raw_ref,
            repository=repository,
        )
    return commit_hash


def _attach_context(error, raw_ref: str, repository: str) -> None:
    if error.ref is None:
        error.ref = raw_ref
    if error.repository is None:
        error.repository = repository
