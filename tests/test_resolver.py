"""Test module for resolver.py.

Verifies the classify-and-format rules of the reference tag resolver and
how failures of the checkout capability are reported.
"""

from unittest.mock import Mock
import pytest
from image_tag_resolver.exceptions import (
    InvalidArgument,
    CheckoutFailure,
    CommitResolutionFailure,
    TagResolutionError,
)
from image_tag_resolver.models import RefKind
from image_tag_resolver.resolver import classify_reference, resolve_tag

REPOSITORY = "dictybase/modware"


class TestStaticResolution:
    """References that resolve without a checkout."""

    def test_semver_returned_unchanged(self, fake_checkout):
        assert resolve_tag("v1.2.3", REPOSITORY, fake_checkout) == "v1.2.3"
        assert resolve_tag("1.2.3", REPOSITORY, fake_checkout) == "1.2.3"
        fake_checkout.checkout.assert_not_called()

    def test_sha_prefixed_and_truncated(self, fake_checkout):
        assert resolve_tag("abcdef1234567", REPOSITORY, fake_checkout) == "sha-abcdef1"
        fake_checkout.checkout.assert_not_called()

    def test_seven_character_sha(self, fake_checkout):
        assert resolve_tag("abcdef1", REPOSITORY, fake_checkout) == "sha-abcdef1"

    def test_branch_ref_path(self, fake_checkout):
        assert resolve_tag("refs/heads/feature-x", REPOSITORY, fake_checkout) == "feature-x"
        fake_checkout.checkout.assert_not_called()

    def test_tag_ref_path(self, fake_checkout):
        assert resolve_tag("refs/tags/release-2024", REPOSITORY, fake_checkout) == "release-2024"

    def test_classification_is_recorded(self, fake_checkout):
        result = classify_reference("refs/heads/develop", REPOSITORY, fake_checkout)
        assert result.raw_ref == "refs/heads/develop"
        assert result.kind == RefKind.BRANCH_OR_TAG_REF
        assert result.resolved_tag == "develop"

    def test_resolved_tag_has_no_separators(self, fake_checkout):
        tag = resolve_tag("refs/heads/team/feature:x", REPOSITORY, fake_checkout)
        assert "/" not in tag
        assert ":" not in tag


class TestFallbackResolution:
    """References that need a checkout to be tagged."""

    def test_bare_branch(self, fake_checkout):
        assert resolve_tag("main", REPOSITORY, fake_checkout) == "main-9f8e7d6"
        fake_checkout.checkout.assert_called_once_with(REPOSITORY, "main")
        fake_checkout.head_commit_hash.assert_called_once_with(
            fake_checkout.checkout.return_value
        )

    def test_branch_with_slash_is_sanitized(self, fake_checkout):
        assert resolve_tag("feature/login", REPOSITORY, fake_checkout) == "feature-login-9f8e7d6"

    def test_short_hex_falls_back(self, fake_checkout):
        """A six character hex string is not a SHA and is not an error."""
        assert resolve_tag("abcdef", REPOSITORY, fake_checkout) == "abcdef-9f8e7d6"

    def test_kind_is_unrecognized(self, fake_checkout):
        result = classify_reference("main", REPOSITORY, fake_checkout)
        assert result.kind == RefKind.UNRECOGNIZED

    def test_idempotent(self, fake_checkout):
        first = resolve_tag("main", REPOSITORY, fake_checkout)
        second = resolve_tag("main", REPOSITORY, fake_checkout)
        assert first == second

    def test_hash_whitespace_is_ignored(self, fake_checkout, commit_hash):
        fake_checkout.head_commit_hash.return_value = commit_hash + "\n"
        assert resolve_tag("main", REPOSITORY, fake_checkout) == "main-9f8e7d6"

    def test_abbreviated_hash_is_truncated(self, fake_checkout):
        fake_checkout.head_commit_hash.return_value = "9f8e7d6c5b4a"
        assert resolve_tag("main", REPOSITORY, fake_checkout) == "main-9f8e7d6"

    def test_working_copy_is_released(self, fake_checkout):
        resolve_tag("main", REPOSITORY, fake_checkout)
        fake_checkout.release.assert_called_once_with(fake_checkout.checkout.return_value)

    def test_working_copy_is_released_when_head_fails(self, fake_checkout):
        fake_checkout.head_commit_hash.side_effect = RuntimeError("rev-parse failed")

        with pytest.raises(CommitResolutionFailure):
            resolve_tag("main", REPOSITORY, fake_checkout)

        fake_checkout.release.assert_called_once_with(fake_checkout.checkout.return_value)


class TestErrors:
    """Failures and how they are reported."""

    @pytest.mark.parametrize("ref,repository", [
        ("", REPOSITORY),
        ("   ", REPOSITORY),
        ("main", ""),
        ("v1.2.3", ""),
    ])
    def test_invalid_argument_before_checkout(self, fake_checkout, ref, repository):
        with pytest.raises(InvalidArgument):
            resolve_tag(ref, repository, fake_checkout)
        fake_checkout.checkout.assert_not_called()

    def test_checkout_failure_propagates(self, fake_checkout):
        fake_checkout.checkout.side_effect = CheckoutFailure("clone failed")

        with pytest.raises(CheckoutFailure) as exc_info:
            resolve_tag("main", REPOSITORY, fake_checkout)

        assert exc_info.value.ref == "main"
        assert exc_info.value.repository == REPOSITORY
        fake_checkout.head_commit_hash.assert_not_called()

    def test_unexpected_checkout_error_is_wrapped(self, fake_checkout):
        fake_checkout.checkout.side_effect = OSError("disk full")

        with pytest.raises(CheckoutFailure) as exc_info:
            resolve_tag("main", REPOSITORY, fake_checkout)

        assert isinstance(exc_info.value.__cause__, OSError)
        assert "main" in str(exc_info.value)
        assert REPOSITORY in str(exc_info.value)

    def test_checkout_is_not_retried(self, fake_checkout):
        fake_checkout.checkout.side_effect = CheckoutFailure("clone failed")

        with pytest.raises(CheckoutFailure):
            resolve_tag("main", REPOSITORY, fake_checkout)

        assert fake_checkout.checkout.call_count == 1

    def test_commit_resolution_failure(self, fake_checkout):
        fake_checkout.head_commit_hash.side_effect = RuntimeError("rev-parse failed")

        with pytest.raises(CommitResolutionFailure) as exc_info:
            resolve_tag("main", REPOSITORY, fake_checkout)

        assert exc_info.value.ref == "main"
        assert exc_info.value.repository == REPOSITORY

    def test_non_hex_commit_is_rejected(self, fake_checkout):
        fake_checkout.head_commit_hash.return_value = "fatal: not a git repository"

        with pytest.raises(CommitResolutionFailure):
            resolve_tag("main", REPOSITORY, fake_checkout)

    def test_empty_commit_is_rejected(self, fake_checkout):
        fake_checkout.head_commit_hash.return_value = "\n"

        with pytest.raises(CommitResolutionFailure):
            resolve_tag("main", REPOSITORY, fake_checkout)

    def test_empty_branch_name_is_rejected_before_checkout(self, fake_checkout):
        with pytest.raises(InvalidArgument) as exc_info:
            resolve_tag("refs/heads/", REPOSITORY, fake_checkout)

        assert exc_info.value.ref == "refs/heads/"
        fake_checkout.checkout.assert_not_called()

    def test_errors_share_a_base_class(self):
        for error in (InvalidArgument, CheckoutFailure, CommitResolutionFailure):
            assert issubclass(error, TagResolutionError)

    def test_checkout_object_not_needed_for_static_refs(self):
        """Static references never touch the checkout capability."""
        assert resolve_tag("v2.0.0", REPOSITORY, Mock(spec=[])) == "v2.0.0"
