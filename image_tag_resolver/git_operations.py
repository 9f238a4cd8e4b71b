"""
Git Operations Module for Image Tag Resolver

This module handles Git-related operations such as repository checkout and client initialization.
It provides functions to interact with both remote Git repositories and GitHub's API.

Classes:
    GitCheckout: Checkout capability used by the resolver's fallback path

Functions:
    repository_url: Expands an 'owner/repo' locator into a clone URL
    setup_github_client: Sets up a GitHub client with proper authentication

Raises:
    CheckoutFailure: When a reference cannot be checked out
    CommitResolutionFailure: When the HEAD commit cannot be read
    GitOperationError: When the GitHub client cannot be set up
"""

import logging
import os
import shutil
import tempfile
import threading
from typing import Optional

from git import Repo
from git.exc import GitCommandError
from github import Github
from github.Repository import Repository

from .config import GITHUB_URL
from .exceptions import CheckoutFailure, CommitResolutionFailure, GitOperationError
from .tag_classification import ref_path_name

logger = logging.getLogger(__name__)


def repository_url(locator: str) -> str:
    """Return a clone URL for a repository locator.

    'owner/repo' is expanded to a GitHub HTTPS URL; URLs, scp-style remotes
    and existing local paths are returned unchanged.
    """
    if "://" in locator or locator.startswith("git@") or os.path.exists(locator):
        return locator
    return f"{GITHUB_URL}/{locator.strip('/')}.git"


class GitCheckout:
    """Clones repositories at a reference into private working directories.

    Every directory the checkout creates is tracked until it is released.
    Use it as a context manager, or call cleanup(), to remove whatever is left.
    """

    def __init__(self, base_dir: Optional[str] = None):
        """Initialize the checkout capability.

        Args:
            base_dir: Directory under which working copies are created;
                the system temp directory if omitted
        """
        self.base_dir = base_dir
        self._workdirs = set()
        self._lock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.cleanup()

    def _new_workdir(self) -> str:
        path = tempfile.mkdtemp(prefix="ref-checkout-", dir=self.base_dir)
        with self._lock:
            self._workdirs.add(os.path.realpath(path))
        return path

    def _remove_workdir(self, path: str) -> None:
        path = os.path.realpath(path)
        with self._lock:
            if path not in self._workdirs:
                return
            self._workdirs.discard(path)
        logger.debug("Removing working directory %s", path)
        shutil.rmtree(path, ignore_errors=True)

    def checkout(self, repository: str, ref: str) -> Repo:
        """Clone a repository and check out a reference.

        The reference is first cloned as a branch or tag. If the remote does
        not know it by that name, the default branch is cloned and the
        reference is checked out as a commit. Directories of failed attempts
        are removed before returning or raising.

        Args:
            repository: Repository locator or clone URL
            ref: Branch, tag, full ref path or commit hash

        Returns:
            The cloned repository

        Raises:
            CheckoutFailure: If the reference cannot be materialized
        """
        url = repository_url(repository)
        branch = ref_path_name(ref) or ref
        workdir = self._new_workdir()
        try:
            return Repo.clone_from(url, workdir, branch=branch)
        except GitCommandError as e:
            self._remove_workdir(workdir)
            if "not found" not in str(e.stderr).lower():
                raise CheckoutFailure(
                    f"Error in checking out repo {url}: {e}", ref=ref, repository=repository
                ) from e
            logger.info("Reference %s not found in %s, checking it out from the default branch", ref, url)

        workdir = self._new_workdir()
        try:
            repo = Repo.clone_from(url, workdir)
        except GitCommandError as e:
            self._remove_workdir(workdir)
            raise CheckoutFailure(
                f"Error in checking out default branch of {url}: {e}", ref=ref, repository=repository
            ) from e

        try:
            repo.git.checkout(ref)
        except GitCommandError as e:
            repo.close()
            self._remove_workdir(workdir)
            raise CheckoutFailure(
                f"Error in checking out ref {ref} from {url}: {e}", ref=ref, repository=repository
            ) from e
        return repo

    def head_commit_hash(self, repo: Repo) -> str:
        """Return the full hash of the commit checked out in a working copy."""
        try:
            return repo.git.rev_parse("HEAD").strip()
        except GitCommandError as e:
            raise CommitResolutionFailure(
                f"Failed to run rev-parse HEAD in {repo.working_dir}: {e}"
            ) from e

    def release(self, repo: Repo) -> None:
        """Close a working copy and remove its directory if this checkout created it."""
        repo.close()
        self._remove_workdir(repo.working_dir)

    def cleanup(self) -> None:
        """Remove every working directory that has not been released yet."""
        with self._lock:
            paths = list(self._workdirs)
        for path in paths:
            self._remove_workdir(path)


def setup_github_client(token: str, repository: str) -> tuple[Github, Repository]:
    """Set up a GitHub client and look up the repository."""
    try:
        github_client = Github(token)
        github_repo = github_client.get_repo(repository)
        return github_client, github_repo
    except Exception as e:
        raise GitOperationError(f"Failed to setup git clients: {e}") from e
