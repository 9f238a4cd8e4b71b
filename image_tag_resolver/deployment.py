"""
GitHub Deployment Module

Creates GitHub deployments whose payload carries the resolved image tag,
reads that payload back for the deploy step and reports deployment status.
All GitHub access goes through a PyGithub Repository object.
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, List, Tuple

from github.GithubException import GithubException
from github.Repository import Repository

from .exceptions import DeploymentError, InvalidArgument

logger = logging.getLogger(__name__)

DEPLOYMENT_STATES = {"error", "failure", "inactive", "in_progress", "queued", "pending", "success"}


@dataclass(frozen=True)
class DeploymentPayload:
    """Payload attached to a deployment, keyed by its JSON field names."""

    repository: str
    docker_image_tag: str
    application: str = ""
    stack: str = ""
    project: str = ""
    cluster: str = ""
    storage: str = ""
    kubectl_config: str = ""
    artifact: str = ""
    docker_image: str = ""
    dockerfile: str = ""
    docker_namespace: str = ""
    dagger_version: str = ""
    dagger_checksum: str = ""
    run_id: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentPayload":
        """Create a payload from decoded JSON, ignoring unknown keys.

        Raises:
            TypeError: If data is not a JSON object
            ValueError: If run_id is not numeric
        """
        if not isinstance(data, dict):
            raise TypeError(f"payload must be a JSON object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        for required in ("repository", "docker_image_tag"):
            values.setdefault(required, "")
        if "run_id" in values:
            values["run_id"] = int(values["run_id"] or 0)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> List[str]:
        """Validate the payload.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        for name in ("repository", "docker_image_tag", "application", "stack"):
            if not getattr(self, name):
                errors.append(f"{name} value is required")
        if not self.run_id:
            errors.append("run_id value is required")
        return errors


def parse_owner_repo(owner_repo: str) -> Tuple[str, str]:
    """Split 'owner/repo' into its two parts."""
    parts = owner_repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise InvalidArgument(
            f"invalid repository format {owner_repo!r}, expected 'owner/repo'",
            repository=owner_repo,
        )
    return parts[0], parts[1]


def create_deployment(
    github_repo: Repository,
    ref: str,
    payload: DeploymentPayload,
    environment: str,
    description: str = "",
) -> int:
    """
    Create a GitHub deployment for a reference.

    Args:
        github_repo: GitHub repository object
        ref: The Git reference being deployed
        payload: Payload carrying the image tag and deploy target
        environment: GitHub environment name
        description: Optional deployment description

    Returns:
        The id of the created deployment

    Raises:
        InvalidArgument: If the payload is incomplete
        DeploymentError: If the GitHub API call fails
    """
    errors = payload.validate()
    if errors:
        raise InvalidArgument(f"Invalid deployment payload: {'; '.join(errors)}", ref=ref)

    try:
        deployment = github_repo.create_deployment(
            ref=ref,
            task="deploy",
            auto_merge=False,
            required_contexts=[],
            payload=payload.to_dict(),
            environment=environment,
            description=description or f"Deploy {payload.application} {payload.docker_image_tag}",
        )
    except GithubException as e:
        raise DeploymentError(f"Failed to create deployment for {ref}: {e}") from e

    logger.info("Created deployment %s for %s in %s", deployment.id, ref, environment)
    return deployment.id


def fetch_deployment_payload(github_repo: Repository, repository: str, deployment_id) -> DeploymentPayload:
    """
    Read the payload of an existing deployment.

    Args:
        github_repo: GitHub repository object
        repository: Repository the payload is expected to belong to
        deployment_id: Deployment id, as an int or a numeric string

    Returns:
        The decoded DeploymentPayload

    Raises:
        InvalidArgument: If deployment_id is not numeric
        DeploymentError: If the deployment cannot be read or belongs elsewhere
    """
    try:
        dep_id = int(deployment_id)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Invalid deployment id {deployment_id!r}: {e}") from e

    try:
        deployment = github_repo.get_deployment(dep_id)
        raw_payload = deployment.payload
    except GithubException as e:
        raise DeploymentError(f"Error in getting deployment information: {e}", dep_id) from e

    if isinstance(raw_payload, str):
        try:
            raw_payload = json.loads(raw_payload)
        except json.JSONDecodeError as e:
            raise DeploymentError(f"Error in decoding payload: {e}", dep_id) from e

    try:
        payload = DeploymentPayload.from_dict(raw_payload or {})
    except (TypeError, ValueError) as e:
        raise DeploymentError(f"Error in decoding payload: {e}", dep_id) from e

    if payload.repository != repository:
        raise DeploymentError(
            f"payload repo {payload.repository} and given repo {repository} does not match",
            dep_id,
        )
    return payload


def set_deployment_status(github_repo: Repository, deployment_id: int, state: str, target_url: str = "") -> None:
    """Report the status of a deployment."""
    if state not in DEPLOYMENT_STATES:
        raise InvalidArgument(f"Invalid deployment state {state!r}")

    try:
        deployment = github_repo.get_deployment(int(deployment_id))
        if target_url:
            deployment.create_status(state, target_url=target_url)
        else:
            deployment.create_status(state)
    except GithubException as e:
        raise DeploymentError(f"Failed to set deployment status to {state}: {e}", deployment_id) from e

    logger.info("Deployment %s is now %s", deployment_id, state)
