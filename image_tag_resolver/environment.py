"""
Environment Configuration Module

Handles parsing and validation of environment variables.
This is a pure module - no side effects, just data transformation.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Tuple
import logging

from .config import (
    PublishConfig,
    DEFAULT_NAMESPACE,
    DEFAULT_DOCKERFILE,
    DEFAULT_DEPLOYMENT_ENVIRONMENT,
    DEFAULT_PROJECT,
)
from .deployment import parse_owner_repo
from .exceptions import InvalidArgument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvironmentConfig:
    """Configuration parsed from environment variables."""

    repository: str
    ref: str
    image: str = ""
    namespace: str = DEFAULT_NAMESPACE
    dockerfiles: Tuple[str, ...] = (DEFAULT_DOCKERFILE,)
    values_file: str = ""
    application: str = ""
    github_token: str = ""
    create_deployment: bool = False
    deployment_environment: str = DEFAULT_DEPLOYMENT_ENVIRONMENT
    project: str = DEFAULT_PROJECT
    cluster: str = ""
    stack: str = ""
    run_id: str = ""
    dry_run: bool = False
    log_level: str = "INFO"
    github_output: str = ""
    _run_id_invalid: bool = field(default=False, repr=False, compare=False)

    @classmethod
    def from_env(cls, env: Dict[str, str]) -> "EnvironmentConfig":
        """Create configuration from environment variables.

        Args:
            env: Dictionary of environment variables (typically os.environ)

        Returns:
            EnvironmentConfig instance
        """
        dockerfiles = tuple(
            path.strip() for path in env.get("DOCKERFILES", "").split(",") if path.strip()
        ) or (DEFAULT_DOCKERFILE,)

        run_id = env.get("RUN_ID", "").strip() or env.get("GITHUB_RUN_ID", "").strip()

        if not env.get("REF", "").strip() and env.get("GITHUB_REF", "").strip():
            logger.info("REF not set, using GITHUB_REF=%s", env["GITHUB_REF"].strip())

        return cls(
            repository=env.get("REPOSITORY", "").strip() or env.get("GITHUB_REPOSITORY", "").strip(),
            ref=env.get("REF", "").strip() or env.get("GITHUB_REF", "").strip(),
            image=env.get("IMAGE", "").strip(),
            namespace=env.get("DOCKER_NAMESPACE", "").strip() or DEFAULT_NAMESPACE,
            dockerfiles=dockerfiles,
            values_file=env.get("VALUES_FILE", "").strip(),
            application=env.get("APPLICATION", "").strip(),
            github_token=env.get("GH_TOKEN", ""),
            create_deployment=env.get("CREATE_DEPLOYMENT", "false").lower() == "true",
            deployment_environment=(
                env.get("DEPLOYMENT_ENVIRONMENT", "").strip() or DEFAULT_DEPLOYMENT_ENVIRONMENT
            ),
            project=env.get("PROJECT", "").strip() or DEFAULT_PROJECT,
            cluster=env.get("CLUSTER", "").strip(),
            stack=env.get("STACK", "").strip(),
            run_id=run_id,
            dry_run=env.get("DRY_RUN", "false").lower() == "true",
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            github_output=env.get("GITHUB_OUTPUT", "").strip(),
            _run_id_invalid=bool(run_id) and not run_id.isdigit(),
        )

    def publish_config(self) -> PublishConfig:
        """Build the immutable publish configuration for this run."""
        return PublishConfig(
            repository=self.repository,
            ref=self.ref,
            image=self.image or self.repository.rstrip("/").rsplit("/", 1)[-1].removesuffix(".git"),
            namespace=self.namespace,
            dockerfiles=self.dockerfiles,
        )

    def validate(self) -> List[str]:
        """Validate the configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        # Required fields
        if not self.repository:
            errors.append("REPOSITORY is required")

        if not self.ref:
            errors.append("REF is required")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Invalid LOG_LEVEL '{self.log_level}'")

        if self.values_file and not self.application:
            errors.append("APPLICATION is required when VALUES_FILE is set")

        if self._run_id_invalid:
            errors.append(f"RUN_ID must be numeric, got '{self.run_id}'")

        if self.create_deployment:
            if not self.github_token:
                errors.append("GH_TOKEN is required when CREATE_DEPLOYMENT is true")
            if self.repository:
                try:
                    parse_owner_repo(self.repository)
                except InvalidArgument:
                    errors.append(f"REPOSITORY must be in format 'owner/repo', got '{self.repository}'")
            if not self.application:
                errors.append("APPLICATION is required when CREATE_DEPLOYMENT is true")
            if not self.stack:
                errors.append("STACK is required when CREATE_DEPLOYMENT is true")
            if not self.run_id:
                errors.append("RUN_ID is required when CREATE_DEPLOYMENT is true")

        return errors
