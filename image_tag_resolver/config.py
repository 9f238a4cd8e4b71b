"""
Configuration Module for Image Tag Resolver

This module contains configuration settings and data structures used throughout the application.
It defines constants and the immutable configuration passed to the planning step.

Constants:
    GITHUB_URL: Base URL used to expand 'owner/repo' repository locators
    DEFAULT_NAMESPACE: Docker namespace images are published under
    DEFAULT_DOCKERFILE: Dockerfile used when none is configured
    SHORT_SHA_LENGTH: Number of commit hash characters kept in tags
    DEFAULT_MAX_WORKERS: Upper bound for concurrent tag resolutions
    DEFAULT_DEPLOYMENT_ENVIRONMENT: GitHub environment for created deployments

Classes:
    PublishConfig: Configuration for a single publish run
"""

from dataclasses import dataclass, field
from typing import Tuple

# Constants
GITHUB_URL = "https://github.com"
DEFAULT_NAMESPACE = "dictybase"
DEFAULT_DOCKERFILE = "build/package/Dockerfile"
SHORT_SHA_LENGTH = 7
DEFAULT_MAX_WORKERS = 4
DEFAULT_DEPLOYMENT_ENVIRONMENT = "development"
DEFAULT_PROJECT = "backend_application"


@dataclass(frozen=True)
class PublishConfig:
    """Configuration for publishing images from one repository reference."""

    repository: str
    ref: str
    image: str
    namespace: str = DEFAULT_NAMESPACE
    dockerfiles: Tuple[str, ...] = field(default=(DEFAULT_DOCKERFILE,))
