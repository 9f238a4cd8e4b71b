"""Data models for tag resolution and publish planning."""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


class RefKind(Enum):
    """Category a Git reference falls into."""
    SEMVER = "semver"
    COMMIT_SHA = "commit_sha"
    BRANCH_OR_TAG_REF = "branch_or_tag_ref"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ReferenceClassification:
    """Outcome of resolving one reference into a tag."""
    raw_ref: str
    kind: RefKind
    resolved_tag: str


@dataclass(frozen=True)
class ImagePlan:
    """A single image that would be built from a Dockerfile and published."""
    dockerfile: str
    namespace: str
    image: str
    tag: str

    @property
    def reference(self) -> str:
        """Full image reference, e.g. dictybase/modware:v1.2.3."""
        return f"{self.namespace}/{self.image}:{self.tag}"


@dataclass
class PublishPlan:
    """Complete plan for a publish run."""
    repository: str
    ref: str
    classification: ReferenceClassification
    images: List[ImagePlan] = field(default_factory=list)

    @property
    def tag(self) -> str:
        return self.classification.resolved_tag

    def has_images(self) -> bool:
        """Check if there is anything to publish."""
        return bool(self.images)

    def get_references(self) -> List[str]:
        """Get the image references in plan order."""
        return [image.reference for image in self.images]


@dataclass
class ExecutionResult:
    """Result of running the CLI pipeline."""
    success: bool
    tag: Optional[str] = None
    image_references: List[str] = field(default_factory=list)
    deployment_id: Optional[int] = None
    values_file_updated: Optional[bool] = None
    errors: List[str] = field(default_factory=list)
    dry_run: bool = False
