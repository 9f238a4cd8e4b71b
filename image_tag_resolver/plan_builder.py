"""
Plan Builder Module

Resolves the image tag for a run and turns it into concrete publish plans.
The tag is resolved once and threaded through every image of the run.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePosixPath
from typing import Dict, List, Sequence, Tuple

from .config import PublishConfig, DEFAULT_MAX_WORKERS
from .models import ImagePlan, PublishPlan
from .resolver import classify_reference, resolve_tag

logger = logging.getLogger(__name__)


def image_name_for(dockerfile: str, default_image: str) -> str:
    """
    Derive the image name for a Dockerfile.

    'Dockerfile' keeps the default image name; 'Dockerfile.<variant>'
    publishes as '<image>-<variant>'.

    Args:
        dockerfile: Path to the Dockerfile
        default_image: Image name configured for the run

    Returns:
        Image name for this Dockerfile
    """
    name = PurePosixPath(dockerfile).name
    prefix = "Dockerfile."
    if name.startswith(prefix) and len(name) > len(prefix):
        return f"{default_image}-{name[len(prefix):]}"
    return default_image


def build_image_plans(config: PublishConfig, tag: str) -> List[ImagePlan]:
    """Build one image plan per configured Dockerfile, all with the same tag."""
    plans = []
    seen = set()
    for dockerfile in config.dockerfiles:
        if dockerfile in seen:
            continue
        seen.add(dockerfile)
        plans.append(
            ImagePlan(
                dockerfile=dockerfile,
                namespace=config.namespace,
                image=image_name_for(dockerfile, config.image),
                tag=tag,
            )
        )
    return plans


def prepare_plan(config: PublishConfig, checkout) -> PublishPlan:
    """
    Prepare a complete publish plan.

    Args:
        config: Publish configuration
        checkout: Checkout capability for references that need one

    Returns:
        PublishPlan with the resolved tag and its image plans
    """
    classification = classify_reference(config.ref, config.repository, checkout)
    plan = PublishPlan(
        repository=config.repository,
        ref=config.ref,
        classification=classification,
        images=build_image_plans(config, classification.resolved_tag),
    )
    logger.info(
        "Planned %d image(s) for %s@%s with tag %s",
        len(plan.images), config.repository, config.ref, plan.tag,
    )
    return plan


def resolve_tags(
    requests: Sequence[Tuple[str, str]],
    checkout,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Dict[Tuple[str, str], str]:
    """
    Resolve tags for several independent (repository, ref) pairs.

    At most max_workers resolutions run at once. Each one checks out into
    its own working directory, so they share no state.

    Args:
        requests: (repository, ref) pairs
        checkout: Checkout capability shared by all resolutions
        max_workers: Upper bound on concurrent resolutions

    Returns:
        Mapping of (repository, ref) to tag, in request order

    Raises:
        TagResolutionError: The first failure, in request order
    """
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    unique = list(dict.fromkeys(requests))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(resolve_tag, ref, repository, checkout)
            for repository, ref in unique
        ]
        return {request: future.result() for request, future in zip(unique, futures)}
