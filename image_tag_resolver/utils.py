"""
Utility Functions Module for Image Tag Resolver

This module provides helpers used by the command line entry point.

Functions:
    setup_logging: Configures application logging
    write_github_output: Appends step outputs for GitHub Actions
    print_plan_summary: Displays the images a run would publish
"""

import logging
from typing import Dict

from .models import PublishPlan

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def write_github_output(path: str, outputs: Dict[str, str]) -> None:
    """Append key=value lines to the GitHub Actions step output file."""
    with open(path, "a", encoding="utf-8") as f:
        for key, value in outputs.items():
            f.write(f"{key}={value}\n")
    logger.debug("Wrote %d output(s) to %s", len(outputs), path)


def print_plan_summary(plan: PublishPlan, dry_run: bool = False):
    """Print a summary of the images in a plan."""
    print(f"\n{'Dry run summary' if dry_run else 'Publish plan'}:")
    print(f"Reference: {plan.ref} ({plan.classification.kind.value})")
    print(f"Image tag: {plan.tag}")
    for image in plan.images:
        print(f"- {image.dockerfile} -> {image.reference}")
