"""
Values File Module

Records a resolved image tag in a YAML values file, e.g. the per-application
'<app>.tag' entry a deployment reads its image tag from.
"""

import logging
from pathlib import Path
from typing import Optional

import dpath
import yaml

logger = logging.getLogger(__name__)


def application_tag_path(application: str) -> str:
    """Dotted path holding an application's image tag."""
    return f"{application}.tag"


def update_values_file(path: str, key_path: str, tag: str, dry_run: bool = False) -> Optional[bool]:
    """Set the value at a dotted path in a YAML file to the given tag.

    Args:
        path (str): Path to the YAML file.
        key_path (str): Dotted path of the value, e.g. 'modware.tag'.
        tag (str): The image tag to set.
        dry_run (bool): Whether to report the change without writing it.

    Returns:
        bool or None: True if updated, False if unchanged, None if file is missing.
    """
    values_file = Path(path)
    if not values_file.exists():
        return None

    with values_file.open() as f:
        data = yaml.safe_load(f) or {}

    try:
        old_value = dpath.get(data, key_path, separator=".")
    except KeyError:
        old_value = None

    if old_value == tag:
        logger.info("%s already has %s=%s", path, key_path, tag)
        return False

    print(f"{'Would update' if dry_run else 'Updated'} {key_path} in {path} from {old_value} to {tag}")
    if dry_run:
        return True

    dpath.new(data, key_path, tag, separator=".")
    with values_file.open("w") as f:
        yaml.dump(data, f)
    return True
