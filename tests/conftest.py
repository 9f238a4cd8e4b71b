"""Test fixtures for Image Tag Resolver.

This module provides shared fixtures used across multiple test modules.

Fixtures:
    commit_hash: A full 40 character commit hash
    fake_checkout: A mock checkout capability that reports commit_hash
    sample_values_yaml: Creates a temporary values.yaml file
"""

from unittest.mock import Mock

import pytest
import yaml


@pytest.fixture
def commit_hash():
    """A full commit hash as returned by rev-parse HEAD."""
    return "9f8e7d6c5b4a39281706f5e4d3c2b1a098765432"


@pytest.fixture
def fake_checkout(commit_hash):
    """Creates a mock checkout capability.

    checkout() returns a sentinel working copy and head_commit_hash()
    returns the commit_hash fixture, so the fallback path runs without
    touching the network.

    Returns:
        Mock: An object with checkout and head_commit_hash methods
    """
    checkout = Mock()
    checkout.checkout.return_value = Mock(name="working_copy")
    checkout.head_commit_hash.return_value = commit_hash
    return checkout


@pytest.fixture
def sample_values_yaml(tmp_path):
    """Creates a temporary values.yaml file for testing.

    Returns:
        dict: A dictionary containing:
            - values_file (Path): Path to the values.yaml file
            - initial_data (dict): The initial values.yaml content
    """
    values_file = tmp_path / "values.yaml"
    data = {"modware": {"tag": "initial-tag", "replicas": 2}}

    with values_file.open("w") as f:
        yaml.dump(data, f)

    return {"values_file": values_file, "initial_data": data}
