"""Resolve Git references into container image tags for CI/CD pipelines."""
