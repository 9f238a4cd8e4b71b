"""Test suite for Image Tag Resolver.

This package contains test modules and fixtures for verifying the functionality
of the Image Tag Resolver tool. It includes tests for:
- Reference classification and tag formatting
- Git checkout and commit resolution
- Publish planning and concurrent resolution
- Values file updates
- GitHub deployments

The test suite uses pytest and provides fixtures for common test scenarios.
"""
