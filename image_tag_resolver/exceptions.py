"""Custom exceptions for Image Tag Resolver."""


class TagResolutionError(Exception):
    """Base class for failures while resolving a reference into a tag."""

    def __init__(self, message: str, ref: str = None, repository: str = None):
        self.ref = ref
        self.repository = repository
        super().__init__(message)


class InvalidArgument(TagResolutionError):
    """Raised when a required input is missing or malformed."""


class CheckoutFailure(TagResolutionError):
    """Raised when a repository cannot be checked out at the requested reference."""


class CommitResolutionFailure(TagResolutionError):
    """Raised when the HEAD commit of a working copy cannot be read."""


class GitOperationError(Exception):
    """Raised when Git or GitHub clients cannot be set up."""


class DeploymentError(Exception):
    """Raised when a GitHub deployment cannot be created, read or updated."""

    def __init__(self, message: str, deployment_id: int = None):
        self.deployment_id = deployment_id
        super().__init__(message)
