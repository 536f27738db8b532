from __future__ import annotations

from ref_publisher.exceptions.base import RefPublisherError


class PublishError(RefPublisherError):
    """Base exception for failures while publishing a single ref.

    Attributes:
        message: Human-readable error message.
        ref: Branch or tag name being published.
        operation: Step of the publish pipeline that failed
            (e.g., "validate", "local_lookup", "push").
    """

    operation: str = "publish"

    def __init__(self, message: str, ref: str | None = None) -> None:
        """Initialize the PublishError.

        Args:
            message: Human-readable error message.
            ref: Branch or tag name being published.
        """
        self.ref = ref
        super().__init__(message)


class InvalidRefNameError(PublishError):
    """Exception raised when a branch or tag name does not match its grammar.

    Attributes:
        message: Human-readable error message.
        ref: The rejected name.
        reason: Why the name was rejected.
    """

    operation = "validate"

    def __init__(self, message: str, ref: str | None = None, reason: str = "") -> None:
        self.reason = reason
        super().__init__(message, ref=ref)


class LocalLookupError(PublishError):
    """Exception raised when the local repository cannot be queried for a ref."""

    operation = "local_lookup"


class RefNotFoundError(PublishError):
    """Exception raised when a ref to publish does not exist locally.

    Refs must be created by an earlier release step; publishing never
    creates them.
    """

    operation = "local_lookup"


class RemoteLookupError(PublishError):
    """Exception raised when the remote cannot be queried for a ref."""

    operation = "remote_lookup"


class PushError(PublishError):
    """Exception raised when pushing a ref fails after all retries."""

    operation = "push"


class PublisherClosedError(PublishError):
    """Exception raised when a closed publisher is used."""

    operation = "publish"
