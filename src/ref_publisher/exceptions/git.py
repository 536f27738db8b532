from __future__ import annotations

from pathlib import Path

from ref_publisher.exceptions.base import RefPublisherError


class GitError(RefPublisherError):
    """Exception for git operation failures.

    Raised by the repository adapter when a git command fails, such as a
    checkout, a remote lookup or a push.

    Attributes:
        message: Human-readable error message.
        operation: Git operation that failed (e.g., "push", "ls_remote").
        recoverable: True if error might be recoverable.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize the GitError.

        Args:
            message: Human-readable error message.
            operation: Git operation that failed.
            recoverable: True if error might be recoverable.
        """
        self.operation = operation
        self.recoverable = recoverable
        super().__init__(message)


class GitNotFoundError(GitError):
    """Exception raised when git CLI is not installed or not in PATH."""

    def __init__(self, message: str = "Git CLI not found") -> None:
        super().__init__(message, operation="git_check", recoverable=False)


class RepositoryOpenError(GitError):
    """Exception raised when a path cannot be opened as a git repository.

    Attributes:
        message: Human-readable error message.
        path: Directory that could not be opened.
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
    ) -> None:
        """Initialize the RepositoryOpenError.

        Args:
            message: Human-readable error message.
            path: Directory that could not be opened.
        """
        self.path = path
        super().__init__(message, operation="open", recoverable=False)


class CheckoutError(GitError):
    """Exception raised when a branch cannot be checked out.

    Covers both a missing ref and a dirty working tree that would be
    overwritten by the checkout.

    Attributes:
        message: Human-readable error message.
        branch_name: Branch that was being checked out.
    """

    def __init__(
        self,
        message: str,
        branch_name: str | None = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize the CheckoutError.

        Args:
            message: Human-readable error message.
            branch_name: Branch that was being checked out.
            recoverable: True when cleaning the working tree may fix it.
        """
        self.branch_name = branch_name
        super().__init__(message, operation="checkout", recoverable=recoverable)


class PushRejectedError(GitError):
    """Exception raised when remote rejects a push.

    Attributes:
        message: Human-readable error message.
        reason: Rejection reason from git.
    """

    def __init__(self, message: str, reason: str = "") -> None:
        """Initialize the PushRejectedError.

        Args:
            message: Human-readable error message.
            reason: Rejection reason from git.
        """
        self.reason = reason
        super().__init__(message, operation="push", recoverable=False)
