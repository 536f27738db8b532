"""GitPython-based repository handle for ref-publisher.

This module implements the repository side of the publish protocol: opening
a working copy, checking out the default branch, answering local and remote
existence queries, and pushing a single ref with dry-run and retry support.

Key features:
- Uses GitPython's Repo class for all operations
- Remote queries use ``git ls-remote`` so no fetch is needed
- Integrates Tenacity for retry logic on network operations
- Bound to exactly one remote, chosen at construction

Example:
    ```python
    from ref_publisher.git import GitRepository

    repo = GitRepository.open("/path/to/repo")
    repo.checkout("master")
    repo.set_dry_run(True)
    repo.set_max_retries(3)
    if repo.has_local_branch("release-1.19") and not repo.has_remote_branch(
        "release-1.19"
    ):
        repo.push("refs/heads/release-1.19")
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import GitCommandNotFound
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from ref_publisher.exceptions import (
    CheckoutError,
    GitError,
    GitNotFoundError,
    PushRejectedError,
    RepositoryOpenError,
)
from ref_publisher.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "DEFAULT_NETWORK_TIMEOUT",
    "GitRepository",
    "is_network_error",
]

T = TypeVar("T")

# =============================================================================
# Constants
# =============================================================================

#: Default timeout for network operations in seconds
DEFAULT_NETWORK_TIMEOUT: float = 60.0

#: Maximum retries for network operations unless set_max_retries is called
DEFAULT_MAX_RETRIES: int = 3

#: stderr fragments of transient failures worth another attempt
NETWORK_ERROR_PATTERNS: tuple[str, ...] = (
    "could not resolve host",
    "connection refused",
    "connection reset",
    "connection timed out",
    "network unreachable",
    "temporary failure",
    "unable to access",
    "early eof",
    "the remote end hung up",
    "ssl certificate",
    "ssl_connect",
    "ssl_read",
    "gnutls_handshake",
    "tls connection",
    "did not complete in",
)

#: Exponential backoff between network attempts
DEFAULT_RETRY_WAIT: wait_base = wait_exponential(multiplier=1, min=1, max=10)


# =============================================================================
# Helper Functions
# =============================================================================


def _stderr(exc: GitCommandError) -> str:
    return str(exc.stderr or exc.stdout or str(exc))


def is_network_error(exc: BaseException) -> bool:
    """Check if exception is a network-related error that should be retried.

    Args:
        exc: Exception raised by a git command.

    Returns:
        True for GitCommandErrors whose output matches a transient network
        failure, including commands killed by the network timeout.
    """
    if not isinstance(exc, GitCommandError):
        return False
    stderr = _stderr(exc).lower()
    return any(pattern in stderr for pattern in NETWORK_ERROR_PATTERNS)


def _convert_git_error(exc: GitCommandError, operation: str, ref: str) -> GitError:
    """Convert GitPython exception to a ref-publisher exception.

    Args:
        exc: GitPython exception.
        operation: Name of the git operation that failed.
        ref: Ref the operation was working on.

    Returns:
        Appropriate ref-publisher exception.
    """
    stderr = _stderr(exc)
    stderr_lower = stderr.lower()

    if operation == "checkout":
        overwritten = (
            "would be overwritten" in stderr_lower
            or "overwritten by checkout" in stderr_lower
        )
        return CheckoutError(
            f"Unable to check out {ref}: {stderr.strip()}",
            branch_name=ref,
            recoverable=overwritten,
        )

    # git marks each refused ref with [rejected] or [remote rejected]; a
    # trailing "failed to push" alone can come from a local refspec error
    if operation == "push" and (
        "[rejected]" in stderr_lower or "[remote rejected]" in stderr_lower
    ):
        return PushRejectedError(
            f"Remote rejected push of {ref}", reason=stderr.strip()
        )

    return GitError(
        f"git {operation} failed for {ref}: {stderr.strip()}",
        operation=operation,
        recoverable=is_network_error(exc),
    )


# =============================================================================
# Main Class: GitRepository
# =============================================================================


class GitRepository:
    """GitPython-based repository handle.

    Holds the working copy, the remote refs are published to, and the
    dry-run and retry settings applied to every push. Not thread-safe: one
    handle serializes access to one working tree.
    """

    def __init__(
        self,
        path: Path | str,
        remote: str = "origin",
        network_timeout: float = DEFAULT_NETWORK_TIMEOUT,
        retry_wait: wait_base = DEFAULT_RETRY_WAIT,
    ) -> None:
        """Initialize GitRepository.

        Args:
            path: Path to the git repository.
            remote: Remote all remote queries and pushes go to.
            network_timeout: Seconds before a network git command is killed.
            retry_wait: Tenacity wait strategy between network attempts.

        Raises:
            GitNotFoundError: If git is not installed.
            RepositoryOpenError: If path is not a git repository.
        """
        self._path = Path(path)
        self._remote = remote
        self._network_timeout = network_timeout
        self._retry_wait = retry_wait
        self._dry_run = False
        self._max_retries = DEFAULT_MAX_RETRIES

        try:
            self._repo = Repo(self._path)
        except GitCommandNotFound as e:
            raise GitNotFoundError("Git CLI not found. Please install git.") from e
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryOpenError(
                f"Not a git repository: {path}",
                path=path,
            ) from e

    @classmethod
    def open(cls, path: Path | str, remote: str = "origin") -> GitRepository:
        """Open the repository at path."""
        return cls(path, remote=remote)

    @property
    def path(self) -> Path:
        """Path to the repository root."""
        return self._path

    @property
    def remote(self) -> str:
        """Name of the remote refs are published to."""
        return self._remote

    @property
    def repo(self) -> Repo:
        """Underlying GitPython Repo instance."""
        return self._repo

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    @property
    def max_retries(self) -> int:
        return self._max_retries

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def set_dry_run(self, dry_run: bool) -> None:
        """Simulate pushes from now on (git push --dry-run)."""
        self._dry_run = dry_run

    def set_max_retries(self, max_retries: int) -> None:
        """Set how many times a failed network operation is retried.

        Raises:
            ValueError: If max_retries is negative.
        """
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self._max_retries = max_retries

    # -------------------------------------------------------------------------
    # Local State
    # -------------------------------------------------------------------------

    def checkout(self, branch: str) -> None:
        """Switch to an existing branch.

        Raises:
            CheckoutError: If the branch is missing or uncommitted changes
                would be overwritten.
        """
        try:
            self._repo.git.checkout(branch)
            logger.info("Checked out branch: %s", branch)
        except GitCommandError as e:
            raise _convert_git_error(e, "checkout", branch) from e

    def has_local_branch(self, name: str) -> bool:
        """Check whether a local branch exists.

        Raises:
            GitError: If the local refs cannot be read.
        """
        try:
            return any(head.name == name for head in self._repo.heads)
        except (GitCommandError, OSError, ValueError) as e:
            raise GitError(
                f"Unable to list local branches: {e}",
                operation="list_branches",
            ) from e

    def tags_on_branch(self, branch: str) -> list[str]:
        """List tags reachable from a branch, newest version first.

        Raises:
            GitError: If the branch does not exist or tags cannot be listed.
        """
        try:
            output = self._repo.git.tag("--sort=-v:refname", "--merged", branch)
        except GitCommandError as e:
            raise _convert_git_error(e, "list_tags", branch) from e
        return [line.strip() for line in output.split("\n") if line.strip()]

    # -------------------------------------------------------------------------
    # Remote Operations (with retry)
    # -------------------------------------------------------------------------

    def has_remote_branch(self, name: str) -> bool:
        """Check whether the remote has a branch.

        Raises:
            GitError: If the remote cannot be queried.
        """
        return self._has_remote_ref(f"refs/heads/{name}", "--heads")

    def has_remote_tag(self, name: str) -> bool:
        """Check whether the remote has a tag.

        Raises:
            GitError: If the remote cannot be queried.
        """
        return self._has_remote_ref(f"refs/tags/{name}", "--tags")

    def push(self, ref: str) -> None:
        """Push a branch or tag to the remote.

        ref may be a short name, but a fully qualified one (refs/heads/...
        or refs/tags/...) avoids ambiguity when a branch and a tag share
        a name.

        Honors the dry-run flag and retries transient network failures up
        to max_retries times.

        Raises:
            PushRejectedError: If the remote rejects the push.
            GitError: If the push fails for any other reason.
        """
        args: list[str] = []
        if self._dry_run:
            args.append("--dry-run")
        args.extend([self._remote, ref])

        try:
            self._with_retries(
                "push",
                lambda: self._repo.git.push(
                    *args, kill_after_timeout=self._network_timeout
                ),
            )
        except GitCommandError as e:
            raise _convert_git_error(e, "push", ref) from e

        logger.info(
            "Push%s completed to %s/%s",
            " (dry-run)" if self._dry_run else "",
            self._remote,
            ref,
        )

    def _has_remote_ref(self, full_ref: str, kind_flag: str) -> bool:
        try:
            output = self._with_retries(
                "ls_remote",
                lambda: self._repo.git.ls_remote(
                    kind_flag,
                    self._remote,
                    full_ref,
                    kill_after_timeout=self._network_timeout,
                ),
            )
        except GitCommandError as e:
            raise _convert_git_error(e, "ls_remote", full_ref) from e

        for line in output.split("\n"):
            parts = line.split("\t")
            if len(parts) == 2 and parts[1].strip() == full_ref:
                return True
        return False

    def _with_retries(self, operation: str, fn: Callable[[], T]) -> T:
        def _log_retry(state: RetryCallState) -> None:
            logger.warning(
                "git_retry",
                operation=operation,
                attempt=state.attempt_number,
                max_retries=self._max_retries,
                error=str(state.outcome.exception()) if state.outcome else None,
            )

        retrying = Retrying(
            retry=retry_if_exception(is_network_error),
            stop=stop_after_attempt(self._max_retries + 1),
            wait=self._retry_wait,
            before_sleep=_log_retry,
            reraise=True,
        )
        return retrying(fn)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Release the GitPython resources held by this handle."""
        self._repo.close()
