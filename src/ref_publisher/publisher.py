"""Idempotent publishing of release branches and tags.

A publish call validates the ref name, confirms the ref exists locally,
asks the remote whether it already has it, and pushes only when it does
not. Re-running a publish after a partial release is therefore safe: refs
already on the remote are skipped.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Protocol

from ref_publisher.config import PublisherConfig
from ref_publisher.exceptions import (
    CheckoutError,
    GitError,
    LocalLookupError,
    PublisherClosedError,
    PushError,
    RefNotFoundError,
    RemoteLookupError,
    RepositoryOpenError,
)
from ref_publisher.git import GitRepository
from ref_publisher.logging import get_logger
from ref_publisher.refs import RefKind, validate_branch_name, validate_tag_name

__all__ = [
    "PublishResult",
    "RefPublisher",
    "RepositoryHandle",
    "RepositoryOpener",
]

logger = get_logger(__name__)


class RepositoryHandle(Protocol):
    """Repository operations the publisher relies on.

    A handle is bound to a single remote. Query methods take short names
    and raise GitError when the repository or remote cannot be read. push
    takes a fully qualified ref (refs/heads/... or refs/tags/...) and
    raises GitError once its own retries are exhausted.
    """

    def checkout(self, branch: str) -> None: ...

    def set_dry_run(self, dry_run: bool) -> None: ...

    def set_max_retries(self, max_retries: int) -> None: ...

    def has_local_branch(self, name: str) -> bool: ...

    def has_remote_branch(self, name: str) -> bool: ...

    def tags_on_branch(self, branch: str) -> list[str]: ...

    def has_remote_tag(self, name: str) -> bool: ...

    def push(self, ref: str) -> None: ...

    def close(self) -> None: ...


#: Opens a repository handle given the repository path and remote name
RepositoryOpener = Callable[[Path, str], RepositoryHandle]


def _open_git_repository(path: Path, remote: str) -> RepositoryHandle:
    return GitRepository.open(path, remote=remote)


@dataclass(frozen=True, slots=True)
class PublishResult:
    """Outcome of a successful publish call.

    Attributes:
        ref: Branch or tag name.
        kind: Whether the ref is a branch or a tag.
        pushed: False when the remote already had the ref.
        dry_run: True when the push was only simulated.
    """

    ref: str
    kind: RefKind
    pushed: bool
    dry_run: bool


class RefPublisher:
    """Pushes release branches and tags to the configured remote.

    The publisher owns its repository handle: it is opened by create() and
    released by close(). Use one publisher per release run and do not share
    it across threads.

    Example:
        ```python
        config = PublisherConfig(repo_path=Path("k8s"), dry_run=False)
        with RefPublisher.create(config) as publisher:
            publisher.publish_branch("release-1.19")
            publisher.publish_tag("v1.19.0")
        ```
    """

    def __init__(self, repo: RepositoryHandle, config: PublisherConfig) -> None:
        """Wrap an already opened and configured handle.

        Prefer create(), which opens the repository, checks out the default
        branch and applies the dry-run and retry settings.
        """
        self._repo: RepositoryHandle | None = repo
        self._config = config

    @classmethod
    def create(
        cls,
        config: PublisherConfig,
        opener: RepositoryOpener | None = None,
    ) -> RefPublisher:
        """Open the repository and prepare it for publishing.

        Args:
            config: Options for this run.
            opener: Factory for the repository handle. Defaults to the
                GitPython implementation.

        Returns:
            A publisher owning the opened handle.

        Raises:
            RepositoryOpenError: If config.repo_path is not a repository.
            CheckoutError: If the default branch cannot be checked out.
        """
        open_repo = opener or _open_git_repository
        try:
            repo = open_repo(config.repo_path, config.remote)
        except RepositoryOpenError:
            raise
        except GitError as e:
            raise RepositoryOpenError(
                f"While opening repository {config.repo_path}: {e.message}",
                path=config.repo_path,
            ) from e

        try:
            logger.info(
                "checkout_default_branch",
                branch=config.default_branch,
                repo_path=str(config.repo_path),
            )
            try:
                repo.checkout(config.default_branch)
            except CheckoutError:
                raise
            except GitError as e:
                raise CheckoutError(
                    f"Checking out {config.default_branch} branch: {e.message}",
                    branch_name=config.default_branch,
                ) from e

            if config.dry_run:
                logger.debug("dry_run_enabled", detail="pushes will be simulated")
            repo.set_dry_run(config.dry_run)
            repo.set_max_retries(config.max_retries)
        except BaseException:
            repo.close()
            raise

        return cls(repo, config)

    @property
    def config(self) -> PublisherConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._repo is None

    # -------------------------------------------------------------------------
    # Publishing
    # -------------------------------------------------------------------------

    def publish_branch(self, branch_name: str) -> PublishResult:
        """Push a release branch unless the remote already has it.

        Idempotent: calling it again after a successful push is a no-op.

        Args:
            branch_name: Branch to publish, e.g. "release-1.19".

        Returns:
            PublishResult telling whether a push happened.

        Raises:
            InvalidRefNameError: If branch_name is not release-<major>.<minor>.
            LocalLookupError: If local branches cannot be read.
            RefNotFoundError: If the branch does not exist locally.
            RemoteLookupError: If the remote cannot be queried.
            PushError: If the push fails.
        """
        validate_branch_name(branch_name)
        repo = self._handle(branch_name)

        try:
            exists = repo.has_local_branch(branch_name)
        except GitError as e:
            raise LocalLookupError(
                f"Checking if branch {branch_name} exists locally: {e.message}",
                ref=branch_name,
            ) from e
        if not exists:
            raise RefNotFoundError(
                f"Unable to push branch {branch_name}, "
                "it does not exist in the local repo",
                ref=branch_name,
            )

        try:
            on_remote = repo.has_remote_branch(branch_name)
        except GitError as e:
            raise RemoteLookupError(
                f"Checking if branch {branch_name} exists in remote "
                f"{self._config.remote}: {e.message}",
                ref=branch_name,
            ) from e

        return self._push_unless_present(repo, branch_name, RefKind.BRANCH, on_remote)

    def publish_tag(self, tag_name: str) -> PublishResult:
        """Push a release tag unless the remote already has it.

        The tag must be reachable from the default branch. Matching is an
        exact, case-sensitive comparison against the local tag names.

        Args:
            tag_name: Tag to publish, e.g. "v1.19.0".

        Returns:
            PublishResult telling whether a push happened.

        Raises:
            InvalidRefNameError: If tag_name is not a prefixed semantic version.
            LocalLookupError: If the local tags cannot be listed.
            RefNotFoundError: If the tag is not on the default branch.
            RemoteLookupError: If the remote cannot be queried.
            PushError: If the push fails.
        """
        validate_tag_name(tag_name, self._config.tag_prefix)
        repo = self._handle(tag_name)
        branch = self._config.default_branch

        try:
            current_tags = repo.tags_on_branch(branch)
        except GitError as e:
            raise LocalLookupError(
                f"Listing tags on branch {branch}: {e.message}",
                ref=tag_name,
            ) from e
        if tag_name not in current_tags:
            raise RefNotFoundError(
                f"Unable to push tag {tag_name}, it does not exist "
                f"on branch {branch} yet",
                ref=tag_name,
            )

        try:
            on_remote = repo.has_remote_tag(tag_name)
        except GitError as e:
            raise RemoteLookupError(
                f"Checking if tag {tag_name} exists in remote "
                f"{self._config.remote}: {e.message}",
                ref=tag_name,
            ) from e

        return self._push_unless_present(repo, tag_name, RefKind.TAG, on_remote)

    def _push_unless_present(
        self,
        repo: RepositoryHandle,
        ref: str,
        kind: RefKind,
        on_remote: bool,
    ) -> PublishResult:
        dry_run = self._config.dry_run
        log = logger.bind(ref=ref, kind=kind.value, remote=self._config.remote)

        if on_remote:
            log.info("ref_already_on_remote")
            return PublishResult(ref=ref, kind=kind, pushed=False, dry_run=dry_run)

        log.info("pushing_ref", dry_run=dry_run)
        try:
            repo.push(kind.full_ref(ref))
        except GitError as e:
            raise PushError(f"Pushing {kind.value} {ref}: {e.message}", ref=ref) from e
        log.info("ref_pushed", dry_run=dry_run)

        return PublishResult(ref=ref, kind=kind, pushed=True, dry_run=dry_run)

    def _handle(self, ref: str) -> RepositoryHandle:
        if self._repo is None:
            raise PublisherClosedError("Publisher has been closed", ref=ref)
        return self._repo

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Release the repository handle. Safe to call more than once."""
        if self._repo is not None:
            repo, self._repo = self._repo, None
            repo.close()

    def __enter__(self) -> RefPublisher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
