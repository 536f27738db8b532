"""Name grammar for the refs a release publishes.

Release branches are named ``release-<major>.<minor>`` and release tags
``<prefix><major>.<minor>.<patch>[-pre][+build]``. Both are checked with
strict semantic-version parsing; nothing here touches a repository.
"""

from __future__ import annotations

from enum import Enum

from semver import Version

from ref_publisher.exceptions import InvalidRefNameError

__all__ = [
    "BRANCH_PREFIX",
    "DEFAULT_TAG_PREFIX",
    "RefKind",
    "branch_version",
    "tag_version",
    "validate_branch_name",
    "validate_tag_name",
]

#: Prefix every release branch carries
BRANCH_PREFIX = "release-"

#: Prefix release tags carry unless configured otherwise
DEFAULT_TAG_PREFIX = "v"


class RefKind(str, Enum):
    """Kind of ref being published."""

    BRANCH = "branch"
    TAG = "tag"

    def full_ref(self, name: str) -> str:
        """Fully qualified ref for name, e.g. ``refs/heads/release-1.19``.

        Pushing the qualified form keeps a branch and a tag that share a
        name from being ambiguous.
        """
        namespace = "heads" if self is RefKind.BRANCH else "tags"
        return f"refs/{namespace}/{name}"


def _parse_semver(value: str) -> Version:
    try:
        return Version.parse(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{value!r} is not a valid semantic version") from e


def branch_version(branch_name: str) -> Version:
    """Parse the version a release branch stands for.

    ``release-1.18`` maps to ``1.18.0``.

    Args:
        branch_name: Branch name to parse.

    Returns:
        The branch's version with patch set to 0.

    Raises:
        InvalidRefNameError: If the prefix is missing or the suffix plus
            ``.0`` is not a valid semantic version.
    """
    if not branch_name.startswith(BRANCH_PREFIX):
        raise InvalidRefNameError(
            f"Branch name has to start with {BRANCH_PREFIX}: {branch_name!r}",
            ref=branch_name,
            reason="prefix",
        )
    suffix = branch_name.removeprefix(BRANCH_PREFIX)
    try:
        return _parse_semver(f"{suffix}.0")
    except ValueError as e:
        raise InvalidRefNameError(
            f"Invalid semantic version in branch name {branch_name!r}: "
            f"expected {BRANCH_PREFIX}<major>.<minor>",
            ref=branch_name,
            reason="version",
        ) from e


def tag_version(tag_name: str, prefix: str = DEFAULT_TAG_PREFIX) -> Version:
    """Parse the version a release tag stands for.

    Args:
        tag_name: Tag name to parse (e.g., "v1.18.0").
        prefix: Required tag prefix. An empty prefix accepts bare versions.

    Returns:
        The tag's version.

    Raises:
        InvalidRefNameError: If the prefix is missing or the remainder is
            not a valid semantic version.
    """
    if not tag_name.startswith(prefix):
        raise InvalidRefNameError(
            f"Tag name has to start with {prefix!r}: {tag_name!r}",
            ref=tag_name,
            reason="prefix",
        )
    try:
        return _parse_semver(tag_name[len(prefix) :])
    except ValueError as e:
        raise InvalidRefNameError(
            f"Invalid semantic version in tag {tag_name!r}",
            ref=tag_name,
            reason="version",
        ) from e


def validate_branch_name(branch_name: str) -> None:
    """Raise InvalidRefNameError unless branch_name is a release branch."""
    branch_version(branch_name)


def validate_tag_name(tag_name: str, prefix: str = DEFAULT_TAG_PREFIX) -> None:
    """Raise InvalidRefNameError unless tag_name is a release tag."""
    tag_version(tag_name, prefix)
