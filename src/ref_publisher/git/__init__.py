"""Git repository handle used by the publisher.

Usage:
    ```python
    from ref_publisher.git import GitRepository

    repo = GitRepository.open("/path/to/repo", remote="origin")
    repo.has_remote_tag("v1.19.0")
    ```
"""

from __future__ import annotations

from ref_publisher.git.repository import (
    DEFAULT_NETWORK_TIMEOUT,
    GitRepository,
    is_network_error,
)

__all__ = [
    "DEFAULT_NETWORK_TIMEOUT",
    "GitRepository",
    "is_network_error",
]
