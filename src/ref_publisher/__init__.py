"""ref-publisher: idempotent publishing of release branches and tags.

Usage:
    ```python
    from ref_publisher import PublisherConfig, RefPublisher

    config = PublisherConfig(repo_path="/path/to/repo", dry_run=False)
    with RefPublisher.create(config) as publisher:
        publisher.publish_branch("release-1.19")
        publisher.publish_tag("v1.19.0")
    ```
"""

from __future__ import annotations

from ref_publisher.config import PublisherConfig
from ref_publisher.publisher import PublishResult, RefPublisher, RepositoryHandle
from ref_publisher.refs import RefKind

__version__ = "0.1.0"

__all__ = [
    "PublishResult",
    "PublisherConfig",
    "RefKind",
    "RefPublisher",
    "RepositoryHandle",
    "__version__",
]
