"""ref-publisher exception hierarchy.

All exceptions can be imported from this package:
    from ref_publisher.exceptions import PushError, RefNotFoundError
"""

from __future__ import annotations

# Base exception
from ref_publisher.exceptions.base import RefPublisherError

# Configuration exceptions
from ref_publisher.exceptions.config import ConfigError

# Git-related exceptions
from ref_publisher.exceptions.git import (
    CheckoutError,
    GitError,
    GitNotFoundError,
    PushRejectedError,
    RepositoryOpenError,
)

# Publish pipeline exceptions
from ref_publisher.exceptions.publish import (
    InvalidRefNameError,
    LocalLookupError,
    PublisherClosedError,
    PublishError,
    PushError,
    RefNotFoundError,
    RemoteLookupError,
)

__all__ = [
    "CheckoutError",
    "ConfigError",
    "GitError",
    "GitNotFoundError",
    "InvalidRefNameError",
    "LocalLookupError",
    "PublishError",
    "PublisherClosedError",
    "PushError",
    "PushRejectedError",
    "RefNotFoundError",
    "RefPublisherError",
    "RemoteLookupError",
    "RepositoryOpenError",
]
