from __future__ import annotations


class RefPublisherError(Exception):
    """Base exception class for all ref-publisher errors.

    Every error raised by the publisher, the git adapter or the configuration
    layer inherits from this class, so the CLI boundary can catch them in one
    place while letting system exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            publisher.publish_tag("v1.19.0")
        except RefPublisherError as e:
            logger.error("publish_failed", error=e.message)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the RefPublisherError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
