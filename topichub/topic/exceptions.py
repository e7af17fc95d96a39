"""Topic domain exceptions."""

from topichub.core.exceptions import NotFoundError


class TopicNotFoundError(NotFoundError):
    """Raised when topic cannot be found."""

    error_type = "topic_not_found"

    def __init__(self, message: str = "Topic not found"):
        super().__init__(message)
