"""Domain errors raised by the store and action layers."""


class ReviewServiceError(Exception):
    """Base class for every error raised by the review service."""


class ValidationError(ReviewServiceError):
    """Malformed input rejected before any store write."""


class CreationError(ReviewServiceError):
    """The store did not return the record it was asked to create."""


class NotFoundError(ReviewServiceError):
    """The referenced record does not exist."""
