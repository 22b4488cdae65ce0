"""
Custom exceptions for feed building.
"""


class FeedBuildError(Exception):
    """Base class for failures the orchestration layer turns into a fallback feed."""

    pass


class MalformedSourcePayload(FeedBuildError):
    """Raised when the upstream payload does not contain an array of records."""

    pass


class SourceFetchError(FeedBuildError):
    """Raised when the upstream source cannot be retrieved."""

    pass
