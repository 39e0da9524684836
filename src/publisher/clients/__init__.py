"""Remote API clients used by the publisher."""

from .base import (
    BlobUploadError,
    ConfigurationError,
    NothingToCommitError,
    NotConnectedError,
    PublishError,
    PublishFailedError,
    RemoteApiError,
    RemoteClient,
    TransportError,
)
from .github import GitHubClient
from .rate_limiter import RateLimiter

__all__ = [
    "BlobUploadError",
    "ConfigurationError",
    "GitHubClient",
    "NothingToCommitError",
    "NotConnectedError",
    "PublishError",
    "PublishFailedError",
    "RateLimiter",
    "RemoteApiError",
    "RemoteClient",
    "TransportError",
]
