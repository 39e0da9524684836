"""Remote client interface and the publisher's exception hierarchy."""

from abc import ABC, abstractmethod
from typing import Any


class RemoteClient(ABC):
    """Base class for clients of a Git-hosting REST API.

    Everything above the client layer (provisioner, tree builder, orchestrator)
    talks to the backend only through ``request``, which makes it easy to swap
    in a fake backend for tests.
    """

    @abstractmethod
    def request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        """Perform one API call.

        Args:
            method: HTTP method (GET, POST, PATCH, ...)
            path: API path starting with '/', e.g. '/user/repos'
            body: Optional JSON body

        Returns:
            Decoded JSON response (None for empty bodies)

        Raises:
            RemoteApiError: If the backend answers with a non-2xx status
            TransportError: If the request never got a response
        """
        pass


class PublishError(Exception):
    """Base exception for publish errors."""

    pass


class ConfigurationError(PublishError):
    """The publish request cannot run as configured; no network call was made."""

    pass


class NotConnectedError(ConfigurationError):
    """No access token is available for the organization."""

    pass


class RemoteApiError(PublishError):
    """The remote API answered with a non-2xx status."""

    def __init__(self, status: int, raw_body: str, method: str = "", path: str = ""):
        self.status = status
        self.raw_body = raw_body
        self.method = method
        self.path = path
        super().__init__(f"GitHub API error ({status}): {raw_body}")

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_name_taken(self) -> bool:
        """True for the 422 returned when a repository name is already in use."""
        return self.status == 422 and "name already exists" in self.raw_body

    @property
    def is_empty_repository(self) -> bool:
        """True for the 409 GitHub returns when reading refs of an empty repo."""
        return self.status == 409 and "empty" in self.raw_body.lower()


class TransportError(PublishError):
    """The request failed before any response was received."""

    pass


class BlobUploadError(PublishError):
    """A blob could not be created while strict mode was on."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to create blob for {path}: {cause}")


class NothingToCommitError(PublishError):
    """Every blob failed, so there is nothing to build a tree from."""

    pass


class PublishFailedError(PublishError):
    """Normalized error surfaced to callers when a publish fails."""

    def __init__(self, message: str, phase: str | None = None):
        self.phase = phase
        super().__init__(message)
