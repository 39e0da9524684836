"""Create the destination repository or adopt the one already using its name."""

from common.logger import get_logger
from publisher.clients.base import RemoteApiError
from publisher.clients.github import GitHubClient
from publisher.models import RepositoryHandle

logger = get_logger(__name__)


class RepositoryProvisioner:
    """Resolve the repository a publish writes to.

    Repository names are caller-chosen slugs, so re-publishing the same app
    collides with the repository created the first time. That collision is
    the one failure handled here: the existing repository under the
    authenticated account is looked up and returned instead.
    """

    def __init__(self, client: GitHubClient):
        self.client = client

    def provision(self, name: str, description: str, is_private: bool) -> RepositoryHandle:
        """Create ``name`` or fall back to the existing repository.

        Raises:
            RemoteApiError: For any failure other than the name conflict
            TransportError: If GitHub could not be reached
        """
        logger.info(f"Creating repository {name}...")
        try:
            data = self.client.create_repository(name, description, is_private)
        except RemoteApiError as e:
            if not e.is_name_taken:
                raise
            logger.info(f"Repository {name} already exists, fetching existing repository...")
            return self.resolve_existing(name)

        handle = RepositoryHandle.from_api(data)
        logger.info(f"Repository created: {handle.html_url}")
        return handle

    def resolve_existing(self, name: str) -> RepositoryHandle:
        login = self.client.get_authenticated_user()["login"]
        data = self.client.get_repository(f"{login}/{name}")
        handle = RepositoryHandle.from_api(data, is_preexisting=True)
        logger.info(f"Using existing repository: {handle.html_url}")
        return handle
