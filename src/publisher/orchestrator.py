"""Sequence a whole publish: credential, repository, files, commit, record.

Publishes are sequential and blocking. The orchestrator holds no locks, so two
publishes aimed at the same repository race on the final ref update (the last
forced update wins). Callers that may publish one app concurrently must
serialize those calls themselves.
"""

import re
from collections.abc import Callable
from typing import Protocol

from common.constants import (
    DEFAULT_DESCRIPTION_TEMPLATE,
    INITIAL_COMMIT_TEMPLATE,
    UPDATE_COMMIT_TEMPLATE,
)
from common.logger import get_logger
from publisher.clients.base import (
    ConfigurationError,
    NotConnectedError,
    PublishFailedError,
    RemoteApiError,
)
from publisher.clients.github import GitHubClient
from publisher.composer import FileSetComposer
from publisher.credentials import CredentialResolver
from publisher.models import PublishRequest, PublishResult, RepositoryHandle, RepositoryValidation
from publisher.provisioner import RepositoryProvisioner
from publisher.tree_builder import TreeCommitBuilder

logger = get_logger(__name__)

GITHUB_URL_PATTERN = re.compile(r"^https://github\.com/([\w-]+)/([\w-]+)", re.ASCII)

INVALID_URL_MESSAGE = "Invalid GitHub URL format. Expected: https://github.com/username/repo"
NOT_FOUND_MESSAGE = "Repository not found. Check the URL or ensure the repo is public."
NOT_CONNECTED_MESSAGE = "GitHub not connected. Please connect GitHub in Integrations settings."


class DeploymentRecorder(Protocol):
    """Caller-owned store of where each app was last published."""

    def get_repository_url(self, app_id: str) -> str | None: ...

    def record_deployment(self, app_id: str, repo_url: str, branch: str) -> None: ...


def commit_message(app_name: str, is_preexisting: bool) -> str:
    template = UPDATE_COMMIT_TEMPLATE if is_preexisting else INITIAL_COMMIT_TEMPLATE
    return template.format(app_name=app_name)


class PublishOrchestrator:
    """Publish generated apps to GitHub as single atomic commits.

    Args:
        credentials: Resolves the access token for an organization
        client_factory: Builds a client from a token (None for anonymous)
        composer: File-set composer (default ``FileSetComposer()``)
        recorder: Optional deployment recorder, used when the request has an app id
        strict: Blob failure policy passed to ``TreeCommitBuilder``
        max_workers: Blob upload threads passed to ``TreeCommitBuilder``

    Example:
        >>> orchestrator = PublishOrchestrator(EnvCredentialResolver())
        >>> result = orchestrator.publish(request)
        >>> result.repo_url
        'https://github.com/me/acme'
    """

    def __init__(
        self,
        credentials: CredentialResolver,
        client_factory: Callable[[str | None], GitHubClient] = GitHubClient,
        composer: FileSetComposer | None = None,
        recorder: DeploymentRecorder | None = None,
        strict: bool | None = None,
        max_workers: int | None = None,
    ):
        self.credentials = credentials
        self.client_factory = client_factory
        self.composer = composer or FileSetComposer()
        self.recorder = recorder
        self.strict = strict
        self.max_workers = max_workers

    def publish(self, request: PublishRequest) -> PublishResult:
        """Run one publish end to end.

        Raises:
            ConfigurationError: No token for the organization, or nothing to
                publish; raised before any network call
            PublishFailedError: Any other failure, with ``phase`` set to the
                step that failed (``credentials``, ``provision``, ``compose``,
                ``commit`` or ``record``) and the original exception as ``__cause__``
        """
        phase = "credentials"
        client = None
        try:
            token = self.credentials.resolve_access_token(request.organization_id)
            if not token:
                raise NotConnectedError(NOT_CONNECTED_MESSAGE)
            if not request.generated_files and not request.scaffold_files:
                raise ConfigurationError(
                    "Nothing to publish: no generated files and no scaffold files"
                )

            logger.info(f"Publishing {request.app.name} to repository {request.repo_name}")
            client = self.client_factory(token)

            phase = "provision"
            repo = RepositoryProvisioner(client).provision(
                request.repo_name,
                request.description or DEFAULT_DESCRIPTION_TEMPLATE.format(app_name=request.app.name),
                request.is_private,
            )

            phase = "compose"
            files = self.composer.compose(
                request.generated_files, request.scaffold_files, request.app
            )

            phase = "commit"
            builder = TreeCommitBuilder(client, strict=self.strict, max_workers=self.max_workers)
            outcome = builder.commit(
                repo, files, commit_message(request.app.name, repo.is_preexisting)
            )

            phase = "record"
            self._record(request.app_id, repo)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Publish failed during {phase}: {e}")
            raise PublishFailedError(f"Failed to create GitHub repository: {e}", phase=phase) from e
        finally:
            if client is not None:
                client.close()

        result = PublishResult(
            success=True,
            repo_url=repo.html_url,
            clone_url=repo.clone_url,
            default_branch=repo.default_branch,
            file_count=len(files),
            commit_sha=outcome.commit.sha,
            is_preexisting=repo.is_preexisting,
            dropped_paths=outcome.dropped_paths,
        )
        logger.info(f"Published {result.file_count} file(s) to {result.repo_url}")
        return result

    def _record(self, app_id: str | None, repo: RepositoryHandle) -> None:
        if not app_id or self.recorder is None:
            return
        if self.recorder.get_repository_url(app_id) == repo.html_url:
            logger.debug(f"Deployment for {app_id} already points at {repo.html_url}")
            return
        self.recorder.record_deployment(app_id, repo.html_url, repo.default_branch)

    def validate_repository(self, url: str) -> RepositoryValidation:
        """Check that ``url`` names a repository readable without authentication.

        Never raises; every failure comes back as ``valid=False`` with a message.
        """
        logger.info(f"Validating repository: {url}")
        match = GITHUB_URL_PATTERN.match(url or "")
        if not match:
            return RepositoryValidation(valid=False, error=INVALID_URL_MESSAGE)

        owner, repo = match.groups()
        client = None
        try:
            client = self.client_factory(None)
            data = client.get_repository(f"{owner}/{repo}")
        except RemoteApiError as e:
            if e.is_not_found:
                return RepositoryValidation(valid=False, error=NOT_FOUND_MESSAGE)
            return RepositoryValidation(valid=False, error=f"GitHub API returned status {e.status}")
        except Exception as e:
            logger.error(f"Validation error: {e}")
            return RepositoryValidation(valid=False, error=f"Network error: {e}")
        finally:
            if client is not None:
                client.close()

        return RepositoryValidation(
            valid=True,
            repo_info={
                "owner": owner,
                "repo": repo,
                "url": url,
                "defaultBranch": data.get("default_branch"),
                "isPrivate": data.get("private"),
            },
        )
