"""Publish a composed file set as a single commit through the Git Data API.

The sequence is blobs → tree → commit → ref. Blobs, trees and commits are
inert until a ref points at them, so the branch moves exactly once, at the
very end: a reader sees either the old tip or the complete new one.

Two publishes racing on the same branch are not serialized here. With a
forced ref update the last writer wins; callers that publish concurrently to
one repository must serialize those publishes themselves.
"""

from concurrent.futures import ThreadPoolExecutor

from common.env import env
from common.logger import get_logger
from publisher.clients.base import (
    BlobUploadError,
    NothingToCommitError,
    PublishError,
    RemoteApiError,
)
from publisher.clients.github import GitHubClient
from publisher.encoding import encode_base64
from publisher.models import (
    BlobRef,
    CommitOutcome,
    CommitRef,
    ComposedFile,
    ComposedFileSet,
    RepositoryHandle,
    TreeRef,
)

logger = get_logger(__name__)


class TreeCommitBuilder:
    """Turn a ``ComposedFileSet`` into one commit on the default branch.

    Args:
        client: GitHub client used for every round trip
        strict: When True, the first blob failure aborts the publish. When
            False (best effort), failed files are dropped from the commit and
            reported in ``CommitOutcome.dropped_paths``. Defaults to
            PUBLISH_STRICT_BLOBS.
        max_workers: Threads used for blob uploads (default PUBLISH_BLOB_WORKERS)
    """

    def __init__(
        self,
        client: GitHubClient,
        strict: bool | None = None,
        max_workers: int | None = None,
    ):
        self.client = client
        self.strict = env.strict_blob_upload() if strict is None else strict
        self.max_workers = max(1, max_workers or env.blob_upload_workers())

    def resolve_tip(self, repo: RepositoryHandle) -> tuple[str | None, str | None]:
        """Return ``(tip_commit_sha, tip_tree_sha)``, or ``(None, None)`` for an empty repo."""
        try:
            ref = self.client.get_branch_ref(repo.full_name, repo.default_branch)
        except RemoteApiError as e:
            if e.is_not_found or e.is_empty_repository:
                logger.info("No existing commits found (new repository)")
                return None, None
            raise

        tip_sha = ref["object"]["sha"]
        commit = self.client.get_commit(repo.full_name, tip_sha)
        return tip_sha, commit["tree"]["sha"]

    def _create_blob(
        self, repo: RepositoryHandle, file: ComposedFile
    ) -> tuple[ComposedFile, str | None, PublishError | None]:
        try:
            blob = self.client.create_blob(repo.full_name, encode_base64(file.content))
        except PublishError as e:
            return file, None, e
        return file, blob["sha"], None

    def upload_blobs(
        self, repo: RepositoryHandle, files: ComposedFileSet
    ) -> tuple[list[BlobRef], list[str]]:
        """Create one blob per file.

        Returns:
            Tuple of (blob refs in file order, paths that failed)

        Raises:
            BlobUploadError: In strict mode, for the first failed file
        """
        ordered = list(files)
        if self.max_workers > 1 and len(ordered) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(lambda f: self._create_blob(repo, f), ordered))
        else:
            results = []
            for f in ordered:
                result = self._create_blob(repo, f)
                results.append(result)
                if self.strict and result[2] is not None:
                    break

        blobs: list[BlobRef] = []
        dropped: list[str] = []
        for file, sha, err in results:
            if err is not None:
                if self.strict:
                    raise BlobUploadError(file.path, err) from err
                logger.error(f"Failed to create blob for {file.path}: {err}")
                dropped.append(file.path)
                continue
            blobs.append(BlobRef(path=file.path, sha=sha))

        return blobs, dropped

    def commit(self, repo: RepositoryHandle, files: ComposedFileSet, message: str) -> CommitOutcome:
        """Publish ``files`` as a single commit and move the branch to it.

        Raises:
            NothingToCommitError: If no blob could be created
            BlobUploadError: In strict mode, when any blob fails
            RemoteApiError, TransportError: For failures of any other round trip
        """
        logger.info(f"Committing {len(files)} file(s) in a single commit...")

        parent_sha, base_tree_sha = self.resolve_tip(repo)

        blobs, dropped = self.upload_blobs(repo, files)
        if not blobs:
            raise NothingToCommitError("No files could be committed to GitHub")
        if dropped:
            logger.warning(f"Dropped {len(dropped)} file(s) from the commit: {', '.join(dropped)}")

        tree_data = self.client.create_tree(
            repo.full_name, [b.as_tree_entry() for b in blobs], base_tree=base_tree_sha
        )
        tree = TreeRef(sha=tree_data["sha"], base_tree_sha=base_tree_sha)

        commit_data = self.client.create_commit(
            repo.full_name, message, tree.sha, parents=[parent_sha] if parent_sha else None
        )
        commit = CommitRef(
            sha=commit_data["sha"], message=message, tree_sha=tree.sha, parent_sha=parent_sha
        )

        # The only externally visible step
        if parent_sha:
            self.client.update_ref(repo.full_name, repo.default_branch, commit.sha, force=True)
        else:
            self.client.create_ref(repo.full_name, repo.default_branch, commit.sha)

        logger.info(f"Committed {len(blobs)} file(s) in single commit: {commit.sha}")
        return CommitOutcome(commit=commit, tree=tree, blobs=blobs, dropped_paths=dropped)
