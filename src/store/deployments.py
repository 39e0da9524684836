"""Where each builder app was last published."""

import json
from datetime import datetime, timezone

from common.logger import get_logger

from .interface import DatabaseAdapter

logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DeploymentStore:
    """SQLite-backed deployment recorder.

    Keeps one ``deployments`` row per app id and appends to ``publish_log``
    for every successful publish. The adapter must already be connected.

    Example:
        >>> with get_adapter(":memory:") as adapter:
        ...     store = DeploymentStore(adapter)
        ...     store.ensure_schema()
        ...     store.record_deployment("app_1", "https://github.com/me/site", "main")
    """

    def __init__(self, adapter: DatabaseAdapter):
        self.adapter = adapter

    def ensure_schema(self) -> None:
        self.adapter.create_schema()

    def get_repository_url(self, app_id: str) -> str | None:
        row = self.adapter.fetchone("SELECT repo_url FROM deployments WHERE app_id = ?", (app_id,))
        return row["repo_url"] if row else None

    def get_deployment(self, app_id: str) -> dict | None:
        return self.adapter.fetchone(
            "SELECT app_id, repo_url, branch, updated_at FROM deployments WHERE app_id = ?",
            (app_id,),
        )

    def record_deployment(self, app_id: str, repo_url: str, branch: str) -> None:
        """Insert or replace the deployment row for ``app_id``."""
        self.adapter.execute(
            """
            INSERT INTO deployments (app_id, repo_url, branch, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(app_id) DO UPDATE SET
                repo_url = excluded.repo_url,
                branch = excluded.branch,
                updated_at = excluded.updated_at
            """,
            (app_id, repo_url, branch, _now()),
        )
        self.adapter.commit()
        logger.info(f"Recorded deployment for {app_id}: {repo_url} ({branch})")

    def log_publish(
        self,
        app_id: str | None,
        repo_url: str,
        commit_sha: str,
        file_count: int,
        dropped_paths: list[str] | None = None,
    ) -> None:
        self.adapter.execute(
            """
            INSERT INTO publish_log
                (app_id, repo_url, commit_sha, file_count, dropped_paths, published_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (app_id, repo_url, commit_sha, file_count, json.dumps(dropped_paths or []), _now()),
        )
        self.adapter.commit()

    def publish_history(self, app_id: str) -> list[dict]:
        rows = self.adapter.fetchall(
            "SELECT * FROM publish_log WHERE app_id = ? ORDER BY id", (app_id,)
        )
        for row in rows:
            row["dropped_paths"] = json.loads(row["dropped_paths"] or "[]")
        return rows
