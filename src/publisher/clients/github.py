"""GitHub REST client for repository and Git Data API calls."""

import time
from typing import Any
from urllib.parse import quote

import requests

from common.constants import BLOB_ENCODING
from common.env import env
from common.logger import get_logger

from .base import RemoteApiError, RemoteClient, TransportError
from .rate_limiter import RateLimiter

logger = get_logger(__name__)


class GitHubClient(RemoteClient):
    """Thin client for the GitHub REST API.

    Only the calls needed to publish a file set are wrapped:
    - Repository creation and lookup (``/user/repos``, ``/repos/{owner}/{repo}``)
    - Identity lookup (``/user``)
    - Git Data API: refs, commits, blobs and trees

    Every request carries the same Accept, Authorization and User-Agent
    headers. Idempotent GETs are retried on transport failures with
    exponential backoff; writes are sent exactly once and throttled by a
    sliding-window rate limiter.

    API Documentation: https://docs.github.com/en/rest/git
    """

    ACCEPT = "application/vnd.github.v3+json"

    # Retry configuration for GETs
    MAX_RETRIES = 3
    RETRY_BASE_DELAY = 1  # seconds

    def __init__(
        self,
        token: str | None,
        api_base: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        writes_per_minute: int | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize GitHub client.

        Args:
            token: Bearer token; None makes anonymous requests
            api_base: API root (default from GITHUB_API_BASE)
            user_agent: User-Agent header (default from GITHUB_USER_AGENT)
            timeout: Per-request timeout in seconds (default from GITHUB_TIMEOUT)
            writes_per_minute: Throttle for non-GET calls, 0 disables it
            session: Pre-built requests session (mainly for tests)
        """
        self.api_base = (api_base or env.github_api_base()).rstrip("/")
        self.timeout = timeout if timeout is not None else env.github_timeout()
        self.write_limiter = RateLimiter(
            requests_per_period=(
                writes_per_minute
                if writes_per_minute is not None
                else env.github_write_requests_per_minute()
            ),
            period_seconds=60,
        )

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": self.ACCEPT,
                "User-Agent": user_agent or env.github_user_agent(),
            }
        )
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @property
    def authenticated(self) -> bool:
        return "Authorization" in self.session.headers

    def request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        method = method.upper()
        url = f"{self.api_base}{path}"
        attempts = self.MAX_RETRIES if method == "GET" else 1

        if method != "GET":
            self.write_limiter.wait_if_needed()

        for attempt in range(attempts):
            try:
                logger.debug(f"{method} {path}")
                response = self.session.request(method, url, json=body, timeout=self.timeout)
                break
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                if attempt < attempts - 1:
                    wait_time = self.RETRY_BASE_DELAY * (2**attempt)
                    logger.warning(
                        f"{method} {path} failed ({type(e).__name__}), retrying in {wait_time}s "
                        f"(attempt {attempt + 1}/{attempts})"
                    )
                    time.sleep(wait_time)
                    continue
                raise TransportError(f"{method} {path} failed: {e}") from e
            except requests.exceptions.RequestException as e:
                raise TransportError(f"{method} {path} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RemoteApiError(response.status_code, response.text, method=method, path=path)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ── Repositories ────────────────────────────────────────────────

    def create_repository(self, name: str, description: str, private: bool) -> dict[str, Any]:
        return self.request(
            "POST",
            "/user/repos",
            {"name": name, "description": description, "private": private, "auto_init": False},
        )

    def get_authenticated_user(self) -> dict[str, Any]:
        return self.request("GET", "/user")

    def get_repository(self, full_name: str) -> dict[str, Any]:
        return self.request("GET", f"/repos/{full_name}")

    # ── Git Data API ────────────────────────────────────────────────

    def get_branch_ref(self, full_name: str, branch: str) -> dict[str, Any]:
        return self.request("GET", f"/repos/{full_name}/git/ref/heads/{quote(branch)}")

    def get_commit(self, full_name: str, sha: str) -> dict[str, Any]:
        return self.request("GET", f"/repos/{full_name}/git/commits/{sha}")

    def create_blob(self, full_name: str, content_b64: str) -> dict[str, Any]:
        return self.request(
            "POST",
            f"/repos/{full_name}/git/blobs",
            {"content": content_b64, "encoding": BLOB_ENCODING},
        )

    def create_tree(
        self, full_name: str, entries: list[dict[str, str]], base_tree: str | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"tree": entries}
        if base_tree:
            payload["base_tree"] = base_tree
        return self.request("POST", f"/repos/{full_name}/git/trees", payload)

    def create_commit(
        self, full_name: str, message: str, tree_sha: str, parents: list[str] | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": message, "tree": tree_sha}
        if parents:
            payload["parents"] = parents
        return self.request("POST", f"/repos/{full_name}/git/commits", payload)

    def update_ref(self, full_name: str, branch: str, sha: str, force: bool = True) -> dict[str, Any]:
        return self.request(
            "PATCH",
            f"/repos/{full_name}/git/refs/heads/{quote(branch)}",
            {"sha": sha, "force": force},
        )

    def create_ref(self, full_name: str, branch: str, sha: str) -> dict[str, Any]:
        return self.request(
            "POST",
            f"/repos/{full_name}/git/refs",
            {"ref": f"refs/heads/{branch}", "sha": sha},
        )

    def close(self) -> None:
        self.session.close()

    def __repr__(self) -> str:
        auth = "authenticated" if self.authenticated else "anonymous"
        return f"GitHubClient(api_base={self.api_base}, {auth})"
