"""Environment configuration interface for repo-publisher.

All environment variable access goes through this module so defaults live in
one place. A ``.env`` file in the working directory is loaded on import.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def github_api_base() -> str:
        """Get the GitHub REST API base URL.

        Returns:
            API base URL without trailing slash, defaults to https://api.github.com
        """
        return os.getenv("GITHUB_API_BASE", "https://api.github.com").rstrip("/")

    @staticmethod
    def github_user_agent() -> str:
        """Get the User-Agent sent with every GitHub request.

        Returns:
            User-Agent string, defaults to 'l4yercak3-builder'
        """
        return os.getenv("GITHUB_USER_AGENT", "l4yercak3-builder")

    @staticmethod
    def github_token() -> str | None:
        """Get the fallback personal access token.

        Returns:
            Token string, or None when unset or blank
        """
        token = os.getenv("GITHUB_PERSONAL_ACCESS_TOKEN", "").strip()
        return token or None

    @staticmethod
    def github_timeout() -> float:
        """Get the per-request timeout in seconds.

        Returns:
            Timeout, defaults to 30 seconds
        """
        return float(os.getenv("GITHUB_TIMEOUT", "30"))

    @staticmethod
    def github_write_requests_per_minute() -> int:
        """Get the throttle applied to content-creating requests.

        Returns:
            Requests per minute, defaults to 80
        """
        return int(os.getenv("GITHUB_WRITE_REQUESTS_PER_MINUTE", "80"))

    @staticmethod
    def blob_upload_workers() -> int:
        """Get the number of threads used to upload blobs.

        Returns:
            Worker count, defaults to 1 (sequential uploads)
        """
        return max(1, int(os.getenv("PUBLISH_BLOB_WORKERS", "1")))

    @staticmethod
    def strict_blob_upload() -> bool:
        """Whether a single failed blob aborts the publish.

        Returns:
            True when PUBLISH_STRICT_BLOBS is truthy, defaults to False
        """
        return os.getenv("PUBLISH_STRICT_BLOBS", "false").strip().lower() in _TRUTHY

    @staticmethod
    def database_path() -> Path:
        """Get the SQLite file that records published repository locations.

        Returns:
            Path to SQLite database file, defaults to ./data/publisher.db
        """
        return Path(os.getenv("PUBLISH_DATABASE_PATH", "./data/publisher.db"))

    @staticmethod
    def log_level() -> str:
        """Get the default log level name.

        Returns:
            Upper-case level name, defaults to INFO
        """
        return os.getenv("LOG_LEVEL", "INFO").upper()


# Singleton instance for convenient access
env = Environment()
