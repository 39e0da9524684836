"""Access-token resolution for the organization being published from.

Token storage (OAuth connections, encrypted vaults) belongs to the caller.
The publisher only needs one question answered: which bearer token should
be used for this organization, if any.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from common.env import env


class CredentialResolver(ABC):
    """Source of GitHub access tokens."""

    @abstractmethod
    def resolve_access_token(self, organization_id: str) -> str | None:
        """Return the token for ``organization_id``.

        Returns:
            Token string, or None when the organization has no GitHub
            connection
        """
        pass


class StaticCredentialResolver(CredentialResolver):
    """Tokens from an in-memory mapping of organization id to token."""

    def __init__(self, tokens: Mapping[str, str]):
        self.tokens = dict(tokens)

    def resolve_access_token(self, organization_id: str) -> str | None:
        token = (self.tokens.get(organization_id) or "").strip()
        return token or None


class EnvCredentialResolver(CredentialResolver):
    """Single token from GITHUB_PERSONAL_ACCESS_TOKEN, for every organization."""

    def resolve_access_token(self, organization_id: str) -> str | None:
        return env.github_token()


class ChainedCredentialResolver(CredentialResolver):
    """Ask each resolver in turn and return the first token found.

    Example:
        >>> resolver = ChainedCredentialResolver(
        ...     StaticCredentialResolver({"org_1": "gho_abc"}),
        ...     EnvCredentialResolver(),
        ... )
    """

    def __init__(self, *resolvers: CredentialResolver):
        self.resolvers = resolvers

    def resolve_access_token(self, organization_id: str) -> str | None:
        for resolver in self.resolvers:
            token = resolver.resolve_access_token(organization_id)
            if token:
                return token
        return None
