"""Publish generated web apps to GitHub as one atomic commit."""

from .credentials import (
    ChainedCredentialResolver,
    CredentialResolver,
    EnvCredentialResolver,
    StaticCredentialResolver,
)
from .models import (
    AppMetadata,
    EnvVarSpec,
    GeneratedFile,
    PublishRequest,
    PublishResult,
    RepositoryValidation,
    ScaffoldFile,
)
from .orchestrator import DeploymentRecorder, PublishOrchestrator

__all__ = [
    "AppMetadata",
    "ChainedCredentialResolver",
    "CredentialResolver",
    "DeploymentRecorder",
    "EnvCredentialResolver",
    "EnvVarSpec",
    "GeneratedFile",
    "PublishOrchestrator",
    "PublishRequest",
    "PublishResult",
    "RepositoryValidation",
    "ScaffoldFile",
    "StaticCredentialResolver",
]
