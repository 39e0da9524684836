"""Data models for a single publish run."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Literal

from common.constants import BLOB_MODE, BLOB_TYPE

FileOrigin = Literal["generated", "scaffold", "default", "entrypoint"]


@dataclass(frozen=True)
class GeneratedFile:
    """One file produced by the external code generator."""

    path: str
    content: str
    language: str = "text"


@dataclass(frozen=True)
class ScaffoldFile:
    """One infrastructure file supplied alongside the generator output."""

    path: str
    content: str
    label: str | None = None


@dataclass(frozen=True)
class ComposedFile:
    """A file that made it into the final, conflict-resolved set."""

    path: str
    content: str
    origin: FileOrigin


class ComposedFileSet:
    """Ordered collection of files keyed by path.

    Insertion order is preserved and a path may appear only once, so the set
    can be handed straight to the tree builder.
    """

    def __init__(self, files: list[ComposedFile] | None = None):
        self._files: dict[str, ComposedFile] = {}
        for f in files or []:
            self.add(f)

    def add(self, file: ComposedFile) -> None:
        """Append a file.

        Raises:
            ValueError: If the path is already present
        """
        if file.path in self._files:
            raise ValueError(f"Duplicate path in composed file set: {file.path}")
        self._files[file.path] = file

    def get(self, path: str) -> ComposedFile | None:
        return self._files.get(path)

    def paths(self) -> list[str]:
        return list(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __iter__(self) -> Iterator[ComposedFile]:
        return iter(self._files.values())

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"ComposedFileSet({len(self)} files)"


@dataclass(frozen=True)
class EnvVarSpec:
    """An environment variable the generated app expects."""

    key: str
    description: str = ""
    required: bool = False
    default_value: str | None = None


@dataclass
class AppMetadata:
    """Application metadata used to fill in the default scaffold."""

    name: str
    organization_name: str = "Unknown"
    sdk_version: str = "1.0.0"
    required_env_vars: list[EnvVarSpec] = field(default_factory=list)


@dataclass(frozen=True)
class RepositoryHandle:
    """The destination repository, resolved once per publish."""

    full_name: str
    default_branch: str
    html_url: str
    clone_url: str
    is_preexisting: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any], is_preexisting: bool = False) -> "RepositoryHandle":
        """Build a handle from a GitHub repository payload."""
        return cls(
            full_name=data["full_name"],
            default_branch=data.get("default_branch") or "main",
            html_url=data["html_url"],
            clone_url=data.get("clone_url", ""),
            is_preexisting=is_preexisting,
        )


@dataclass(frozen=True)
class BlobRef:
    """A created blob and the path it will occupy in the tree."""

    path: str
    sha: str
    mode: str = BLOB_MODE
    type: str = BLOB_TYPE

    def as_tree_entry(self) -> dict[str, str]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


@dataclass(frozen=True)
class TreeRef:
    sha: str
    base_tree_sha: str | None = None


@dataclass(frozen=True)
class CommitRef:
    sha: str
    message: str
    tree_sha: str
    parent_sha: str | None = None


@dataclass
class CommitOutcome:
    """What the tree builder produced, including any paths it had to drop."""

    commit: CommitRef
    tree: TreeRef
    blobs: list[BlobRef]
    dropped_paths: list[str] = field(default_factory=list)


@dataclass
class PublishRequest:
    """Everything the orchestrator needs for one publish."""

    organization_id: str
    app: AppMetadata
    repo_name: str
    generated_files: list[GeneratedFile]
    description: str | None = None
    is_private: bool = True
    scaffold_files: list[ScaffoldFile] = field(default_factory=list)
    app_id: str | None = None


@dataclass
class PublishResult:
    """Outcome of a successful publish."""

    success: bool
    repo_url: str
    clone_url: str
    default_branch: str
    file_count: int
    commit_sha: str = ""
    is_preexisting: bool = False
    dropped_paths: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "repoUrl": self.repo_url,
            "cloneUrl": self.clone_url,
            "defaultBranch": self.default_branch,
            "fileCount": self.file_count,
            "commitSha": self.commit_sha,
            "isPreexisting": self.is_preexisting,
            "droppedPaths": list(self.dropped_paths),
        }


@dataclass
class RepositoryValidation:
    """Result of checking an externally supplied repository URL."""

    valid: bool
    repo_info: dict[str, Any] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.valid:
            return {"valid": True, "repoInfo": self.repo_info}
        return {"valid": False, "error": self.error}
