"""Shared fixtures: an in-memory GitHub backend behind the real client interface."""

import hashlib
import json
import re
import threading
from dataclasses import dataclass, field

import pytest

from publisher.clients.base import RemoteApiError
from publisher.clients.github import GitHubClient
from publisher.encoding import decode_bytes
from publisher.models import AppMetadata, GeneratedFile

NAME_TAKEN_BODY = json.dumps(
    {
        "message": "Repository creation failed.",
        "errors": [
            {
                "resource": "Repository",
                "code": "custom",
                "field": "name",
                "message": "name already exists on this account",
            }
        ],
    }
)
EMPTY_REPO_BODY = json.dumps({"message": "Git Repository is empty."})
NOT_FOUND_BODY = json.dumps({"message": "Not Found"})


def _blob_sha(data: bytes) -> str:
    return _sha(f"blob {len(data)}\0", data)


def _sha(*parts: str | bytes) -> str:
    digest = hashlib.sha1()
    for part in parts:
        digest.update(part.encode("utf-8") if isinstance(part, str) else part)
    return digest.hexdigest()


@dataclass
class FakeRepo:
    owner: str
    name: str
    private: bool = True
    default_branch: str = "main"
    refs: dict[str, str] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def as_api(self) -> dict:
        return {
            "full_name": self.full_name,
            "name": self.name,
            "private": self.private,
            "default_branch": self.default_branch,
            "html_url": f"https://github.com/{self.full_name}",
            "clone_url": f"https://github.com/{self.full_name}.git",
        }


@dataclass
class Fault:
    method: str
    pattern: re.Pattern
    error: Exception
    remaining: int | None


class FakeGitHub(GitHubClient):
    """GitHub stand-in that keeps repositories and Git objects in memory.

    Objects are content addressed like the real thing: the same blob content
    gives the same blob sha and the same entries give the same tree sha.
    Every call is recorded in ``calls`` as ``(method, path, body)``.
    """

    def __init__(self, token: str | None = "test-token", login: str = "octocat"):
        super().__init__(token, api_base="https://api.github.test", writes_per_minute=0)
        self.login = login
        self.repos: dict[str, FakeRepo] = {}
        self.blobs: dict[str, bytes] = {}
        self.trees: dict[str, dict[str, str]] = {}
        self.commits: dict[str, dict] = {}
        self.calls: list[tuple[str, str, dict | None]] = []
        self.faults: list[Fault] = []
        self.failing_blob_contents: set[str] = set()
        self._lock = threading.Lock()
        self._commit_counter = 0

    # ── Test helpers ────────────────────────────────────────────────

    def fail(self, method: str, pattern: str, error: Exception | None = None, times: int | None = None):
        """Make matching requests raise ``error`` (a 500 by default)."""
        if error is None:
            error = RemoteApiError(500, '{"message":"Server Error"}', method=method)
        self.faults.append(Fault(method, re.compile(pattern), error, times))

    def fail_blob(self, content: str) -> None:
        """Make blob creation fail for files with exactly this content."""
        self.failing_blob_contents.add(content)

    def seed_repository(self, name: str, files: dict[str, str] | None = None) -> FakeRepo:
        """Create a repository, optionally with one commit holding ``files``."""
        repo = FakeRepo(owner=self.login, name=name)
        self.repos[repo.full_name] = repo
        if files:
            entries = {}
            for path, content in files.items():
                data = content.encode("utf-8")
                sha = _blob_sha(data)
                self.blobs[sha] = data
                entries[path] = sha
            tree_sha = self._store_tree(entries)
            repo.refs["main"] = self._store_commit("seed", tree_sha, [])
        return repo

    def branch_files(self, full_name: str, branch: str = "main") -> dict[str, str]:
        """Decode the files visible at the tip of ``branch``."""
        repo = self.repos[full_name]
        tip = repo.refs.get(branch)
        if tip is None:
            return {}
        tree = self.trees[self.commits[tip]["tree"]]
        return {path: self.blobs[sha].decode("utf-8") for path, sha in tree.items()}

    def calls_to(self, method: str, fragment: str) -> list[tuple[str, str, dict | None]]:
        return [c for c in self.calls if c[0] == method and fragment in c[1]]

    @property
    def ref_writes(self) -> list[tuple[str, str, dict | None]]:
        return [
            c
            for c in self.calls
            if (c[0] == "PATCH" and "/git/refs/heads/" in c[1])
            or (c[0] == "POST" and c[1].endswith("/git/refs"))
        ]

    # ── Backend ─────────────────────────────────────────────────────

    def request(self, method, path, body=None):
        method = method.upper()
        with self._lock:
            self.calls.append((method, path, body))
            for fault in self.faults:
                if fault.method == method and fault.pattern.search(path):
                    if fault.remaining is not None:
                        if fault.remaining <= 0:
                            continue
                        fault.remaining -= 1
                    raise fault.error
            return self._dispatch(method, path, body or {})

    def _error(self, status: int, body: str, method: str, path: str):
        return RemoteApiError(status, body, method=method, path=path)

    def _store_tree(self, entries: dict[str, str]) -> str:
        sha = _sha("tree", json.dumps(sorted(entries.items())))
        self.trees[sha] = dict(entries)
        return sha

    def _store_commit(self, message: str, tree_sha: str, parents: list[str]) -> str:
        self._commit_counter += 1
        sha = _sha("commit", message, tree_sha, *parents, str(self._commit_counter))
        self.commits[sha] = {"message": message, "tree": tree_sha, "parents": list(parents)}
        return sha

    def _repo(self, owner: str, name: str, method: str, path: str) -> FakeRepo:
        repo = self.repos.get(f"{owner}/{name}")
        if repo is None:
            raise self._error(404, NOT_FOUND_BODY, method, path)
        return repo

    def _dispatch(self, method: str, path: str, body: dict):
        if method == "GET" and path == "/user":
            return {"login": self.login}

        if method == "POST" and path == "/user/repos":
            full_name = f"{self.login}/{body['name']}"
            if full_name in self.repos:
                raise self._error(422, NAME_TAKEN_BODY, method, path)
            repo = FakeRepo(owner=self.login, name=body["name"], private=body["private"])
            self.repos[full_name] = repo
            return repo.as_api()

        m = re.fullmatch(r"/repos/([^/]+)/([^/]+)(/.*)?", path)
        if not m:
            raise self._error(404, NOT_FOUND_BODY, method, path)
        repo = self._repo(m.group(1), m.group(2), method, path)
        rest = m.group(3) or ""

        if method == "GET" and rest == "":
            return repo.as_api()

        if method == "GET" and rest.startswith("/git/ref/heads/"):
            branch = rest[len("/git/ref/heads/") :]
            if not repo.refs:
                raise self._error(409, EMPTY_REPO_BODY, method, path)
            if branch not in repo.refs:
                raise self._error(404, NOT_FOUND_BODY, method, path)
            return {"ref": f"refs/heads/{branch}", "object": {"sha": repo.refs[branch], "type": "commit"}}

        if method == "GET" and rest.startswith("/git/commits/"):
            sha = rest[len("/git/commits/") :]
            if sha not in self.commits:
                raise self._error(404, NOT_FOUND_BODY, method, path)
            commit = self.commits[sha]
            return {
                "sha": sha,
                "message": commit["message"],
                "tree": {"sha": commit["tree"]},
                "parents": [{"sha": p} for p in commit["parents"]],
            }

        if method == "POST" and rest == "/git/blobs":
            data = decode_bytes(body["content"])
            if data.decode("utf-8") in self.failing_blob_contents:
                raise self._error(500, '{"message":"Server Error"}', method, path)
            sha = _blob_sha(data)
            self.blobs[sha] = data
            return {"sha": sha, "url": f"{path}/{sha}"}

        if method == "POST" and rest == "/git/trees":
            entries: dict[str, str] = {}
            base = body.get("base_tree")
            if base is not None:
                if base not in self.trees:
                    raise self._error(422, '{"message":"Invalid tree info"}', method, path)
                entries.update(self.trees[base])
            for entry in body["tree"]:
                if entry["sha"] not in self.blobs:
                    raise self._error(422, '{"message":"Invalid tree info"}', method, path)
                entries[entry["path"]] = entry["sha"]
            return {"sha": self._store_tree(entries)}

        if method == "POST" and rest == "/git/commits":
            if body["tree"] not in self.trees:
                raise self._error(422, '{"message":"Tree SHA does not exist"}', method, path)
            return {"sha": self._store_commit(body["message"], body["tree"], body.get("parents", []))}

        if method == "PATCH" and rest.startswith("/git/refs/heads/"):
            branch = rest[len("/git/refs/heads/") :]
            if branch not in repo.refs:
                raise self._error(422, '{"message":"Reference does not exist"}', method, path)
            repo.refs[branch] = body["sha"]
            return {"ref": f"refs/heads/{branch}", "object": {"sha": body["sha"]}}

        if method == "POST" and rest == "/git/refs":
            branch = body["ref"][len("refs/heads/") :]
            if branch in repo.refs:
                raise self._error(422, '{"message":"Reference already exists"}', method, path)
            repo.refs[branch] = body["sha"]
            return {"ref": body["ref"], "object": {"sha": body["sha"]}}

        raise self._error(404, NOT_FOUND_BODY, method, path)


@pytest.fixture
def github():
    """An empty in-memory GitHub backend."""
    return FakeGitHub()


@pytest.fixture
def acme():
    """Metadata for the app used throughout the publish scenarios."""
    return AppMetadata(name="Acme", organization_name="Acme Inc", sdk_version="1.2.0")


@pytest.fixture
def landing_page():
    """A single v0-style component with a recognizable default export."""
    return GeneratedFile(
        path="components/landing-page.tsx",
        content="export default function Landing() {\n  return <main>Acme</main>\n}\n",
        language="typescript",
    )

