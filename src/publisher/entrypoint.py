"""Locate or synthesize the root page of a generated Next.js app.

Generators such as v0 usually emit components (``components/landing-page.tsx``)
but no ``app/page.tsx``, which leaves the deployed site answering 404 at ``/``.
``EntryPointInferencer`` inspects the file set and decides whether a root page
is needed and what it should render. Inference is best effort: whatever the
input, it ends in a decision, never an exception.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Literal, Protocol

from common.constants import (
    CANONICAL_ENTRY_PATH,
    COMPONENT_EXTENSIONS,
    CONVENTIONAL_ENTRY_PATHS,
    EXCLUDED_COMPONENT_FRAGMENTS,
    FALLBACK_COMPONENT_NAME,
    IMPORT_ALIAS_PREFIX,
    MIN_COMPONENT_LENGTH,
    PRIORITY_COMPONENT_NAMES,
    ROOT_LEVEL_ENTRY_PATHS,
)
from common.logger import get_logger
from publisher.scaffold import read_template, render_template

logger = get_logger(__name__)


class SourceFile(Protocol):
    path: str
    content: str


EntryAction = Literal["none", "promote", "generate", "placeholder"]

# A matcher looks at the candidate components and either picks one (with a
# short reason used in logs) or passes.
Matcher = Callable[[Sequence[SourceFile]], tuple[SourceFile, str] | None]


@dataclass(frozen=True)
class EntryPointDecision:
    """What to do about the root page."""

    action: EntryAction
    path: str = CANONICAL_ENTRY_PATH
    content: str = ""
    source_path: str | None = None
    reason: str = ""

    @property
    def adds_file(self) -> bool:
        return self.action != "none"


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1].lower()


def match_priority_name(
    candidates: Sequence[SourceFile], names: Sequence[str] = PRIORITY_COMPONENT_NAMES
) -> tuple[SourceFile, str] | None:
    """Pick the first file whose name contains a well-known page name.

    Names are tried in order, so "page" beats "landing" even if the landing
    file comes first in the input.
    """
    for name in names:
        for candidate in candidates:
            if name in _basename(candidate.path):
                return candidate, f'priority-name-match:"{name}"'
    return None


def match_largest(
    candidates: Sequence[SourceFile], min_length: int = MIN_COMPONENT_LENGTH
) -> tuple[SourceFile, str] | None:
    """Pick the longest component, on the theory that it is the full page."""
    if not candidates:
        return None
    largest = max(candidates, key=lambda f: len(f.content))
    if len(largest.content) > min_length:
        return largest, "largest-file"
    return None


def match_first(candidates: Sequence[SourceFile]) -> tuple[SourceFile, str] | None:
    if not candidates:
        return None
    return candidates[0], "first-file"


DEFAULT_MATCHERS: tuple[Matcher, ...] = (match_priority_name, match_largest, match_first)

# Tried in order; the first capture wins
DEFAULT_EXPORT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"export\s+default\s+(?:async\s+)?function\s*\*?\s*([A-Za-z_$][\w$]*)"),
    re.compile(r"export\s+default\s+class\s+([A-Za-z_$][\w$]*)"),
    re.compile(r"export\s+default\s+(?!function\b|class\b|async\b)([A-Za-z_$][\w$]*)"),
    re.compile(r"function\s+(\w+)[\s\S]*?export\s+default\s+\1"),
    re.compile(r"export\s*\{\s*([A-Za-z_$][\w$]*)\s+as\s+default\s*\}"),
)


def default_export_name(content: str, fallback: str = FALLBACK_COMPONENT_NAME) -> str:
    """Extract the declared name of a module's default export.

    Example:
        >>> default_export_name("export default function Landing() {}")
        'Landing'
    """
    for pattern in DEFAULT_EXPORT_PATTERNS:
        match = pattern.search(content)
        if match:
            return match.group(1)
    return fallback


def jsx_component_name(name: str) -> str:
    """Name to bind a default import to so JSX renders it as a component.

    JSX treats a tag starting with a lowercase letter as an HTML element, so
    ``landing`` is bound as ``Landing``.
    """
    if name[:1].islower():
        return name[0].upper() + name[1:]
    return name


def module_import_path(path: str) -> str:
    """'components/landing-page.tsx' -> '@/components/landing-page'"""
    return IMPORT_ALIAS_PREFIX + re.sub(r"\.(tsx|jsx)$", "", path)


def is_component_candidate(path: str) -> bool:
    if not path.endswith(COMPONENT_EXTENSIONS):
        return False
    return not any(fragment in path for fragment in EXCLUDED_COMPONENT_FRAGMENTS)


class EntryPointInferencer:
    """Decide whether a root page must be added and build its content.

    Args:
        matchers: Ranked strategies for choosing the main component; the
            first one that returns a file wins. Defaults to name match,
            then largest file, then first file.
    """

    def __init__(self, matchers: Iterable[Matcher] | None = None):
        self.matchers: list[Matcher] = list(matchers or DEFAULT_MATCHERS)

    def infer(self, files: Iterable[SourceFile]) -> EntryPointDecision:
        files = list(files)
        by_path = {f.path: f for f in files}

        for path in CONVENTIONAL_ENTRY_PATHS:
            if path in by_path:
                logger.debug(f"Root page already present at {path}")
                return EntryPointDecision("none", source_path=path, reason="already-present")

        for path in ROOT_LEVEL_ENTRY_PATHS:
            if path in by_path:
                logger.info(f"Found root-level {path}, promoting to {CANONICAL_ENTRY_PATH}")
                return EntryPointDecision(
                    "promote",
                    content=by_path[path].content,
                    source_path=path,
                    reason="root-level-page",
                )

        candidates = [f for f in files if is_component_candidate(f.path)]
        if not candidates:
            logger.info("No .tsx/.jsx component files found, using placeholder page")
            return EntryPointDecision(
                "placeholder", content=read_template("page_placeholder.tsx"), reason="no-components"
            )

        chosen, reason = self._select(candidates)
        component_name = jsx_component_name(default_export_name(chosen.content))
        import_path = module_import_path(chosen.path)

        logger.info(
            f"Entry point analysis: {len(candidates)} candidate(s), selected {chosen.path} "
            f"({reason}), component {component_name} from {import_path}"
        )

        return EntryPointDecision(
            "generate",
            content=render_template(
                "page_import.tsx", component_name=component_name, import_path=import_path
            ),
            source_path=chosen.path,
            reason=reason,
        )

    def _select(self, candidates: Sequence[SourceFile]) -> tuple[SourceFile, str]:
        for matcher in self.matchers:
            result = matcher(candidates)
            if result is not None:
                return result
        return candidates[0], "first-file"
