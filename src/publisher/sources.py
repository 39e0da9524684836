"""Load generator output and scaffold files from a local directory."""

from pathlib import Path

from common.logger import get_logger
from publisher.models import GeneratedFile, ScaffoldFile

logger = get_logger(__name__)

LANGUAGE_BY_EXTENSION = {
    ".tsx": "typescript",
    ".ts": "typescript",
    ".jsx": "javascript",
    ".js": "javascript",
    ".mjs": "javascript",
    ".json": "json",
    ".css": "css",
    ".md": "markdown",
    ".html": "html",
    ".svg": "xml",
}

IGNORED_DIRS = {".git", "node_modules", ".next", "__pycache__"}


def language_for(path: str) -> str:
    """Guess a language label from the file extension ("text" if unknown)."""
    return LANGUAGE_BY_EXTENSION.get(Path(path).suffix.lower(), "text")


def iter_text_files(root: Path) -> list[tuple[str, str]]:
    """Return ``(relative_posix_path, content)`` for every UTF-8 file under ``root``.

    Files are sorted by path. Build and VCS directories are skipped, and so is
    anything that does not decode as UTF-8.
    """
    if not root.is_dir():
        raise ValueError(f"{root} is not a directory")

    found = []
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root)
        if not path.is_file() or IGNORED_DIRS.intersection(rel.parts):
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning(f"Skipping non-text file: {rel.as_posix()}")
            continue
        found.append((rel.as_posix(), content))
    return found


def load_generated_files(root: Path) -> list[GeneratedFile]:
    files = [
        GeneratedFile(path=rel, content=content, language=language_for(rel))
        for rel, content in iter_text_files(root)
    ]
    logger.info(f"Loaded {len(files)} generated file(s) from {root}")
    return files


def load_scaffold_files(root: Path) -> list[ScaffoldFile]:
    files = [ScaffoldFile(path=rel, content=content) for rel, content in iter_text_files(root)]
    logger.info(f"Loaded {len(files)} scaffold file(s) from {root}")
    return files
