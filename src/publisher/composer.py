"""Merge generator output with scaffold files into one publishable set."""

from collections.abc import Callable, Iterable

from common.logger import get_logger
from publisher.clients.base import ConfigurationError
from publisher.entrypoint import EntryPointInferencer
from publisher.models import (
    AppMetadata,
    ComposedFile,
    ComposedFileSet,
    FileOrigin,
    GeneratedFile,
    ScaffoldFile,
)
from publisher.scaffold import build_default_scaffold

logger = get_logger(__name__)


def _by_path(
    files: Iterable[GeneratedFile | ScaffoldFile], origin: FileOrigin
) -> dict[str, ComposedFile]:
    """Key files by path; a repeated path keeps its first position and last content."""
    keyed: dict[str, ComposedFile] = {}
    for f in files:
        if f.path in keyed:
            logger.warning(f"Path {f.path} appears more than once in {origin} files, keeping the last")
        keyed[f.path] = ComposedFile(path=f.path, content=f.content, origin=origin)
    return keyed


class FileSetComposer:
    """Build the final file set for a publish.

    Two precedence rules apply, depending on whether the caller sent a scaffold:

    - With a scaffold, scaffold files override generated files on the same
      path (the wizard may ship an enhanced ``package.json``).
    - Without one, a default scaffold is synthesized and each default file is
      added only where the generator did not already provide that path.

    Either way the entry-point inferencer runs last and may append
    ``app/page.tsx``.
    """

    def __init__(
        self,
        inferencer: EntryPointInferencer | None = None,
        default_scaffold: Callable[[AppMetadata], list[ScaffoldFile]] = build_default_scaffold,
    ):
        self.inferencer = inferencer or EntryPointInferencer()
        self.default_scaffold = default_scaffold

    def compose(
        self,
        generated_files: list[GeneratedFile],
        scaffold_files: list[ScaffoldFile] | None,
        app: AppMetadata,
    ) -> ComposedFileSet:
        """Compose the file set to publish.

        Args:
            generated_files: Generator output, in generator order
            scaffold_files: Caller-supplied scaffold; None or empty means
                "synthesize the default scaffold"
            app: Metadata used to fill in default scaffold templates

        Returns:
            Ordered set with unique paths: kept generated files first, then
            scaffold or default files, then any inferred entry point

        Raises:
            ConfigurationError: If there are neither generated nor scaffold files
        """
        if not generated_files and not scaffold_files:
            raise ConfigurationError("Nothing to publish: no generated files and no scaffold files")

        if scaffold_files:
            composed = self.merge_with_scaffold(generated_files, scaffold_files)
        else:
            composed = self.merge_with_defaults(generated_files, app)

        decision = self.inferencer.infer(composed)
        if decision.adds_file:
            composed.add(ComposedFile(decision.path, decision.content, origin="entrypoint"))

        logger.info(f"Composed {len(composed)} file(s) for publish")
        logger.debug(f"Files to commit: {composed.paths()}")
        return composed

    def merge_with_scaffold(
        self, generated_files: list[GeneratedFile], scaffold_files: list[ScaffoldFile]
    ) -> ComposedFileSet:
        """Scaffold wins on path collisions."""
        generated = _by_path(generated_files, "generated")
        scaffold = _by_path(scaffold_files, "scaffold")

        kept = [f for path, f in generated.items() if path not in scaffold]

        logger.info(
            f"Using supplied scaffold: {len(generated)} generated, {len(scaffold)} scaffold, "
            f"{len(generated) - len(kept)} conflict(s) resolved in favour of scaffold"
        )
        return ComposedFileSet(kept + list(scaffold.values()))

    def merge_with_defaults(
        self, generated_files: list[GeneratedFile], app: AppMetadata
    ) -> ComposedFileSet:
        """Generated files win over synthesized defaults."""
        composed = ComposedFileSet(list(_by_path(generated_files, "generated").values()))

        skipped = []
        for default in self.default_scaffold(app):
            if default.path in composed:
                skipped.append(default.path)
                continue
            composed.add(ComposedFile(default.path, default.content, origin="default"))

        if skipped:
            logger.info(f"Generator already provides {', '.join(skipped)}; keeping generated versions")
        return composed
