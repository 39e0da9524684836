"""Tests for file set composition."""

import json
import logging

import pytest

from publisher.clients.base import ConfigurationError
from publisher.composer import FileSetComposer
from publisher.models import (
    AppMetadata,
    ComposedFile,
    ComposedFileSet,
    GeneratedFile,
    ScaffoldFile,
)
from publisher.scaffold import default_scaffold_paths


@pytest.fixture
def composer():
    return FileSetComposer()


class TestComposedFileSet:
    """Tests for ComposedFileSet."""

    def test_preserves_insertion_order(self):
        files = ComposedFileSet()
        files.add(ComposedFile("b.txt", "b", "generated"))
        files.add(ComposedFile("a.txt", "a", "generated"))
        assert files.paths() == ["b.txt", "a.txt"]
        assert len(files) == 2
        assert "a.txt" in files

    def test_rejects_duplicate_path(self):
        files = ComposedFileSet([ComposedFile("a.txt", "a", "generated")])
        with pytest.raises(ValueError, match="Duplicate path"):
            files.add(ComposedFile("a.txt", "other", "scaffold"))


class TestComposeWithScaffold:
    """Tests for composition when the caller supplies scaffold files."""

    def test_scaffold_wins_on_collision(self, composer, acme):
        """Test a scaffold file replaces the generated file at the same path."""
        generated = [
            GeneratedFile("package.json", '{"name": "from-generator"}'),
            GeneratedFile("components/hero.tsx", "export default function Hero() {}"),
        ]
        scaffold = [ScaffoldFile("package.json", '{"name": "from-scaffold"}')]

        files = composer.compose(generated, scaffold, acme)

        entries = [f for f in files if f.path == "package.json"]
        assert len(entries) == 1
        assert entries[0].content == '{"name": "from-scaffold"}'
        assert entries[0].origin == "scaffold"

    def test_no_default_scaffold_when_supplied(self, composer, acme):
        """Test default files are not synthesized alongside a supplied scaffold."""
        files = composer.compose(
            [GeneratedFile("app/page.tsx", "export default function Home() {}")],
            [ScaffoldFile("package.json", "{}")],
            acme,
        )
        assert files.paths() == ["app/page.tsx", "package.json"]

    def test_order_generated_then_scaffold(self, composer, acme):
        """Test kept generated files come first, then scaffold files."""
        files = composer.compose(
            [GeneratedFile("app/page.tsx", "x"), GeneratedFile("b.ts", "b")],
            [ScaffoldFile("tsconfig.json", "{}"), ScaffoldFile("b.ts", "scaffold b")],
            acme,
        )
        assert files.paths() == ["app/page.tsx", "tsconfig.json", "b.ts"]
        assert files.get("b.ts").content == "scaffold b"

    def test_scaffold_only(self, composer, acme):
        """Test a publish made of scaffold files alone."""
        files = composer.compose([], [ScaffoldFile("README.md", "# Hi")], acme)
        assert files.paths() == ["README.md", "app/page.tsx"]
        assert files.get("app/page.tsx").origin == "entrypoint"


class TestComposeWithDefaults:
    """Tests for composition with the synthesized default scaffold."""

    def test_generated_manifest_is_kept(self, composer, acme):
        """Test a generated package.json is not replaced by the default."""
        generated = [GeneratedFile("package.json", '{"name": "custom"}')]

        files = composer.compose(generated, None, acme)

        assert files.get("package.json").content == '{"name": "custom"}'
        assert files.get("package.json").origin == "generated"

    def test_defaults_fill_missing_paths(self, composer, acme):
        """Test every default path is present exactly once."""
        files = composer.compose([GeneratedFile("components/hero.tsx", "x")], [], acme)
        for path in default_scaffold_paths():
            assert path in files

    def test_skipped_defaults_are_logged(self, composer, acme, caplog):
        """Test kept generated versions are reported."""
        with caplog.at_level(logging.INFO):
            composer.compose([GeneratedFile("README.md", "# Custom")], None, acme)
        assert "README.md" in caplog.text

    def test_acme_example(self, composer, acme, landing_page):
        """Test the single landing-page component scenario end to end."""
        files = composer.compose([landing_page], None, acme)

        assert files.paths()[0] == "components/landing-page.tsx"
        assert json.loads(files.get("package.json").content)["name"] == "acme"
        assert files.get("README.md").content.startswith("# Acme")

        page = files.get("app/page.tsx")
        assert page.origin == "entrypoint"
        assert "import Landing from '@/components/landing-page';" in page.content
        assert files.paths()[-1] == "app/page.tsx"


class TestComposeEdgeCases:
    """Tests for inputs that need special handling."""

    def test_nothing_to_publish(self, composer, acme):
        with pytest.raises(ConfigurationError):
            composer.compose([], [], acme)

    def test_repeated_generated_path_keeps_last_content(self, composer, acme, caplog):
        """Test a path repeated by the generator appears once with its last content."""
        generated = [
            GeneratedFile("components/hero.tsx", "first"),
            GeneratedFile("components/cta.tsx", "cta"),
            GeneratedFile("components/hero.tsx", "second"),
        ]
        with caplog.at_level(logging.WARNING):
            files = composer.compose(generated, None, acme)

        assert files.paths()[:2] == ["components/hero.tsx", "components/cta.tsx"]
        assert files.get("components/hero.tsx").content == "second"
        assert "more than once" in caplog.text

    @pytest.mark.parametrize("with_scaffold", [True, False])
    def test_paths_are_unique(self, composer, with_scaffold):
        """Test no two composed entries share a path."""
        generated = [
            GeneratedFile("package.json", "{}"),
            GeneratedFile("app/layout.tsx", "layout"),
            GeneratedFile("page.tsx", "export default function P() {}"),
            GeneratedFile("package.json", "{ }"),
        ]
        scaffold = [ScaffoldFile("package.json", "{}"), ScaffoldFile("app/layout.tsx", "s")]

        files = composer.compose(generated, scaffold if with_scaffold else None, AppMetadata("X"))

        paths = [f.path for f in files]
        assert len(paths) == len(set(paths))

    def test_promoted_root_page(self, composer, acme):
        """Test a root-level page.tsx is copied to app/page.tsx."""
        page = GeneratedFile("page.tsx", "export default function Home() { return null }")
        files = composer.compose([page], None, acme)

        assert "page.tsx" in files
        assert files.get("app/page.tsx").content == page.content
