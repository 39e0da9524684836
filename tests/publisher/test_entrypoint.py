"""Tests for root page inference."""

import pytest

from publisher.entrypoint import (
    EntryPointInferencer,
    default_export_name,
    is_component_candidate,
    jsx_component_name,
    match_largest,
    match_priority_name,
    module_import_path,
)
from publisher.models import GeneratedFile


def gen(path, content="export default function Component() {}"):
    return GeneratedFile(path=path, content=content)


class TestDefaultExportName:
    """Tests for default_export_name."""

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("export default function Landing() {}", "Landing"),
            ("export default async function Page() {}", "Page"),
            ("export default class Dashboard extends React.Component {}", "Dashboard"),
            ("const Hero = () => null;\nexport default Hero;", "Hero"),
            ("function Pricing() {}\n\nexport default Pricing", "Pricing"),
            ("const Site = () => null;\nexport { Site as default };", "Site"),
        ],
    )
    def test_recognized_forms(self, content, expected):
        assert default_export_name(content) == expected

    def test_anonymous_default_export_uses_fallback(self):
        """Test an anonymous arrow default export."""
        assert default_export_name("export default () => <div />") == "MainComponent"

    def test_no_default_export_uses_fallback(self):
        assert default_export_name("export const x = 1", fallback="App") == "App"


class TestHelpers:
    """Tests for path helpers."""

    @pytest.mark.parametrize(
        "name,expected",
        [("Landing", "Landing"), ("landing", "Landing"), ("_page", "_page"), ("$hero", "$hero")],
    )
    def test_jsx_component_name(self, name, expected):
        assert jsx_component_name(name) == expected

    def test_module_import_path(self):
        assert module_import_path("components/landing-page.tsx") == "@/components/landing-page"
        assert module_import_path("src/components/Hero.jsx") == "@/src/components/Hero"

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("components/hero.tsx", True),
            ("components/hero.jsx", True),
            ("lib/utils.ts", False),
            ("app/layout.tsx", False),
            ("app/globals.css", False),
            ("components/theme-provider.tsx", False),
            ("components/ui/button.tsx", False),
        ],
    )
    def test_is_component_candidate(self, path, expected):
        assert is_component_candidate(path) is expected


class TestMatchers:
    """Tests for the ranked matchers."""

    def test_priority_names_tried_in_order(self):
        """Test that 'page' beats 'landing' regardless of input order."""
        files = [gen("components/landing.tsx"), gen("components/page-shell.tsx")]
        chosen, reason = match_priority_name(files)
        assert chosen.path == "components/page-shell.tsx"
        assert reason == 'priority-name-match:"page"'

    def test_priority_name_matches_basename_only(self):
        """Test that directory names do not count."""
        assert match_priority_name([gen("home/widget.tsx")]) is None

    def test_largest_requires_minimum_length(self):
        """Test that small files never win on size."""
        assert match_largest([gen("components/a.tsx", "x" * 100)]) is None
        chosen, reason = match_largest([gen("components/a.tsx", "x" * 101)])
        assert reason == "largest-file"


class TestEntryPointInferencer:
    """Test suite for EntryPointInferencer."""

    @pytest.fixture
    def inferencer(self):
        return EntryPointInferencer()

    @pytest.mark.parametrize("path", ["app/page.tsx", "src/app/page.tsx"])
    def test_existing_root_page_adds_nothing(self, inferencer, path):
        """Test that a conventional root page is left alone."""
        decision = inferencer.infer([gen("components/hero.tsx"), gen(path)])
        assert decision.action == "none"
        assert not decision.adds_file

    def test_root_level_page_is_promoted(self, inferencer):
        """Test that a stray page.tsx is copied to app/page.tsx."""
        page = gen("page.tsx", "export default function Home() { return <h1>Hi</h1> }")
        decision = inferencer.infer([gen("components/hero.tsx"), page])

        assert decision.action == "promote"
        assert decision.path == "app/page.tsx"
        assert decision.content == page.content
        assert decision.source_path == "page.tsx"

    def test_generates_import_of_landing_page(self, inferencer):
        """Test the v0 landing-page case."""
        landing = gen("components/landing-page.tsx", "export default function Landing() {}")
        decision = inferencer.infer([landing])

        assert decision.action == "generate"
        assert decision.path == "app/page.tsx"
        assert decision.source_path == "components/landing-page.tsx"
        assert "import Landing from '@/components/landing-page';" in decision.content
        assert "<Landing />" in decision.content

    def test_lowercase_default_export_is_capitalized(self, inferencer):
        """Test a lowercase export is imported under a component name."""
        landing = gen(
            "components/landing-page.tsx",
            "const landing = () => <main />;\nexport default landing;\n",
        )
        decision = inferencer.infer([landing])

        assert "import Landing from '@/components/landing-page';" in decision.content
        assert "<Landing />" in decision.content
        assert "<landing" not in decision.content

    def test_falls_back_to_largest_component(self, inferencer):
        """Test size wins when no file has a well-known name."""
        small = gen("components/pricing.tsx", "export default function Pricing() {}")
        big = gen("components/features.tsx", "export default function Features() {}" + " " * 200)
        decision = inferencer.infer([small, big])

        assert decision.source_path == "components/features.tsx"
        assert decision.reason == "largest-file"

    def test_falls_back_to_first_component(self, inferencer):
        """Test the first component wins when all are small and unnamed."""
        decision = inferencer.infer([gen("components/pricing.tsx"), gen("components/faq.tsx")])
        assert decision.source_path == "components/pricing.tsx"
        assert decision.reason == "first-file"

    def test_excluded_files_are_never_chosen(self, inferencer):
        """Test layouts and ui primitives do not become the root page."""
        files = [gen("components/ui/page-header.tsx"), gen("components/contact.tsx")]
        decision = inferencer.infer(files)
        assert decision.source_path == "components/contact.tsx"

    def test_placeholder_without_components(self, inferencer):
        """Test the static placeholder when nothing can be rendered."""
        decision = inferencer.infer([gen("lib/utils.ts"), gen("app/layout.tsx")])

        assert decision.action == "placeholder"
        assert decision.path == "app/page.tsx"
        assert "Welcome" in decision.content

    def test_empty_input(self, inferencer):
        assert inferencer.infer([]).action == "placeholder"

    def test_custom_matchers(self):
        """Test that matchers are pluggable and ranked."""

        def pick_last(candidates):
            return candidates[-1], "last-file"

        decision = EntryPointInferencer(matchers=[pick_last]).infer(
            [gen("components/home.tsx"), gen("components/zeta.tsx")]
        )
        assert decision.source_path == "components/zeta.tsx"
        assert decision.reason == "last-file"
