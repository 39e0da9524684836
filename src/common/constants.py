"""Shared constants for repo-publisher.

For environment-based configuration (API base, tokens, etc.), use the env module:
    from common.env import env
    api_base = env.github_api_base()
"""

# Git object graph
BLOB_MODE = "100644"
BLOB_TYPE = "blob"
BLOB_ENCODING = "base64"

# Entry-point conventions for generated Next.js apps
CANONICAL_ENTRY_PATH = "app/page.tsx"
CONVENTIONAL_ENTRY_PATHS: tuple[str, ...] = ("app/page.tsx", "src/app/page.tsx")
ROOT_LEVEL_ENTRY_PATHS: tuple[str, ...] = ("page.tsx", "src/page.tsx")
COMPONENT_EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx")

# Path fragments that never make a good root page (layouts, styles, shadcn ui)
EXCLUDED_COMPONENT_FRAGMENTS: tuple[str, ...] = ("layout", "globals", "provider", "/ui/")

# Filename fragments tried in order when picking the main component
PRIORITY_COMPONENT_NAMES: tuple[str, ...] = (
    "page",
    "app",
    "home",
    "landing",
    "main",
    "index",
    "hero",
    "landing-page",
    "home-page",
    "website",
    "site",
)

# A component must be longer than this to win on size alone
MIN_COMPONENT_LENGTH = 100

FALLBACK_COMPONENT_NAME = "MainComponent"
IMPORT_ALIAS_PREFIX = "@/"

# Commit messages
BRAND_SUFFIX = "Built with l4yercak3 and v0"
INITIAL_COMMIT_TEMPLATE = "Initial commit: {app_name} - " + BRAND_SUFFIX
UPDATE_COMMIT_TEMPLATE = "Update: {app_name} - " + BRAND_SUFFIX
DEFAULT_DESCRIPTION_TEMPLATE = "{app_name} - Built with l4yercak3"
