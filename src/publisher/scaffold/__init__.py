"""Default scaffold synthesized when the caller supplies none.

The file bodies live in ``templates/`` as versioned package data; this module
only knows how to fill them in. ``templates/manifest.json`` lists which files
make up the default scaffold and where each one lands in the repository.
"""

import json
import re
from functools import lru_cache
from importlib import resources
from string import Template
from typing import Any

from publisher.models import AppMetadata, EnvVarSpec, ScaffoldFile

_TEMPLATE_PACKAGE = "publisher.scaffold"
_TEMPLATE_DIR = "templates"

SDK_PACKAGE = "@l4yercak3/sdk"


def read_template(name: str) -> str:
    """Read a raw template body from the package data."""
    template_dir = resources.files(_TEMPLATE_PACKAGE).joinpath(_TEMPLATE_DIR)
    return template_dir.joinpath(name).read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def load_manifest() -> dict[str, Any]:
    return json.loads(read_template("manifest.json"))


def template_version() -> str:
    """Version of the bundled template set."""
    return load_manifest()["version"]


def render_template(name: str, **values: str) -> str:
    """Fill ``$placeholder`` fields of a text template.

    Raises:
        KeyError: If the template references a value that was not supplied
    """
    return Template(read_template(name)).substitute(values)


def package_slug(app_name: str) -> str:
    """Lowercase the app name and collapse whitespace runs to dashes.

    Example:
        >>> package_slug("Acme Events")
        'acme-events'
    """
    return re.sub(r"\s+", "-", app_name.lower())


def render_package_json(app: AppMetadata) -> str:
    manifest = json.loads(read_template("package.json"))
    manifest["name"] = package_slug(app.name)
    manifest["dependencies"][SDK_PACKAGE] = f"^{app.sdk_version}"
    return json.dumps(manifest, indent=2)


def render_env_example(env_vars: list[EnvVarSpec]) -> str:
    lines = read_template("env.example").splitlines()
    for var in env_vars:
        lines.append(f"# {var.description}")
        if var.required:
            lines.append("# Required: Yes")
        lines.append(f"{var.key}={var.default_value or ''}")
        lines.append("")
    return "\n".join(lines)


def _render_json(name: str) -> str:
    return json.dumps(json.loads(read_template(name)), indent=2)


def _render(template: str, app: AppMetadata) -> str:
    if template == "package.json":
        return render_package_json(app)
    if template == "env.example":
        return render_env_example(app.required_env_vars)
    if template.endswith(".json"):
        return _render_json(template)
    return render_template(
        template,
        app_name=app.name,
        organization_name=app.organization_name,
    )


def build_default_scaffold(app: AppMetadata) -> list[ScaffoldFile]:
    """Render every default scaffold file for an app, in manifest order."""
    return [
        ScaffoldFile(path=entry["path"], content=_render(entry["template"], app), label=entry["label"])
        for entry in load_manifest()["files"]
    ]


def default_scaffold_paths() -> list[str]:
    return [entry["path"] for entry in load_manifest()["files"]]


__all__ = [
    "build_default_scaffold",
    "default_scaffold_paths",
    "package_slug",
    "read_template",
    "render_template",
    "template_version",
]
