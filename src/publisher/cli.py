#!/usr/bin/env python3
"""CLI interface for the publisher."""

import argparse
import json
from contextlib import ExitStack
from pathlib import Path

from common.env import env
from common.logger import error, get_logger, setup_logging, success
from publisher.clients.base import ConfigurationError, PublishError
from publisher.credentials import EnvCredentialResolver
from publisher.models import AppMetadata, EnvVarSpec, PublishRequest
from publisher.orchestrator import PublishOrchestrator
from publisher.sources import load_generated_files, load_scaffold_files

logger = get_logger(__name__)


def _open_store(stack: ExitStack, db_path: Path | None):
    from store import DeploymentStore, get_adapter

    adapter = stack.enter_context(get_adapter(db_path))
    deployment_store = DeploymentStore(adapter)
    deployment_store.ensure_schema()
    return deployment_store


def _parse_env_var(value: str) -> EnvVarSpec:
    key, _, description = value.partition("=")
    return EnvVarSpec(key=key.strip(), description=description.strip(), required=True)


def cmd_publish(args):
    """Publish a generated app directory to GitHub.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if not args.generated_dir.is_dir():
        error(f"{args.generated_dir} is not a directory")
        return 1
    if args.scaffold_dir and not args.scaffold_dir.is_dir():
        error(f"{args.scaffold_dir} is not a directory")
        return 1

    request = PublishRequest(
        organization_id=args.organization_id,
        app=AppMetadata(
            name=args.app_name,
            organization_name=args.organization_name,
            sdk_version=args.sdk_version,
            required_env_vars=[_parse_env_var(v) for v in args.env_var],
        ),
        repo_name=args.repo_name,
        generated_files=load_generated_files(args.generated_dir),
        description=args.description,
        is_private=not args.public,
        scaffold_files=load_scaffold_files(args.scaffold_dir) if args.scaffold_dir else [],
        app_id=args.app_id,
    )

    try:
        with ExitStack() as stack:
            deployment_store = _open_store(stack, args.db) if args.app_id else None
            orchestrator = PublishOrchestrator(
                EnvCredentialResolver(),
                recorder=deployment_store,
                strict=args.strict or None,
                max_workers=args.workers,
            )
            result = orchestrator.publish(request)
            if deployment_store is not None:
                deployment_store.log_publish(
                    args.app_id,
                    result.repo_url,
                    result.commit_sha,
                    result.file_count,
                    result.dropped_paths,
                )
    except ConfigurationError as e:
        error(str(e))
        return 2
    except PublishError as e:
        error(str(e))
        return 1

    success(f"Published {result.file_count} file(s) to {result.repo_url}")
    if result.dropped_paths:
        logger.warning(f"Not committed: {', '.join(result.dropped_paths)}")
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    return 0


def cmd_validate(args):
    """Check that a GitHub URL points at a readable repository."""
    validation = PublishOrchestrator(EnvCredentialResolver()).validate_repository(args.url)
    if args.json:
        print(json.dumps(validation.to_dict(), indent=2))
    if not validation.valid:
        error(validation.error)
        return 1
    info = validation.repo_info
    visibility = "private" if info["isPrivate"] else "public"
    success(f"{info['owner']}/{info['repo']} ({visibility}, default branch {info['defaultBranch']})")
    return 0


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Publish generated web apps to GitHub as a single atomic commit"
    )
    parser.add_argument("--log-file", default=None, help="Also write full log records to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Publish command
    publish_parser = subparsers.add_parser("publish", help="Publish a generated app directory")
    publish_parser.add_argument(
        "--generated-dir",
        type=Path,
        required=True,
        help="Directory containing the generator output",
    )
    publish_parser.add_argument(
        "--scaffold-dir",
        type=Path,
        default=None,
        help="Directory of scaffold files that override generated ones (default: built-in scaffold)",
    )
    publish_parser.add_argument("--repo-name", required=True, help="Repository name to create")
    publish_parser.add_argument("--app-name", required=True, help="Application display name")
    publish_parser.add_argument(
        "--organization-id",
        default="default",
        help="Organization whose GitHub connection is used (default: default)",
    )
    publish_parser.add_argument(
        "--organization-name", default="Unknown", help="Organization name shown in the README"
    )
    publish_parser.add_argument(
        "--sdk-version", default="1.0.0", help="SDK version pinned in package.json (default: 1.0.0)"
    )
    publish_parser.add_argument("--description", default=None, help="Repository description")
    publish_parser.add_argument(
        "--env-var",
        action="append",
        default=[],
        metavar="KEY[=DESCRIPTION]",
        help="Required environment variable listed in .env.example (repeatable)",
    )
    publish_parser.add_argument(
        "--public", action="store_true", help="Create a public repository (default: private)"
    )
    publish_parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort on the first failed file instead of dropping it",
    )
    publish_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help=f"Parallel blob uploads (default: {env.blob_upload_workers()})",
    )
    publish_parser.add_argument(
        "--app-id", default=None, help="Record the deployment under this app id"
    )
    publish_parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help=f"Deployment database (default: {env.database_path()})",
    )
    publish_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    publish_parser.set_defaults(func=cmd_publish)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check a GitHub repository URL")
    validate_parser.add_argument("url", help="https://github.com/<owner>/<repo>")
    validate_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    validate_parser.set_defaults(func=cmd_validate)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(env.log_level(), args.log_file)
    return args.func(args)


if __name__ == "__main__":
    exit(main())
