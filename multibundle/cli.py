from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .configuration import Configuration, resolve_project_defaults
from .errors import ConfigurationError
from .runtime import Runtime
from .schemas.env import EnvOptions

LOG_LEVEL_ENV = "MULTIBUNDLE_LOG_LEVEL"


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_local_env(root: Path) -> None:
    """Load ``<root>/.env`` so MULTIBUNDLE_* defaults can live next to the project."""

    env_file = root / ".env"
    if env_file.exists():
        load_dotenv(env_file)


def _plan_base_config(runtime: Runtime, env: EnvOptions, bundle_name: str, project: Dict[str, Any]) -> Dict[str, Any]:
    """Stand-in synthesizer: the plan only needs the per-bundle view it is given."""

    return {"bundle_name": bundle_name, **project["bundles"][bundle_name]}


def _add_env_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--root", default=".", help="Project root (defaults to the working directory)")
    parser.add_argument("--config", help="Path to the project config, relative to --root")
    parser.add_argument("--platform")
    parser.add_argument("--dev", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--bundle-target", choices=["file", "server"])
    parser.add_argument("--bundle-type", choices=["basic-bundle", "indexed-ram-bundle", "file-ram-bundle"])
    parser.add_argument("--bundle-mode", choices=["single-bundle", "multi-bundle"])
    parser.add_argument("--bundle-output")
    parser.add_argument("--assets-dest")
    parser.add_argument("--sourcemap-output")
    parser.add_argument("--minify", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--port", type=int)
    parser.add_argument("--max-workers", type=int)


def _env_options(args: argparse.Namespace, root: Path) -> EnvOptions:
    return EnvOptions.from_environ(
        root=str(root),
        platform=args.platform,
        dev=args.dev,
        bundle_target=args.bundle_target,
        bundle_type=args.bundle_type,
        bundle_mode=args.bundle_mode,
        bundle_output=args.bundle_output,
        assets_dest=args.assets_dest,
        sourcemap_output=args.sourcemap_output,
        minify=args.minify,
        port=args.port,
        max_workers=args.max_workers,
    )


def _run_plan(args: argparse.Namespace, root: Path, env: EnvOptions) -> int:
    runtime = Runtime(root=root)
    loader = Configuration.get_loader(runtime, root, args.config)
    try:
        configuration = loader.load(env, _plan_base_config)
        bundles = configuration.create_bundles_sorted(
            runtime,
            skip_host_check=args.skip_host_check,
            allow_unresolved=args.allow_unresolved,
        )
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    payload = {
        "platforms": configuration.platforms,
        "server": asdict(configuration.server),
        "order": [bundle.name for bundle in bundles],
        "bundles": [bundle.to_dict() for bundle in bundles],
    }
    print(json.dumps(payload, indent=2))
    return 0


def _run_defaults(args: argparse.Namespace, root: Path, env: EnvOptions) -> int:
    loader = Configuration.get_loader(Runtime(root=root), root, args.config)
    try:
        project_config = loader.load_project_config()
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    print(json.dumps(asdict(resolve_project_defaults(project_config, env)), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="multibundle", description="Resolve and order multi-bundle builds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan = subparsers.add_parser("plan", help="Resolve every bundle and print the build order")
    _add_env_arguments(plan)
    plan.add_argument("--skip-host-check", action="store_true")
    plan.add_argument("--allow-unresolved", action="store_true", help="Drop unknown depends_on names instead of failing")

    defaults = subparsers.add_parser("defaults", help="Print project-wide settings after defaults are applied")
    _add_env_arguments(defaults)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root = Path(args.root).resolve()
    _load_local_env(root)
    try:
        env = _env_options(args, root)
    except ValidationError as exc:
        print(f"Invalid environment options: {exc}", file=sys.stderr)
        return 2

    if args.command == "plan":
        return _run_plan(args, root, env)
    if args.command == "defaults":
        return _run_defaults(args, root, env)

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
