"""Resolve an owned bundle declaration into its final build properties.

Every overridable field follows the same precedence: a value set on the
bundle declaration wins over the matching ``EnvOptions`` value, which wins
over the computed default. The exceptions are:

- ``mode`` and ``minify`` OR the declaration flag with the env flag;
- ``format`` and ``output_type`` are forced by a ``server`` bundle target;
- ``max_workers`` is floored at 1 at every tier.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from ..schemas.env import EnvOptions
from ..schemas.project import EntryFiles, OwnedBundleDeclaration
from .bundles import OwnedBundleProperties, bundle_type_for

logger = logging.getLogger(__name__)

SERVER_BUNDLE_FORMAT = "basic-bundle"
DEFAULT_BUNDLE_FORMAT = "basic-bundle"
DEFAULT_PROVIDES_MODULE_NODE_MODULES = ("react-native",)
CI_MAX_WORKERS = 7

_CI_VARIABLES = ("CI", "CONTINUOUS_INTEGRATION", "BUILD_NUMBER", "RUN_ID")


@dataclass(frozen=True, slots=True)
class EnvironmentProbe:
    """Read-only facts about the machine the build runs on."""

    is_ci: bool
    cpu_count: int


def is_ci_environment(environ: Optional[Mapping[str, str]] = None) -> bool:
    source = os.environ if environ is None else environ
    if source.get("CI", "").lower() == "false":
        return False
    return any(source.get(name) for name in _CI_VARIABLES)


def detect_environment(environ: Optional[Mapping[str, str]] = None) -> EnvironmentProbe:
    return EnvironmentProbe(is_ci=is_ci_environment(environ), cpu_count=os.cpu_count() or 1)


def default_max_workers(probe: EnvironmentProbe) -> int:
    available = probe.cpu_count - 1
    if probe.is_ci:
        available = min(available, CI_MAX_WORKERS)
    return max(available, 1)


def resolve_max_workers(
    declared: Optional[int], env_value: Optional[int], probe: EnvironmentProbe
) -> int:
    if declared is not None:
        return max(1, declared)
    if env_value is not None:
        return max(1, env_value)
    return default_max_workers(probe)


def normalize_entry(entry: object) -> Tuple[List[str], List[str]]:
    """Split an entry declaration into ``(input modules, preload modules)``."""

    if isinstance(entry, str):
        return [entry], []
    if isinstance(entry, EntryFiles):
        return list(entry.entry_files), list(entry.setup_files)
    return list(entry), []  # type: ignore[call-overload]


def _unique(names: Optional[List[str]]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(names or ()))


def resolve_bundle_properties(
    declaration: OwnedBundleDeclaration,
    env: EnvOptions,
    probe: EnvironmentProbe,
) -> OwnedBundleProperties:
    input_module_names, preload_module_names = normalize_entry(declaration.entry)

    if env.is_server_target:
        bundle_format = SERVER_BUNDLE_FORMAT
    else:
        bundle_format = declaration.type or env.bundle_type or DEFAULT_BUNDLE_FORMAT

    max_workers = resolve_max_workers(declaration.max_workers, env.max_workers, probe)
    logger.debug(
        "Resolved %s workers (declared=%s, env=%s, ci=%s, cpus=%s)",
        max_workers,
        declaration.max_workers,
        env.max_workers,
        probe.is_ci,
        probe.cpu_count,
    )

    return OwnedBundleProperties(
        mode="dev" if declaration.dev or env.dev else "prod",
        platform=declaration.platform or env.platform,
        bundling_mode=env.bundle_mode,
        output_type="server" if env.is_server_target else "file",
        output_path=env.bundle_output,
        format=bundle_format,
        type=bundle_type_for(dll=declaration.dll, app=declaration.app),
        context=declaration.root or env.root,
        input_module_names=input_module_names,
        preload_module_names=preload_module_names,
        assets_destination=declaration.assets_dest or env.assets_dest,
        minify=bool(declaration.minify or env.minify),
        minify_options=declaration.minify_options,
        source_map=declaration.source_map if declaration.source_map is not None else True,
        source_map_destination=env.sourcemap_output,
        loose_mode=declaration.loose_mode if declaration.loose_mode is not None else False,
        depends_on=_unique(declaration.depends_on),
        provides_module_node_modules=(
            list(declaration.provides_module_node_modules)
            if declaration.provides_module_node_modules is not None
            else list(DEFAULT_PROVIDES_MODULE_NODE_MODULES)
        ),
        haste_options=dict(declaration.haste_options or {}),
        max_workers=max_workers,
    )


__all__ = [
    "CI_MAX_WORKERS",
    "DEFAULT_PROVIDES_MODULE_NODE_MODULES",
    "EnvironmentProbe",
    "SERVER_BUNDLE_FORMAT",
    "default_max_workers",
    "detect_environment",
    "is_ci_environment",
    "normalize_entry",
    "resolve_bundle_properties",
    "resolve_max_workers",
]
