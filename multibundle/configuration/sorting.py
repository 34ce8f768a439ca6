"""Build ordering: shared-library bundles, then the host, then applications."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Sequence

from ..errors import CyclicDependencyError, MissingHostBundleError, UnresolvedDependencyError
from .bundles import Bundle

logger = logging.getLogger(__name__)

HOST_BUNDLE_NAMES = ("index", "main", "host")


def _index_by_name(bundles: Iterable[Bundle]) -> Dict[str, Bundle]:
    index: Dict[str, Bundle] = {}
    for bundle in bundles:
        index.setdefault(bundle.name, bundle)
    return index


def _check_dependencies(bundles: Sequence[Bundle], by_name: Dict[str, Bundle], *, allow_unresolved: bool) -> None:
    for bundle in bundles:
        for dependency in bundle.properties.depends_on:
            if dependency in by_name:
                continue
            if not allow_unresolved:
                raise UnresolvedDependencyError(bundle.name, dependency)
            logger.warning("Ignoring unknown dependency '%s' of bundle '%s'", dependency, bundle.name)


def _collect_dll_closure(bundles: Sequence[Bundle], by_name: Dict[str, Bundle]) -> List[str]:
    """Return dll bundle names with their ``depends_on`` closure, dependencies first."""

    def dependencies_of(name: str) -> Iterator[str]:
        dependency = by_name.get(name)
        return iter(dependency.properties.depends_on if dependency is not None else ())

    # Insertion-ordered set: a name is added once its own dependencies are in.
    collected: Dict[str, None] = {}
    for bundle in bundles:
        if bundle.properties.type != "dll" or bundle.name in collected:
            continue
        trail = [bundle.name]
        pending = [dependencies_of(bundle.name)]
        while pending:
            name = next(pending[-1], None)
            if name is None:
                pending.pop()
                collected[trail.pop()] = None
                continue
            if name in trail:
                raise CyclicDependencyError(trail[trail.index(name):] + [name])
            if name in collected:
                continue
            trail.append(name)
            pending.append(dependencies_of(name))
    return list(collected)


def sort_bundles(
    bundles: Sequence[Bundle],
    *,
    skip_host_check: bool = False,
    allow_unresolved: bool = False,
) -> List[Bundle]:
    """Order ``bundles`` for building.

    Every dll bundle comes after everything it (transitively) depends on,
    and the whole dll tier comes before the host bundle, which comes before
    the remaining bundles in declaration order.

    :raises UnresolvedDependencyError: unknown ``depends_on`` name, unless ``allow_unresolved``.
    :raises CyclicDependencyError: the dll closure walk meets a cycle.
    :raises MissingHostBundleError: no host bundle and ``skip_host_check`` is false.
    """

    by_name = _index_by_name(bundles)
    _check_dependencies(bundles, by_name, allow_unresolved=allow_unresolved)

    dlls = _collect_dll_closure(bundles, by_name)
    host = ""
    apps: List[str] = []
    for bundle in bundles:
        if bundle.properties.type == "dll":
            continue
        if bundle.name in HOST_BUNDLE_NAMES and not host:
            host = bundle.name
            continue
        if bundle.name in HOST_BUNDLE_NAMES:
            logger.warning("Bundle '%s' ignored as host, '%s' is already the host bundle", bundle.name, host)
        apps.append(bundle.name)

    if not host and not skip_host_check:
        raise MissingHostBundleError(HOST_BUNDLE_NAMES)

    sorted_names = list(dict.fromkeys(name for name in [*dlls, host, *apps] if name))
    ordered: List[Bundle] = []
    for name in sorted_names:
        bundle = by_name.get(name)
        if bundle is None:
            logger.debug("Dropping unresolved bundle name '%s' from build order", name)
            continue
        ordered.append(bundle)

    logger.debug("Build order: %s", ", ".join(bundle.name for bundle in ordered))
    return ordered


__all__ = ["HOST_BUNDLE_NAMES", "sort_bundles"]
