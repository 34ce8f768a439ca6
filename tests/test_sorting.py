from __future__ import annotations

import logging
import sys

import pytest

from multibundle.configuration import HOST_BUNDLE_NAMES, sort_bundles
from multibundle.errors import CyclicDependencyError, MissingHostBundleError, UnresolvedDependencyError
from multibundle.runtime import Runtime


def _names(bundles) -> list[str]:
    return [bundle.name for bundle in bundles]


def test_dll_closure_comes_first(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration(
        {
            "A": {"entry": "./a.js", "dll": True},
            "B": {"entry": "./b.js", "dll": True, "depends_on": ["A"]},
            "host": {"entry": "./host.js", "depends_on": ["B"]},
            "app1": {"entry": "./app1.js"},
        }
    )

    assert _names(configuration.create_bundles_sorted(runtime)) == ["A", "B", "host", "app1"]


def test_dll_dependencies_hoisted_regardless_of_declaration_order(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration(
        {
            "app1": {"entry": "./app1.js", "app": True, "depends_on": ["B"]},
            "host": {"entry": "./host.js", "depends_on": ["B"]},
            "B": {"entry": "./b.js", "dll": True, "depends_on": ["A"]},
            "A": {"entry": "./a.js", "dll": True},
        }
    )

    assert _names(configuration.create_bundles_sorted(runtime)) == ["A", "B", "host", "app1"]


def test_non_dll_dependency_of_dll_joins_dll_tier(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration(
        {
            "common": {"entry": "./common.js"},
            "app0": {"entry": "./app0.js", "app": True},
            "vendor": {"bundle_path": "/dist/vendor.bundle", "dll": True, "depends_on": ["common"]},
            "index": {"entry": "./index.js"},
        }
    )

    assert _names(configuration.create_bundles_sorted(runtime)) == ["common", "vendor", "index", "app0"]


def test_transitive_dependencies_of_non_dll_are_walked(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration(
        {
            "index": {"entry": "./index.js"},
            "polyfills": {"entry": "./polyfills.js"},
            "utils": {"entry": "./utils.js", "depends_on": ["polyfills"]},
            "base": {"entry": "./base.js", "dll": True, "depends_on": ["utils"]},
        }
    )

    assert _names(configuration.create_bundles_sorted(runtime)) == ["polyfills", "utils", "base", "index"]


@pytest.mark.parametrize("host_name", HOST_BUNDLE_NAMES)
def test_each_reserved_name_is_a_host(make_configuration, runtime: Runtime, host_name: str) -> None:
    configuration = make_configuration(
        {
            "app0": {"entry": "./app0.js"},
            host_name: {"entry": "./host.js"},
        }
    )

    assert _names(configuration.create_bundles_sorted(runtime)) == [host_name, "app0"]


def test_missing_host_fails(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration({"app1": {"entry": "./app1.js"}, "app2": {"entry": "./app2.js"}})

    with pytest.raises(MissingHostBundleError) as excinfo:
        configuration.create_bundles_sorted(runtime)

    assert excinfo.value.host_names == ("index", "main", "host")


def test_missing_host_allowed_when_check_skipped(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration({"app1": {"entry": "./app1.js"}, "app2": {"entry": "./app2.js"}})

    assert _names(configuration.create_bundles_sorted(runtime, skip_host_check=True)) == ["app1", "app2"]


def test_dll_named_like_host_is_not_the_host(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration({"index": {"entry": "./index.js", "dll": True}})

    with pytest.raises(MissingHostBundleError):
        configuration.create_bundles_sorted(runtime)


def test_second_host_name_is_treated_as_app(make_configuration, runtime: Runtime, caplog) -> None:
    configuration = make_configuration(
        {
            "index": {"entry": "./index.js"},
            "app0": {"entry": "./app0.js"},
            "main": {"entry": "./main.js"},
        }
    )

    with caplog.at_level(logging.WARNING, logger="multibundle.configuration.sorting"):
        bundles = configuration.create_bundles_sorted(runtime)

    assert _names(bundles) == ["index", "app0", "main"]
    assert "'main' ignored as host" in caplog.text


def test_dependency_cycle_is_reported(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration(
        {
            "A": {"entry": "./a.js", "dll": True, "depends_on": ["B"]},
            "B": {"entry": "./b.js", "dll": True, "depends_on": ["A"]},
            "index": {"entry": "./index.js"},
        }
    )

    with pytest.raises(CyclicDependencyError) as excinfo:
        configuration.create_bundles_sorted(runtime)

    assert excinfo.value.cycle == ("A", "B", "A")
    assert "A -> B -> A" in str(excinfo.value)


def test_self_dependency_is_a_cycle(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration(
        {"A": {"entry": "./a.js", "dll": True, "depends_on": ["A"]}, "index": {"entry": "./index.js"}}
    )

    with pytest.raises(CyclicDependencyError) as excinfo:
        configuration.create_bundles_sorted(runtime)

    assert excinfo.value.cycle == ("A", "A")


def test_long_dll_chain_is_ordered(make_configuration, runtime: Runtime) -> None:
    depth = sys.getrecursionlimit() + 50
    names = [f"dll_{position}" for position in range(depth)]
    bundles = {"index": {"entry": "./index.js"}}
    for position in reversed(range(depth)):
        declaration = {"entry": f"./{names[position]}.js", "dll": True}
        if position:
            declaration["depends_on"] = [names[position - 1]]
        bundles[names[position]] = declaration
    configuration = make_configuration(bundles)

    assert _names(configuration.create_bundles_sorted(runtime)) == [*names, "index"]


def test_unknown_dependency_fails_by_default(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration({"index": {"entry": "./index.js", "depends_on": ["missing"]}})

    with pytest.raises(UnresolvedDependencyError) as excinfo:
        configuration.create_bundles_sorted(runtime)

    assert excinfo.value.bundle_name == "index"
    assert excinfo.value.dependency == "missing"


def test_unknown_dependency_dropped_when_allowed(make_configuration, runtime: Runtime, caplog) -> None:
    configuration = make_configuration(
        {
            "base": {"entry": "./base.js", "dll": True, "depends_on": ["missing"]},
            "index": {"entry": "./index.js"},
        }
    )

    with caplog.at_level(logging.WARNING, logger="multibundle.configuration.sorting"):
        bundles = configuration.create_bundles_sorted(runtime, allow_unresolved=True)

    assert _names(bundles) == ["base", "index"]
    assert "unknown dependency 'missing'" in caplog.text


def test_sort_bundles_accepts_any_bundle_sequence(make_configuration, runtime: Runtime) -> None:
    configuration = make_configuration(
        {
            "index": {"entry": "./index.js"},
            "base": {"bundle_path": "/dist/base.bundle", "dll": True},
        }
    )
    bundles = configuration.create_bundles(runtime)

    ordered = sort_bundles(bundles)

    assert _names(ordered) == ["base", "index"]
    assert ordered[0] is bundles[1]
