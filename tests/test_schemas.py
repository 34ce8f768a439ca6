from __future__ import annotations

import pytest
from pydantic import ValidationError

from multibundle.errors import InvalidBundleDeclarationError
from multibundle.schemas import (
    EntryFiles,
    EnvOptions,
    ExternalBundleDeclaration,
    OwnedBundleDeclaration,
    ProjectConfig,
    parse_bundle_declaration,
)


def test_bundle_path_selects_external_declaration() -> None:
    declaration = parse_bundle_declaration("base", {"bundle_path": "/dist/base.bundle", "dll": True})

    assert isinstance(declaration, ExternalBundleDeclaration)
    assert declaration.dll is True


def test_mapping_without_bundle_path_is_owned() -> None:
    declaration = parse_bundle_declaration("index", {"entry": {"entry_files": ["./index.js"]}})

    assert isinstance(declaration, OwnedBundleDeclaration)
    assert isinstance(declaration.entry, EntryFiles)
    assert declaration.entry.setup_files == []


def test_parsed_declarations_pass_through() -> None:
    declaration = OwnedBundleDeclaration(entry="./index.js")

    assert parse_bundle_declaration("index", declaration) is declaration


def test_unknown_fields_are_rejected() -> None:
    with pytest.raises(InvalidBundleDeclarationError) as excinfo:
        parse_bundle_declaration("index", {"entry": "./index.js", "entryFile": "./typo.js"})

    assert excinfo.value.bundle_name == "index"


def test_non_mapping_declaration_is_rejected() -> None:
    with pytest.raises(InvalidBundleDeclarationError):
        parse_bundle_declaration("index", "./index.js")


def test_project_config_tags_declarations_up_front() -> None:
    def build(env, runtime):
        return {"entry": "./app.js"}

    project = ProjectConfig.model_validate(
        {
            "bundles": {
                "index": {"entry": "./index.js"},
                "base": {"bundle_path": "/dist/base.bundle"},
                "app": build,
            }
        }
    )

    assert isinstance(project.bundles["index"], OwnedBundleDeclaration)
    assert isinstance(project.bundles["base"], ExternalBundleDeclaration)
    assert project.bundles["app"] is build
    assert list(project.bundles) == ["index", "base", "app"]


def test_env_options_from_environ() -> None:
    env = EnvOptions.from_environ(
        {
            "MULTIBUNDLE_PLATFORM": "android",
            "MULTIBUNDLE_DEV": "true",
            "MULTIBUNDLE_MAX_WORKERS": "3",
            "MULTIBUNDLE_BUNDLE_TARGET": "server",
            "MULTIBUNDLE_ASSETS_DEST": "",
        },
        root="/project",
    )

    assert env.platform == "android"
    assert env.dev is True
    assert env.max_workers == 3
    assert env.is_server_target
    assert env.assets_dest is None
    assert env.root == "/project"


def test_env_options_overrides_win_over_environ() -> None:
    env = EnvOptions.from_environ({"MULTIBUNDLE_PLATFORM": "android"}, platform="ios", minify=None, root="/project")

    assert env.platform == "ios"
    assert env.minify is None


def test_env_options_are_frozen() -> None:
    env = EnvOptions(root="/project")

    with pytest.raises(ValidationError):
        env.platform = "ios"  # type: ignore[misc]


def test_env_options_reject_unknown_target() -> None:
    with pytest.raises(ValidationError):
        EnvOptions.from_environ({"MULTIBUNDLE_BUNDLE_TARGET": "cloud"}, root="/project")
