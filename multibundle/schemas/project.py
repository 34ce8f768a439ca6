"""Pydantic models describing a multibundle project declaration."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import InvalidBundleDeclarationError

BundleFormat = Literal["basic-bundle", "indexed-ram-bundle", "file-ram-bundle"]
SourceMap = Union[bool, Literal["inline"]]
LooseMode = Union[bool, List[str]]


class ServerConfig(BaseModel):
    host: Optional[str] = None
    port: Optional[int] = Field(default=None, ge=1, le=65535)

    model_config = ConfigDict(extra="forbid")


class TemplatesConfig(BaseModel):
    filename: Dict[str, str] = Field(
        default_factory=dict,
        description="Output filename template per platform, e.g. '[bundleName].[platform].bundle'.",
    )

    model_config = ConfigDict(extra="forbid")


class FeaturesConfig(BaseModel):
    multi_bundle: Optional[Literal[1, 2]] = None

    model_config = ConfigDict(extra="forbid")


class EntryFiles(BaseModel):
    """Structured entry: modules to bundle plus modules to run before them."""

    entry_files: List[str]
    setup_files: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ProvidedModule(BaseModel):
    name: str
    directory: str

    model_config = ConfigDict(extra="forbid")


class OwnedBundleDeclaration(BaseModel):
    """A bundle built from source entry modules."""

    entry: Union[str, List[str], EntryFiles]
    name: Optional[str] = None
    type: Optional[BundleFormat] = None
    platform: Optional[str] = None
    root: Optional[str] = None
    dev: Optional[bool] = None
    assets_dest: Optional[str] = None
    minify: Optional[bool] = None
    minify_options: Optional[Dict[str, Any]] = None
    source_map: Optional[SourceMap] = None
    loose_mode: Optional[LooseMode] = None
    dll: Optional[bool] = None
    app: Optional[bool] = None
    depends_on: Optional[List[str]] = None
    provides_module_node_modules: Optional[List[Union[str, ProvidedModule]]] = None
    haste_options: Optional[Dict[str, Any]] = None
    transform: Optional[Callable[..., Any]] = None
    max_workers: Optional[int] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("entry")
    @classmethod
    def _require_entry_module(cls, value: Union[str, List[str], EntryFiles]) -> Union[str, List[str], EntryFiles]:
        modules = value.entry_files if isinstance(value, EntryFiles) else value
        if not modules:
            raise ValueError("entry must name at least one module")
        return value


class ExternalBundleDeclaration(BaseModel):
    """A prebuilt bundle that is only referenced (and optionally copied)."""

    bundle_path: str
    name: Optional[str] = None
    dll: Optional[bool] = None
    app: Optional[bool] = None
    depends_on: Optional[List[str]] = None
    copy_bundle: Optional[bool] = None
    manifest_path: Optional[str] = None
    assets_path: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


BundleDeclaration = Union[OwnedBundleDeclaration, ExternalBundleDeclaration]
BundleConfigBuilder = Callable[..., Any]


def parse_bundle_declaration(bundle_name: str, raw: Any) -> BundleDeclaration:
    """Turn a raw declaration into the owned or external variant.

    A mapping that carries ``bundle_path`` is an external bundle, any other
    mapping is an owned bundle. Already-parsed declarations pass through.
    """

    if isinstance(raw, (OwnedBundleDeclaration, ExternalBundleDeclaration)):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidBundleDeclarationError(
            bundle_name, f"expected a mapping or declaration model, got {type(raw).__name__}"
        )
    model = ExternalBundleDeclaration if "bundle_path" in raw else OwnedBundleDeclaration
    try:
        return model.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidBundleDeclarationError(bundle_name, str(exc)) from exc


class ProjectConfig(BaseModel):
    """Root project declaration, read-only once constructed."""

    server: Optional[ServerConfig] = None
    platforms: Optional[List[str]] = None
    templates: Optional[TemplatesConfig] = None
    features: Optional[FeaturesConfig] = None
    bundles: Dict[str, Union[OwnedBundleDeclaration, ExternalBundleDeclaration, BundleConfigBuilder]]

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("bundles", mode="before")
    @classmethod
    def _tag_declarations(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        tagged: Dict[str, Any] = {}
        for bundle_name, entry in value.items():
            tagged[bundle_name] = entry if callable(entry) else parse_bundle_declaration(bundle_name, entry)
        return tagged


__all__ = [
    "BundleConfigBuilder",
    "BundleDeclaration",
    "BundleFormat",
    "EntryFiles",
    "ExternalBundleDeclaration",
    "FeaturesConfig",
    "LooseMode",
    "OwnedBundleDeclaration",
    "ProjectConfig",
    "ProvidedModule",
    "ServerConfig",
    "SourceMap",
    "TemplatesConfig",
    "parse_bundle_declaration",
]
