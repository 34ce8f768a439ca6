"""Resolved bundle entities: owned (built here) and external (prebuilt)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from ..schemas.env import BundlingMode
from ..schemas.project import BundleFormat, LooseMode, ProvidedModule, SourceMap

BundleType = Literal["default", "dll", "app"]
BuildConfigTransform = Callable[[Any], Any]


def bundle_type_for(*, dll: Optional[bool], app: Optional[bool]) -> BundleType:
    if dll:
        return "dll"
    if app:
        return "app"
    return "default"


class OwnedBundleProperties(BaseModel):
    mode: Literal["dev", "prod"]
    platform: str
    bundling_mode: BundlingMode
    output_type: Literal["server", "file"]
    output_path: Optional[str] = None
    format: BundleFormat
    type: BundleType
    context: str
    input_module_names: List[str] = Field(..., min_length=1)
    preload_module_names: List[str] = Field(default_factory=list)
    assets_destination: Optional[str] = None
    minify: bool
    minify_options: Optional[Dict[str, Any]] = None
    source_map: SourceMap
    source_map_destination: Optional[str] = None
    loose_mode: LooseMode
    depends_on: Tuple[str, ...] = ()
    provides_module_node_modules: List[Union[str, ProvidedModule]]
    haste_options: Dict[str, Any] = Field(default_factory=dict)
    max_workers: int = Field(..., ge=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def is_dev(self) -> bool:
        return self.mode == "dev"


class ExternalBundleProperties(BaseModel):
    type: BundleType
    bundle_path: Path
    assets_path: Path
    manifest_path: Optional[Path] = None
    should_copy: bool = False
    depends_on: Tuple[str, ...] = ()

    model_config = ConfigDict(extra="forbid", frozen=True)


@dataclass(frozen=True, slots=True, eq=False)
class OwnedBundle:
    """A bundle this project builds from its entry modules."""

    name: str
    properties: OwnedBundleProperties
    base_config: Any
    transform: Optional[BuildConfigTransform] = None

    kind = "owned"

    def make_build_config(self) -> Any:
        """Return the bundler config, passed through the user transform if one is set."""

        if self.transform is None:
            return self.base_config
        return self.transform(self.base_config)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "kind": self.kind,
            "properties": self.properties.model_dump(mode="json"),
        }


@dataclass(frozen=True, slots=True, eq=False)
class ExternalBundle:
    """A prebuilt bundle that is referenced, and optionally copied, as-is."""

    name: str
    properties: ExternalBundleProperties

    kind = "external"

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "kind": self.kind,
            "properties": self.properties.model_dump(mode="json"),
        }


Bundle = Union[OwnedBundle, ExternalBundle]


__all__ = [
    "Bundle",
    "BuildConfigTransform",
    "BundleType",
    "ExternalBundle",
    "ExternalBundleProperties",
    "OwnedBundle",
    "OwnedBundleProperties",
    "bundle_type_for",
]
