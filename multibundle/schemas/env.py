"""Environment/CLI overrides applied on top of the project declaration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .project import BundleFormat

BundleTarget = Literal["file", "server"]
BundlingMode = Literal["single-bundle", "multi-bundle"]

ENV_PREFIX = "MULTIBUNDLE_"

_ENV_FIELDS = (
    "platform",
    "root",
    "dev",
    "bundle_type",
    "bundle_mode",
    "bundle_target",
    "bundle_output",
    "assets_dest",
    "sourcemap_output",
    "minify",
    "port",
    "max_workers",
)


class EnvOptions(BaseModel):
    """Immutable snapshot of the options one invocation runs with."""

    platform: str = ""
    root: str = Field(default_factory=lambda: str(Path.cwd()))
    dev: bool = False
    bundle_type: Optional[BundleFormat] = None
    bundle_mode: BundlingMode = "multi-bundle"
    bundle_target: BundleTarget = "file"
    bundle_output: Optional[str] = None
    assets_dest: Optional[str] = None
    sourcemap_output: Optional[str] = None
    minify: Optional[bool] = None
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    max_workers: Optional[int] = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "EnvOptions":
        """Build options from ``MULTIBUNDLE_*`` variables.

        Keyword overrides whose value is not ``None`` win over the environment.
        Empty variables are ignored.
        """

        source = os.environ if environ is None else environ
        payload: Dict[str, Any] = {}
        for field_name in _ENV_FIELDS:
            value = source.get(f"{ENV_PREFIX}{field_name.upper()}")
            if value:
                payload[field_name] = value
        for field_name, value in overrides.items():
            if value is not None:
                payload[field_name] = value
        return cls.model_validate(payload)

    @property
    def is_server_target(self) -> bool:
        return self.bundle_target == "server"


__all__ = ["BundleTarget", "BundlingMode", "ENV_PREFIX", "EnvOptions"]
