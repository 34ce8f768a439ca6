"""Locate and read a project config file into a :class:`ProjectConfig`."""

from __future__ import annotations

import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from .configuration.configuration import Configuration, GetBaseConfig
from .configuration.properties import EnvironmentProbe
from .errors import ConfigurationLoadError
from .schemas.env import EnvOptions
from .schemas.project import ProjectConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAMES = (
    "multibundle.yaml",
    "multibundle.yml",
    "multibundle.json",
    "multibundle.config.py",
)
PYTHON_CONFIG_ATTRIBUTE = "project"


class ConfigurationLoader:
    """Finds the project config under ``root`` and builds a :class:`Configuration`."""

    def __init__(self, runtime: Any, root: Union[str, Path], custom_path: Optional[Union[str, Path]] = None) -> None:
        self.runtime = runtime
        self.root = Path(root)
        self.custom_path = Path(custom_path) if custom_path else None

    def resolve_path(self) -> Path:
        if self.custom_path is not None:
            path = self.custom_path if self.custom_path.is_absolute() else self.root / self.custom_path
            if not path.is_file():
                raise ConfigurationLoadError(f"Project config not found: {path}", path=path)
            return path

        for filename in DEFAULT_CONFIG_FILENAMES:
            candidate = self.root / filename
            if candidate.is_file():
                return candidate
        candidates = ", ".join(DEFAULT_CONFIG_FILENAMES)
        raise ConfigurationLoadError(f"No project config found in {self.root} (looked for {candidates}).")

    def load_project_config(self) -> ProjectConfig:
        path = self.resolve_path()
        logger.debug("Loading project config from %s", path)
        payload = _read_payload(path)
        if isinstance(payload, ProjectConfig):
            return payload
        if not isinstance(payload, Mapping):
            raise ConfigurationLoadError(
                f"Project config {path} must define a mapping, got {type(payload).__name__}.", path=path
            )
        try:
            return ProjectConfig.model_validate(dict(payload))
        except ValidationError as exc:
            raise ConfigurationLoadError(f"Invalid project config {path}: {exc}", path=path) from exc

    def load(
        self,
        env_options: EnvOptions,
        get_base_config: GetBaseConfig,
        *,
        probe: Optional[EnvironmentProbe] = None,
    ) -> Configuration:
        return Configuration(self.load_project_config(), get_base_config, env_options, probe=probe)


def _read_payload(path: Path) -> Any:
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        try:
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationLoadError(f"Failed to parse YAML project config {path}: {exc}", path=path) from exc
    if suffix == ".json":
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigurationLoadError(f"Failed to parse JSON project config {path}: {exc}", path=path) from exc
    if suffix == ".py":
        return _read_python_config(path)
    raise ConfigurationLoadError(f"Unsupported project config format: {path.name}", path=path)


def _read_python_config(path: Path) -> Any:
    spec = importlib.util.spec_from_file_location(f"_multibundle_project_{path.stem.replace('.', '_')}", path)
    if spec is None or spec.loader is None:
        raise ConfigurationLoadError(f"Cannot import project config {path}", path=path)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ConfigurationLoadError(f"Failed to import project config {path}: {exc}", path=path) from exc
    if not hasattr(module, PYTHON_CONFIG_ATTRIBUTE):
        raise ConfigurationLoadError(
            f"Project config {path} does not define a '{PYTHON_CONFIG_ATTRIBUTE}' attribute.", path=path
        )
    return getattr(module, PYTHON_CONFIG_ATTRIBUTE)


__all__ = ["ConfigurationLoader", "DEFAULT_CONFIG_FILENAMES", "PYTHON_CONFIG_ATTRIBUTE"]
