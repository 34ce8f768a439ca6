"""Project-wide settings with every default spelled out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..schemas.env import EnvOptions
from ..schemas.project import FeaturesConfig, ProjectConfig, ServerConfig, TemplatesConfig

DEFAULT_PORT = 8081
DEFAULT_HOST = "localhost"
DEFAULT_PLATFORMS: Tuple[str, ...] = ("ios", "android")
DEFAULT_MULTI_BUNDLE = 1
DEFAULT_FILENAME_TEMPLATES: Dict[str, str] = {
    "ios": "[bundleName].jsbundle",
    "android": "[bundleName].[platform].bundle",
    "__server__": "[bundleName].[platform].bundle",
    "__fallback__": "[bundleName].[platform].bundle",
}


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class TemplateSettings:
    filename: Dict[str, str]

    def filename_for(self, platform: str) -> str:
        """Return the template for ``platform``, falling back to ``__fallback__``."""

        return self.filename.get(platform, self.filename["__fallback__"])


@dataclass(frozen=True, slots=True)
class FeatureSettings:
    multi_bundle: int


@dataclass(frozen=True, slots=True)
class ProjectDefaults:
    platforms: List[str]
    server: ServerSettings
    templates: TemplateSettings
    features: FeatureSettings
    bundle_names: List[str]


def make_server_settings(server: Optional[ServerConfig] = None, *, port: Optional[int] = None) -> ServerSettings:
    """Resolve the dev-server section; an explicit ``port`` wins over the project value."""

    host = server.host if server and server.host else DEFAULT_HOST
    resolved_port = port or (server.port if server and server.port else None) or DEFAULT_PORT
    return ServerSettings(host=host, port=resolved_port)


def make_template_settings(templates: Optional[TemplatesConfig] = None) -> TemplateSettings:
    filename = dict(DEFAULT_FILENAME_TEMPLATES)
    if templates is not None:
        filename.update(templates.filename)
    return TemplateSettings(filename=filename)


def make_feature_settings(features: Optional[FeaturesConfig] = None) -> FeatureSettings:
    multi_bundle = DEFAULT_MULTI_BUNDLE
    if features is not None and features.multi_bundle is not None:
        multi_bundle = features.multi_bundle
    return FeatureSettings(multi_bundle=multi_bundle)


def resolve_project_defaults(project_config: ProjectConfig, env_options: EnvOptions) -> ProjectDefaults:
    return ProjectDefaults(
        platforms=list(DEFAULT_PLATFORMS if project_config.platforms is None else project_config.platforms),
        server=make_server_settings(project_config.server, port=env_options.port),
        templates=make_template_settings(project_config.templates),
        features=make_feature_settings(project_config.features),
        bundle_names=list(project_config.bundles),
    )


__all__ = [
    "DEFAULT_FILENAME_TEMPLATES",
    "DEFAULT_HOST",
    "DEFAULT_MULTI_BUNDLE",
    "DEFAULT_PLATFORMS",
    "DEFAULT_PORT",
    "FeatureSettings",
    "ProjectDefaults",
    "ServerSettings",
    "TemplateSettings",
    "make_feature_settings",
    "make_server_settings",
    "make_template_settings",
    "resolve_project_defaults",
]
