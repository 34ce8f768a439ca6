"""Schema definitions for project declarations and environment options."""

from .env import BundleTarget, BundlingMode, EnvOptions
from .project import (
    BundleConfigBuilder,
    BundleDeclaration,
    BundleFormat,
    EntryFiles,
    ExternalBundleDeclaration,
    FeaturesConfig,
    OwnedBundleDeclaration,
    ProjectConfig,
    ProvidedModule,
    ServerConfig,
    TemplatesConfig,
    parse_bundle_declaration,
)

__all__ = [
    "BundleConfigBuilder",
    "BundleDeclaration",
    "BundleFormat",
    "BundleTarget",
    "BundlingMode",
    "EntryFiles",
    "EnvOptions",
    "ExternalBundleDeclaration",
    "FeaturesConfig",
    "OwnedBundleDeclaration",
    "ProjectConfig",
    "ProvidedModule",
    "ServerConfig",
    "TemplatesConfig",
    "parse_bundle_declaration",
]
