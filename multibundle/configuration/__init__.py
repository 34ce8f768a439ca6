"""Bundle resolution and build ordering."""

from .bundles import (
    Bundle,
    BundleType,
    ExternalBundle,
    ExternalBundleProperties,
    OwnedBundle,
    OwnedBundleProperties,
)
from .configuration import Configuration, GetBaseConfig
from .defaults import (
    DEFAULT_PORT,
    FeatureSettings,
    ProjectDefaults,
    ServerSettings,
    TemplateSettings,
    resolve_project_defaults,
)
from .properties import EnvironmentProbe, detect_environment, resolve_bundle_properties
from .sorting import HOST_BUNDLE_NAMES, sort_bundles

__all__ = [
    "Bundle",
    "BundleType",
    "Configuration",
    "DEFAULT_PORT",
    "EnvironmentProbe",
    "ExternalBundle",
    "ExternalBundleProperties",
    "FeatureSettings",
    "GetBaseConfig",
    "HOST_BUNDLE_NAMES",
    "OwnedBundle",
    "OwnedBundleProperties",
    "ProjectDefaults",
    "ServerSettings",
    "TemplateSettings",
    "detect_environment",
    "resolve_bundle_properties",
    "resolve_project_defaults",
    "sort_bundles",
]
