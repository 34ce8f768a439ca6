"""Configuration resolution and build ordering for multi-bundle apps."""

__version__ = "0.1.0"
from .configuration import (
    Bundle,
    Configuration,
    EnvironmentProbe,
    ExternalBundle,
    OwnedBundle,
    ProjectDefaults,
    resolve_project_defaults,
    sort_bundles,
)
from .errors import (
    ConfigurationError,
    ConfigurationLoadError,
    CyclicDependencyError,
    InvalidBundleDeclarationError,
    MissingHostBundleError,
    UnresolvedDependencyError,
    UnsupportedPlatformError,
)
from .loader import ConfigurationLoader
from .runtime import Runtime
from .schemas import EnvOptions, ProjectConfig

__all__ = [
    "__version__",
    "Bundle",
    "Configuration",
    "ConfigurationError",
    "ConfigurationLoadError",
    "ConfigurationLoader",
    "CyclicDependencyError",
    "EnvOptions",
    "EnvironmentProbe",
    "ExternalBundle",
    "InvalidBundleDeclarationError",
    "MissingHostBundleError",
    "OwnedBundle",
    "ProjectConfig",
    "ProjectDefaults",
    "Runtime",
    "UnresolvedDependencyError",
    "UnsupportedPlatformError",
    "resolve_project_defaults",
    "sort_bundles",
]
