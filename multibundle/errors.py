"""Errors raised while resolving and ordering bundle configurations."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class ConfigurationError(Exception):
    """Base class for every failure raised by the configuration engine."""


class UnsupportedPlatformError(ConfigurationError):
    """Raised when a bundle resolves to a platform outside the allow-list."""

    def __init__(self, platform: str, platforms: Sequence[str]) -> None:
        self.platform = platform
        self.platforms = tuple(platforms)
        available = ", ".join(f'"{item}"' for item in self.platforms)
        super().__init__(f'Platform "{platform}" is not supported - only: {available} are available.')


class MissingHostBundleError(ConfigurationError):
    """Raised when no bundle uses one of the reserved host names."""

    def __init__(self, host_names: Sequence[str]) -> None:
        self.host_names = tuple(host_names)
        expected = ", ".join(f"`{name}`" for name in self.host_names)
        super().__init__(f"Cannot find host bundle. Make sure you have a bundle config named one of: {expected}.")


class CyclicDependencyError(ConfigurationError):
    """Raised when the shared-library closure walk meets a dependency cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__(f"Circular depends_on chain between bundles: {' -> '.join(self.cycle)}.")


class UnresolvedDependencyError(ConfigurationError):
    """Raised when ``depends_on`` names a bundle that was never declared."""

    def __init__(self, bundle_name: str, dependency: str) -> None:
        self.bundle_name = bundle_name
        self.dependency = dependency
        super().__init__(f"Bundle '{bundle_name}' depends on unknown bundle '{dependency}'.")


class InvalidBundleDeclarationError(ConfigurationError):
    """Raised when a bundle declaration does not match either declaration shape."""

    def __init__(self, bundle_name: str, reason: str) -> None:
        self.bundle_name = bundle_name
        super().__init__(f"Invalid declaration for bundle '{bundle_name}': {reason}")


class ConfigurationLoadError(ConfigurationError):
    """Raised when a project config file cannot be found or read."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        self.path = path
        super().__init__(message)


__all__ = [
    "ConfigurationError",
    "ConfigurationLoadError",
    "CyclicDependencyError",
    "InvalidBundleDeclarationError",
    "MissingHostBundleError",
    "UnresolvedDependencyError",
    "UnsupportedPlatformError",
]
