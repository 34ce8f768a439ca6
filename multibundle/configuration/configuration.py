"""Project configuration: resolves declared bundles into build units."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from ..errors import ConfigurationError, InvalidBundleDeclarationError, UnsupportedPlatformError
from ..schemas.env import EnvOptions
from ..schemas.project import (
    BundleDeclaration,
    ExternalBundleDeclaration,
    OwnedBundleDeclaration,
    ProjectConfig,
    parse_bundle_declaration,
)
from .bundles import (
    BuildConfigTransform,
    Bundle,
    ExternalBundle,
    ExternalBundleProperties,
    OwnedBundle,
    OwnedBundleProperties,
    bundle_type_for,
)
from .defaults import resolve_project_defaults
from .properties import EnvironmentProbe, detect_environment, resolve_bundle_properties
from .sorting import sort_bundles

if TYPE_CHECKING:
    from ..loader import ConfigurationLoader

logger = logging.getLogger(__name__)

# (runtime, env_options, bundle_name, legacy_project_view) -> bundler config
GetBaseConfig = Callable[[Any, EnvOptions, str, Dict[str, Any]], Any]


def _bind_transform(transform: Callable[..., Any], **context: Any) -> BuildConfigTransform:
    def apply(config: Any) -> Any:
        return transform(config=config, **context)

    return apply


class Configuration:
    """A resolved project configuration.

    Project-wide settings are resolved on construction. Bundles are resolved
    by :meth:`create_bundles`, which rebuilds the ``owned_bundles`` and
    ``external_bundles`` registries on every call.
    """

    @staticmethod
    def get_loader(runtime: Any, root: Union[str, Path], custom_path: Optional[Union[str, Path]] = None) -> "ConfigurationLoader":
        """Return a loader that finds and reads the project config under ``root``."""

        from ..loader import ConfigurationLoader

        return ConfigurationLoader(runtime, root, custom_path)

    def __init__(
        self,
        project_config: Union[ProjectConfig, Mapping[str, Any]],
        get_base_config: GetBaseConfig,
        env_options: EnvOptions,
        *,
        probe: Optional[EnvironmentProbe] = None,
    ) -> None:
        if not isinstance(project_config, ProjectConfig):
            try:
                project_config = ProjectConfig.model_validate(project_config)
            except ValidationError as exc:
                raise ConfigurationError(f"Invalid project config: {exc}") from exc
        self.project_config = project_config
        self.get_base_config = get_base_config
        self.env_options = env_options
        self._probe = probe

        defaults = resolve_project_defaults(project_config, env_options)
        self.platforms = defaults.platforms
        self.server = defaults.server
        self.templates = defaults.templates
        self.features = defaults.features
        self.bundle_names = defaults.bundle_names

        self.owned_bundles: List[OwnedBundle] = []
        self.external_bundles: List[ExternalBundle] = []

    @property
    def probe(self) -> EnvironmentProbe:
        if self._probe is None:
            self._probe = detect_environment()
        return self._probe

    def create_bundles(self, runtime: Any) -> List[Bundle]:
        """Construct owned and external bundles in declaration order.

        :raises UnsupportedPlatformError: a bundle targets a platform outside ``platforms``.
        :raises InvalidBundleDeclarationError: a declaration is malformed or reuses a name.
        """

        self.owned_bundles = []
        self.external_bundles = []

        bundles: List[Bundle] = []
        seen: Dict[str, str] = {}
        for bundle_name in self.bundle_names:
            declaration = self._declaration_for(bundle_name, runtime)
            if isinstance(declaration, ExternalBundleDeclaration):
                bundle: Bundle = self._create_external_bundle(bundle_name, declaration)
            else:
                bundle = self._create_owned_bundle(bundle_name, declaration, runtime)

            if bundle.name in seen:
                raise InvalidBundleDeclarationError(
                    bundle_name, f"bundle name '{bundle.name}' is already used by '{seen[bundle.name]}'"
                )
            seen[bundle.name] = bundle_name
            bundles.append(bundle)

        self.owned_bundles = [bundle for bundle in bundles if isinstance(bundle, OwnedBundle)]
        self.external_bundles = [bundle for bundle in bundles if isinstance(bundle, ExternalBundle)]
        return bundles

    def create_bundles_sorted(
        self,
        runtime: Any,
        *,
        skip_host_check: bool = False,
        allow_unresolved: bool = False,
    ) -> List[Bundle]:
        """Construct bundles and order them by type and ``depends_on``."""

        return sort_bundles(
            self.create_bundles(runtime),
            skip_host_check=skip_host_check,
            allow_unresolved=allow_unresolved,
        )

    def _declaration_for(self, bundle_name: str, runtime: Any) -> BundleDeclaration:
        entry = self.project_config.bundles[bundle_name]
        if isinstance(entry, (OwnedBundleDeclaration, ExternalBundleDeclaration)):
            return entry
        return parse_bundle_declaration(bundle_name, entry(self.env_options, runtime))

    def _create_external_bundle(self, bundle_name: str, declaration: ExternalBundleDeclaration) -> ExternalBundle:
        bundle_path = Path(declaration.bundle_path)
        bundle_dir = bundle_path.parent
        if declaration.assets_path:
            assets_path = Path(declaration.assets_path)
            if not assets_path.is_absolute():
                assets_path = Path(os.path.normpath(bundle_dir / assets_path))
        else:
            assets_path = bundle_dir

        name = declaration.name or bundle_name
        logger.debug("Bundle '%s' is external (%s)", name, bundle_path)
        return ExternalBundle(
            name,
            ExternalBundleProperties(
                type=bundle_type_for(dll=declaration.dll, app=declaration.app),
                bundle_path=bundle_path,
                assets_path=assets_path,
                manifest_path=Path(declaration.manifest_path) if declaration.manifest_path else None,
                should_copy=bool(declaration.copy_bundle),
                depends_on=tuple(dict.fromkeys(declaration.depends_on or ())),
            ),
        )

    def _create_owned_bundle(self, bundle_name: str, declaration: OwnedBundleDeclaration, runtime: Any) -> OwnedBundle:
        name = declaration.name or bundle_name
        properties = resolve_bundle_properties(declaration, self.env_options, self.probe)

        # Server builds load the config once with an empty platform, so the
        # allow-list only applies to file targets.
        if properties.platform not in self.platforms and not self.env_options.is_server_target:
            raise UnsupportedPlatformError(properties.platform, self.platforms)

        logger.debug("Bundle '%s' resolved for platform '%s' (%s)", name, properties.platform, properties.mode)
        base_config = self.get_base_config(runtime, self.env_options, name, self._legacy_project_view(name, properties))

        transform = None
        if declaration.transform is not None:
            transform = _bind_transform(
                declaration.transform,
                bundle_name=name,
                runtime=runtime,
                env=self.env_options,
            )
        return OwnedBundle(name, properties, base_config, transform)

    def _legacy_project_view(self, name: str, properties: OwnedBundleProperties) -> Dict[str, Any]:
        return {
            "server": {"host": self.server.host, "port": self.server.port},
            "bundles": {
                name: {
                    "entry": {"entry_files": list(properties.input_module_names)},
                    "platform": properties.platform,
                    "root": properties.context,
                    "assets_dest": properties.assets_destination or "",
                    "dev": properties.is_dev,
                    "minify": properties.minify,
                    "provides_module_node_modules": list(properties.provides_module_node_modules),
                    "haste_options": dict(properties.haste_options),
                    "max_workers": properties.max_workers,
                    "type": properties.format,
                }
            },
        }


__all__ = ["Configuration", "GetBaseConfig"]
