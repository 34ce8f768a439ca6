from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pytest

from multibundle.configuration import Configuration, EnvironmentProbe
from multibundle.runtime import Runtime
from multibundle.schemas import EnvOptions


class RecordingBaseConfig:
    """Base-config synthesizer that remembers every call it receives."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, runtime: Any, env: EnvOptions, bundle_name: str, project: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append({"runtime": runtime, "env": env, "bundle_name": bundle_name, "project": project})
        return {"name": bundle_name, "entry": project["bundles"][bundle_name]["entry"]}


@pytest.fixture()
def probe() -> EnvironmentProbe:
    return EnvironmentProbe(is_ci=False, cpu_count=8)


@pytest.fixture()
def env() -> EnvOptions:
    return EnvOptions(platform="ios", root="/project")


@pytest.fixture()
def runtime(tmp_path: Path) -> Runtime:
    return Runtime(root=tmp_path)


@pytest.fixture()
def base_config() -> RecordingBaseConfig:
    return RecordingBaseConfig()


@pytest.fixture()
def make_configuration(env: EnvOptions, probe: EnvironmentProbe, base_config: RecordingBaseConfig):
    def factory(
        bundles: Mapping[str, Any],
        *,
        env_options: Optional[EnvOptions] = None,
        **project: Any,
    ) -> Configuration:
        return Configuration(
            {"bundles": dict(bundles), **project},
            base_config,
            env_options or env,
            probe=probe,
        )

    return factory
