"""Shared fixtures: chart templates, a config bundle and an in-memory Helm."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import yaml

from chartdeck.config.settings import ChartDescriptor
from chartdeck.deployment.shell_commands.types import CommandResult, HelmRelease

API_VALUES = """\
image:
  repository: placeholder
  tag: latest
  pullPolicy: IfNotPresent
body:
  name: ""
  namespace: ""
config:
  configMapName: ""
  configName: ""
  data:
    appsettings: ""
    log4netConfig: ""
count: 1
volumeMounts:
  - name: placeholder
    mountPath: /app/appsettings.json
    subPath: appsettings.json
  - name: placeholder
    mountPath: /app/log4net.config
    subPath: log4net.config
ingress:
  enabled: true
  className: nginx
  hosts:
    - host: api.example.com
      path: /
      pathType: Prefix
    - host: api.internal
      path: /
      pathType: Prefix
resources:
  limits:
    cpu: 500m
"""

HOST_VALUES = """\
image:
  repository: placeholder
  tag: latest
body:
  name: ""
  namespace: ""
config:
  configMapName: ""
  configName: ""
  data:
    appsettings: ""
    log4netConfig: ""
volumeMounts:
  - name: placeholder
    mountPath: /app/appsettings.json
    subPath: appsettings.json
hostPort: 7777
"""


def write_chart(chart_dir: Path, chart_name: str, values: str) -> Path:
    chart_dir.mkdir(parents=True, exist_ok=True)
    (chart_dir / "Chart.yaml").write_text(
        f"apiVersion: v2\nname: {chart_name}\nversion: 0.1.0\n"
    )
    (chart_dir / "values.yaml").write_text(values)
    return chart_dir


@pytest.fixture
def api_chart(tmp_path: Path) -> Path:
    return write_chart(tmp_path / "charts" / "api", "game-api", API_VALUES)


@pytest.fixture
def host_chart(tmp_path: Path) -> Path:
    return write_chart(tmp_path / "charts" / "host", "game-host", HOST_VALUES)


@pytest.fixture
def descriptor(api_chart: Path, host_chart: Path) -> ChartDescriptor:
    return ChartDescriptor(
        name="game",
        namespace="game-ns",
        repository="123456789012.dkr.ecr.eu-west-1.amazonaws.com/game",
        region="eu-west-1",
        api_template=api_chart,
        host_template=host_chart,
    )


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Config tree with the two artifacts at different depths."""
    root = tmp_path / "cfg"
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "appsettings.json").write_text('{"Port": 8080}')
    (root / "nested" / "deeper" / "log4net.config").write_text("<log4net />")
    return root


class FakeHelm:
    """In-memory stand-in for HelmCommands backed by a release dict."""

    def __init__(self) -> None:
        self.releases: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []

    def upgrade(
        self,
        release_name: str,
        chart_path: Path,
        namespace: str,
        *,
        install: bool = True,
        value_files: list[Path] | None = None,
        timeout: str = "5m",
        wait: bool = False,
        create_namespace: bool = True,
        on_output: Any = None,
    ) -> CommandResult:
        self.calls.append(("upgrade", release_name))
        if release_name not in self.releases and not install:
            return CommandResult(
                success=False,
                stderr=f'Error: UPGRADE FAILED: "{release_name}" has no deployed releases',
                returncode=1,
            )

        values: dict[str, Any] = {}
        for vf in value_files or []:
            values.update(yaml.safe_load(Path(vf).read_text()) or {})
        chart = yaml.safe_load((Path(chart_path) / "Chart.yaml").read_text())
        previous = self.releases.get(release_name, {})
        self.releases[release_name] = {
            "namespace": namespace,
            "chart": f"{chart['name']}-{chart['version']}",
            "values": values,
            "revision": previous.get("revision", 0) + 1,
        }
        return CommandResult(success=True, stdout=f"Release {release_name} upgraded")

    def uninstall(
        self, release_name: str, namespace: str, *, wait: bool = True
    ) -> CommandResult:
        self.calls.append(("uninstall", release_name))
        if release_name not in self.releases:
            return CommandResult(
                success=False,
                stderr=f"Error: uninstall: Release not loaded: {release_name}: "
                "release: not found",
                returncode=1,
            )
        del self.releases[release_name]
        return CommandResult(success=True, stdout=f'release "{release_name}" uninstalled')

    def list_releases(self, namespace: str) -> tuple[CommandResult, list[HelmRelease]]:
        self.calls.append(("list", namespace))
        releases = [
            HelmRelease(
                name=name,
                namespace=data["namespace"],
                status="deployed",
                revision=str(data["revision"]),
                chart=data["chart"],
            )
            for name, data in self.releases.items()
        ]
        return CommandResult(success=True, stdout=json.dumps([])), releases

    def get_values(
        self, release_name: str, namespace: str
    ) -> tuple[CommandResult, dict[str, Any]]:
        self.calls.append(("get_values", release_name))
        if release_name not in self.releases:
            return CommandResult(
                success=False, stderr="Error: release: not found", returncode=1
            ), {}
        return CommandResult(success=True), copy.deepcopy(
            self.releases[release_name]["values"]
        )

    def get_manifest(self, release_name: str, namespace: str) -> CommandResult:
        self.calls.append(("get_manifest", release_name))
        if release_name not in self.releases:
            return CommandResult(
                success=False, stderr="Error: release: not found", returncode=1
            )
        return CommandResult(
            success=True,
            stdout=f"---\nkind: Deployment\nmetadata:\n  name: {release_name}\n",
        )


@pytest.fixture
def fake_helm() -> FakeHelm:
    return FakeHelm()


@pytest.fixture
def mock_commands(fake_helm: FakeHelm) -> MagicMock:
    """Shell commands with the fake Helm and mocked docker/registry."""
    commands = MagicMock()
    commands.helm = fake_helm
    commands.registry.USERNAME = "AWS"
    return commands


@pytest.fixture
def mock_console() -> MagicMock:
    """Create a mock CLI console."""
    return MagicMock()
