"""Chart release commands.

This module provides the commands that output, apply, update and delete
releases of the current chart family. Omitting --name lists the deployed
releases and asks which one to act on.
"""

from typing import Annotated

import typer

from chartdeck.cli.context import get_cli_context
from chartdeck.cli.shared.console import with_error_handling

chart_app = typer.Typer(
    name="chart",
    help="Chart release operations (output, apply, update, delete).",
    no_args_is_help=True,
)


NameOption = Annotated[
    str | None,
    typer.Option("--name", help="Release name (omit to pick from a list)"),
]
BuildOption = Annotated[
    str | None,
    typer.Option(
        "--build",
        help="Dockerfile to build and push as <repository>:<version> first",
    ),
]
ConfigOption = Annotated[
    str | None,
    typer.Option(
        "--config",
        help="Directory containing appsettings.json and log4net.config",
    ),
]
IngressPathOption = Annotated[
    str | None,
    typer.Option("--path", help="Ingress path (default: /<version>)"),
]
CountOption = Annotated[
    int,
    typer.Option("--count", help="Instance count (api only)"),
]


@chart_app.command()
@with_error_handling
def output(
    path: Annotated[
        str,
        typer.Argument(help="Directory to write the manifests to"),
    ] = ".",
    name: NameOption = None,
) -> None:
    """Write a release's rendered manifests to a local directory.

    Examples:
        chartdeck chart output ./out --name game-api120
        chartdeck chart output
    """
    ctx = get_cli_context()
    ctx.workflow().output(path, name=name)


@chart_app.command()
@with_error_handling
def apply(
    release_type: Annotated[
        str,
        typer.Argument(metavar="TYPE", help="Release type: api or host"),
    ],
    version: Annotated[str, typer.Argument(help="Version to deploy")],
    name: NameOption = None,
    config: ConfigOption = None,
    ingress_path: IngressPathOption = None,
    count: CountOption = 1,
    build: BuildOption = None,
) -> None:
    """Install a release, or upgrade it if it already exists.

    The release name defaults to <chart>-<type><version without dots>.

    Examples:
        chartdeck chart apply api 1.2.0 --config ./cfg
        chartdeck chart apply host 1.2.0 --config ./cfg --build Dockerfile
        chartdeck chart apply api 1.2.0 --config ./cfg --path /v1 --count 3
    """
    ctx = get_cli_context()
    ctx.console.print_header(f"Applying {release_type} {version}")
    ctx.workflow().apply(
        release_type,
        version,
        name=name,
        config_dir=config,
        ingress_path=ingress_path,
        count=count,
        dockerfile=build,
    )


@chart_app.command()
@with_error_handling
def update(
    version: Annotated[str, typer.Argument(help="Version to move to")],
    name: NameOption = None,
    build: BuildOption = None,
    re_install: Annotated[
        str | None,
        typer.Option(
            "--re-install",
            help="Uninstall the release and install a fresh api or host release",
        ),
    ] = None,
    config: ConfigOption = None,
    ingress_path: IngressPathOption = None,
    count: CountOption = 1,
) -> None:
    """Move a release to a new version, keeping its stored values.

    Examples:
        chartdeck chart update 1.3.0 --name game-api120
        chartdeck chart update 1.3.0 --build Dockerfile
        chartdeck chart update 1.3.0 --re-install api --config ./cfg
    """
    ctx = get_cli_context()
    ctx.console.print_header(f"Updating to {version}")
    ctx.workflow().update(
        version,
        name=name,
        dockerfile=build,
        reinstall=re_install,
        config_dir=config,
        ingress_path=ingress_path,
        count=count,
    )


@chart_app.command()
@with_error_handling
def delete(name: NameOption = None) -> None:
    """Uninstall a release.

    Examples:
        chartdeck chart delete --name game-api120
        chartdeck chart delete
    """
    ctx = get_cli_context()
    ctx.workflow().delete(name=name)
