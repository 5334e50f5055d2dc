# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""'flyweave compile' — run pointcut matching over service files."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from flyweave.aop.extension import AopExtension
from flyweave.aop.matching_pass import PointcutMatchingPass
from flyweave.aop.services import USE_COMPILATION_CACHE_PARAMETER
from flyweave.cli.console import console
from flyweave.container.builder import ContainerBuilder
from flyweave.container.loader import YamlFileLoader
from flyweave.core.config import Config
from flyweave.kernel.exceptions import FlyweaveException
from flyweave.logging.structlog_adapter import StructlogAdapter


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("flyweave.yaml"),
    show_default=True,
    help="Configuration file (YAML or TOML).",
)
@click.option(
    "--services",
    "service_files",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    required=True,
    help="Service definition YAML file; may be repeated.",
)
@click.option("--profile", "profiles", multiple=True, help="Active configuration profile; may be repeated.")
@click.option("--no-cache", is_flag=True, help="Ignore the compilation cache for this run.")
def compile_command(config_path: Path, service_files: tuple[Path, ...], profiles: tuple[str, ...], no_cache: bool) -> None:
    """Match pointcuts against services and write proxy classes."""
    container = ContainerBuilder()
    loader = YamlFileLoader(container)
    try:
        config = Config.from_file(config_path, active_profiles=list(profiles))
        StructlogAdapter().configure(config)
        props = AopExtension().load(config, container)
        for service_file in service_files:
            loader.load(service_file)
        if no_cache:
            container.set_parameter(USE_COMPILATION_CACHE_PARAMETER, False)
        result = PointcutMatchingPass().process(container)
    except FlyweaveException as exc:
        console.print(f"[error]Error:[/error] {escape(str(exc))}")
        raise SystemExit(1) from exc

    if not result.proxies:
        console.print("[dim]No services matched any pointcut.[/dim]")
        return

    table = Table(title=f"Proxies in {props.cache_dir}", border_style="dim")
    table.add_column("Service", style="info")
    table.add_column("Class")
    table.add_column("Proxy")
    table.add_column("Status")
    for proxy in result.proxies:
        status = "[success]generated[/success]" if proxy.generated else "[dim]cached[/dim]"
        table.add_row(proxy.service_id, proxy.class_name, proxy.proxy_class_name, status)
    console.print(table)
