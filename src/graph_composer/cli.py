"""
命令行入口

提供 graph-composer 命令行工具。
"""

import functools
import json
import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import ComposerConfig
from .exceptions import GraphComposerError
from .exporter import ExportWriter
from .graph import GraphComposer

console = Console()


def composer_options(func):
    """各子命令共用的选项"""

    @click.argument("directory", default=".", type=click.Path(exists=True, file_okay=False))
    @click.option("--model", "-m", "model_path", type=click.Path(exists=True), help="依赖模型快照路径")
    @click.option("--no-dev", is_flag=True, help="不显示开发依赖")
    @click.option("--exclude-regex", "-r", multiple=True, help="排除名称匹配该正则的软件包")
    @click.option("--depth", "-d", type=click.IntRange(min=0), help="最大深度（默认无限制）")
    @click.option("--colorize", "-c", is_flag=True, help="按版本状态着色")
    @click.option("--outdated-report", type=click.Path(), help="outdated 命令输出的报告文件")
    @click.option("--export", "-e", "export_file", type=click.Path(), help="统计导出文件（如 stats.json）")
    @functools.wraps(func)
    def wrapper(directory, model_path, no_dev, exclude_regex, depth, colorize,
                outdated_report, export_file, **kwargs):
        config = ComposerConfig(
            directory=directory,
            model_path=model_path,
            max_depth=depth,
            colorize=colorize,
            export_file=export_file,
            exclude_patterns=list(exclude_regex),
            exclude_dev=no_dev,
            outdated_report=outdated_report,
        )
        return func(config, **kwargs)

    return wrapper


def build_composer(config: ComposerConfig) -> GraphComposer:
    """创建构建器，配置错误时退出"""
    try:
        return GraphComposer.from_config(config)
    except GraphComposerError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", count=True, help="输出日志（重复使用显示调试信息）")
def main(verbose: int):
    """依赖关系图与版本状态报告工具"""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )


@main.command()
@composer_options
@click.option("--format", "-f", "fmt", type=click.Choice(["html", "dot"]), default="html")
def show(config: ComposerConfig, fmt: str):
    """构建依赖图并在浏览器中打开"""
    config.format = fmt
    composer = build_composer(config)

    try:
        with console.status("Composing dependency graph..."):
            path = composer.display_graph()
    except GraphComposerError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Generated {path}")


@main.command()
@composer_options
@click.option("--output", "-o", required=True, type=click.Path(), help="输出文件路径")
@click.option("--format", "-f", "fmt", type=click.Choice(["html", "dot"]), help="输出格式（默认取自文件扩展名）")
def export(config: ComposerConfig, output: str, fmt: str | None):
    """构建依赖图并写入文件"""
    config.format = fmt or Path(output).suffix.lstrip(".") or "html"
    composer = build_composer(config)

    try:
        with console.status("Composing dependency graph..."):
            path = composer.get_image_path(output)
    except GraphComposerError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Generated {path}")
    console.print(f"[dim]Open in browser: file://{os.path.abspath(path)}[/dim]")

    if config.export_file:
        console.print(f"[green]✓[/green] Exported statistics to {config.export_file}")


@main.command()
@composer_options
@click.option("--json", "as_json", is_flag=True, help="输出 JSON 格式")
def stats(config: ComposerConfig, as_json: bool):
    """显示依赖数量与版本状态统计"""
    composer = build_composer(config)

    try:
        _, drawn = composer.compose()
        statistics = composer.get_export_data(drawn)
        if config.export_file:
            ExportWriter().write(statistics, config.export_file)
    except GraphComposerError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    data = statistics.to_dict()

    if as_json:
        click.echo(json.dumps(data, indent=4))
        return

    root = composer.model.root_package()
    console.print(Panel(f"[bold]{root.name}[/bold] {root.version or ''}", border_style="blue"))

    table = Table(title="Dependencies", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    deps = data["dependencies"]
    table.add_row("Direct", str(deps["direct"]))
    table.add_row("Indirect", str(deps["indirect"]))
    table.add_row("Total", str(deps["total"]))

    console.print(table)

    table = Table(title="Dependency Status", show_header=True, header_style="bold magenta")
    table.add_column("Status", style="cyan")
    table.add_column("Packages", justify="right")

    status = data["dependencyStatus"]
    table.add_row("[green]Latest[/green]", str(status["latest"]))
    table.add_row("Patch available", str(status["patchAvailable"]))
    table.add_row("[yellow]Minor available[/yellow]", str(status["minorAvailable"]))
    table.add_row("[dark_orange]Major available[/dark_orange]", str(status["majorAvailable"]))
    table.add_row("[red]Abandoned[/red]", str(status["abandoned"]))

    console.print(table)


if __name__ == "__main__":
    main()
