"""
bpgen CLI.

Command-line interface for generating Soong modules from a resolved graph.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import Config, get_config
from .core.exceptions import BpGenError
from .core.logging import get_logger, setup_logging
from .models.graph import ResolvedGraph
from .services.canonicalizer import load_name_table

app = typer.Typer(
    name="bpgen",
    help="Generate Android.bp modules from a resolved dependency graph",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"bpgen v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """bpgen: resolved dependency graph to Soong modules."""
    pass


def _build_config(
    project_dir: Optional[Path],
    project_name: Optional[str],
    target_sdk: Optional[int],
    platform: Optional[list[str]],
    names: Optional[Path],
    no_patch: bool = False,
    verbose: bool = False,
) -> Config:
    """Layer command-line options over the environment configuration."""
    update: dict[str, Any] = {}
    if project_dir is not None:
        update["project_dir"] = project_dir
    if project_name is not None:
        update["project_name"] = project_name
    if target_sdk is not None:
        update["target_sdk"] = target_sdk
    if platform:
        update["platform_modules"] = list(platform)
    if names is not None:
        update["name_overrides_file"] = names
    if no_patch:
        update["patch_android_bp"] = False
    if verbose:
        update["log_level"] = "DEBUG"
    # Round-trip through validation so CLI values get the same checks as env values
    return Config.load({**get_config().model_dump(), **update})


_GRAPH_ARGUMENT = typer.Argument(
    ...,
    help="Resolved dependency graph (JSON)",
    exists=True,
    file_okay=True,
    dir_okay=False,
    resolve_path=True,
)
_PROJECT_DIR_OPTION = typer.Option(None, "--project-dir", "-d", help="Directory holding Android.bp")
_PROJECT_NAME_OPTION = typer.Option(None, "--project-name", "-n", help="Prefix of vendored module names")
_TARGET_SDK_OPTION = typer.Option(None, "--target-sdk", "-s", help="Target platform SDK version")
_PLATFORM_OPTION = typer.Option(
    None, "--platform", "-p", help="group:name glob of a platform-provided module (repeatable)"
)
_NAMES_OPTION = typer.Option(None, "--names", help="JSON file with extra module name overrides")


@app.command()
def generate(
    graph_file: Path = _GRAPH_ARGUMENT,
    project_dir: Optional[Path] = _PROJECT_DIR_OPTION,
    project_name: Optional[str] = _PROJECT_NAME_OPTION,
    target_sdk: Optional[int] = _TARGET_SDK_OPTION,
    platform: Optional[list[str]] = _PLATFORM_OPTION,
    names: Optional[Path] = _NAMES_OPTION,
    no_patch: bool = typer.Option(False, "--no-patch", help="Do not touch the hand-maintained Android.bp"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """Regenerate libs/ and patch Android.bp from a resolved graph."""
    from .orchestration import GenerateBpPipeline

    try:
        config = _build_config(project_dir, project_name, target_sdk, platform, names, no_patch, verbose)
        setup_logging(config)
        graph = ResolvedGraph.from_file(graph_file)
        pipeline = GenerateBpPipeline(config, name_table=load_name_table(config.name_overrides_file))
        result = pipeline.run(graph)
    except BpGenError as e:
        logger.error("Generation failed", error=str(e))
        console.print(f"\n[bold red]✗ Generation failed![/bold red]\n{escape(str(e))}")
        raise typer.Exit(1)

    console.print("\n[bold green]✓ Generation completed[/bold green]\n")

    table = Table(title="Generation Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Run ID", result.run_id)
    table.add_row("Duration", f"{result.duration_ms:.0f}ms")
    table.add_row("Direct Dependencies", str(result.direct_dependencies))
    table.add_row("Transitive Closure", str(result.closure_size))
    table.add_row("Vendored Modules", str(len(result.vendored)))
    table.add_row("Platform Modules", str(len(result.platform_provided)))
    table.add_row("Declarations", str(result.declarations))
    if result.android_bp_patched:
        table.add_row("Android.bp", "[green]updated[/green]" if result.android_bp_changed else "unchanged")
    else:
        table.add_row("Android.bp", "[yellow]skipped[/yellow]")

    console.print(table)


@app.command()
def modules(
    graph_file: Path = _GRAPH_ARGUMENT,
    project_name: Optional[str] = _PROJECT_NAME_OPTION,
    target_sdk: Optional[int] = _TARGET_SDK_OPTION,
    platform: Optional[list[str]] = _PLATFORM_OPTION,
    names: Optional[Path] = _NAMES_OPTION,
) -> None:
    """List the transitive closure and how each module is classified. Writes nothing."""
    from .orchestration import GenerateBpPipeline

    try:
        config = _build_config(None, project_name, target_sdk, platform, names)
        setup_logging(config)
        graph = ResolvedGraph.from_file(graph_file)
        pipeline = GenerateBpPipeline(config, name_table=load_name_table(config.name_overrides_file))
        flattened = pipeline.flatten(graph)
    except BpGenError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    direct = set(flattened.direct)
    table = Table(title="Transitive Closure")
    table.add_column("Module", style="cyan")
    table.add_column("Version")
    table.add_column("Artifact")
    table.add_column("Soong Name", style="green")
    table.add_column("Status")

    for module in flattened.closure:
        if pipeline.classifier.is_excluded(module):
            status = "[dim]excluded[/dim]"
        elif pipeline.classifier.is_provided_by_platform(module):
            status = "platform"
        else:
            status = "[bold]vendored[/bold]"
        marker = " (direct)" if module in direct else ""
        table.add_row(
            f"{module.coordinate}{marker}",
            module.version,
            module.artifact.file_type.value if module.artifact else "-",
            pipeline.canonicalizer.module_name(module),
            status,
        )

    console.print(table)


@app.command()
def config() -> None:
    """Show the effective configuration."""
    try:
        cfg = get_config()
    except BpGenError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Project Name", cfg.project_name)
    table.add_row("Target SDK", str(cfg.target_sdk))
    table.add_row("Project Dir", str(cfg.project_dir))
    table.add_row("Libs Dir", str(cfg.libs_path))
    table.add_row("Android.bp", str(cfg.android_bp_path))
    table.add_row("Platform Modules", ", ".join(cfg.platform_modules) or "None")
    table.add_row("Name Overrides", str(cfg.name_overrides_file or "built-in"))
    table.add_row("Log Level", cfg.log_level)

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  BPGEN_PROJECT_NAME, BPGEN_TARGET_SDK, BPGEN_PROJECT_DIR")
    console.print("  BPGEN_PLATFORM_MODULES, BPGEN_NAME_OVERRIDES, BPGEN_LOG_LEVEL")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
