from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from lambdaserve.domain.errors import LambdaServeError
from lambdaserve.domain.models import DEFAULT_OUT_DIR, DEFAULT_PORT, ConvertConfig, InPlaceConfig
from lambdaserve.orchestrator.pipeline import ConvertResult, plan_routes, run_convert, run_inplace
from lambdaserve.repo.ignore import build_exclude_set

app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _fail(e: Exception) -> typer.Exit:
    err_console.print(f"[bold red]error:[/bold red] {e}")
    return typer.Exit(code=1)


def _report(result: ConvertResult, verbose: bool) -> None:
    for w in result.warnings:
        err_console.print(f"[yellow]warning:[/yellow] {w}")

    console.print(f"[bold green]lambdaserve[/bold green] {result.mode}: {result.out_dir}")
    for h in result.handlers:
        console.print(f"  POST /{h.route_name:<30} -> {h.path_name}")
    if verbose:
        console.print("")
        for p in result.written:
            console.print(f"[bold]Wrote[/bold] {p}")
    console.print("")
    if result.mode == "staged":
        console.print(
            f"Tip: [bold]docker build -t server {result.out_dir}[/bold] to build the image."
        )


@app.command()
def convert(
    handlers: List[str] = typer.Argument(..., help="Handler source files, relative to the current directory"),
    out: str = typer.Option(DEFAULT_OUT_DIR, envvar="LAMBDASERVE_OUT_DIR", help="Output directory (must not exist)"),
    exclude: Optional[List[str]] = typer.Option(None, help="Extra names never copied into the output"),
    port: int = typer.Option(DEFAULT_PORT, envvar="LAMBDASERVE_PORT", help="Default port of the server"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every written file"),
) -> None:
    """Stage the project into a new directory and add an Express server + container files."""
    try:
        config = ConvertConfig(
            cwd=Path.cwd(),
            handler_paths=handlers,
            out_dir=Path(out).expanduser(),
            excludes=build_exclude_set(exclude or []),
            port=port,
        )
    except ValidationError as e:
        raise typer.BadParameter(str(e))

    try:
        result = run_convert(config)
    except LambdaServeError as e:
        raise _fail(e)
    _report(result, verbose)


@app.command()
def inplace(
    handler: str = typer.Argument(..., help="Path to the handler file"),
    route: str = typer.Argument(..., help="Route name for the POST endpoint"),
    port: int = typer.Option(DEFAULT_PORT, envvar="LAMBDASERVE_PORT", help="Default port of the server"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every written file"),
) -> None:
    """Write server, Dockerfile and manifest next to a single handler."""
    try:
        config = InPlaceConfig(cwd=Path.cwd(), handler_path=handler, route_name=route, port=port)
    except ValidationError as e:
        raise typer.BadParameter(str(e))

    try:
        result = run_inplace(config)
    except LambdaServeError as e:
        raise _fail(e)
    _report(result, verbose)


@app.command()
def routes(
    handlers: List[str] = typer.Argument(..., help="Handler source files"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    """Show the routes and bindings that `convert` would generate."""
    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    try:
        refs = plan_routes(Path.cwd(), handlers)
    except LambdaServeError as e:
        raise _fail(e)

    if fmt == "json":
        rows = [
            {"route": f"/{h.route_name}", "binding": h.binding_name, "path": h.path_name}
            for h in refs
        ]
        console.print_json(json.dumps(rows))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("ROUTE")
    table.add_column("BINDING")
    table.add_column("FILE")
    for h in refs:
        table.add_row("POST", f"/{h.route_name}", h.binding_name, h.path_name)
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
