from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from gatewayforge.config import get_settings
from gatewayforge.errors import GatewayForgeError
from gatewayforge.intake.loader import EXAMPLE_ENDPOINTS, apply_requires_key, load_endpoints
from gatewayforge.orchestrator.pipeline import run_generate
from gatewayforge.tree.builder import build_resource_tree, find_identifier_collisions


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _fail(e: Exception) -> NoReturn:
    err_console.print(f"[bold red]error[/bold red] {escape(str(e))}")
    raise typer.Exit(code=1)


def _write(out: str, text: str) -> Path:
    out_path = Path(out).expanduser()
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
    except OSError as e:
        _fail(e)
    return out_path


def _endpoints_file(file: str) -> Path:
    p = Path(file).expanduser()
    if not p.exists():
        raise typer.BadParameter(f"Endpoints file does not exist: {p}")
    if not p.is_file():
        raise typer.BadParameter(f"Endpoints path is not a file: {p}")
    return p


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, help="Logging level (default from settings)"),
) -> None:
    level = (log_level or get_settings().log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise typer.BadParameter(f"Unknown log level: {level}", param_hint="--log-level")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def generate(
    file: str = typer.Argument(..., help="JSON file with the endpoint list"),
    out: Optional[str] = typer.Option(None, help="Output .tf path (default: print to stdout)"),
    rest_api: Optional[str] = typer.Option(None, help="Name of the aws_api_gateway_rest_api resource"),
    strict: Optional[bool] = typer.Option(None, "--strict/--no-strict", help="Fail on resource name collisions"),
    highlight: Optional[bool] = typer.Option(None, "--highlight/--no-highlight", help="Colour HCL on the console"),
    all_api_key: Optional[bool] = typer.Option(
        None, "--all-api-key/--no-all-api-key", help="Force api_key_required on every endpoint"
    ),
) -> None:
    settings = get_settings()
    path = _endpoints_file(file)

    try:
        endpoints = load_endpoints(path)
        if all_api_key is not None:
            endpoints = apply_requires_key(endpoints, all_api_key)
        result = run_generate(
            endpoints,
            rest_api_name=rest_api or settings.rest_api_name,
            strict=settings.strict_identifiers if strict is None else strict,
        )
    except GatewayForgeError as e:
        _fail(e)

    if out:
        out_path = _write(out, result.text)
        console.print(
            f"[bold green]Wrote[/bold green] {result.resource_count} resources, "
            f"{result.method_count} methods, {result.integration_count} integrations to: {out_path}"
        )
        return

    if settings.highlight if highlight is None else highlight:
        console.print(Syntax(result.text, "terraform", theme="monokai", background_color="default"))
    else:
        typer.echo(result.text, nl=False)


@app.command()
def tree(
    file: str = typer.Argument(..., help="JSON file with the endpoint list"),
) -> None:
    path = _endpoints_file(file)
    try:
        t = build_resource_tree(load_endpoints(path))
    except GatewayForgeError as e:
        _fail(e)

    table = Table(show_header=True, header_style="bold")
    table.add_column("DEPTH", no_wrap=True, justify="right")
    table.add_column("RESOURCE")
    table.add_column("PATH")
    table.add_column("PARENT")

    for key, node in t.depth_ordered():
        table.add_row(str(node.depth), node.identifier, key, node.parent_path)

    console.print(f"[bold]Resources:[/bold] {len(t)}")
    console.print(table)

    for name, keys in sorted(find_identifier_collisions(t).items()):
        console.print(f"[yellow]collision[/yellow] {escape(name)}: {escape(', '.join(keys))}")


@app.command()
def example(
    out: Optional[str] = typer.Option(None, help="Output path (default: print to stdout)"),
) -> None:
    text = json.dumps(list(EXAMPLE_ENDPOINTS), indent=2)
    if out:
        out_path = _write(out, text + "\n")
        console.print(f"[bold green]Wrote[/bold green] example endpoints to: {out_path}")
    else:
        typer.echo(text)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
