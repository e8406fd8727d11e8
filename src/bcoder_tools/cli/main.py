"""
CLI for bcoder-tools.

Lists the sandboxed tools and runs single calls or batches of calls
against a workspace, the same way an agent loop would.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from bcoder_tools import __version__
from bcoder_tools.settings import ToolSystemSettings
from bcoder_tools.tools import ToolResult, ToolSystem, create_tool_system

# Load environment variables
load_dotenv()

console = Console()
# Logs go to stderr so JSON output on stdout stays parseable
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Setup rich logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def _load_system(root: Optional[str], config: Optional[str]) -> ToolSystem:
    """Build the tool system from a config file or the environment."""
    try:
        settings = ToolSystemSettings.load(config_path=config, workspace_root=root)
    except FileNotFoundError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        err_console.print(f"[bold red]Configuration error:[/bold red] {e}")
        sys.exit(1)

    if not settings.workspace_root.is_dir():
        err_console.print(
            f"[bold red]Error:[/bold red] Workspace root is not a directory: "
            f"{settings.workspace_root}"
        )
        sys.exit(1)

    return create_tool_system(settings=settings)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _parse_arguments(raw: Optional[str]) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        arguments = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--args")
    if not isinstance(arguments, dict):
        raise click.BadParameter("Arguments must be a JSON object", param_hint="--args")
    return arguments


root_option = click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False),
    default=None,
    help="Workspace root (default: BCODER_WORKSPACE_ROOT or current directory)",
)
config_option = click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML/JSON settings file",
)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """bcoder-tools - sandboxed filesystem tools for coding agents."""
    setup_logging(verbose)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print function-calling schemas as JSON")
@root_option
@config_option
def tools(as_json: bool, root: Optional[str], config: Optional[str]):
    """
    List the available tools.

    Examples:

        # Table of tools and their parameters
        bcoder-tools tools

        # Schemas as sent to an LLM
        bcoder-tools tools --json
    """
    system = _load_system(root, config)

    if as_json:
        _echo_json([d.to_function_schema() for d in system.list_descriptors()])
        return

    table = Table(title=f"Tools ({system.workspace_root})")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Description")
    table.add_column("Parameters")

    for descriptor in system.list_descriptors():
        params = ", ".join(
            f"{p.name}: {p.kind.value}" + ("" if p.required else "?")
            for p in descriptor.parameters
        )
        table.add_row(descriptor.name, descriptor.description, params)

    console.print(table)


@cli.command()
@click.argument("name")
@click.option("--args", "-a", "raw_args", default=None, help="Arguments as a JSON object")
@root_option
@config_option
def run(name: str, raw_args: Optional[str], root: Optional[str], config: Optional[str]):
    """
    Execute a single tool call.

    Prints the result as JSON. Exits with status 1 if the call failed.

    Examples:

        bcoder-tools run list_files --args '{"path": ".", "recursive": true}'

        bcoder-tools run read_file -a '{"path": "README.md"}' --root ~/projects/demo
    """
    arguments = _parse_arguments(raw_args)
    system = _load_system(root, config)

    result = asyncio.run(system.execute_tool(name, arguments))
    _echo_json(result.model_dump(mode="json", exclude_none=True))

    if not result.success:
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@root_option
@config_option
def batch(file: str, root: Optional[str], config: Optional[str]):
    """
    Execute a list of tool calls from a YAML or JSON file.

    Calls run in order; a failed call does not stop the batch. Exits with
    status 1 if any call failed.

    File format (YAML):

        - name: write_file
          arguments: {path: notes.txt, content: hello}
        - name: read_file
          arguments: {path: notes.txt}
    """
    try:
        calls = yaml.safe_load(Path(file).read_text())
    except yaml.YAMLError as e:
        err_console.print(f"[bold red]Error:[/bold red] Cannot parse {file}: {e}")
        sys.exit(1)

    if not isinstance(calls, list):
        err_console.print("[bold red]Error:[/bold red] Batch file must contain a list of calls")
        sys.exit(1)

    system = _load_system(root, config)
    results: list[ToolResult] = asyncio.run(system.execute_tools(calls))

    _echo_json([r.model_dump(mode="json", exclude_none=True) for r in results])

    failed = sum(1 for r in results if not r.success)
    if failed:
        err_console.print(f"[yellow]{failed} of {len(results)} calls failed[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    cli()
