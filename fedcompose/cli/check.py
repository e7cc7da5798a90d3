"""CLI check command implementation.

This module implements the `fedcompose check` command: it loads subgraph
manifests, runs the enum consistency checks across them, and reports the
result in one of several output formats.
"""

import asyncio
import json
import sys
import time
import traceback
from typing import Any, NoReturn

from rich.console import Console
from rich.table import Table
import rich_click as click
import yaml

from ..config import CompositionConfig
from ..core import (
    FileSubgraphLoader,
    MalformedDefinitionError,
    SubgraphLoadError,
    SubgraphLoadResult,
    configure_logging,
)
from ..validation import CompositionResult, CompositionValidator

# Create console for rich formatting - auto-detects if we're in interactive environment
console = Console()

EXIT_OK = 0
EXIT_FAULTS = 1
EXIT_INPUT_ERROR = 2
EXIT_INTERNAL_ERROR = 4


def _should_use_rich_formatting(force_colors: bool = False) -> bool:
    """Determine if we should use rich formatting based on environment."""
    return force_colors or console.is_terminal


def _fail(format: str, error_type: str, message: str, exit_code: int) -> NoReturn:
    """Report a command failure and exit."""
    if format == "json":
        click.echo(
            json.dumps(
                {"status": "error", "error_type": error_type, "message": message},
                indent=2,
            )
        )
    else:
        click.echo(f"❌ {message}")
    sys.exit(exit_code)


def _details(
    loaded: SubgraphLoadResult, result: CompositionResult, elapsed_ms: float
) -> dict[str, Any]:
    return {
        "files": loaded.file_count,
        "services": loaded.services,
        "types": result.type_count,
        "fragments": result.fragment_count,
        "check_time_ms": round(elapsed_ms, 1),
    }


def _output_table_format(
    result: CompositionResult,
    details: dict[str, Any],
    verbose: bool,
    force_colors: bool = False,
) -> None:
    """Output the result as a table (rich) or plain text (CI)."""
    if _should_use_rich_formatting(force_colors):
        if result.is_valid:
            console.print("✅ [bold green]Composition consistent[/bold green]")
        else:
            console.print("❌ [bold red]Composition inconsistent[/bold red]")
        console.print()

        info_table = Table(show_header=False, box=None, padding=(0, 1))
        info_table.add_row(
            "[bold]Services:[/bold]", f"[cyan]{', '.join(details['services'])}[/cyan]"
        )
        info_table.add_row("[bold]Types:[/bold]", f"[yellow]{details['types']}[/yellow]")
        if not result.is_valid:
            info_table.add_row(
                "[bold red]Errors found:[/bold red]", f"[red]{result.error_count}[/red]"
            )
        if verbose:
            info_table.add_row("[bold]Files:[/bold]", f"[dim]{details['files']}[/dim]")
            info_table.add_row(
                "[bold]Fragments:[/bold]", f"[dim]{details['fragments']}[/dim]"
            )
            info_table.add_row(
                "[bold]Check time:[/bold]", f"[dim]{details['check_time_ms']}ms[/dim]"
            )
        console.print(info_table)

        if result.errors:
            console.print()
            fault_table = Table(title="Faults", show_lines=True)
            fault_table.add_column("Code", style="red")
            fault_table.add_column("Type", style="bold yellow")
            fault_table.add_column("Message")
            for error in result.errors:
                fault_table.add_row(error.code, error.type_name, error.message)
            console.print(fault_table)

        for warning in result.warnings:
            console.print(f"⚠️  [yellow]{warning.code}[/yellow] [dim]{warning.message}[/dim]")
        return

    # Plain text for non-interactive (CI)
    click.echo(
        "✅ Composition consistent" if result.is_valid else "❌ Composition inconsistent"
    )
    click.echo()
    click.echo(f"Services: {', '.join(details['services'])}")
    click.echo(f"Types: {details['types']}")
    if not result.is_valid:
        click.echo(f"Errors found: {result.error_count}")
    if verbose:
        click.echo(f"Files: {details['files']}")
        click.echo(f"Fragments: {details['fragments']}")
        click.echo(f"Check time: {details['check_time_ms']}ms")

    if result.errors:
        click.echo()
        for error in result.errors:
            click.echo(f"❌ {error.code}: {error.message}")
            if verbose and error.impacted_services:
                for service, coordinates in error.impacted_services.items():
                    click.echo(f"   📍 {service}: {', '.join(coordinates)}")

    for warning in result.warnings:
        click.echo(f"⚠️  {warning.code}: {warning.message}")


def _output_compact_format(
    result: CompositionResult, details: dict[str, Any], verbose: bool
) -> None:
    """Output the result as a single status line plus one line per fault."""
    status_parts = [
        "✅ VALID" if result.is_valid else "❌ INVALID",
        f"types={details['types']}",
        f"errors={result.error_count}",
    ]
    if result.warning_count > 0:
        status_parts.append(f"warnings={result.warning_count}")
    if verbose:
        status_parts.extend(
            [
                f"files={details['files']}",
                f"fragments={details['fragments']}",
                f"checked={details['check_time_ms']}ms",
            ]
        )
    click.echo(" ".join(status_parts))

    for error in result.errors:
        click.echo(f"  ❌ {error.code} {error.type_name}")


def _structured_output(
    result: CompositionResult, details: dict[str, Any], verbose: bool
) -> dict[str, Any]:
    output = result.to_dict()
    output["services"] = details["services"]
    if verbose:
        output["files"] = details["files"]
        output["check_time_ms"] = details["check_time_ms"]
    return output


def _check_implementation(  # noqa: PLR0913
    paths: tuple[str, ...],
    strict: bool,
    malformed: str | None,
    workers: int | None,
    format: str,
    verbose: bool,
    force_colors: bool,
) -> None:
    try:
        overrides: dict[str, Any] = {}
        if strict:
            overrides["strict"] = True
        if malformed is not None:
            overrides["malformed_policy"] = malformed
        if workers is not None:
            overrides["max_workers"] = workers
        config = CompositionConfig(**overrides)

        configure_logging(
            environment=config.environment,
            log_level=config.log_level,
            json_logs=config.json_logs,
        )

        try:
            loaded = asyncio.run(FileSubgraphLoader(list(paths)).load_result())
        except SubgraphLoadError as e:
            _fail(format, "subgraph_load_error", str(e), EXIT_INPUT_ERROR)

        start_time = time.perf_counter()
        try:
            result = CompositionValidator(config).validate(loaded.fragments)
        except MalformedDefinitionError as e:
            _fail(format, "malformed_definition", str(e), EXIT_INPUT_ERROR)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        details = _details(loaded, result, elapsed_ms)

        if format == "table":
            _output_table_format(result, details, verbose, force_colors)
        elif format == "compact":
            _output_compact_format(result, details, verbose)
        elif format == "json":
            click.echo(json.dumps(_structured_output(result, details, verbose), indent=2))
        elif format == "yaml":
            click.echo(
                yaml.dump(
                    _structured_output(result, details, verbose),
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
            )

        sys.exit(EXIT_OK if result.is_valid else EXIT_FAULTS)

    except KeyboardInterrupt:
        _fail(format, "interrupted", "Check interrupted by user", EXIT_INTERNAL_ERROR)
    except Exception as e:
        if verbose and format != "json":
            click.echo("\nFull traceback:")
            click.echo(traceback.format_exc())
        _fail(format, "internal_error", f"Internal error: {e}", EXIT_INTERNAL_ERROR)


@click.command("check")
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=False),
)
@click.option(
    "--strict",
    is_flag=True,
    help="⚡ **Enable strict mode** - warnings become errors",
)
@click.option(
    "--malformed",
    type=click.Choice(["ignore", "warn", "error"]),
    default=None,
    help="🧩 **Malformed definition policy** (default: warn)",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="🧵 **Worker threads** for evaluating type groups",
)
@click.option(
    "--format",
    type=click.Choice(["table", "compact", "json", "yaml"]),
    default="table",
    help="📋 **Output format** for check results",
    show_default=True,
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="🔍 **Show detailed information** - files, fragments, impacted coordinates",
)
@click.option(
    "--force-colors",
    is_flag=True,
    help="🎨 **Force colored output** - useful for testing rich formatting",
    hidden=True,  # Hide from main help but available for testing
)
def check_command(
    paths: tuple[str, ...],
    strict: bool,
    malformed: str | None,
    workers: int | None,
    format: str,
    verbose: bool,
    force_colors: bool,
) -> None:
    """🔍 **Check enum consistency across subgraph manifests**

    Loads every subgraph manifest given (files or directories) and verifies
    that each enum type agrees across all subgraphs that define it.

    **Examples:**

    ```bash
    fedcompose check subgraphs/              # Check every manifest in a directory
    fedcompose check a.yaml b.yaml           # Check specific manifests
    fedcompose check subgraphs/ --format json
    fedcompose check subgraphs/ --strict     # Malformed definitions fail the run
    ```

    **Exit Codes:**
    - `0`: Composition consistent ✅
    - `1`: Enum faults found ❌
    - `2`: Manifest missing, unreadable, invalid, or malformed 📁⚠️
    - `4`: Internal error 💥
    """
    _check_implementation(
        paths or ("subgraphs",), strict, malformed, workers, format, verbose, force_colors
    )
