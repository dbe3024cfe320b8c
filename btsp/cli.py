"""btsp CLI: the command-line shell around the bootstrap compiler."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from btsp import __version__

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _print_status(line: str) -> None:
    """Print plain status text exactly as given (no markup, no wrapping)."""
    console.print(line, markup=False, highlight=False, soft_wrap=True)


@click.group()
@click.version_option(version=__version__)
def main():
    """btsp: bootstrap script compiler.

    Parses .btsp scripts (#import directives and a #start/#end program
    body) and writes a .btspdebug dump of the parsed representation.
    """


# ── Build ────────────────────────────────────────────────────────────


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("sources", nargs=-1, type=click.UNPROCESSED)
@click.option("--output", "-o", default=None, help="Output base name (default: main)")
@click.option("--output-dir", "-d", default=None, help="Directory for the .btspdebug file")
@click.option("--config", "-c", "config_path", default=None, help="Path to a btsp.yaml")
@click.option("--verbose", "-v", is_flag=True, help="Log each pipeline step")
def build(sources: tuple, output: str | None, output_dir: str | None, config_path: str | None, verbose: bool):
    """Compile SOURCE into a debug dump.

    Exactly one existing .btsp file must be given.
    """
    from btsp.compiler import Compiler
    from btsp.config import ConfigError, resolve_config
    from btsp.utils.file_scanner import check_build_target

    _configure_logging(verbose)

    try:
        config = resolve_config(config_path, output_dir=output_dir)
    except (ConfigError, OSError) as e:
        console.print(f"[red]Config error:[/] {escape(str(e))}")
        sys.exit(1)

    check = check_build_target(list(sources), suffix=config.source_suffix)
    if not check.passed:
        for line in check.report_lines():
            _print_status(line)
        sys.exit(1)

    result = Compiler(config=config).compile(check.path, output_name=output)
    if not result.ok:
        for line in result.status_lines():
            _print_status(line)
        sys.exit(1)


# ── Inspect ──────────────────────────────────────────────────────────


@main.command(name="inspect")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
def inspect_source(source: str):
    """Parse SOURCE and show its imports, entities and references.

    Nothing is written to disk.
    """
    from btsp.ir.parser import find_boundaries, parse_source

    try:
        with open(source, encoding="utf-8", newline="") as f:
            document = parse_source(f.read(), source=source)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Failed to read:[/] {escape(str(e))}")
        sys.exit(1)

    console.print(f"\n[bold blue]btsp[/] {escape(source)}: {document.summary()}\n")

    if document.imports:
        console.print("[bold]Imports:[/] " + escape(", ".join(document.imports)))
    else:
        console.print("[yellow]No imports.[/]")

    table = Table(title=f"Entities ({document.entity_count})")
    table.add_column("#", style="dim", width=4)
    table.add_column("Command", style="cyan")
    table.add_column("Form")
    table.add_column("Args")

    for i, entity in enumerate(document.entities):
        table.add_row(str(i + 1), escape(entity.command), entity.form.value, escape(", ".join(entity.args)))

    console.print(table)

    if not find_boundaries(document.raw).complete:
        console.print("[yellow]No complete #start/#end block found.[/]")

    console.print("\n[bold]References:[/]")
    for ref in document.references:
        _print_status(f"  {ref}")


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.argument("directory", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--config", "-c", "config_path", default=None, help="Path to a btsp.yaml")
def list_sources(directory: str, config_path: str | None):
    """List the .btsp sources under DIRECTORY."""
    from pathlib import Path

    from btsp.config import ConfigError, resolve_config
    from btsp.ir.parser import parse_source
    from btsp.utils.file_scanner import scan_sources

    try:
        config = resolve_config(config_path, start=directory)
    except (ConfigError, OSError) as e:
        console.print(f"[red]Config error:[/] {escape(str(e))}")
        sys.exit(1)

    root = Path(directory)
    sources = scan_sources(root, suffix=config.source_suffix)

    if not sources:
        console.print(f"[yellow]No {config.source_suffix} sources found.[/]")
        return

    table = Table(title=f"Sources ({len(sources)} found)")
    table.add_column("Path", style="cyan")
    table.add_column("Imports", justify="right")
    table.add_column("Entities", justify="right")

    for path in sources:
        try:
            with open(path, encoding=config.encoding, newline="") as f:
                document = parse_source(f.read(), source=str(path))
        except (OSError, UnicodeDecodeError):
            table.add_row(escape(str(path.relative_to(root))), "[red]?[/]", "[red]?[/]")
            continue
        table.add_row(
            escape(str(path.relative_to(root))),
            str(len(document.imports)),
            str(document.entity_count),
        )

    console.print(table)


if __name__ == "__main__":
    main()
