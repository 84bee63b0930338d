"""chmdocset CLI entry point.

    chmdocset [--out PATH] [--platform LABEL] SOURCE

Exit codes: 0 success, 1 fatal build error, 2 usage error.
"""

from __future__ import annotations

import importlib.metadata
import warnings
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from chmdocset.cli.errors import (
    err_bundle_write,
    err_config,
    err_extraction_failed,
    err_extractor_missing,
    err_index_failed,
    err_source_not_found,
    warn_skipped_document,
)
from chmdocset.config import ConfigError, load_config
from chmdocset.errors import (
    BundleWriteError,
    ExtractionError,
    ExtractorNotFoundError,
    IndexStoreError,
)
from chmdocset.extract import ChmExtractor
from chmdocset.pipeline import BuildOptions, BuildResult, build_docset

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def _package_version() -> str:
    try:
        return importlib.metadata.version("chmdocset")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"chmdocset {_package_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="chmdocset",
    help="Convert a CHM help file into a searchable Dash/Zeal docset.",
    add_completion=False,
)


@app.command()
def convert_cmd(
    source: Annotated[
        Path,
        typer.Argument(help="CHM file to convert.", show_default=False),
    ],
    out: Annotated[
        Path,
        typer.Option(
            "--out",
            "-o",
            help="Output directory, or the bundle path itself if it ends in .docset.",
        ),
    ] = Path("."),
    platform: Annotated[
        str | None,
        typer.Option(
            "--platform",
            "-p",
            help="DocSet platform family (default: bundle.platform from config, else 'unknown').",
            show_default=False,
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Per-project config file (default: ./chmdocset.yaml)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Report each stage and a summary."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Extract SOURCE into a .docset bundle and index its page titles."""
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            cfg = load_config(config_path=config_path)
    except ConfigError as exc:
        err_console.print(err_config(str(exc)))
        raise typer.Exit(1)
    for w in caught:
        err_console.print(f"[yellow]Warning:[/] {escape(str(w.message))}")

    if not source.is_file():
        err_console.print(err_source_not_found(str(source)))
        raise typer.Exit(1)

    options = BuildOptions(source=source, out=out, platform=platform, config=cfg)
    extractor = ChmExtractor(program=cfg.extractor.program)

    def _on_stage(message: str) -> None:
        if verbose:
            console.print(f"[bold]→[/] {escape(message)}")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TextColumn("[dim]{task.completed} pages[/dim]"),
            transient=True,
            console=console,
            disable=not verbose,
        ) as prog:
            task = prog.add_task("Building docset…", total=None)

            def _on_page(path: Path) -> None:
                prog.update(task, advance=1, description=f"Scanning {escape(path.name)}")

            result = build_docset(
                options, extractor, on_stage=_on_stage, on_progress=_on_page
            )
    except ExtractorNotFoundError as exc:
        err_console.print(err_extractor_missing(exc.program))
        raise typer.Exit(1)
    except ExtractionError as exc:
        err_console.print(err_extraction_failed(exc.program, exc.returncode))
        raise typer.Exit(1)
    except BundleWriteError as exc:
        err_console.print(err_bundle_write(str(exc)))
        raise typer.Exit(1)
    except IndexStoreError as exc:
        err_console.print(err_index_failed(str(exc)))
        raise typer.Exit(1)

    for skipped in result.report.skipped:
        err_console.print(warn_skipped_document(skipped.path, skipped.reason))

    if verbose:
        _print_summary(result)


def _print_summary(result: BuildResult) -> None:
    report = result.report
    console.print(
        f"  [green]✓[/] {report.indexed} pages indexed "
        f"[dim]({report.scanned} scanned · {report.untitled} untitled · "
        f"{len(report.skipped)} skipped)[/]"
    )
    console.print(f"  [green]✓[/] Docset written to [bold]{escape(str(result.layout.docset_path))}[/]")


if __name__ == "__main__":
    app()
