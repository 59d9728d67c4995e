"""CLI interface for templating - generated sources from templates."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

import click

from .config import TemplatingSettings, load_project_settings
from .errors import TemplatingError
from .materialize import MaterializationStatus, SourceMaterializer, SourceScope
from .templates import TokenRenderer, resolve_delimiters
from .utils import console


def _apply_overrides(
    settings: TemplatingSettings,
    delimiters: Tuple[str, ...],
    use_default_delimiters: Optional[bool],
    escape_string: Optional[str],
    encoding: Optional[str],
    overwrite: Optional[bool],
) -> TemplatingSettings:
    if delimiters:
        settings.delimiters = list(delimiters)
    if use_default_delimiters is not None:
        settings.use_default_delimiters = use_default_delimiters
    if escape_string is not None:
        settings.escape_string = escape_string
    if encoding is not None:
        settings.encoding = encoding
    if overwrite is not None:
        settings.overwrite = overwrite
    return settings


@contextmanager
def _quiet_console(enabled: bool) -> Iterator[None]:
    """Silence the shared console so stdout carries only the JSON document."""
    previous = console.quiet
    console.quiet = previous or enabled
    try:
        yield
    finally:
        console.quiet = previous


def _filter_options(func):
    options = [
        click.option(
            "--project-dir",
            type=click.Path(file_okay=False, path_type=Path),
            default=".",
            show_default=True,
            help="Project base directory",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(dir_okay=False, exists=True, path_type=Path),
            default=None,
            help="Settings file (default: nearest templating.yml)",
        ),
        click.option(
            "--delimiter",
            "delimiters",
            multiple=True,
            help="Delimiter as 'begin*end' or a single token. Repeatable.",
        ),
        click.option(
            "--use-default-delimiters/--no-default-delimiters",
            default=None,
            help="Keep the default ${*} and @ delimiters next to custom ones",
        ),
        click.option("--escape-string", default=None, help="Prefix that disables interpolation"),
        click.option("--encoding", default=None, help="Encoding of the template sources"),
        click.option("--overwrite/--no-overwrite", default=None),
        click.option(
            "--format", "fmt", type=click.Choice(["lines", "json"]), default="lines"
        ),
        click.option("--verbose", is_flag=True, help="Print debug output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run(
    scope: SourceScope,
    project_dir: Path,
    config_path: Optional[Path],
    fmt: str,
    verbose: bool,
    **overrides,
) -> None:
    try:
        settings = _apply_overrides(
            load_project_settings(project_dir, config_path), **overrides
        )
        project = settings.create_project(project_dir)
        renderer = TokenRenderer(properties=project.interpolation_context())
        with _quiet_console(fmt == "json"):
            result = SourceMaterializer(
                settings, project, renderer, scope=scope, verbose=verbose
            ).execute()
    except TemplatingError as e:
        console.print(f"❌ {e}", style="bold red")
        raise SystemExit(1)

    if result.status is not MaterializationStatus.COMPLETED:
        return
    roots = (
        project.compile_source_roots
        if scope is SourceScope.MAIN
        else project.test_compile_source_roots
    )
    if fmt == "json":
        print(
            json.dumps(
                {"copied": result.copied, "source_roots": [str(r) for r in roots]}
            )
        )
    else:
        for root in roots:
            print(root)


@click.group()
def cli() -> None:
    """Generate source roots from template directories."""
    pass


@cli.command("filter-sources")
@_filter_options
def filter_sources_cmd(
    project_dir: Path, config_path: Optional[Path], fmt: str, verbose: bool, **overrides
) -> None:
    """
    Render the main template sources and add them as a compile source root.

    Templates under `source_directory` are rendered into a staging directory,
    only changed files are copied to `output_directory`, and the staging
    directory is removed.
    """
    _run(SourceScope.MAIN, project_dir, config_path, fmt, verbose, **overrides)


@cli.command("filter-test-sources")
@_filter_options
def filter_test_sources_cmd(
    project_dir: Path, config_path: Optional[Path], fmt: str, verbose: bool, **overrides
) -> None:
    """Render the test template sources and add them as a test source root."""
    _run(SourceScope.TEST, project_dir, config_path, fmt, verbose, **overrides)


@cli.command("delimiters")
@click.option(
    "--project-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=None,
)
def delimiters_cmd(project_dir: Path, config_path: Optional[Path]) -> None:
    """Print the effective delimiters, one 'begin*end' per line."""
    try:
        settings = load_project_settings(project_dir, config_path)
        delims = resolve_delimiters(
            settings.use_default_delimiters,
            settings.delimiters,
            TokenRenderer.default_delimiters,
        )
    except TemplatingError as e:
        console.print(f"❌ {e}", style="bold red")
        raise SystemExit(1)
    for delim in delims:
        print(delim)


if __name__ == "__main__":
    cli()
