"""CLI entrypoint for solcheck."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from solcheck import __version__
from solcheck.config import AppConfig, default_config_template, load_app_config
from solcheck.discovery import ProjectError
from solcheck.engine import scan
from solcheck.forge import ForgeError, run_forge_fmt
from solcheck.report import Report, render_human, render_json
from solcheck.rules import list_rule_info
from solcheck.specgen import build_specifications, render_specifications

app = typer.Typer(
    name="solcheck",
    no_args_is_help=True,
    help="Check Foundry-style Solidity projects against naming and layout conventions.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug details to stderr."),
    ] = False,
) -> None:
    """Root command callback."""
    _ = version
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


@app.command("check")
def check_command(
    root: Annotated[Path, typer.Option(help="Project root.")] = Path("."),
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
    workers: Annotated[
        int | None, typer.Option(min=1, help="Number of files checked concurrently.")
    ] = None,
    fmt_check: Annotated[
        bool,
        typer.Option("--fmt-check", help="Also fail when `forge fmt --check` reports changes."),
    ] = False,
) -> None:
    """Check the project for convention violations."""
    app_config = _load_config_or_raise(root, config_file)
    output_format = _format_or_raise(format or app_config.format)
    report = _scan_or_exit(root, app_config, workers=workers)

    if output_format == "json":
        typer.echo(render_json(report, project_root=str(root)))
    else:
        typer.echo(render_human(report))

    formatted = True
    if fmt_check:
        formatted = _forge_fmt_or_exit(root, check=True)

    if not report.passed or not formatted:
        raise typer.Exit(code=1)


@app.command("fmt")
def fmt_command(
    root: Annotated[Path, typer.Option(help="Project root.")] = Path("."),
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Format sources with `forge fmt`, then check conventions."""
    app_config = _load_config_or_raise(root, config_file)
    _forge_fmt_or_exit(root, check=False)
    report = _scan_or_exit(root, app_config, workers=None)
    typer.echo(render_human(report))
    if not report.passed:
        raise typer.Exit(code=1)


@app.command("spec")
def spec_command(
    root: Annotated[Path, typer.Option(help="Project root.")] = Path("."),
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Print contract specifications derived from test names."""
    app_config = _load_config_or_raise(root, config_file)
    try:
        specifications = build_specifications(
            root,
            layout=app_config.layout.to_layout(),
            exclude=app_config.exclude,
        )
    except ProjectError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    typer.echo(render_specifications(specifications))


@app.command("rules")
def rules_command(
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """List the convention rules."""
    output_format = _format_or_raise(format)
    rule_info = list_rule_info()

    if output_format == "json":
        payload = {
            "rules": [
                {
                    "rule_id": item.rule_id,
                    "name": item.name,
                    "description": item.description,
                    "roles": [str(role) for role in item.roles],
                }
                for item in rule_info
            ]
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Available rules:"]
    for item in rule_info:
        roles = ", ".join(str(role) for role in item.roles)
        lines.append(f"- {item.rule_id} [{roles}] - {item.description}")
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    root: Annotated[Path, typer.Option(help="Project root.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = _format_or_raise(format)
    app_config = _load_config_or_raise(root, config_file)
    payload = app_config.to_dict()

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    layout = payload["layout"]
    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- exclude: {payload['exclude']}",
        f"- workers: {payload['workers'] or 'auto'}",
        f"- layout.src: {layout['src']}",
        f"- layout.script: {layout['script']}",
        f"- layout.test: {layout['test']}",
        f"- layout.library_dirs: {layout['library_dirs']}",
        f"- layout.source: {layout['source'] or 'defaults'}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".solcheck.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter project config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


def main() -> None:
    """Console script entrypoint."""
    app()


def _load_config_or_raise(root: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(root, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _format_or_raise(value: str) -> str:
    output_format = value.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")
    return output_format


def _scan_or_exit(root: Path, app_config: AppConfig, *, workers: int | None) -> Report:
    try:
        return scan(
            root,
            layout=app_config.layout.to_layout(),
            exclude=app_config.exclude,
            workers=workers or app_config.workers,
        )
    except ProjectError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def _forge_fmt_or_exit(root: Path, *, check: bool) -> bool:
    try:
        result = run_forge_fmt(root, check=check)
    except ForgeError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if result.output:
        typer.echo(result.output, err=not result.ok)
    if not result.ok:
        typer.echo("Formatting check failed; run `forge fmt` to fix.", err=True)
    return result.ok
