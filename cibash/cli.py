"""CLI — click-based command-line interface."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from cibash.adapters.registry import detect, extract_regions, list_adapters
from cibash.config import CibashConfig, load_config
from cibash.highlight import STYLES, highlight, language_for_path
from cibash.logging import configure_logging
from cibash.models import Dialect, HighlightResult
from cibash.report import render_json, render_summary, render_text
from cibash.scanner.mapper import map_token
from cibash.scanner.tokenizer import tokenize
from cibash.watch import watch_file


def _read(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        click.echo(f"Error: cannot read {path}: {exc}", err=True)
        sys.exit(1)


def _run(path: str, text: str, cfg: CibashConfig, language: str | None) -> HighlightResult:
    return highlight(
        text,
        path=path,
        language=language or language_for_path(path),
        languages=cfg.highlight.languages,
        ignore_types=cfg.highlight.ignored_token_types,
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Increase log verbosity for troubleshooting.")
@click.option("--log-file", "log_file", default=None, type=click.Path(),
              help="Also write log lines to this file.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True),
              help="Explicit config file (skips project/user lookup).")
@click.pass_context
def main(ctx: click.Context, verbose: bool, log_file: str | None, config_path: str | None) -> None:
    """cibash — highlight shell embedded in GitHub Actions and GitLab CI YAML."""
    configure_logging(verbose=verbose, log_file=Path(log_file) if log_file else None)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def _config(ctx: click.Context, path: str) -> CibashConfig:
    return load_config(scan_path=path, config_path=ctx.obj.get("config_path"))


# ───────────────────────────────────────────────────────────────────
# detect / regions / tokens
# ───────────────────────────────────────────────────────────────────

@main.command("detect")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "fmt", default="text",
              type=click.Choice(["text", "json"], case_sensitive=False),
              help="Output format.")
def detect_cmd(path: str, fmt: str) -> None:
    """Detect which CI dialect a YAML file is written in."""
    result = detect(_read(path))
    if fmt == "json":
        click.echo(json.dumps({
            "path": path,
            "dialect": str(result.dialect),
            "confidence": round(result.confidence, 4),
        }, indent=2))
        return
    click.echo(f"{path}: {result.dialect} (confidence: {result.confidence:.2f})")


@main.command("regions")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--dialect", "dialect_opt", default=None,
              type=click.Choice([d.value for d in Dialect if d is not Dialect.UNKNOWN]),
              help="Skip detection and extract as this dialect.")
def regions_cmd(path: str, dialect_opt: str | None) -> None:
    """List the shell regions of a CI file."""
    text = _read(path)
    dialect = Dialect.from_str(dialect_opt) if dialect_opt else detect(text).dialect
    regions = extract_regions(dialect, text)
    click.echo(f"{path}: {dialect}, {len(regions)} region(s)")
    for i, region in enumerate(regions, 1):
        first = region.line_offsets[0] if region.line_offsets else "-"
        click.echo(f"── region {i} @ {first} ──")
        click.echo(region.content.rstrip("\n"))


@main.command("tokens")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def tokens_cmd(path: str) -> None:
    """Print every token with its mapped document range."""
    text = _read(path)
    dialect = detect(text).dialect
    for i, region in enumerate(extract_regions(dialect, text), 1):
        click.echo(f"── region {i} ──")
        for token in tokenize(region.content):
            mapped = map_token(token.offset, token.length, region.content, region.line_offsets)
            where = f"{mapped.start}-{mapped.end}" if mapped else "unmapped"
            click.echo(f"  {token.type.name:<18} {where:<12} {token.value!r}")


# ───────────────────────────────────────────────────────────────────
# highlight / watch
# ───────────────────────────────────────────────────────────────────

@main.command("highlight")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--language", default=None,
              help="Document language id (default: inferred from the path).")
@click.option("--no-color", "no_color", is_flag=True, default=False,
              help="Print the document without ANSI colors.")
@click.option("--format", "fmt", default=None,
              type=click.Choice(["text", "json"], case_sensitive=False),
              help="Output format (default: from config, else text).")
@click.option("--json-out", "json_out", default=None, type=click.Path(),
              help="Write JSON report to file.")
@click.pass_context
def highlight_cmd(
    ctx: click.Context,
    path: str,
    language: str | None,
    no_color: bool,
    fmt: str | None,
    json_out: str | None,
) -> None:
    """Paint the shell inside a CI file."""
    cfg = _config(ctx, path)
    text = _read(path)
    result = _run(path, text, cfg, language)

    effective_fmt = (fmt or cfg.highlight.format).lower()
    if effective_fmt == "json":
        click.echo(render_json(result))
    else:
        color = cfg.highlight.color and not no_color
        click.echo(render_text(result, text, color=color), nl=False)
        click.echo(render_summary(result), err=True)

    if json_out:
        Path(json_out).write_text(render_json(result))
        click.echo(f"JSON report written to {json_out}", err=True)


@main.command("watch")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--language", default=None,
              help="Document language id (default: inferred from the path).")
@click.option("--debounce-ms", "debounce_ms", default=None, type=int,
              help="Quiet period before re-analysis (default 100).")
@click.pass_context
def watch_cmd(ctx: click.Context, path: str, language: str | None, debounce_ms: int | None) -> None:
    """Re-analyse a CI file whenever it changes."""
    cfg = _config(ctx, path)

    # Runs on the debouncer's timer thread, where sys.exit() would be lost.
    def _analyse() -> None:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            click.echo(f"Error: cannot read {path}: {exc}", err=True)
            return
        result = _run(path, text, cfg, language)
        click.echo(render_summary(result))
        click.echo("")

    try:
        watch_file(
            path,
            _analyse,
            debounce_ms=debounce_ms if debounce_ms is not None else cfg.watch.debounce_ms,
            poll_interval_ms=cfg.watch.poll_interval_ms,
        )
    except KeyboardInterrupt:
        click.echo("Stopped.", err=True)


# ───────────────────────────────────────────────────────────────────
# dialects / styles
# ───────────────────────────────────────────────────────────────────

@main.command("dialects")
def dialects_cmd() -> None:
    """List supported CI dialects in detection order."""
    click.echo(f"{'Dialect':<16} {'Bash keys'}")
    click.echo("-" * 48)
    for adapter in list_adapters():
        click.echo(f"{adapter.dialect.value:<16} {', '.join(sorted(adapter.bash_keys))}")


@main.command("styles")
def styles_cmd() -> None:
    """Show the color used for each token type."""
    for kind, hex_color in STYLES.items():
        click.echo(f"{kind.name:<18} {hex_color}")
