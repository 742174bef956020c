#!/usr/bin/env python3
"""
sqlbatch – apply a SQL script statement by statement.

Connection settings come from ``sqlbatch.config.yml`` (or ``-c``) when it
exists, otherwise from the ``DB_DRIVER`` / ``DB_HOST`` / ``DB_PORT`` / ``DB_USER`` /
``DB_PASSWORD`` / ``DB_NAME`` environment variables (``.env`` is read too).
The script path comes from ``--file``, ``script:`` or ``FILE_NAME``.
"""
from __future__ import annotations

import logging
import pathlib
import sys

import click

from sqlbatch import __version__
from sqlbatch.config import ConfigError, Settings, load
from sqlbatch.driver import ConnectionFailure
from sqlbatch.log import init_logger
from sqlbatch.script.reader import ScriptError, iter_script
from sqlbatch.script.runner import ExecutionFailure, ScriptRunner


def _fail(msg: str) -> None:
    click.echo(msg, err=True)
    sys.exit(1)


def _load_settings(ctx, _param, value) -> Settings:
    try:
        return load(ctx.obj["config_path"], value)
    except ConfigError as exc:
        _fail(f"Config error: {exc}")


@click.group()
@click.option(
    "-c", "--config", "config_path", type=click.Path(), help="settings YAML"
)
@click.option("-v", "--verbose", is_flag=True, help="log every executed statement")
@click.pass_context
def main(ctx, config_path, verbose):
    ctx.obj = {
        "config_path": pathlib.Path(config_path) if config_path else None,
        "level": logging.DEBUG if verbose else logging.INFO,
    }


@main.command()
def version():
    click.echo(__version__)


@main.command()
@click.option("-e", "--env", "settings", callback=_load_settings, expose_value=True)
@click.option("-f", "--file", "script", type=click.Path(dir_okay=False))
@click.option("--log-file", type=click.Path(dir_okay=False))
@click.option("--dry-run", is_flag=True)
@click.pass_context
def run(ctx, settings, script, log_file, dry_run):
    settings = settings.with_overrides(script=script, log_file=log_file)
    init_logger(settings.log_file, ctx.obj["level"])

    try:
        result = ScriptRunner(settings).run(dry_run=dry_run)
        result.raise_for_failure()
    except (ConfigError, ConnectionFailure, ScriptError, ExecutionFailure) as exc:
        _fail(str(exc))

    click.echo(f"{'(DRY) ' if dry_run else ''}Executed {result.executed} statement(s).")


@main.command()
@click.option("-f", "--file", "script", required=True, type=click.Path(dir_okay=False))
@click.option("--encoding", default="utf-8", show_default=True)
def check(script, encoding):
    """Show the statements a script splits into, without a database."""
    count = 0
    try:
        for count, stmt in enumerate(iter_script(script, encoding), start=1):
            click.echo(f"-- #{count}")
            click.echo(stmt)
    except ScriptError as exc:
        _fail(str(exc))
    click.echo(f"{count} statement(s).")
