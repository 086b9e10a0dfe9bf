"""
docat — CLI entrypoint.

Usage:
    docat --help
    docat init myapp
    docat up api worker
    docat --app myapp status
"""

from __future__ import annotations

import functools
import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from docat import __version__
from docat.adapters.registry import Drivers
from docat.core.context import get_working_dir, set_working_dir
from docat.core.errors import DocatError
from docat.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)
from docat.core.persistence.cache_store import CacheStore, FileCacheStore
from docat.core.use_cases.parameters import Parameters, get_parameters, get_project


def _fatal_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report DocatError in red and exit 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DocatError as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(1)

    return wrapper


def _selection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """``--app`` / ``--all`` accepted after the subcommand too."""
    func = click.option("--all", "all_", is_flag=True, default=None, help="Run on all projects.")(func)
    func = click.option("--app", "-a", "app", default=None, help="Run commands on a specific app.")(func)
    return func


def _store(ctx: click.Context) -> CacheStore:
    return ctx.obj["store"]


def _drivers(ctx: click.Context) -> Drivers:
    return ctx.obj["drivers"]


def _parameters(
    ctx: click.Context,
    projects: tuple[str, ...],
    app: str | None,
    all_: bool | None,
    include_install: bool,
) -> Parameters:
    return get_parameters(
        app or ctx.obj.get("app"),
        list(projects),
        all_=bool(all_ or ctx.obj.get("all")),
        include_install=include_install,
        store=_store(ctx),
        cwd=get_working_dir(),
    )


def _report(ctx: click.Context, verb: str, dir_names: list[str], params: Parameters) -> None:
    if ctx.obj.get("quiet"):
        return
    if not dir_names:
        click.secho(f"Nothing to {verb}.", fg="yellow")
        return
    for dir_name in dir_names:
        project = params.projects.get(dir_name) or params.app.projects[dir_name]
        click.secho(f"   ✓ {verb} ", fg="green", nl=False)
        click.echo(project.display_name)


@click.group()
@click.version_option(version=__version__, prog_name="docat")
@click.option("--app", "-a", "app", default=None, help="Run commands on a specific app.")
@click.option("--all", "all_", is_flag=True, help="Run on all projects.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    app: str | None,
    all_: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Run commands on multiple docker compose projects at the same time."""
    ctx.ensure_object(dict)
    ctx.obj["app"] = app
    ctx.obj["all"] = all_
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj.setdefault("store", FileCacheStore())
    ctx.obj.setdefault("drivers", Drivers.default())

    set_working_dir(ctx.obj.get("cwd") or Path.cwd())

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )
    if verbose or debug:
        _drivers(ctx).warn_unavailable()


@cli.command()
@click.argument("app_name")
@click.option("--yes", "-y", is_flag=True, help="Write files without asking.")
@click.pass_context
@_fatal_errors
def init(ctx: click.Context, app_name: str, yes: bool) -> None:
    """Generate a new config file for the current project."""
    from docat.core.use_cases.init import init_project

    result = init_project(
        app_name,
        store=_store(ctx),
        vcs=_drivers(ctx).vcs,
        directory=get_working_dir(),
        confirm=(lambda _prompt: True) if yes else (lambda prompt: click.confirm(prompt)),
    )

    if result.status == "exists":
        click.echo("Config file found, skipping.")
    elif result.status == "aborted":
        click.secho("Aborted", fg="yellow")
    else:
        if not ctx.obj.get("quiet"):
            click.echo(result.project_yaml)
        click.secho(f"✅ Config file generated: {result.config_path}", fg="green")


@cli.command()
@click.argument("projects", nargs=-1)
@_selection_options
@click.pass_context
@_fatal_errors
def install(ctx: click.Context, projects: tuple[str, ...], app: str | None, all_: bool | None) -> None:
    """Fetch the projects if they don't exist."""
    from docat.core.services.lifecycle import install as install_projects

    params = _parameters(ctx, projects, app, all_, include_install=True)
    installed = install_projects(params.app, params.projects, _drivers(ctx))
    _report(ctx, "installed", installed, params)


@cli.command("run-install")
@click.argument("projects", nargs=-1, required=True)
@_selection_options
@click.pass_context
@_fatal_errors
def run_install(ctx: click.Context, projects: tuple[str, ...], app: str | None, all_: bool | None) -> None:
    """Re-run install steps on existing projects."""
    from docat.core.services.lifecycle import run_install as run_install_steps

    params = _parameters(ctx, projects, app, all_, include_install=False)
    done = run_install_steps(params.app, params.projects, _drivers(ctx))
    _report(ctx, "ran install for", done, params)


@cli.command()
@click.argument("projects", nargs=-1)
@_selection_options
@click.pass_context
@_fatal_errors
def up(ctx: click.Context, projects: tuple[str, ...], app: str | None, all_: bool | None) -> None:
    """Bring up projects."""
    from docat.core.services.lifecycle import up as bring_up

    params = _parameters(ctx, projects, app, all_, include_install=True)
    started = bring_up(params.app, params.projects, _drivers(ctx))
    _report(ctx, "up", started, params)


@cli.command()
@click.argument("projects", nargs=-1)
@_selection_options
@click.pass_context
@_fatal_errors
def down(ctx: click.Context, projects: tuple[str, ...], app: str | None, all_: bool | None) -> None:
    """Bring down projects."""
    from docat.core.services.lifecycle import down as bring_down

    params = _parameters(ctx, projects, app, all_, include_install=False)
    stopped = bring_down(params.app, params.projects, _drivers(ctx))
    _report(ctx, "down", stopped, params)


@cli.command()
@click.argument("projects", nargs=-1)
@_selection_options
@click.pass_context
@_fatal_errors
def restart(ctx: click.Context, projects: tuple[str, ...], app: str | None, all_: bool | None) -> None:
    """Restart projects."""
    from docat.core.services.lifecycle import restart as restart_projects

    params = _parameters(ctx, projects, app, all_, include_install=True)
    started = restart_projects(params.app, params.projects, _drivers(ctx))
    _report(ctx, "restarted", started, params)


@cli.command()
@click.argument("projects", nargs=-1)
@_selection_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@_fatal_errors
def status(
    ctx: click.Context,
    projects: tuple[str, ...],
    app: str | None,
    all_: bool | None,
    as_json: bool,
) -> None:
    """Get status for projects."""
    from docat.core.use_cases.status import get_status

    params = _parameters(ctx, projects, app, all_ or not projects, include_install=False)
    result = get_status(params, _drivers(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    for project in result.projects:
        click.echo()
        click.secho(project.name, fg="cyan", bold=True)
        if not project.services:
            click.secho("  (no services declared)", fg="yellow")
        for service in project.services:
            color = "green" if service.is_up else "red"
            click.secho(f"  {service.status.value:<4}", fg=color, nl=False)
            click.echo(f"  {service.name}")

    if not ctx.obj.get("quiet"):
        click.echo()
        click.echo(f"{result.up_count}/{result.service_count} services up")


def _single_project_command(name: str, help_text: str, operation: str) -> None:
    @cli.command(
        name,
        help=help_text,
        context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
    )
    @click.option("--project", "-p", "project_name", default=None, help="Project to execute the command on.")
    @click.option("--app", "-a", "app", default=None, help="Run commands on a specific app.")
    @click.argument("service")
    @click.argument("command", nargs=-1, type=click.UNPROCESSED)
    @click.pass_context
    @_fatal_errors
    def command(
        ctx: click.Context,
        project_name: str | None,
        app: str | None,
        service: str,
        command: tuple[str, ...],
    ) -> None:
        from docat.core.services import lifecycle

        project = get_project(
            app or ctx.obj.get("app"),
            project_name,
            store=_store(ctx),
            cwd=get_working_dir(),
        )
        getattr(lifecycle, operation)(service, list(command), project, _drivers(ctx))


_single_project_command(
    "run",
    "Start a new container without dependencies and run a command.",
    "run",
)
_single_project_command(
    "exec",
    "Run a command on a running container.",
    "exec_",
)


if __name__ == "__main__":
    cli()
