"""CLI entry point for skilltest."""
from __future__ import annotations

import asyncio
import sys
from typing import List, Optional

import click

from skilltest import __version__
from skilltest.config import SkilltestConfig, load_config
from skilltest.core.models import TestInfo
from skilltest.discovery import (
    expected_test_file,
    find_all_tests,
    find_test,
    load_catalog,
    resolve_tests_dir,
)
from skilltest.execution import run_suite
from skilltest.log_config import configure_logging
from skilltest.reporting import write_report

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

EXIT_NOT_FOUND = 2

NO_TESTS_MESSAGE = "No tests found. Create <skill>.tests.py files in the tests/ folder to add tests."


class CliState:
    """Resolved configuration shared by subcommands."""

    def __init__(self, config: SkilltestConfig, verbose: bool) -> None:
        self.config = config
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"skilltest {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable debug logging and capture test stderr.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a skilltest.yaml file.",
)
@click.option(
    "--project-root",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Project directory holding the skills and tests folders.",
)
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the skilltest version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[str], project_root: str) -> None:
    """Discover and run skill tests."""

    try:
        config = load_config(config_path, project_root)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    verbose = verbose or config.verbose
    configure_logging(level="WARNING", verbose=verbose, force=True)
    ctx.obj = CliState(config=config, verbose=verbose)


@cli.command(name="list")
@click.pass_obj
def list_tests(state: CliState) -> None:
    """List skills that have a test module."""

    tests = _discover_all(state.config)
    if not tests:
        click.echo(NO_TESTS_MESSAGE)
        return
    for info in tests:
        click.echo(f"{info.short_name} [{info.unit_kind}] {info.test_file_path}")
    click.echo(f"Found {len(tests)} test(s). Use 'skilltest run <skill>' or 'skilltest run all' to run.")


@cli.command()
@click.argument("target", required=False)
@click.option("--timeout", "timeout_ms", type=click.IntRange(min=1), help="Per-test timeout in milliseconds.")
@click.option("--parallel/--sequential", default=None, help="Run tests concurrently (config default otherwise).")
@click.option("--in-process", is_flag=True, help="Import tests into this process instead of spawning children.")
@click.option("--report-path", type=click.Path(dir_okay=False), help="Write the JSON report to this path.")
@click.pass_obj
def run(
    state: CliState,
    target: Optional[str],
    timeout_ms: Optional[int],
    parallel: Optional[bool],
    in_process: bool,
    report_path: Optional[str],
) -> None:
    """Run the tests for TARGET, or every test when TARGET is omitted or 'all'."""

    config = state.config
    if not target or target.lower() == "all":
        tests = _discover_all(config)
        if not tests:
            click.echo(NO_TESTS_MESSAGE, err=True)
            raise click.exceptions.Exit(EXIT_NOT_FOUND)
    else:
        tests = [_discover_one(config, target)]

    suite = asyncio.run(
        run_suite(
            tests,
            timeout_ms=timeout_ms or config.timeout_ms,
            verbose=state.verbose,
            parallel=config.parallel if parallel is None else parallel,
            in_process=in_process,
            interpreter=config.interpreter,
        )
    )
    try:
        text = write_report(suite, report_path)
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc
    if report_path:
        click.echo(f"JSON report written to {report_path}")
    else:
        click.echo(text)
    raise click.exceptions.Exit(0 if suite.success else 1)


def _discover_all(config: SkilltestConfig) -> List[TestInfo]:
    catalog = load_catalog(config.skills_path)
    return find_all_tests(catalog, resolve_tests_dir(config.project_root, config.tests_dir))


def _discover_one(config: SkilltestConfig, name: str) -> TestInfo:
    catalog = load_catalog(config.skills_path)
    info = find_test(catalog, name, resolve_tests_dir(config.project_root, config.tests_dir))
    if info is not None:
        return info
    if name in catalog:
        expected = expected_test_file(catalog[name].short_name, config.tests_path)
        click.echo(f'Skill "{name}" found but has no test file.\n\nCreate one at:\n  {expected}', err=True)
    else:
        click.echo(f"Skill \"{name}\" not found. Use 'skilltest list' to see available tests.", err=True)
    raise click.exceptions.Exit(EXIT_NOT_FOUND)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="skilltest", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
