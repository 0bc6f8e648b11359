"""
CLI entry point: ties together loader → resolver → commands → reporter.

Usage:
  # Check that every action is pinned to the SHA of its version comment:
  python3 -m gha_pin verify

  # Pin actions to commit SHAs based on their tags / version comments:
  python3 -m gha_pin fix

  # Move one action (or all of them) to the latest release:
  python3 -m gha_pin upgrade actions/checkout
  python3 -m gha_pin upgrade --all

  # Refresh pins to the newest release matching the current version spec:
  python3 -m gha_pin update --all

Exit codes:
  0 - nothing to report
  1 - verify found issues, or an upgrade failed
  2 - error (bad arguments, unreadable files, etc.)
"""

import logging
import os
import sys

import click
import yaml

from gha_pin.commands import (
    all_usages,
    check_update_arguments,
    check_upgrade_arguments,
    drop_ignored,
    run_fix,
    run_update,
    run_upgrade,
    run_verify,
    save_changed,
)
from gha_pin.config import Config, load_config
from gha_pin.errors import GhaPinError, UsageError
from gha_pin.github import GitHubClient, token_from_env
from gha_pin.parser import load_workflow_files
from gha_pin.reporter import format_warnings, report_changes, report_console, report_json
from gha_pin.resolver import TagResolver

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load(ctx: click.Context) -> list:
    """Load workflow files for the current root, exiting when there is nothing to do."""
    root = ctx.obj["root"]
    config: Config = ctx.obj["config"]
    try:
        files = load_workflow_files(root, exclude=config.exclude)
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: failed to load workflow files: {e}", err=True)
        sys.exit(EXIT_ERROR)

    drop_ignored(files, config.ignore_repos)
    if not all_usages(files):
        click.echo("No workflow or composite action usages found.")
        sys.exit(EXIT_OK)
    return files


def _check_arguments(check, *args) -> None:
    try:
        check(*args)
    except UsageError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)


def _resolver(ctx: click.Context) -> TagResolver:
    client = ctx.obj.get("client")
    if client is None:
        client = GitHubClient(token=token_from_env(), api_url=ctx.obj["config"].api_url)
    return TagResolver(client)


def _save(files: list) -> int:
    try:
        return len(save_changed(files))
    except OSError as e:
        click.echo(f"Error: failed to write workflow file: {e}", err=True)
        sys.exit(EXIT_ERROR)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Repository root to scan.")
@click.option("--config", "config_path", default=None, help="Path to .gha-pin.yml config file.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, root: str, config_path: str):
    """Pin GitHub Actions to commit SHAs that match their version tags."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    root = os.path.abspath(root)
    ctx.obj["root"] = root
    try:
        ctx.obj["config"] = load_config(config_path=config_path, root=root)
    except (yaml.YAMLError, ValueError, OSError) as e:
        click.echo(f"Error: failed to load config: {e}", err=True)
        sys.exit(EXIT_ERROR)


@cli.command()
@click.option("--format", "output_format", type=click.Choice(["console", "json"]), default="console", help="Output format.")
@click.pass_context
def verify(ctx: click.Context, output_format: str):
    """Ensure actions use full commit SHAs that match their tagged versions.

    Exits with code 0 if every pin matches, 1 otherwise.
    """
    files = _load(ctx)
    issues = run_verify(_resolver(ctx), files)

    if output_format == "json":
        click.echo(report_json(issues))
    else:
        report_console(issues)

    sys.exit(EXIT_FINDINGS if issues else EXIT_OK)


@cli.command()
@click.pass_context
def fix(ctx: click.Context):
    """Pin actions to commit SHAs based on their tagged versions."""
    files = _load(ctx)
    changes = run_fix(_resolver(ctx), files)
    written = _save(files)

    if changes.warnings:
        click.echo(format_warnings(changes), err=True)
    report_changes(changes, written)
    sys.exit(EXIT_OK)


@cli.command()
@click.argument("repo", required=False)
@click.option("--all", "all_repos", is_flag=True, help="Upgrade every referenced action to its latest release tag.")
@click.option("--version", "version", default="", help="Upgrade to a specific release tag (only with a single repo argument).")
@click.pass_context
def upgrade(ctx: click.Context, repo: str, all_repos: bool, version: str):
    """Upgrade one action (owner/repo) or all actions to the latest release."""
    _check_arguments(check_upgrade_arguments, repo, version, all_repos)
    files = _load(ctx)
    try:
        changes = run_upgrade(_resolver(ctx), files, repo=repo, version=version, all_repos=all_repos)
    except UsageError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)
    except GhaPinError as e:
        logger.error("Upgrade failed: %s", e)
        click.echo(f"Error: failed to upgrade: {e}", err=True)
        sys.exit(EXIT_FINDINGS)

    written = _save(files)
    report_changes(changes, written)
    sys.exit(EXIT_OK)


@cli.command()
@click.argument("repo", required=False)
@click.option("--all", "all_repos", is_flag=True, help="Update every referenced action to match its existing version spec.")
@click.pass_context
def update(ctx: click.Context, repo: str, all_repos: bool):
    """Refresh pinned commits to the latest release that matches the current version spec."""
    _check_arguments(check_update_arguments, repo, all_repos)
    files = _load(ctx)
    try:
        changes = run_update(_resolver(ctx), files, repo=repo, all_repos=all_repos)
    except UsageError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    written = _save(files)
    if changes.warnings:
        click.echo(format_warnings(changes), err=True)
    report_changes(changes, written)
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    cli()
