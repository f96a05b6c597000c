"""
Admin CLI for inspecting the webhook relay configuration.

Provides commands to validate the configuration, list the job table and
preview which jobs a push would trigger.
"""

import json
import sys
from pathlib import Path

import click

from hooks_common.config import (
    ConfigError,
    RelayConfig,
    get_default_config_path,
    load_config,
)
from hooks_common.models import PushEvent
from hooks_server.resolver import resolve_jobs

ROOT_FOLDER_LABEL = "(root)"


def get_config(config_path: Path | None) -> RelayConfig:
    """Load the configuration or exit with an error message."""
    path = config_path or get_default_config_path()
    try:
        return load_config(path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    envvar="JENKINS_HOOKS_CONFIG",
    help="Path to the TOML configuration",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None):
    """Jenkins Hooks Admin - Inspect the push-to-job configuration."""
    ctx.obj = config_path


@cli.command("check")
@click.pass_obj
def check(config_path: Path | None):
    """Validate the configuration file."""
    config = get_config(config_path)
    mapping = config.mapping

    click.echo("✓ Configuration valid")
    click.echo(f"  Jenkins:  {config.connection.base_url}")
    click.echo(f"  Folders:  {len(mapping.folders())}")
    click.echo(f"  Projects: {len(mapping)}")
    click.echo(f"  Jobs:     {mapping.job_count()}")
    if not config.connection.verify_tls:
        click.echo("  Warning:  TLS certificate verification is disabled")


@cli.command("list")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_mapping(config_path: Path | None, json_output: bool):
    """List every folder/project/branch and its jobs."""
    config = get_config(config_path)
    rows = list(config.mapping.entries())

    if json_output:
        data = [
            {"folder": folder, "project": project, "branch": branch, "jobs": list(jobs)}
            for folder, project, branch, jobs in rows
        ]
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"{'FOLDER':<20} {'PROJECT':<25} {'BRANCH':<25} JOBS")
    click.echo("-" * 90)
    for folder, project, branch, jobs in rows:
        label = folder if folder is not None else ROOT_FOLDER_LABEL
        click.echo(f"{label:<20} {project:<25} {branch:<25} {', '.join(jobs)}")


@cli.command("resolve")
@click.argument("repository")
@click.argument("ref")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_obj
def resolve(config_path: Path | None, repository: str, ref: str, json_output: bool):
    """Show which builds a push of REF to REPOSITORY would trigger.

    Nothing is sent to Jenkins.
    """
    config = get_config(config_path)
    event = PushEvent.from_ref(repository, ref)
    targets = resolve_jobs(event, config.mapping)
    urls = [
        config.connection.trigger_url(target.folder, target.job) for target in targets
    ]

    if json_output:
        data = {
            "repository": event.repository,
            "branch": event.branch,
            "jobs": [
                {"folder": target.folder, "job": target.job, "url": url}
                for target, url in zip(targets, urls)
            ],
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not targets:
        click.echo(f"No jobs for {event.repository}/{event.branch}")
        return

    click.echo(f"Push to {event.repository}/{event.branch} triggers:")
    for url in urls:
        click.echo(f"  GET {url}")


if __name__ == "__main__":
    cli()
