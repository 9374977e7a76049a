"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import logging
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from release_ops_manager.changelog.commits import GitCommitLogReader
from release_ops_manager.changelog.generator import ChangelogGenerator
from release_ops_manager.changelog.models import ChangelogStatus
from release_ops_manager.configuration.env import Settings, get_settings
from release_ops_manager.configuration.reconcile import reconcile_release_version, validate_github_authentication_configuration
from release_ops_manager.exceptions import ReleaseOpsError
from release_ops_manager.github.adapter import GitHubKitAdapter
from release_ops_manager.projects.discovery import discover_organization_projects
from release_ops_manager.projects.registry import ProjectRegistry
from release_ops_manager.projects.versions import ReleaseType
from release_ops_manager.utils.github import strip_owner_from_repository
from release_ops_manager.utils.shell import SubprocessCommandRunner

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False)


@typer_app.callback()
def main(debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False) -> None:
    """Release management for the projects of a GitHub organization."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO))


async def populate_registry_from_github(registry: ProjectRegistry, settings: Settings) -> None:
    """Register the organization's npm projects using the configured GitHub credentials."""
    github_auth_type = await validate_github_authentication_configuration(
        github_pat_token=settings.GITHUB_PAT_TOKEN,
        github_app_id=settings.GITHUB_APP_ID,
        github_app_private_key_path=settings.GITHUB_APP_PRIVATE_KEY_PATH,
        github_app_installation_id=settings.GITHUB_APP_INSTALLATION_ID,
    )
    adapter = await GitHubKitAdapter.create(registry.org, github_auth_type, settings.github_credentials())
    await discover_organization_projects(adapter, registry, registry.org)


@typer_app.command(name="update-changelog")
def update_changelog_cli(
    project_dir: Annotated[Path, Argument(help="Path to the working copy of the project being released.")],
    release_version: Annotated[str | None, Option(envvar="RELEASE_VERSION", help="Version being released. May include prerelease ids.")] = None,
    release_type: Annotated[ReleaseType | None, Option(envvar="RELEASE_TYPE", help="Increment the current package.json version instead.")] = None,
    dependency_dir: Annotated[
        list[Path] | None,
        Option(help="Working copy of an organization dependency. Repeat for every dependency to include."),
    ] = None,
    project_name: Annotated[str | None, Option(help="Repository name (name or owner/name). Defaults to the directory name.")] = None,
    org: Annotated[str | None, Option(help="GitHub organization owning the projects. Defaults to GITHUB_ORG.")] = None,
    discover: Annotated[bool, Option(help="Look up the organization's projects on GitHub before resolving dependencies.")] = False,
    dry_run: Annotated[bool, Option(help="Print the changelog entry without writing it.")] = False,
) -> None:
    """Add an entry for the release to the project's CHANGELOG.md."""
    settings = get_settings()
    runner = SubprocessCommandRunner(stream_output=settings.DEBUG)
    registry = ProjectRegistry(runner, org=org or settings.GITHUB_ORG)

    if not project_dir.is_dir():
        typer.echo(f"Project directory not found: {project_dir.absolute()}", err=True)
        raise typer.Exit(1)

    try:
        if discover:
            asyncio.run(populate_registry_from_github(registry, settings))

        for directory in dependency_dir or []:
            registry.load_project(directory)

        name = strip_owner_from_repository(project_name) if project_name else None
        project = registry.load_project(project_dir, name=name)
        registry.resolve_dependencies(project)

        version = reconcile_release_version(project.version, release_version, release_type)
        typer.echo(f"Preparing changelog for {project.name} {version} (last release {project.last_tag})")

        generator = ChangelogGenerator(registry, GitCommitLogReader(registry, runner), changelog_file_name=settings.CHANGELOG_FILE_NAME)
        result = generator.update_change_log(project.name, version, dry_run=dry_run)
    except (ReleaseOpsError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    if result.status == ChangelogStatus.NO_CHANGES:
        typer.echo("Nothing has changed since the last release - changelog left untouched")
        return

    if result.status == ChangelogStatus.DRY_RUN:
        typer.echo(f"Dry run - the following entry would be added to {result.changelog_path}:")
        typer.echo("\n".join(result.lines))
        return

    typer.echo(f"Updated {result.changelog_path}")


@typer_app.command(name="discover-projects")
def discover_projects_cli(
    org: Annotated[str | None, Argument(help="GitHub organization. Defaults to GITHUB_ORG.")] = None,
) -> None:
    """List the organization's repositories that publish an npm package."""
    settings = get_settings()
    registry = ProjectRegistry(SubprocessCommandRunner(), org=org or settings.GITHUB_ORG)

    try:
        asyncio.run(populate_registry_from_github(registry, settings))
    except ReleaseOpsError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    for project in registry.projects:
        typer.echo(f"{project.name} -> {project.npm_name} ({project.repository_url})")


if __name__ == "__main__":
    typer_app()
