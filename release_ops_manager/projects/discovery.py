"""Populates a project registry from the repositories of a GitHub organization."""

import json

import structlog
from githubkit.exception import RequestFailed

from release_ops_manager.github.abc import GitHubClientBase
from release_ops_manager.projects.models import Project
from release_ops_manager.projects.registry import ProjectRegistry
from release_ops_manager.utils.constants import PACKAGE_MANIFEST

logger = structlog.get_logger(__name__)


async def discover_organization_projects(adapter: GitHubClientBase, registry: ProjectRegistry, org: str) -> list[Project]:
    """Register every public repository of the organization that publishes an npm package.

    Repositories without a readable package.json are skipped. Repositories that
    are already registered keep their entry but pick up the npm name and URL
    found on GitHub.

    Returns:
        The projects that were registered or updated
    """
    repositories = await adapter.list_organization_repositories(org, type="public")
    discovered: list[Project] = []

    for repository in repositories:
        try:
            content = await adapter.get_file_content(PACKAGE_MANIFEST, repo_name=repository.name)
            manifest = json.loads(content)
        except (FileNotFoundError, RequestFailed, ValueError) as e:
            logger.debug("Skipping repository without a usable manifest", repo=repository.name, error=str(e))
            continue

        npm_name = manifest.get("name") if isinstance(manifest, dict) else None
        if not npm_name:
            logger.debug("Skipping repository whose manifest has no package name", repo=repository.name)
            continue

        project = registry.get_project(repository.name)
        if project is None:
            project = registry.register(Project(name=repository.name, npm_name=npm_name, repository_url=repository.html_url))
        else:
            project.npm_name = npm_name
            project.repository_url = repository.html_url
        discovered.append(project)

    logger.info("Discovered organization projects", org=org, repositories=len(repositories), projects=len(discovered))
    return discovered
