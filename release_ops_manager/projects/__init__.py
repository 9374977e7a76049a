"""Project registry and version handling for the organization's repositories."""

from .models import Commit, DependencyEdge, Project
from .registry import ProjectRegistry

__all__ = [
    "Commit",
    "DependencyEdge",
    "Project",
    "ProjectRegistry",
]
