"""Contains exceptions raised by the project registry."""

from release_ops_manager.exceptions import ReleaseOpsError


class UnknownProjectError(ReleaseOpsError):
    """Raised when a project name is not present in the registry."""

    def __init__(self, name: str) -> None:
        """Initializes the exception with the name that could not be found."""
        super().__init__(f"Unknown project: {name}")
        self.name = name


class ProjectNotLoadedError(ReleaseOpsError):
    """Raised when a git operation is attempted on a project without a working copy."""

    def __init__(self, name: str) -> None:
        """Initializes the exception with the name of the project lacking a directory."""
        super().__init__(f"Project {name} has no local working copy")
        self.name = name


class ManifestError(ReleaseOpsError):
    """Raised when a project's package.json is missing or cannot be parsed."""

    pass


class InvalidVersionError(ReleaseOpsError):
    """Raised when a string that must be a semantic version is not one."""

    def __init__(self, value: str) -> None:
        """Initializes the exception with the offending value."""
        super().__init__(f"Not a valid semantic version: {value!r}")
        self.value = value


class InvalidDependencyVersionError(ReleaseOpsError):
    """Raised when a changed dependency resolves to something other than a released version."""

    def __init__(self, project_name: str, dependency_name: str, value: str) -> None:
        """Initializes the exception with the project, the dependency and the version it resolved to."""
        super().__init__(
            f"Dependency {dependency_name} of {project_name} resolved to {value!r}, which is not a released version. "
            "Install the dependency or pin a semantic version."
        )
        self.project_name = project_name
        self.dependency_name = dependency_name
        self.value = value
