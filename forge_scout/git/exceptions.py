"""Exceptions raised while inspecting a local Git repository.

Every exception carries an optional hint telling the user how to fix the
problem; ``str()`` renders the message followed by the hint.
"""

from forge_scout.exceptions import GitOperationError


class GitDiscoveryError(GitOperationError):
    """Base class for local repository discovery errors.

    Attributes:
        message: Human-readable error description
        hint: Optional suggestion for resolving the error
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


class NotGitRepositoryError(GitDiscoveryError):
    """The path is not inside a Git working tree."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Not a Git repository: {path}",
            hint="Run this command inside a clone, or create one with: git init",
        )


class NoRemotesError(GitDiscoveryError):
    """The repository has no remotes configured."""

    def __init__(self) -> None:
        super().__init__(
            "No Git remotes configured in this repository",
            hint="Add a remote with: git remote add origin <url>",
        )


class RemoteNotFoundError(GitDiscoveryError):
    """A specific remote name was requested but does not exist."""

    def __init__(self, remote_name: str, available: list[str]) -> None:
        self.remote_name = remote_name
        self.available = available
        names = ", ".join(available) if available else "none"
        super().__init__(
            f"Remote '{remote_name}' not found (available: {names})",
            hint=f"Add it with: git remote add {remote_name} <url>",
        )
