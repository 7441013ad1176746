"""Custom exception hierarchy for forge-scout.

Provider adapters never let these cross their public methods: every failure
inside an adapter becomes a negative result (``None`` or ``False``). The
exceptions below are raised by local repository discovery, settings loading
and the command-line interface.

Exception Hierarchy:
    ForgeScoutError (base)
    ├── ConfigurationError
    └── GitOperationError
        └── GitDiscoveryError (see forge_scout.git.exceptions)
            ├── NotGitRepositoryError
            ├── NoRemotesError
            └── RemoteNotFoundError

Example Usage:
    >>> from forge_scout.exceptions import ConfigurationError
    >>> try:
    ...     settings = load_settings()
    ... except ConfigurationError as e:
    ...     print(e.message)
"""


class ForgeScoutError(Exception):
    """Base exception for all forge-scout errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(ForgeScoutError):
    """Configuration-related errors.

    Raised when provider settings cannot be loaded from the environment, or
    when the CLI cannot work out which repository a command targets.

    Examples:
        - A timeout environment variable is not a positive number
        - No --owner/--repo given and no usable git remote in the directory
    """

    pass


class GitOperationError(ForgeScoutError):
    """Git operation errors.

    Raised when the local repository cannot be inspected. See
    forge_scout.git.exceptions for the specific error types.
    """

    pass
