"""
Provider settings read from the process environment.

Tokens and base URLs use the environment variable names the hosting
services' own tooling already uses (GITHUB_TOKEN, GITLAB_TOKEN, GITEA_URL,
...). Timeouts use the FORGE_SCOUT_ prefix, e.g. FORGE_SCOUT_CLI_TIMEOUT.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict

from forge_scout.enums import ProviderName
from forge_scout.exceptions import ConfigurationError


class ProviderSettings(BaseSettings):
    """Base URLs, credentials and timeouts for every provider adapter.

    Blank environment values count as unset. Base URLs are stored without a
    trailing slash.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORGE_SCOUT_",
        populate_by_name=True,
        extra="ignore",
    )

    # GitHub
    github_api_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_API_URL",
        description="GitHub REST API root (set for GitHub Enterprise)",
    )
    github_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_TOKEN", "GH_TOKEN"),
    )

    # GitLab
    gitlab_url: str = Field(
        default="https://gitlab.com",
        validation_alias="GITLAB_URL",
    )
    gitlab_token: SecretStr | None = Field(
        default=None,
        validation_alias="GITLAB_TOKEN",
    )

    # Bitbucket Cloud
    bitbucket_api_url: str = Field(
        default="https://api.bitbucket.org",
        validation_alias="BITBUCKET_API_URL",
    )
    bitbucket_token: SecretStr | None = Field(
        default=None,
        validation_alias="BITBUCKET_TOKEN",
    )

    # Azure DevOps (AZURE_DEVOPS_EXT_PAT is what the az CLI reads)
    azure_devops_url: str = Field(
        default="https://dev.azure.com",
        validation_alias="AZURE_DEVOPS_URL",
    )
    azure_devops_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("AZURE_DEVOPS_TOKEN", "AZURE_DEVOPS_EXT_PAT"),
    )

    # Gitea / Forgejo: self-hosted only, REST tier is skipped without a URL
    gitea_url: str | None = Field(
        default=None,
        validation_alias="GITEA_URL",
    )
    gitea_token: SecretStr | None = Field(
        default=None,
        validation_alias="GITEA_TOKEN",
    )
    forgejo_url: str | None = Field(
        default=None,
        validation_alias="FORGEJO_URL",
    )
    forgejo_token: SecretStr | None = Field(
        default=None,
        validation_alias="FORGEJO_TOKEN",
    )

    # Timeouts (seconds)
    cli_timeout: float = Field(default=10.0, gt=0, description="Provider CLI tier timeout")
    http_timeout: float = Field(default=10.0, gt=0, description="REST tier timeout")
    probe_timeout: float = Field(default=5.0, gt=0, description="detect_from_api timeout per endpoint")
    git_timeout: float = Field(default=3.0, gt=0, description="Local git remote lookup timeout")

    @field_validator(
        "github_api_url",
        "gitlab_url",
        "bitbucket_api_url",
        "azure_devops_url",
        "gitea_url",
        "forgejo_url",
        mode="before",
    )
    @classmethod
    def normalize_url(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Fall back to the default for blank values and drop trailing slashes."""
        if v is None or not str(v).strip():
            return cls.model_fields[info.field_name].default
        v = str(v).strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must start with http:// or https:// (got: {v})")
        return v.rstrip("/")

    @field_validator(
        "github_token",
        "gitlab_token",
        "bitbucket_token",
        "azure_devops_token",
        "gitea_token",
        "forgejo_token",
        mode="before",
    )
    @classmethod
    def blank_token_is_unset(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def token_for(self, provider: ProviderName) -> str | None:
        """Return the plain-text token for a provider, or None if unset."""
        secrets: dict[ProviderName, tuple[SecretStr | None, ...]] = {
            ProviderName.GITHUB: (self.github_token,),
            ProviderName.GITLAB: (self.gitlab_token,),
            ProviderName.BITBUCKET: (self.bitbucket_token,),
            ProviderName.AZURE_DEVOPS: (self.azure_devops_token,),
            ProviderName.GITEA: (self.gitea_token,),
            ProviderName.FORGEJO: (self.forgejo_token, self.gitea_token),
        }
        for secret in secrets.get(provider, ()):
            if secret is not None:
                value = secret.get_secret_value().strip()
                if value:
                    return value
        return None

    def base_url_for(self, provider: ProviderName) -> str | None:
        """Return the API base URL for a provider, or None if unset."""
        urls: dict[ProviderName, tuple[str | None, ...]] = {
            ProviderName.GITHUB: (self.github_api_url,),
            ProviderName.GITLAB: (self.gitlab_url,),
            ProviderName.BITBUCKET: (self.bitbucket_api_url,),
            ProviderName.AZURE_DEVOPS: (self.azure_devops_url,),
            ProviderName.GITEA: (self.gitea_url,),
            ProviderName.FORGEJO: (self.forgejo_url, self.gitea_url),
        }
        for url in urls.get(provider, ()):
            if url:
                return url
        return None


def load_settings() -> ProviderSettings:
    """Load provider settings from the environment.

    Raises:
        ConfigurationError: If an environment value fails validation.
    """
    try:
        return ProviderSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid provider settings: {e}") from e


def load_settings_lenient() -> tuple[ProviderSettings, list[str]]:
    """Load provider settings, discarding only the environment values that fail.

    A malformed FORGE_SCOUT_CLI_TIMEOUT should not cost the GITEA_URL and
    tokens that are valid. Rejected keys fall back to their defaults.

    Returns:
        The settings and the sorted names of the rejected keys.

    Raises:
        ValidationError: If an error cannot be traced to an environment key.
    """
    data = EnvSettingsSource(ProviderSettings)()
    rejected: list[str] = []

    while True:
        try:
            return ProviderSettings.model_validate(data), sorted(rejected)
        except ValidationError as e:
            bad = {str(err["loc"][0]) for err in e.errors() if err["loc"] and err["loc"][0] in data}
            if not bad:
                raise
            for key in bad:
                data.pop(key)
            rejected.extend(bad)
