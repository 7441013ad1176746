"""
Provider capability contract and the tiered retrieval machinery.

Every adapter answers the same questions (view a PR, view an issue, check
authentication, recognise its own URLs and APIs) through an ordered chain
of tiers: the provider's own CLI first, then its REST API. A tier either
produces a value or a FetchResult carrying the failure reason; the chain
stops at the first success.

Nothing raised inside a tier escapes: the public methods return ``None`` or
``False`` when retrieval fails, which callers must read as "could not
retrieve", never as "does not exist". The fetch_* variants return the
underlying FetchResult for callers that want to know why.
"""

import dataclasses
import json
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from functools import partial
from typing import Any, Generic, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from forge_scout.config.settings import ProviderSettings, load_settings_lenient
from forge_scout.enums import PRTerminology, ProviderName
from forge_scout.git.parser import detect_provider
from forge_scout.models.domain import FailureReason, FetchResult, IssueInfo, PRInfo
from forge_scout.utils.async_subprocess import run_command
from forge_scout.utils.http import get_json, probe

log = structlog.get_logger(__name__)

T = TypeVar("T")

# Exceptions that mean "the payload did not have the shape we expected"
PARSE_ERRORS = (KeyError, TypeError, AttributeError, ValueError)


@dataclass(frozen=True)
class Tier(Generic[T]):
    """One fallback stage of a retrieval.

    Attributes:
        name: Short label used in logs and FetchResult.tier ("cli", "rest")
        fetch: Zero-argument coroutine function producing the result
    """

    name: str
    fetch: Callable[[], Awaitable[FetchResult[T]]]


async def run_tiers(tiers: Sequence[Tier[T]], provider: str = "") -> FetchResult[T]:
    """Try tiers strictly in order and return the first success.

    An exception escaping a tier is recorded as a NOT_FOUND_OR_ERROR failure
    for that tier. When every tier fails, the last failure is returned.
    """
    result: FetchResult[T] = FetchResult.failure(FailureReason.MISSING_CONFIG, "no tiers available")

    for tier in tiers:
        try:
            result = await tier.fetch()
        except Exception as e:
            result = FetchResult.failure(FailureReason.NOT_FOUND_OR_ERROR, f"{type(e).__name__}: {e}")

        result = dataclasses.replace(result, tier=tier.name)

        if result.ok:
            log.debug("tier_succeeded", provider=provider, tier=tier.name)
            return result

        log.debug(
            "tier_failed",
            provider=provider,
            tier=tier.name,
            reason=str(result.reason),
            detail=result.detail,
        )

    return result


def is_valid_number(number: object) -> bool:
    """PR and issue numbers must be positive integers (bools excluded)."""
    return isinstance(number, int) and not isinstance(number, bool) and number >= 1


def label_names(labels: Any) -> tuple[str, ...] | None:
    """Normalise a label list of names or {"name": ...} objects."""
    if labels is None:
        return None
    return tuple(label["name"] if isinstance(label, dict) else str(label) for label in labels)


class GitProvider(ABC):
    """Abstract base class for hosting provider adapters.

    Subclasses declare their identity as class attributes and implement the
    REST hooks. CLI hooks are optional: an adapter whose ``required_cli`` is
    None, or whose ``*_cli_args`` return None, only has a REST tier.

    Adapters hold no mutable state. Settings are either injected at
    construction or re-read from the environment on every call.

    Attributes:
        name: Provider this adapter serves
        display_name: Human-readable provider name
        pr_terminology: What the provider calls a pull request
        pr_refspec: Format string (``{number}``, ``{branch}``) for fetching a
            PR through a special ref, or None when PRs are plain branches
        required_cli: Preferred CLI binary, or None
        api_probe_paths: Endpoints tried by detect_from_api, most specific
            first
    """

    name: ProviderName
    display_name: str
    pr_terminology: PRTerminology = PRTerminology.PR
    pr_refspec: str | None = None
    required_cli: str | None = None
    api_probe_paths: tuple[str, ...] = ()

    def __init__(self, settings: ProviderSettings | None = None) -> None:
        self._settings = settings

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name.value!r})"

    @property
    def settings(self) -> ProviderSettings:
        """Injected settings, or a fresh read of the environment.

        An invalid environment value falls back to its default; the other
        values are kept, so a bad variable degrades retrieval instead of
        raising.
        """
        if self._settings is not None:
            return self._settings
        try:
            return ProviderSettings()
        except ValidationError as e:
            log.warning("invalid_provider_settings", provider=self.name.value, error=str(e))
        try:
            settings, rejected = load_settings_lenient()
        except ValidationError:
            return ProviderSettings.model_construct()
        log.debug("provider_settings_partially_loaded", provider=self.name.value, rejected=rejected)
        return settings

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect_from_remote(self, url: str) -> bool:
        """Check whether a remote URL belongs to this provider (no I/O)."""
        return detect_provider(url) == self.name

    async def detect_from_api(self, base_url: str) -> bool:
        """Check whether a server speaks this provider's API.

        Probes each of ``api_probe_paths`` in order and reports True on the
        first 2xx response. Unreachable hosts give False.
        """
        base = (base_url or "").strip().rstrip("/")
        if not base or not self.api_probe_paths:
            return False

        timeout = self.settings.probe_timeout
        for path in self.api_probe_paths:
            if await probe(f"{base}{path}", timeout=timeout):
                log.debug("api_detected", provider=self.name.value, base_url=base, path=path)
                return True

        return False

    # ------------------------------------------------------------------
    # Retrieval: public contract
    # ------------------------------------------------------------------

    async def view_pr(self, number: int, owner: str | None = None, repo: str | None = None) -> PRInfo | None:
        """Fetch pull request metadata, or None if it could not be retrieved."""
        return (await self.fetch_pr(number, owner, repo)).value

    async def view_issue(self, number: int, owner: str | None = None, repo: str | None = None) -> IssueInfo | None:
        """Fetch issue metadata, or None if it could not be retrieved."""
        return (await self.fetch_issue(number, owner, repo)).value

    async def fetch_pr(
        self, number: int, owner: str | None = None, repo: str | None = None
    ) -> FetchResult[PRInfo]:
        """Like view_pr, but returns the FetchResult with the failure reason."""
        if not is_valid_number(number):
            return FetchResult.failure(FailureReason.INVALID_INPUT, f"not a positive integer: {number!r}")
        return await run_tiers(self.pr_tiers(number, owner, repo), provider=self.name.value)

    async def fetch_issue(
        self, number: int, owner: str | None = None, repo: str | None = None
    ) -> FetchResult[IssueInfo]:
        """Like view_issue, but returns the FetchResult with the failure reason."""
        if not is_valid_number(number):
            return FetchResult.failure(FailureReason.INVALID_INPUT, f"not a positive integer: {number!r}")
        return await run_tiers(self.issue_tiers(number, owner, repo), provider=self.name.value)

    async def check_auth(self) -> bool:
        """Report whether requests to this provider would be authenticated.

        A token in the environment answers immediately. Otherwise the CLI's
        own session check is run; exit status 0 means authenticated.
        """
        if self.settings.token_for(self.name):
            return True

        args = self.auth_cli_args()
        if not self.required_cli or args is None:
            return False

        try:
            _, _, code = await run_command(
                self.required_cli, *args, check=False, timeout=self.settings.cli_timeout
            )
        except (OSError, TimeoutError) as e:
            log.debug("auth_cli_failed", provider=self.name.value, error=str(e) or type(e).__name__)
            return False

        return code == 0

    def get_required_cli(self) -> str | None:
        """Name of the preferred CLI binary. Installation is not verified."""
        return self.required_cli

    def format_pr_refspec(self, number: int, branch: str) -> str | None:
        """Build the fetch refspec for a PR, or None if the provider has none."""
        if self.pr_refspec is None:
            return None
        return self.pr_refspec.format(number=number, branch=branch)

    # ------------------------------------------------------------------
    # Tier chains
    # ------------------------------------------------------------------

    def pr_tiers(self, number: int, owner: str | None, repo: str | None) -> list[Tier[PRInfo]]:
        tiers: list[Tier[PRInfo]] = []
        cli_args = self.pr_cli_args(number, owner, repo)
        if self.required_cli and cli_args is not None:
            tiers.append(Tier("cli", partial(self._fetch_via_cli, cli_args, self.parse_cli_pr)))
        tiers.append(Tier("rest", partial(self.pr_via_rest, number, owner, repo)))
        return tiers

    def issue_tiers(self, number: int, owner: str | None, repo: str | None) -> list[Tier[IssueInfo]]:
        tiers: list[Tier[IssueInfo]] = []
        cli_args = self.issue_cli_args(number, owner, repo)
        if self.required_cli and cli_args is not None:
            tiers.append(Tier("cli", partial(self._fetch_via_cli, cli_args, self.parse_cli_issue)))
        tiers.append(Tier("rest", partial(self.issue_via_rest, number, owner, repo)))
        return tiers

    async def pr_via_rest(self, number: int, owner: str | None, repo: str | None) -> FetchResult[PRInfo]:
        return await self._fetch_via_rest(self.pr_api_url, self.parse_api_pr, number, owner, repo)

    async def issue_via_rest(self, number: int, owner: str | None, repo: str | None) -> FetchResult[IssueInfo]:
        return await self._fetch_via_rest(self.issue_api_url, self.parse_api_issue, number, owner, repo)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def pr_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str] | None:
        """Arguments (after the binary) printing the PR as JSON, or None."""
        return None

    def issue_cli_args(self, number: int, owner: str | None, repo: str | None) -> list[str] | None:
        """Arguments (after the binary) printing the issue as JSON, or None."""
        return None

    def auth_cli_args(self) -> list[str] | None:
        """Arguments (after the binary) that succeed only when logged in."""
        return None

    def parse_cli_pr(self, data: Any) -> PRInfo:
        return self.parse_api_pr(data)

    def parse_cli_issue(self, data: Any) -> IssueInfo:
        return self.parse_api_issue(data)

    def pr_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str | None:
        """REST URL of a PR, or None if owner/repo cannot address one."""
        return None

    def issue_api_url(self, base_url: str, number: int, owner: str, repo: str) -> str | None:
        """REST URL of an issue, or None if owner/repo cannot address one."""
        return None

    @abstractmethod
    def parse_api_pr(self, data: Any) -> PRInfo:
        pass

    @abstractmethod
    def parse_api_issue(self, data: Any) -> IssueInfo:
        pass

    def rest_headers(self, token: str | None) -> dict[str, str]:
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def rest_auth(self, token: str | None) -> tuple[str, str] | None:
        return None

    def rest_params(self) -> dict[str, str] | None:
        return None

    # ------------------------------------------------------------------
    # Tier implementations
    # ------------------------------------------------------------------

    async def _fetch_via_cli(self, args: list[str], parse: Callable[[Any], T]) -> FetchResult[T]:
        return self._convert(await self._cli_json(args), parse)

    async def _fetch_via_rest(
        self,
        build_url: Callable[[str, int, str, str], str | None],
        parse: Callable[[Any], T],
        number: int,
        owner: str | None,
        repo: str | None,
    ) -> FetchResult[T]:
        if not owner or not repo:
            return FetchResult.failure(FailureReason.MISSING_CONFIG, "owner and repo are required")

        settings = self.settings
        base_url = settings.base_url_for(self.name)
        if not base_url:
            return FetchResult.failure(FailureReason.MISSING_CONFIG, "base URL not configured")

        url = build_url(base_url, number, owner, repo)
        if url is None:
            return FetchResult.failure(FailureReason.MISSING_CONFIG, f"cannot address {owner}/{repo}")

        token = settings.token_for(self.name)
        result = await self._rest_json(
            url,
            headers=self.rest_headers(token),
            auth=self.rest_auth(token),
            params=self.rest_params(),
            timeout=settings.http_timeout,
        )
        return self._convert(result, parse)

    async def _cli_json(self, args: list[str]) -> FetchResult[Any]:
        binary = self.required_cli
        if not binary:
            return FetchResult.failure(FailureReason.UNREACHABLE, "provider has no CLI")

        try:
            stdout, stderr, code = await run_command(
                binary, *args, check=False, timeout=self.settings.cli_timeout
            )
        except FileNotFoundError:
            return FetchResult.failure(FailureReason.UNREACHABLE, f"{binary} not installed")
        except TimeoutError:
            return FetchResult.failure(FailureReason.UNREACHABLE, f"{binary} timed out")
        except OSError as e:
            return FetchResult.failure(FailureReason.UNREACHABLE, f"{binary} could not run: {e}")

        if code != 0:
            return FetchResult.failure(FailureReason.NOT_FOUND_OR_ERROR, stderr.strip() or f"exit status {code}")

        try:
            data = json.loads(stdout)
        except ValueError:
            return FetchResult.failure(FailureReason.NOT_FOUND_OR_ERROR, f"{binary} output is not JSON")

        return FetchResult.success(data)

    async def _rest_json(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        params: dict[str, str] | None = None,
        timeout: float = 10.0,
    ) -> FetchResult[Any]:
        try:
            data = await get_json(url, headers=headers, auth=auth, params=params, timeout=timeout)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            reason = FailureReason.UNAUTHENTICATED if status in (401, 403) else FailureReason.NOT_FOUND_OR_ERROR
            return FetchResult.failure(reason, f"HTTP {status} from {url}")
        except httpx.TimeoutException:
            return FetchResult.failure(FailureReason.UNREACHABLE, f"timed out: {url}")
        except (httpx.TransportError, httpx.InvalidURL) as e:
            return FetchResult.failure(FailureReason.UNREACHABLE, f"{type(e).__name__}: {e}")
        except ValueError:
            return FetchResult.failure(FailureReason.NOT_FOUND_OR_ERROR, f"response is not JSON: {url}")

        return FetchResult.success(data)

    @staticmethod
    def _convert(result: FetchResult[Any], parse: Callable[[Any], T]) -> FetchResult[T]:
        """Turn a raw JSON result into a domain result via ``parse``."""
        if not result.ok:
            return FetchResult.failure(result.reason or FailureReason.NOT_FOUND_OR_ERROR, result.detail)

        try:
            value = parse(result.value)
        except PARSE_ERRORS as e:
            return FetchResult.failure(FailureReason.NOT_FOUND_OR_ERROR, f"unexpected payload: {e!r}")

        return FetchResult.success(value)
