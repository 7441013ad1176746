"""CLI entry point for forge-scout."""

import asyncio
import json
import sys
from typing import Any

import click
import structlog

from forge_scout.config.settings import load_settings
from forge_scout.enums import ProviderName
from forge_scout.exceptions import ConfigurationError
from forge_scout.git.discovery import parse_remote_from_cwd
from forge_scout.git.parser import detect_provider, parse_remote_url
from forge_scout.models.domain import FetchResult
from forge_scout.providers.base import GitProvider
from forge_scout.providers.registry import ProviderRegistry
from forge_scout.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)

PROVIDER_CHOICES = [name.value for name in ProviderName if name != ProviderName.UNKNOWN]


def _print_check(name: str, status: bool, detail: str | None = None) -> None:
    """Print a check result with consistent formatting."""
    if status:
        click.echo(f"  {click.style('[OK]', fg='green')} {name}")
    else:
        click.echo(f"  {click.style('[FAIL]', fg='red')} {name}")

    if detail:
        click.echo(f"       {detail}")


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def _resolve_target(
    registry: ProviderRegistry,
    provider_name: str | None,
    owner: str | None,
    repo: str | None,
    cwd: str | None,
    remote: str | None = None,
) -> tuple[GitProvider, str | None, str | None]:
    """Fill in provider, owner and repo from a working directory remote.

    With no ``remote`` the remote is picked automatically (the only one,
    else origin, else upstream).

    Raises:
        ConfigurationError: If no provider can be determined.
    """
    if provider_name is None or owner is None or repo is None:
        info = parse_remote_from_cwd(cwd, timeout=registry.git_timeout, remote_name=remote)
        if info is not None:
            provider_name = provider_name or info.provider.value
            owner = owner or info.owner
            repo = repo or info.repo

    provider = registry.get_provider(provider_name) if provider_name else None
    if provider is None:
        raise ConfigurationError(
            "Could not determine the hosting provider. "
            "Pass --provider or run inside a clone with a recognised remote."
        )
    return provider, owner, repo


def _report(result: FetchResult[Any], verbose: bool) -> None:
    if result.ok:
        _echo_json(result.value.to_dict())
        return

    click.echo("Error: could not retrieve (not found, or no tier succeeded)", err=True)
    if verbose:
        click.echo(f"  reason: {result.reason}", err=True)
        click.echo(f"  tier:   {result.tier}", err=True)
        if result.detail:
            click.echo(f"  detail: {result.detail}", err=True)
    sys.exit(1)


@click.group()
@click.option("--log-level", default="WARNING", help="Logging level")
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """forge-scout: identify git hosting providers and query PRs and issues."""
    configure_logging(log_level)

    # URL commands are pure and need no settings
    commands_without_settings = ["detect", "parse"]
    if ctx.invoked_subcommand in commands_without_settings:
        ctx.obj = {"registry": None}
        return

    try:
        settings = load_settings()
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("config_error", exc_info=True)
        sys.exit(1)

    ctx.obj = {"registry": ProviderRegistry(settings, git_timeout=settings.git_timeout)}


@cli.command()
@click.argument("url")
def detect(url: str) -> None:
    """Print the hosting provider of a remote URL."""
    click.echo(detect_provider(url).value)


@cli.command()
@click.argument("url")
def parse(url: str) -> None:
    """Parse a remote URL into provider, host, owner and repo."""
    info = parse_remote_url(url)
    if info is None:
        click.echo(f"Error: not a recognised remote URL: {url!r}", err=True)
        sys.exit(1)
    _echo_json(info.to_dict())


def _target_options(func: Any) -> Any:
    """Options shared by the pr and issue commands."""
    options = [
        click.option("--provider", "provider_name", type=click.Choice(PROVIDER_CHOICES), help="Provider"),
        click.option("--owner", help="Owner path (user, group/subgroup, or org/project)"),
        click.option("--repo", help="Repository name"),
        click.option("--cwd", type=click.Path(file_okay=False), help="Repository directory for remote lookup"),
        click.option("--remote", help="Remote to read (default: the only remote, else origin, else upstream)"),
        click.option("--verbose", "-v", is_flag=True, help="Explain failures"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command()
@click.argument("number", type=int)
@_target_options
@click.pass_context
def pr(
    ctx: click.Context,
    number: int,
    provider_name: str | None,
    owner: str | None,
    repo: str | None,
    cwd: str | None,
    remote: str | None,
    verbose: bool,
) -> None:
    """Show pull request (merge request) metadata as JSON."""
    try:
        provider, owner, repo = _resolve_target(ctx.obj["registry"], provider_name, owner, repo, cwd, remote)
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    result = asyncio.run(provider.fetch_pr(number, owner, repo))
    _report(result, verbose)


@cli.command()
@click.argument("number", type=int)
@_target_options
@click.pass_context
def issue(
    ctx: click.Context,
    number: int,
    provider_name: str | None,
    owner: str | None,
    repo: str | None,
    cwd: str | None,
    remote: str | None,
    verbose: bool,
) -> None:
    """Show issue (or work item) metadata as JSON."""
    try:
        provider, owner, repo = _resolve_target(ctx.obj["registry"], provider_name, owner, repo, cwd, remote)
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    result = asyncio.run(provider.fetch_issue(number, owner, repo))
    _report(result, verbose)


async def _check_auth_all(providers: list[GitProvider]) -> list[bool]:
    return list(await asyncio.gather(*(provider.check_auth() for provider in providers)))


@cli.command()
@click.option("--provider", "provider_name", type=click.Choice(PROVIDER_CHOICES), help="Check one provider")
@click.pass_context
def auth(ctx: click.Context, provider_name: str | None) -> None:
    """Check authentication for each provider (token or CLI session)."""
    registry: ProviderRegistry = ctx.obj["registry"]

    providers = [registry.get_provider(provider_name)] if provider_name else list(registry.providers.values())
    providers = [p for p in providers if p is not None]

    click.echo(click.style("Authentication:", bold=True))
    results = asyncio.run(_check_auth_all(providers))
    for provider, ok in zip(providers, results, strict=True):
        cli_name = provider.get_required_cli()
        _print_check(provider.display_name, ok, f"CLI: {cli_name}" if cli_name else "CLI: none (token only)")

    if provider_name and not results[0]:
        sys.exit(1)


async def _probe_all(providers: list[GitProvider], base_url: str) -> list[bool]:
    return [await provider.detect_from_api(base_url) for provider in providers]


@cli.command()
@click.argument("base_url")
@click.option("--provider", "provider_name", type=click.Choice(PROVIDER_CHOICES), help="Probe one provider")
@click.pass_context
def probe(ctx: click.Context, base_url: str, provider_name: str | None) -> None:
    """Probe a self-hosted server's API to identify its provider."""
    registry: ProviderRegistry = ctx.obj["registry"]

    providers = [registry.get_provider(provider_name)] if provider_name else list(registry.providers.values())
    providers = [p for p in providers if p is not None]

    results = asyncio.run(_probe_all(providers, base_url))
    for provider, ok in zip(providers, results, strict=True):
        _print_check(provider.display_name, ok)

    if not any(results):
        sys.exit(1)


@cli.command("providers")
@click.pass_context
def list_providers(ctx: click.Context) -> None:
    """List registered providers and their vocabulary."""
    registry: ProviderRegistry = ctx.obj["registry"]

    rows = [
        {
            "name": provider.name.value,
            "display_name": provider.display_name,
            "pr_terminology": provider.pr_terminology.value,
            "pr_refspec": provider.pr_refspec,
            "required_cli": provider.get_required_cli(),
            "self_hosted": provider.name.is_self_hosted,
        }
        for provider in registry.providers.values()
    ]
    _echo_json(rows)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
