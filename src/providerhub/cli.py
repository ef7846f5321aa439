"""Command-line interface for ProviderHub.

This module provides the CLI commands for running and managing
the ProviderHub service.
"""

import asyncio
from typing import NoReturn

import click

from providerhub import __version__
from providerhub.core.config import get_settings
from providerhub.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="ProviderHub")
def cli() -> None:
    """ProviderHub - provider configuration service.

    Stores, tests and activates the credentials of the external services
    (backup storage, calendars, invoicing, notification channels) an
    application depends on.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the ProviderHub server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting ProviderHub server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "providerhub.infrastructure.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--family", type=str, default=None, help="Only list providers of this family")
def providers(family: str | None) -> None:
    """List the built-in provider catalog."""
    from providerhub.core.configuration.exceptions import ProviderNotFoundError
    from providerhub.infrastructure.configuration.providers import build_default_registry

    registry = build_default_registry()
    families = [family] if family else [f.value for f in registry.list_families()]

    for family_name in families:
        try:
            descriptors = registry.list_providers(family_name)
        except ProviderNotFoundError:
            raise click.BadParameter(f"Unknown family '{family_name}'", param_hint="--family")
        click.echo(f"{family_name}:")
        for descriptor in descriptors:
            click.echo(f"  {descriptor.provider_id:<16} {descriptor.display_name}")
            for field in descriptor.fields:
                flags = []
                if field.is_secret:
                    flags.append("secret")
                if not field.required:
                    flags.append("optional")
                suffix = f" ({', '.join(flags)})" if flags else ""
                click.echo(f"    - {field.name}{suffix}")


@cli.command("init-db")
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates all database tables. Use this only in development.
    In production, use migrations instead.
    """
    from providerhub.infrastructure.persistence.database import close_database, init_database

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize():
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await close_database()

    asyncio.run(initialize())


@cli.command()
@click.option("--family", type=str, default=None, help="Only show this family")
@click.option("--owner-scope", type=str, default=None, help="Owner scope; omit for global")
def status(family: str | None, owner_scope: str | None) -> None:
    """Print the configuration status of every provider."""
    from providerhub.application.services import (
        ProviderConfigurationStore,
        StatusAggregator,
        aggregate_counts,
    )
    from providerhub.core.configuration.exceptions import ProviderConfigError
    from providerhub.infrastructure.configuration.providers import build_default_registry
    from providerhub.infrastructure.persistence.database import close_database, get_db_manager
    from providerhub.infrastructure.security.encryption import EncryptionService

    settings = get_settings()
    configure_logging(settings)
    registry = build_default_registry()

    async def collect():
        try:
            async with get_db_manager().session() as session:
                store = ProviderConfigurationStore(
                    session=session,
                    registry=registry,
                    encryption_service=EncryptionService(settings.encryption_key),
                )
                aggregator = StatusAggregator(registry=registry, source=store)
                if family:
                    return {family: await aggregator.summarize(family, owner_scope)}
                return await aggregator.summarize_all(owner_scope)
        finally:
            await close_database()

    try:
        summaries = asyncio.run(collect())
    except ProviderConfigError as e:
        raise click.ClickException(e.message)

    for family_name, summary in summaries.items():
        counts = summary.counts()
        click.echo(
            f"{family_name}: {counts['configured']}/{counts['total']} configured, "
            f"{counts['active']} active, {counts['error']} in error"
        )
        for provider in summary.providers.values():
            line = f"  {provider.provider_id:<16} {provider.state.value}"
            if provider.last_error:
                line += f"  ({provider.last_error})"
            click.echo(line)

    totals = aggregate_counts(summaries)
    click.echo(
        f"total: {totals['configured']}/{totals['total']} configured, "
        f"{totals['active']} active, {totals['error']} in error"
    )


@cli.command()
def info() -> None:
    """Display ProviderHub configuration."""
    settings = get_settings()

    click.echo(f"""
ProviderHub v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}

Providers:
  Test Timeout: {settings.connection_test_timeout_seconds:g} seconds
  Status TTL:   {settings.status_cache_ttl_seconds} seconds

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `providerhub` command and by `python -m providerhub`.
    """
    cli()


if __name__ == "__main__":
    main()
