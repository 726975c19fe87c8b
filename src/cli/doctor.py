"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.commerce.auth import fetch_access_token
from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import ExtensionError
from core.domain.locale import Locale

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_token(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            await fetch_access_token(client, settings)
        return True, "Token issued"
    except ExtensionError as exc:
        return False, exc.message
    except Exception as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="storefront-pages Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API URL", "OK", settings.commerce_api_url)
    table.add_row("Project key", "OK", settings.commerce_project_key)
    if settings.commerce_access_token:
        table.add_row("Credentials", "OK", "Static access token")
    elif settings.commerce_client_id and settings.commerce_client_secret:
        table.add_row("Credentials", "OK", "Client credentials")
    else:
        table.add_row("Credentials", "MISSING", "Run `storefront-pages doctor setup-commerce`")

    try:
        locale = Locale.parse(settings.default_locale)
        table.add_row("Default locale", "OK", f"{locale} -> {locale.api_locale}")
    except ValueError as exc:
        table.add_row("Default locale", "FAIL", str(exc))
    table.add_row("Default currency", "OK", settings.default_currency)

    # Connectivity (best-effort)
    ok_token, detail_token = asyncio.run(_check_token(settings))
    table.add_row("OAuth token", "OK" if ok_token else "FAIL", detail_token)

    _console.print(table)


@app.command(name="setup-commerce")
def setup_commerce() -> None:
    """Interactive commerce API setup (stores config in the user config .env)."""

    settings = AppSettings()

    api_url = typer.prompt("API URL", default=settings.commerce_api_url, show_default=True).strip()
    auth_url = typer.prompt("Auth URL", default=settings.commerce_auth_url, show_default=True).strip()
    project_key = typer.prompt("Project key", default=settings.commerce_project_key, show_default=True).strip()
    client_id = typer.prompt("Client id").strip()
    client_secret = typer.prompt("Client secret", hide_input=True, confirmation_prompt=False).strip()
    scope = typer.prompt("Scope (optional)", default="", show_default=False).strip()

    if not api_url or not auth_url or not project_key:
        raise typer.BadParameter("api_url, auth_url and project_key are required")

    values = {
        "STOREFRONT_COMMERCE_API_URL": api_url,
        "STOREFRONT_COMMERCE_AUTH_URL": auth_url,
        "STOREFRONT_COMMERCE_PROJECT_KEY": project_key,
        "STOREFRONT_COMMERCE_CLIENT_ID": client_id,
        "STOREFRONT_COMMERCE_CLIENT_SECRET": client_secret,
    }
    if scope:
        values["STOREFRONT_COMMERCE_SCOPE"] = scope

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved commerce config to:[/green] {env_path}")
