"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.secret_client import SecretEndpointClient
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import AuthResolutionError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


async def _check_token(settings: AppSettings) -> tuple[bool, str]:
    try:
        token = await SecretEndpointClient(settings).fetch_token()
        return True, f"Token resolved ({len(token)} chars)"
    except AuthResolutionError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="flexlink Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("UI base URL", "OK", settings.ui_base_url)
    table.add_row("API base URL", "OK", settings.api_base_url)

    if settings.secret_endpoint_url:
        table.add_row("Secret endpoint", "OK", settings.secret_endpoint_url)
        ok_token, detail_token = asyncio.run(_check_token(settings))
        table.add_row("Flex token", "OK" if ok_token else "FAIL", detail_token)
    else:
        ok_token = False
        table.add_row("Secret endpoint", "OPTIONAL", "Not set -> only local hints (offline resolution)")

    # Conectividad (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings.api_base_url, settings))
    table.add_row("Flex API connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_token:
        _console.print(
            "\n[yellow]Note:[/yellow] Without a Flex token, links whose type cannot be inferred locally "
            "fall back to the simple-element view."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    endpoint = typer.prompt("Secret endpoint URL").strip()
    secret_name = typer.prompt("Secret name", default="X_AUTH_TOKEN", show_default=True).strip()
    api_key = typer.prompt("Backend API key", hide_input=True, confirmation_prompt=False).strip()

    if not endpoint or not secret_name:
        raise typer.BadParameter("endpoint and secret name are required")

    env_path = write_user_env_vars(
        {
            "FLEXLINK_SECRET_ENDPOINT_URL": endpoint,
            "FLEXLINK_SECRET_NAME": secret_name,
            "FLEXLINK_SECRET_API_KEY": api_key,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
