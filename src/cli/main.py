"""CLI (Typer) para probar la extensión contra la API de commerce.

Comandos:
- `page PATH`: resuelve una URL como lo haría el host (dynamic-page-handler).
- `data-source NAME`: ejecuta un data source con config `key=value`.
- `actions`: lista la tabla de actions delegadas.
- `doctor`: diagnósticos y setup de credenciales.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

import httpx
import typer
from rich.console import Console

from adapters.json_exporter import export_payload_json
from cli import doctor
from cli.ui_components import (
    build_actions_table,
    build_page_panel,
    build_pagination_text,
    build_preview_table,
    build_products_table,
    print_banner,
)
from core.config import AppSettings
from core.domain.errors import ExtensionError
from core.domain.extension import (
    DataSourceConfiguration,
    DataSourceContext,
    DynamicPageContext,
    ProjectContext,
    Request,
)
from core.domain.models import Product, ProductPaginatedResult
from core.logging_setup import configure_logging
from core.request_utils import LOCALE_HEADER
from core.services.extension_registry import build_extension_registry

app = typer.Typer(
    no_args_is_help=True,
    help="Resolve storefront dynamic pages, data sources and actions.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def parse_pairs(values: list[str] | None) -> dict[str, Any]:
    """`["a=1", "b=2", "b=3"]` -> `{"a": "1", "b": ["2", "3"]}`."""

    out: dict[str, Any] = {}
    for raw in values or []:
        if "=" not in raw:
            raise typer.BadParameter(f"Expected key=value, got {raw!r}")
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty key in {raw!r}")
        if key in out:
            previous = out[key]
            out[key] = [*previous, value] if isinstance(previous, list) else [previous, value]
        else:
            out[key] = value
    return out


def _build_request(path: str, query: list[str] | None, locale: str | None) -> Request:
    headers = {LOCALE_HEADER: locale} if locale else {}
    return Request(path=path, query=parse_pairs(query), headers=headers)


def _fail(message: str) -> None:
    _console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


def _run(coro: Any) -> Any:
    try:
        return asyncio.run(coro)
    except ExtensionError as exc:
        _fail(exc.message)
    except httpx.HTTPError as exc:
        _fail(f"HTTP error talking to the commerce API: {exc}")


def _emit(payload: dict[str, Any], *, as_json: bool, output: Path | None) -> bool:
    """Escribe/imprime JSON; devuelve True si ya no hace falta render Rich."""

    if output is not None:
        written = export_payload_json(payload=payload, output_path=output)
        _console.print(f"[green]Saved payload to:[/green] {written}")
    if as_json:
        _console.print_json(data=payload)
        return True
    return False


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    banner: bool = typer.Option(False, "--banner", help="Show the banner."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    if banner:
        print_banner(_console)


@app.command()
def page(
    path: str = typer.Argument(..., help="Storefront path, e.g. /cart or /shirt/p/SKU-1."),
    query: list[str] = typer.Option([], "--query", "-q", help="Query parameter key=value (repeatable)."),
    locale: str | None = typer.Option(None, "--locale", "-l", help="Locale, e.g. de_DE@EUR."),
    as_json: bool = typer.Option(False, "--json", help="Print the host payload as JSON."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the payload to a JSON file."),
) -> None:
    """Resolve PATH with the dynamic page handler."""

    registry = build_extension_registry(AppSettings())
    request = _build_request(path, query, locale)
    result = _run(registry.handle_dynamic_page(request, DynamicPageContext()))

    if result is None:
        _console.print(f"[yellow]No dynamic page for[/yellow] {path}")
        raise typer.Exit(code=1)

    if _emit(result.as_payload(), as_json=as_json, output=output):
        return

    _console.print(build_page_panel(result))
    payload = getattr(result, "data_source_payload", None)
    if isinstance(payload, ProductPaginatedResult) and payload.items:
        _console.print(build_products_table(payload.items))


@app.command(name="data-source")
def data_source(
    name: str = typer.Argument(..., help="Data source name, e.g. frontastic/product-list."),
    config: list[str] = typer.Option([], "--config", "-c", help="Configuration key=value (repeatable)."),
    path: str = typer.Option("/", "--path", help="Path of the simulated request."),
    query: list[str] = typer.Option([], "--query", "-q", help="Query parameter key=value (repeatable)."),
    locale: str | None = typer.Option(None, "--locale", "-l", help="Locale, e.g. de_DE@EUR."),
    preview: bool = typer.Option(False, "--preview", help="Resolve in editorial preview mode."),
    no_request: bool = typer.Option(False, "--no-request", help="Resolve without a request in the context."),
    as_json: bool = typer.Option(False, "--json", help="Print the host payload as JSON."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the payload to a JSON file."),
) -> None:
    """Resolve the data source NAME."""

    registry = build_extension_registry(AppSettings())
    context = DataSourceContext(
        project_context=ProjectContext(),
        request=None if no_request else _build_request(path, query, locale),
        is_preview=preview,
    )
    data_source_config = DataSourceConfiguration(type=name, configuration=parse_pairs(config))
    result = _run(registry.resolve_data_source(data_source_config, context))

    if _emit(result.as_payload(), as_json=as_json, output=output):
        return

    payload = result.data_source_payload
    if isinstance(payload, ProductPaginatedResult):
        _console.print(build_products_table(payload.items, title=name))
        _console.print(build_pagination_text(payload))
    elif isinstance(payload, dict) and isinstance(payload.get("product"), Product):
        _console.print(build_products_table([payload["product"]], title=name))
    else:
        _console.print_json(data=result.as_payload()["dataSourcePayload"])

    if result.preview_payload is not None:
        _console.print(build_preview_table(result.preview_payload))


@app.command()
def actions() -> None:
    """List the delegated action table."""

    registry = build_extension_registry(AppSettings())
    _console.print(build_actions_table(registry.actions.describe()))


def run() -> None:
    # Windows terminals may default to cp1252; rich output needs utf-8.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")
    app()
