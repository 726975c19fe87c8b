"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.extension import (
    DataSourcePreviewPayloadElement,
    DynamicPageRedirectResult,
    DynamicPageSuccessResult,
)
from core.domain.models import Money, Product, ProductPaginatedResult


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("storefront-pages", style="bold cyan")
    subtitle = Text("Dynamic pages • Data sources • Actions", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_money(money: Money | None) -> str:
    if money is None:
        return "-"
    amount = money.cent_amount / (10 ** money.fraction_digits)
    return f"{amount:.{money.fraction_digits}f} {money.currency_code}"


def build_products_table(products: list[Product], *, title: str = "Products") -> Table:
    table = Table(title=title)
    table.add_column("SKU", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Price", style="green", justify="right")
    table.add_column("URL", style="magenta")
    for product in products:
        variant = product.variants[0] if product.variants else None
        table.add_row(
            (variant.sku if variant else None) or "-",
            product.name or "-",
            format_money(variant.price if variant else None),
            product.url or "-",
        )
    return table


def build_pagination_text(result: ProductPaginatedResult) -> Text:
    text = Text()
    text.append(f"{result.count} of {result.total if result.total is not None else '?'} products", style="bold")
    if result.previous_cursor:
        text.append(f"  prev={result.previous_cursor}", style="dim")
    if result.next_cursor:
        text.append(f"  next={result.next_cursor}", style="dim")
    return text


def build_page_panel(result: DynamicPageSuccessResult | DynamicPageRedirectResult) -> Panel:
    if isinstance(result, DynamicPageRedirectResult):
        body = Text(f"{result.status_code} -> {result.redirect_location}")
        return Panel(body, title=Text("Redirect", style="bold yellow"), border_style="yellow")

    body = Text()
    body.append(result.dynamic_page_type + "\n", style="bold")
    payload: Any = result.data_source_payload
    if isinstance(payload, dict) and isinstance(payload.get("product"), Product):
        product = payload["product"]
        body.append(f"\n{product.name or '-'}  ({product.product_id})")
        if product.url:
            body.append(f"\n{product.url}", style="magenta")
    elif isinstance(payload, ProductPaginatedResult):
        body.append("\n")
        body.append_text(build_pagination_text(payload))
    return Panel(body, title=Text("Dynamic page", style="bold cyan"), border_style="cyan")


def build_preview_table(elements: list[DataSourcePreviewPayloadElement]) -> Table:
    table = Table(title="Preview payload")
    table.add_column("Title", style="white")
    table.add_column("Image", style="magenta")
    for element in elements:
        table.add_row(element.title or "-", element.image or "-")
    return table


def build_actions_table(modules: dict[str, str]) -> Table:
    table = Table(title="Actions")
    table.add_column("Namespace", style="cyan", no_wrap=True)
    table.add_column("Module", style="white")
    for namespace in sorted(modules):
        table.add_row(namespace, modules[namespace])
    return table
