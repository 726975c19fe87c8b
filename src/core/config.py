"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (API de commerce, routers) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "storefront-pages"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "storefront-pages"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "storefront-pages"
    return Path.home() / ".config" / "storefront-pages"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# storefront-pages user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


# Solo `product` vive en este repo; el resto lo instala el paquete de actions.
DEFAULT_ACTION_MODULES: dict[str, str] = {
    "account": "storefront_actions.account",
    "cart": "storefront_actions.cart",
    "product": "adapters.actions.product",
    "wishlist": "storefront_actions.wishlist",
    "project": "storefront_actions.project",
    "nuvei": "storefront_actions.nuvei",
}


class AppSettings(BaseSettings):
    """Configuración central de la extensión.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    commerce_api_url: str = Field(
        default="https://api.europe-west1.gcp.commercetools.com",
        min_length=8,
        description="Base URL de la API de commerce (commercetools HTTP API).",
    )
    commerce_auth_url: str = Field(
        default="https://auth.europe-west1.gcp.commercetools.com",
        min_length=8,
        description="Base URL del servidor OAuth2 de commerce.",
    )
    commerce_project_key: str = Field(
        default="storefront",
        min_length=1,
        description="Project key en la API de commerce.",
    )
    commerce_client_id: str | None = Field(
        default=None,
        description="Client id para el flujo client-credentials.",
    )
    commerce_client_secret: str | None = Field(
        default=None,
        description="Client secret para el flujo client-credentials.",
    )
    commerce_scope: str | None = Field(
        default=None,
        description="Scopes OAuth2 separados por espacio (opcional).",
    )
    commerce_access_token: str | None = Field(
        default=None,
        description="Token estático; si existe no se pide token OAuth2.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="storefront-pages/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones a la API de commerce.",
    )

    default_locale: str = Field(
        default="en_US",
        min_length=2,
        description="Locale por defecto (formato ll_CC, opcionalmente con @CUR).",
    )
    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Moneda ISO 4217 por defecto.",
    )
    default_page_size: int = Field(
        default=24,
        ge=1,
        le=500,
        description="Tamaño de página cuando el request no indica `limit`.",
    )
    max_page_size: int = Field(
        default=500,
        ge=1,
        le=500,
        description="Límite superior para `limit` (la API no acepta más de 500).",
    )

    redirect_non_canonical_product_urls: bool = Field(
        default=False,
        description="Redirigir (301) URLs de producto con slug no canónico.",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging para la CLI.",
    )

    action_modules: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ACTION_MODULES),
        description=(
            "Mapa dominio -> módulo importable con los action handlers "
            "(JSON en env, p.ej. {\"cart\": \"shop_actions.cart\"})."
        ),
    )
