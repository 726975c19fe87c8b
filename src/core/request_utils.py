"""Helpers para leer path, locale, moneda y parámetros de un `Request`.

El host puede mandar la ruta/locale real en cabeceras `frontastic-*` (cuando
reescribe la URL) o en la query; estas funciones aplican siempre el mismo
orden de precedencia.
"""

from __future__ import annotations

from typing import Any

from core.config import AppSettings
from core.domain.extension import ProjectContext, Request
from core.domain.locale import Locale

PATH_HEADER = "frontastic-path"
LOCALE_HEADER = "frontastic-locale"
CURRENCY_HEADER = "frontastic-currency"


def get_path(request: Request | None) -> str | None:
    if request is None:
        return None
    header = request.header(PATH_HEADER)
    if header:
        return header
    query_path = get_query_param(request, "path")
    if query_path:
        return query_path
    return request.path or None


def get_locale(
    request: Request | None,
    project_context: ProjectContext | None = None,
    settings: AppSettings | None = None,
) -> str:
    """Locale del request (`ll_CC[@CUR]`), cayendo a defaults de proyecto y settings."""

    if request is not None:
        header = request.header(LOCALE_HEADER)
        if header:
            return header
        query_locale = get_query_param(request, "locale")
        if query_locale:
            return query_locale
    if project_context is not None and project_context.default_locale:
        return project_context.default_locale
    settings = settings or AppSettings()
    return settings.default_locale


def get_currency(
    request: Request | None,
    project_context: ProjectContext | None = None,
    settings: AppSettings | None = None,
) -> str:
    settings = settings or AppSettings()
    if request is not None:
        header = request.header(CURRENCY_HEADER)
        if header:
            return header.upper()
        query_currency = get_query_param(request, "currency")
        if query_currency:
            return query_currency.upper()

    locale = get_locale(request, project_context, settings)
    try:
        currency = Locale.parse(locale).default_currency()
    except ValueError:
        currency = None
    return currency or settings.default_currency


def get_query_param(request: Request | None, name: str) -> str | None:
    """Primer valor no vacío de un parámetro de query."""

    if request is None:
        return None
    value = request.query.get(name)
    if isinstance(value, list):
        value = next((v for v in value if v not in (None, "")), None)
    if value is None or value == "":
        return None
    return str(value)


def get_query_list(request: Request | None, name: str) -> list[str]:
    """Valores de un parámetro lista (`name[]=a&name[]=b`, `name=a,b` o lista JSON)."""

    if request is None:
        return []
    values: list[str] = []
    for key in (name, f"{name}[]"):
        values.extend(split_list_value(request.query.get(key)))
    return values


def get_query_mapping(request: Request | None, name: str) -> dict[str, str]:
    """Parámetros mapa: `name[field]=value` o un dict anidado en `name`."""

    if request is None:
        return {}
    out: dict[str, str] = {}
    nested = request.query.get(name)
    if isinstance(nested, dict):
        out.update({str(k): str(v) for k, v in nested.items() if v is not None})
    prefix = f"{name}["
    for key, value in request.query.items():
        if not (key.startswith(prefix) and key.endswith("]")):
            continue
        if isinstance(value, list):
            value = value[0] if value else None
        field = key[len(prefix):-1]
        if field and value is not None:
            out[field] = str(value)
    return out


def split_list_value(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split(",")
    return [str(item).strip() for item in items if item is not None and str(item).strip()]
