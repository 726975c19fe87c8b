"""Contratos con el framework de composición de páginas (host).

Por qué modelos propios:
- El host entrega requests/contextos como JSON; validarlos en el borde evita
  `dict.get` encadenados por todo el Core.
- Los resultados se serializan con los nombres camelCase que espera el host
  (`dynamicPageType`, `dataSourcePayload`, `previewPayload`, ...).
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import Field
from pydantic_core import to_jsonable_python

from core.domain.models import CamelModel


class Request(CamelModel):
    """Request HTTP tal como lo reenvía el host."""

    method: str = Field(default="GET")
    path: str = Field(default="/", description="Ruta del request (sin query string).")
    query: dict[str, Any] = Field(
        default_factory=dict,
        description="Parámetros de query; valores str o list[str].",
    )
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | None = None
    session_data: dict[str, Any] | None = None

    def header(self, name: str) -> str | None:
        """Lookup case-insensitive de cabeceras."""

        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class ProjectContext(CamelModel):
    """Contexto de proyecto que el host adjunta a cada invocación."""

    project_id: str = Field(default="storefront")
    environment: str = Field(default="development")
    locales: list[str] = Field(default_factory=list)
    default_locale: str | None = None
    project_configuration: dict[str, Any] = Field(default_factory=dict)


class DataSourceConfiguration(CamelModel):
    data_source_id: str | None = None
    type: str = Field(..., min_length=1, description="Nombre del data source (`frontastic/...`).")
    name: str | None = None
    configuration: dict[str, Any] = Field(default_factory=dict)
    stream_id: str | None = None
    preloaded_value: Any = None


class PageFolder(CamelModel):
    page_folder_id: str | None = None
    data_source_configurations: list[DataSourceConfiguration] = Field(default_factory=list)


class DataSourceContext(CamelModel):
    project_context: ProjectContext = Field(default_factory=ProjectContext)
    request: Request | None = None
    page_folder: PageFolder | None = None
    is_preview: bool = False


class DynamicPageContext(CamelModel):
    project_context: ProjectContext = Field(default_factory=ProjectContext)


class ActionContext(CamelModel):
    project_context: ProjectContext = Field(default_factory=ProjectContext)


class DynamicPageSuccessResult(CamelModel):
    dynamic_page_type: str = Field(..., min_length=1)
    data_source_payload: Any = Field(default_factory=dict)
    page_matching_payload: Any = Field(default_factory=dict)


class DynamicPageRedirectResult(CamelModel):
    status_code: int = Field(default=301, ge=300, le=399)
    redirect_location: str = Field(..., min_length=1)


class DataSourcePreviewPayloadElement(CamelModel):
    title: str | None = None
    image: str | None = None


class DataSourceResult(CamelModel):
    """Resultado de un data source; `previewPayload` solo en modo preview."""

    data_source_payload: Any = Field(default_factory=dict)
    preview_payload: list[DataSourcePreviewPayloadElement] | None = None

    def as_payload(self) -> dict[str, Any]:
        data = super().as_payload()
        if self.preview_payload is None:
            data.pop("previewPayload", None)
        return data


class Response(CamelModel):
    """Respuesta de un action handler; `body` ya va serializado."""

    status_code: int = Field(default=200, ge=100, le=599)
    body: str | None = None
    session_data: dict[str, Any] | None = None

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        *,
        status_code: int = 200,
        session_data: dict[str, Any] | None = None,
    ) -> "Response":
        return cls(
            status_code=status_code,
            body=json.dumps(to_jsonable_python(payload, by_alias=True), ensure_ascii=False),
            session_data=session_data,
        )
