"""Contrato de los routers de páginas dinámicas."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.extension import ProjectContext, Request


@runtime_checkable
class PageRouter(Protocol):
    """Reconoce un tipo de URL y carga los datos de su página.

    `identify_from` es puro (solo mira el request); `load_for` hace I/O y
    devuelve `None` cuando la URL tenía la forma correcta pero no hay datos.
    """

    def identify_from(self, request: Request) -> bool:
        ...

    async def load_for(self, request: Request, project_context: ProjectContext) -> Any:
        ...


@runtime_checkable
class ProductPageRouter(PageRouter, Protocol):
    """Router de producto que además expone el slug pedido en la URL."""

    def requested_slug(self, request: Request) -> str | None:
        ...
