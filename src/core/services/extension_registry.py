"""Registro de la extensión: lo que el host invoca.

Agrupa en un objeto el `dynamic-page-handler`, los `data-sources` y las
`actions`, de modo que la CLI, los tests o un servidor puedan usar la misma
composición.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.config import DEFAULT_ACTION_MODULES, AppSettings
from core.domain.errors import ResourceNotFoundError
from core.domain.extension import (
    ActionContext,
    DataSourceConfiguration,
    DataSourceContext,
    DataSourceResult,
    DynamicPageContext,
    Request,
    Response,
)
from core.interfaces.catalog import CatalogFactory
from core.services.actions import ActionTable
from core.services.data_sources import DataSourceResolver, DataSources
from core.services.dynamic_pages import DynamicPageHandler, DynamicPageResult
from core.services.page_routers import CategoryRouter, ProductRouter, SearchRouter

logger = logging.getLogger(__name__)


@dataclass
class ExtensionRegistry:
    dynamic_page_handler: DynamicPageHandler
    data_sources: dict[str, DataSourceResolver]
    actions: ActionTable

    async def handle_dynamic_page(self, request: Request, context: DynamicPageContext) -> DynamicPageResult:
        return await self.dynamic_page_handler(request, context)

    async def resolve_data_source(
        self, config: DataSourceConfiguration, context: DataSourceContext
    ) -> DataSourceResult:
        resolver = self.data_sources.get(config.type)
        if resolver is None:
            raise ResourceNotFoundError(f"Unknown data source {config.type!r}")
        logger.debug("Resolving data source %s (preview=%s)", config.type, context.is_preview)
        return await resolver(config, context)

    async def run_action(
        self,
        namespace: str,
        action: str,
        request: Request,
        context: ActionContext,
    ) -> Response:
        return await self.actions.dispatch(namespace, action, request, context)


def _default_api_factory() -> CatalogFactory:
    # Import diferido: el Core no depende del adaptador HTTP salvo aquí.
    from adapters.commerce import build_product_api  # noqa: PLC0415

    return build_product_api


def build_extension_registry(
    settings: AppSettings | None = None,
    *,
    api_factory: CatalogFactory | None = None,
) -> ExtensionRegistry:
    settings = settings or AppSettings()
    api_factory = api_factory or _default_api_factory()

    handler = DynamicPageHandler(
        product_router=ProductRouter(api_factory, settings),
        search_router=SearchRouter(api_factory, settings),
        category_router=CategoryRouter(api_factory, settings),
        settings=settings,
    )
    data_sources = DataSources(api_factory, settings).registry()
    actions = ActionTable({**DEFAULT_ACTION_MODULES, **settings.action_modules})

    return ExtensionRegistry(
        dynamic_page_handler=handler,
        data_sources=data_sources,
        actions=actions,
    )
