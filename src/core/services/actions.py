"""Tabla de actions delegadas (account, cart, product, wishlist, ...).

Cada dominio apunta a un módulo con handlers `async (request, context) ->
Response`. Los módulos se pueden dar ya importados o como ruta importable; en
ese caso se importan la primera vez que se usan, así un dominio mal
configurado no rompe el arranque del resto.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import re
from types import ModuleType
from typing import Any, Awaitable, Callable, Mapping

from core.domain.errors import ResourceNotFoundError
from core.domain.extension import ActionContext, Request, Response

logger = logging.getLogger(__name__)

ActionHandler = Callable[[Request, ActionContext], Awaitable[Response]]

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY_RE.sub("_", name).lower()


def _is_exported(module: Any, name: str) -> bool:
    """Solo `__all__` (o, sin él, coroutines definidas en el propio módulo)."""

    exported = getattr(module, "__all__", None)
    if exported is not None:
        return name in exported
    candidate = getattr(module, name, None)
    return inspect.iscoroutinefunction(candidate) and getattr(candidate, "__module__", None) == getattr(
        module, "__name__", None
    )


class ActionTable:
    def __init__(self, modules: Mapping[str, ModuleType | str | Any]) -> None:
        self._modules: dict[str, ModuleType | str | Any] = dict(modules)

    def namespaces(self) -> list[str]:
        return sorted(self._modules)

    def describe(self) -> dict[str, str]:
        """Dominio -> nombre del módulo (sin importar nada)."""

        out: dict[str, str] = {}
        for namespace, module in self._modules.items():
            out[namespace] = module if isinstance(module, str) else getattr(module, "__name__", repr(module))
        return out

    def module(self, namespace: str) -> Any:
        if namespace not in self._modules:
            raise ResourceNotFoundError(f"Unknown action namespace {namespace!r}")

        module = self._modules[namespace]
        if isinstance(module, str):
            try:
                module = importlib.import_module(module)
            except ImportError as exc:
                logger.error("Action module %s for %r could not be imported", module, namespace)
                raise ResourceNotFoundError(
                    f"Action module {module!r} for namespace {namespace!r} is not available"
                ) from exc
            self._modules[namespace] = module
        return module

    def handler(self, namespace: str, action: str) -> ActionHandler:
        """Handler `action` del dominio; acepta `getProduct` o `get_product`."""

        if not action or action.startswith("_"):
            raise ResourceNotFoundError(f"Unknown action {namespace}/{action}")

        module = self.module(namespace)
        for name in (action, _snake_case(action)):
            if not _is_exported(module, name):
                continue
            candidate = getattr(module, name, None)
            if callable(candidate):
                return candidate
        raise ResourceNotFoundError(f"Unknown action {namespace}/{action}")

    async def dispatch(
        self,
        namespace: str,
        action: str,
        request: Request,
        context: ActionContext,
    ) -> Response:
        handler = self.handler(namespace, action)
        logger.debug("Dispatching action %s/%s", namespace, action)
        return await handler(request, context)
