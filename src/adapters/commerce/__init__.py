"""Adaptador de la API de commerce (commercetools HTTP API).

Cada módulo implementa una pieza de `core.interfaces.catalog.ProductCatalog`:
auth (token), mapper (JSON <-> dominio) y el cliente `ProductApi`.
"""

from adapters.commerce.product_api import ProductApi, build_product_api, settings_for_project

__all__ = [
    "ProductApi",
    "build_product_api",
    "settings_for_project",
]
