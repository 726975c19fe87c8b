"""Contratos del Core con el exterior.

- `catalog.ProductCatalog`: lecturas de productos/categorías (lo implementa
  `adapters.commerce.ProductApi`).
- `router.PageRouter`: reconoce una URL y carga sus datos.
"""
