"""Errores del dominio de la extensión.

Solo se modelan los fallos que la extensión distingue; cualquier otro error
se propaga tal cual al host.
"""

from __future__ import annotations


class ExtensionError(Exception):
    """Base de los errores propios de la extensión."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ExtensionError):
    """El request/contexto no trae lo que la operación necesita."""


class ResourceNotFoundError(ExtensionError):
    """Data source, action o recurso desconocido."""


class ExternalError(ExtensionError):
    """La API de commerce respondió con un status no exitoso."""

    def __init__(self, message: str, *, status_code: int, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
