"""Exportación JSON de payloads.

Por qué JSON:
- Es lo que el host consume; volcarlo a disco permite comparar respuestas
  entre entornos o adjuntarlas a un bug.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def export_payload_json(*, payload: dict[str, Any], output_path: Path) -> Path:
    """Exporta un payload (ya en forma JSON) a UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
