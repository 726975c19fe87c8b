"""Launcher de desarrollo: `python -m main page /cart` sin `pip install -e .`.

El código vive en `src/`; aquí solo se añade esa carpeta a `sys.path` y se
delega en la CLI (`cli.main.run`), igual que el script `storefront-pages`.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


if __name__ == "__main__":
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    from cli.main import run  # noqa: PLC0415

    run()
