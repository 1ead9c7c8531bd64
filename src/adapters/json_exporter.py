"""Exportación JSON de resoluciones de enlaces.

Por qué JSON:
- Interoperabilidad con otras herramientas (hojas de cálculo, scripts de
  migración de carpetas).
- Permite revisar en lote qué esquema se eligió y por qué.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from core.services.link_resolver import LinkResolution


def resolution_to_dict(resolution: LinkResolution) -> dict[str, Any]:
    return {
        "element_id": resolution.element_id,
        "intent": resolution.intent.value if resolution.intent else None,
        "reason": resolution.reason.value,
        "url": resolution.url,
        "used_network": resolution.used_network,
    }


def export_resolutions_json(*, resolutions: Iterable[LinkResolution], output_path: Path) -> Path:
    """Exporta las resoluciones a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [resolution_to_dict(r) for r in resolutions]
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
