"""
===============================================================================
TARJETA CRC — domain/bus_chat.py
===============================================================================

Módulo:
    Acciones rápidas del chat dueño <-> conductor

Responsabilidades:
    - Catálogo cerrado de acciones rápidas y su texto publicado.
    - Resolver una acción rápida a (texto, metadata) del mensaje.

Colaboradores:
    - application.usecases.bus_chat

Notas:
    - La clave de la acción viaja en metadata["action_type"]; el texto es
      sólo para mostrar.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Optional

QUICK_ACTIONS: dict[str, str] = {
    "report_delay": "Reportando retraso en la ruta",
    "retire_bus": "Retirando bus del servicio por mantenimiento",
    "location_ping": "Enviando ubicación actual",
}


def quick_action_message(action: str) -> Optional[tuple[str, dict[str, Any]]]:
    """(texto, metadata) de la acción, o None si no existe."""
    key = (action or "").strip().lower()
    text = QUICK_ACTIONS.get(key)
    if text is None:
        return None
    return text, {"action_type": key}
