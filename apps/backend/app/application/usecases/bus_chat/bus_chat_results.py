"""Resultados y errores del chat dueño <-> conductor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import BusChat, BusChatMessage

MSG_FORBIDDEN = "No tienes permisos para usar el chat de buses"
MSG_OWNER_ONLY = "Sólo el dueño del bus puede cerrar el chat"
MSG_CHAT_NOT_FOUND = "Chat no encontrado"
MSG_CHAT_CLOSED = "El chat está cerrado"
MSG_EMPTY_MESSAGE = "El mensaje no puede estar vacío"
MSG_MESSAGE_TOO_LONG = "El mensaje no puede superar {max} caracteres"
MSG_UNKNOWN_QUICK_ACTION = "Acción rápida desconocida: {value}"
MSG_NOT_A_DRIVER = "El usuario indicado no tiene el rol Conductor"
MSG_SELF_CHAT = "No puedes abrir un chat contigo mismo"

MAX_MESSAGE_LENGTH = 2000


class BusChatErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class BusChatError:
    code: BusChatErrorCode
    message: str


@dataclass
class BusChatResult:
    chat: BusChat | None = None
    messages: List[BusChatMessage] = field(default_factory=list)
    created: bool = False
    error: BusChatError | None = None


@dataclass
class BusChatListResult:
    chats: List[BusChat] = field(default_factory=list)
    error: BusChatError | None = None
