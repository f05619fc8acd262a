"""Resultados y errores del chat de soporte."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import ChatMessage, ChatThread

MSG_THREAD_NOT_FOUND = "Conversación no encontrada"
MSG_EMPTY_MESSAGE = "El mensaje no puede estar vacío"
MSG_THREAD_CLOSED = "La conversación está cerrada"
MSG_MESSAGE_TOO_LONG = "El mensaje no puede superar {max} caracteres"

MAX_MESSAGE_LENGTH = 2000


class SupportErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class SupportError:
    code: SupportErrorCode
    message: str


@dataclass
class ThreadResult:
    thread: ChatThread | None = None
    messages: List[ChatMessage] = field(default_factory=list)
    error: SupportError | None = None


@dataclass
class ThreadListResult:
    threads: List[ChatThread] = field(default_factory=list)
