"""
===============================================================================
TARJETA CRC — domain/support_bot.py
===============================================================================

Módulo:
    Respuestas automáticas del chat de soporte

Responsabilidades:
    - Elegir una respuesta enlatada según palabras clave del mensaje.
    - Proveer el mensaje de bienvenida de cada conversación nueva.

Colaboradores:
    - application.usecases.support_chat

Notas:
    - Coincidencia por subcadena sobre el texto en minúsculas y sin tildes
      ("cuánto falta" también matchea "cuanto falta").
    - Las reglas se evalúan en orden; gana la primera.
===============================================================================
"""

from __future__ import annotations

import unicodedata

WELCOME_MESSAGE = (
    "¡Hola! Soy el asistente virtual de la Cooperativa Mariscal Sucre. "
    "¿En qué puedo ayudarte hoy?\n\n"
    "Puedes preguntar sobre:\n"
    "• Horarios de buses\n"
    "• Tarifas\n"
    "• Tiempos de viaje\n"
    "• Información general"
)

SCHEDULES_REPLY = (
    "Los horarios de nuestros buses son:\n"
    "• Milagro - Guayaquil: Cada 30 minutos desde 5:00 AM hasta 10:00 PM\n"
    "• Milagro - Durán: Cada 45 minutos desde 6:00 AM hasta 9:00 PM\n\n"
    "Los horarios son aproximados y pueden variar por tráfico."
)

FARES_REPLY = (
    "Nuestras tarifas son:\n"
    "• Milagro - Guayaquil: $3.00\n"
    "• Milagro - Durán: $2.50\n"
    "• Milagro - Babahoyo: $3.50\n"
    "• Milagro - Machala: $4.50"
)

TRAVEL_TIME_REPLY = (
    "Tiempos estimados de viaje:\n"
    "• A Guayaquil: 1 hora 30 minutos\n"
    "• A Durán: 1 hora 10 minutos\n"
    "• A Babahoyo: 2 horas\n"
    "• A Machala: 2 horas 30 minutos\n\n"
    "Los tiempos pueden variar según el tráfico."
)

FALLBACK_REPLY = (
    "Gracias por tu consulta. Un operador te responderá pronto. "
    "Para consultas inmediatas, puedes llamar a nuestras oficinas: (04) 2970-123"
)

NEW_THREAD_SUBJECT = "Nueva consulta"

_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("horario", "proximo bus"), SCHEDULES_REPLY),
    (("precio", "tarifa"), FARES_REPLY),
    (("tiempo", "cuanto falta"), TRAVEL_TIME_REPLY),
)


def _normalize(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def reply_for(text: str) -> str:
    normalized = _normalize(text or "")
    for keywords, reply in _RULES:
        if any(keyword in normalized for keyword in keywords):
            return reply
    return FALLBACK_REPLY
