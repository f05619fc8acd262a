"""
===============================================================================
TARJETA CRC — app/interfaces/api/http/routers/bus_chat.py
===============================================================================

Responsibilities:
    - Abrir chats con conductores y listarlos según el rol activo.
    - Leer (marca como leído) y publicar mensajes o acciones rápidas.
    - Cerrar un chat (dueño).

Notas:
    - Todo el router exige rol activo socio, administrador o conductor.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.application.usecases.bus_chat import (
    BusChatMessagesInput,
    BusChatResult,
    CloseBusChatUseCase,
    ListBusChatMessagesUseCase,
    ListBusChatsInput,
    ListBusChatsUseCase,
    OpenBusChatInput,
    OpenBusChatUseCase,
    PostBusChatMessageInput,
    PostBusChatMessageUseCase,
)
from app.container import (
    get_close_bus_chat_use_case,
    get_list_bus_chat_messages_use_case,
    get_list_bus_chats_use_case,
    get_open_bus_chat_use_case,
    get_post_bus_chat_message_use_case,
)
from app.domain.roles import BUS_CHAT_ROLES, BUS_OWNER_ROLES
from app.identity.auth_users import CurrentUser, require_active_role
from fastapi import APIRouter, Depends, Response

from ..error_mapping import raise_bus_chat_error
from ..schemas.bus_chat import (
    BusChatMessagesRes,
    BusChatRes,
    BusChatsListRes,
    OpenBusChatReq,
    PostBusChatMessageReq,
    to_bus_chat_message_res,
    to_bus_chat_res,
)

router = APIRouter(prefix="/bus-chats", tags=["bus-chats"])

_require_participant_role = require_active_role(*sorted(BUS_CHAT_ROLES))
_require_owner_role = require_active_role(*sorted(BUS_OWNER_ROLES))


def _messages_response(result: BusChatResult) -> BusChatMessagesRes:
    if result.error is not None:
        raise_bus_chat_error(result.error)
    return BusChatMessagesRes(
        chat=to_bus_chat_res(result.chat),
        messages=[to_bus_chat_message_res(m) for m in result.messages],
    )


@router.get("", response_model=BusChatsListRes)
def list_chats(
    user: CurrentUser = Depends(_require_participant_role),
    use_case: ListBusChatsUseCase = Depends(get_list_bus_chats_use_case),
):
    result = use_case.execute(
        ListBusChatsInput(actor_id=user.user_id, actor_role=user.active_role)
    )
    if result.error is not None:
        raise_bus_chat_error(result.error)
    return BusChatsListRes(chats=[to_bus_chat_res(c) for c in result.chats])


@router.post("", response_model=BusChatRes, status_code=201)
def open_chat(
    req: OpenBusChatReq,
    response: Response,
    user: CurrentUser = Depends(_require_owner_role),
    use_case: OpenBusChatUseCase = Depends(get_open_bus_chat_use_case),
):
    result = use_case.execute(
        OpenBusChatInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            bus_id=req.bus_id,
            driver_id=req.driver_id,
        )
    )
    if result.error is not None:
        raise_bus_chat_error(result.error)
    if not result.created:
        response.status_code = 200
    return to_bus_chat_res(result.chat)


@router.get("/{chat_id}/messages", response_model=BusChatMessagesRes)
def list_messages(
    chat_id: UUID,
    user: CurrentUser = Depends(_require_participant_role),
    use_case: ListBusChatMessagesUseCase = Depends(get_list_bus_chat_messages_use_case),
):
    result = use_case.execute(
        BusChatMessagesInput(
            actor_id=user.user_id, actor_role=user.active_role, chat_id=chat_id
        )
    )
    return _messages_response(result)


@router.post("/{chat_id}/messages", response_model=BusChatMessagesRes, status_code=201)
def post_message(
    chat_id: UUID,
    req: PostBusChatMessageReq,
    user: CurrentUser = Depends(_require_participant_role),
    use_case: PostBusChatMessageUseCase = Depends(get_post_bus_chat_message_use_case),
):
    result = use_case.execute(
        PostBusChatMessageInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            chat_id=chat_id,
            content=req.content,
            quick_action=req.quick_action,
        )
    )
    return _messages_response(result)


@router.post("/{chat_id}/close", response_model=BusChatRes)
def close_chat(
    chat_id: UUID,
    user: CurrentUser = Depends(_require_owner_role),
    use_case: CloseBusChatUseCase = Depends(get_close_bus_chat_use_case),
):
    result = use_case.execute(
        BusChatMessagesInput(
            actor_id=user.user_id, actor_role=user.active_role, chat_id=chat_id
        )
    )
    if result.error is not None:
        raise_bus_chat_error(result.error)
    return to_bus_chat_res(result.chat)
