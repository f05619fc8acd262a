"""
===============================================================================
TARJETA CRC — app/interfaces/api/http/routers/support.py
===============================================================================

Responsibilities:
    - Abrir conversaciones de soporte y listar las propias.
    - Publicar mensajes (respuesta automática del asistente incluida).
    - Devolver la transcripción de una conversación propia.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.application.usecases.support_chat import (
    ListSupportMessagesUseCase,
    ListSupportThreadsUseCase,
    OpenSupportThreadUseCase,
    PostSupportMessageUseCase,
    ThreadResult,
)
from app.container import (
    get_list_support_messages_use_case,
    get_list_support_threads_use_case,
    get_open_support_thread_use_case,
    get_post_support_message_use_case,
)
from app.identity.auth_users import CurrentUser, require_user
from fastapi import APIRouter, Depends

from ..error_mapping import raise_support_error
from ..schemas.support import (
    OpenThreadReq,
    PostMessageReq,
    ThreadMessagesRes,
    ThreadsListRes,
    to_message_res,
    to_thread_res,
)

router = APIRouter(prefix="/support/threads", tags=["support"])


def _thread_response(result: ThreadResult) -> ThreadMessagesRes:
    if result.error is not None:
        raise_support_error(result.error)
    return ThreadMessagesRes(
        thread=to_thread_res(result.thread),
        messages=[to_message_res(m) for m in result.messages],
    )


@router.get("", response_model=ThreadsListRes)
def list_threads(
    user: CurrentUser = Depends(require_user()),
    use_case: ListSupportThreadsUseCase = Depends(get_list_support_threads_use_case),
):
    result = use_case.execute(user.user_id)
    return ThreadsListRes(threads=[to_thread_res(t) for t in result.threads])


@router.post("", response_model=ThreadMessagesRes, status_code=201)
def open_thread(
    req: OpenThreadReq | None = None,
    user: CurrentUser = Depends(require_user()),
    use_case: OpenSupportThreadUseCase = Depends(get_open_support_thread_use_case),
):
    subject = req.subject if req is not None else None
    return _thread_response(use_case.execute(user.user_id, subject))


@router.get("/{thread_id}/messages", response_model=ThreadMessagesRes)
def list_messages(
    thread_id: UUID,
    user: CurrentUser = Depends(require_user()),
    use_case: ListSupportMessagesUseCase = Depends(get_list_support_messages_use_case),
):
    return _thread_response(use_case.execute(user.user_id, thread_id))


@router.post("/{thread_id}/messages", response_model=ThreadMessagesRes, status_code=201)
def post_message(
    thread_id: UUID,
    req: PostMessageReq,
    user: CurrentUser = Depends(require_user()),
    use_case: PostSupportMessageUseCase = Depends(get_post_support_message_use_case),
):
    return _thread_response(use_case.execute(user.user_id, thread_id, req.content))
