from .support_chat import (
    ListSupportMessagesUseCase,
    ListSupportThreadsUseCase,
    OpenSupportThreadUseCase,
    PostSupportMessageUseCase,
)
from .support_results import (
    SupportError,
    SupportErrorCode,
    ThreadListResult,
    ThreadResult,
)

__all__ = [
    "OpenSupportThreadUseCase",
    "PostSupportMessageUseCase",
    "ListSupportMessagesUseCase",
    "ListSupportThreadsUseCase",
    "SupportError",
    "SupportErrorCode",
    "ThreadListResult",
    "ThreadResult",
]
