from .bus_chat import (
    BusChatMessagesInput,
    CloseBusChatUseCase,
    ListBusChatMessagesUseCase,
    ListBusChatsInput,
    ListBusChatsUseCase,
    OpenBusChatInput,
    OpenBusChatUseCase,
    PostBusChatMessageInput,
    PostBusChatMessageUseCase,
)
from .bus_chat_results import (
    BusChatError,
    BusChatErrorCode,
    BusChatListResult,
    BusChatResult,
)

__all__ = [
    "OpenBusChatInput",
    "OpenBusChatUseCase",
    "ListBusChatsInput",
    "ListBusChatsUseCase",
    "BusChatMessagesInput",
    "ListBusChatMessagesUseCase",
    "PostBusChatMessageInput",
    "PostBusChatMessageUseCase",
    "CloseBusChatUseCase",
    "BusChatError",
    "BusChatErrorCode",
    "BusChatListResult",
    "BusChatResult",
]
