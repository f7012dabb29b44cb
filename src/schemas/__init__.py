from .chats import ChatCreate, ChatContinue, ErrorResponse

__all__ = [
    "ChatCreate",
    "ChatContinue",
    "ErrorResponse",
]
