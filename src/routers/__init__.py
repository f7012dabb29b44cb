# src/routers/__init__.py
from .health_check import router as health_check_router
from .chats import router as chats_router
from .upload import router as upload_router

__all__ = [
    "health_check_router",
    "chats_router",
    "upload_router",
]
