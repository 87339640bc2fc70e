"""Chat module - conversation forwarding to the hosted model."""

from apps.chat.routes import router

__all__ = ["router"]
