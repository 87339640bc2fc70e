"""Files module - upload text extraction."""

from apps.files.routes import router

__all__ = ["router"]
