"""GET /health - Report service status."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from config import get_app_config, get_settings
from services.document import SUPPORTED_EXTENSIONS

# --- Response Schemas ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Environment name")
    model: str = Field(..., description="Configured completion model")
    supported_extensions: list[str] = Field(
        ..., description="File extensions accepted by /parse-file"
    )
    timestamp: datetime


# --- Handler ---


async def check_health() -> HealthResponse:
    """Report configuration of the running service.

    The provider is not called; a missing API key already fails at startup.
    """
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        version=get_app_config()["version"],
        environment=settings.environment,
        model=settings.llm_model,
        supported_extensions=sorted(SUPPORTED_EXTENSIONS),
        timestamp=datetime.now(UTC),
    )
