"""Shared types and dataclasses for services.

Provides typed alternatives to dict[str, Any] for better type safety.
"""

from dataclasses import dataclass, field


@dataclass
class ExtractedFile:
    """Result of extracting text from an uploaded file."""

    file_name: str
    file_type: str | None
    file_size: int
    content: str
    truncated: bool = False

    @property
    def content_length(self) -> int:
        return len(self.content)


@dataclass
class TokenUsage:
    """Token accounting reported by the provider for one completion."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def as_dict(self) -> dict[str, int]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass
class Completion:
    """A generated reply from the hosted model."""

    text: str
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
