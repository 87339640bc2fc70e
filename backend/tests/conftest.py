"""Pytest configuration and fixtures for AI Assistant tests."""

import os
import sys

# Set required env vars BEFORE any imports that might trigger Settings
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from unittest.mock import AsyncMock

import pytest

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from services.types import Completion, TokenUsage  # noqa: E402


@pytest.fixture
def sample_completion():
    """A typical provider reply."""
    return Completion(
        text="Here is a summary of your document.",
        model="claude-sonnet-4-20250514",
        usage=TokenUsage(input_tokens=120, output_tokens=30),
    )


@pytest.fixture
def mock_llm(sample_completion):
    """Mock LLM provider returning sample_completion."""
    service = AsyncMock()
    service.complete.return_value = sample_completion
    return service


@pytest.fixture
def sample_conversation():
    """A short conversation ending with a new user turn."""
    return [
        {"role": "user", "content": "Hi there"},
        {"role": "assistant", "content": "Hello! How can I help?"},
        {"role": "user", "content": "What does the report say?"},
    ]


@pytest.fixture
def sample_markdown():
    """Sample markdown upload content."""
    return """# Quarterly Report

Revenue grew 12% quarter over quarter.

- North region: +8%
- South region: +15%

Ünïcödé characters survive extraction.
"""
