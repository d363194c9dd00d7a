from app.infra.llm.base import BaseLLMClient, build_completion
from app.infra.llm.client import (
    SUMMARY_ERROR_PLACEHOLDER,
    extract_summary_text,
    format_activity_for_prompt,
    request_summary,
)
from app.infra.llm.factory import get_summary_client, reset_clients
from app.infra.llm.providers import GeminiClient, OpenAIClient, VLLMClient

__all__ = [
    "BaseLLMClient",
    "OpenAIClient",
    "VLLMClient",
    "GeminiClient",
    "get_summary_client",
    "reset_clients",
    "build_completion",
    "request_summary",
    "extract_summary_text",
    "format_activity_for_prompt",
    "SUMMARY_ERROR_PLACEHOLDER",
]
