from app.core.config import settings
from app.core.logging import get_logger
from app.infra.llm.base import BaseLLMClient
from app.infra.llm.providers import GeminiClient, OpenAIClient, VLLMClient

logger = get_logger(__name__)

PROVIDERS: dict[str, type[BaseLLMClient]] = {
    OpenAIClient.provider: OpenAIClient,
    VLLMClient.provider: VLLMClient,
    GeminiClient.provider: GeminiClient,
}

_summary_client: BaseLLMClient | None = None


def get_summary_client() -> BaseLLMClient:
    """주간 요약용 LLM 클라이언트 반환 (settings.llm_provider 기준, 최초 1회 생성)"""
    global _summary_client

    if _summary_client is not None:
        return _summary_client

    client_class = PROVIDERS.get(settings.llm_provider)
    if client_class is None:
        raise ValueError(f"지원하지 않는 LLM 프로바이더: {settings.llm_provider}")

    _summary_client = client_class()
    logger.info(
        "LLM 클라이언트 초기화 provider=%s model=%s",
        client_class.provider,
        _summary_client.get_model_name(),
    )
    return _summary_client


def reset_clients() -> None:
    """클라이언트 캐시 초기화 - 테스트용"""
    global _summary_client
    _summary_client = None
