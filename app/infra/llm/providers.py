"""LLM 프로바이더별 클라이언트

- openai: OpenAI API (개발/테스트)
- vllm: OpenAI 호환 엔드포인트 (vLLM, HF TGI 등 운영용)
- gemini: Google Gemini
"""

from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from app.core.config import settings
from app.infra.llm.base import BaseLLMClient


class OpenAIClient(BaseLLMClient):
    provider = "openai"

    def __init__(self):
        self._require(settings.openai_api_key, "OPENAI_API_KEY")
        self._model_name = settings.openai_model
        self._model = ChatOpenAI(
            model=self._model_name,
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout,
            temperature=settings.summary_temperature,
            max_tokens=settings.summary_max_tokens,
        )


class VLLMClient(BaseLLMClient):
    provider = "vllm"

    def __init__(self):
        self._require(settings.vllm_api_url, "VLLM_API_URL")
        self._model_name = settings.vllm_model
        # 인증 없는 엔드포인트도 ChatOpenAI는 키 값을 요구함
        self._model = ChatOpenAI(
            model=self._model_name,
            api_key=settings.vllm_api_key or "EMPTY",
            base_url=settings.vllm_api_url,
            timeout=settings.vllm_timeout,
            temperature=settings.summary_temperature,
            max_tokens=settings.summary_max_tokens,
        )


class GeminiClient(BaseLLMClient):
    provider = "gemini"

    def __init__(self):
        self._require(settings.gemini_api_key, "GEMINI_API_KEY")
        self._model_name = settings.gemini_model
        self._model = ChatGoogleGenerativeAI(
            model=self._model_name,
            google_api_key=settings.gemini_api_key,
            timeout=settings.gemini_timeout,
            temperature=settings.summary_temperature,
            max_output_tokens=settings.summary_max_tokens,
        )
