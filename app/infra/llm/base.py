from abc import ABC
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage


def build_completion(model: str, content: str, usage: dict | None = None) -> dict[str, Any]:
    """채팅 완성 응답 형태의 페이로드 생성"""
    return {
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
            }
        ],
        "usage": usage or {},
    }


class BaseLLMClient(ABC):
    """LLM 클라이언트 추상 클래스

    하위 클래스는 __init__에서 _model과 _model_name을 설정한다.
    """

    provider: str
    _model: BaseChatModel
    _model_name: str

    @staticmethod
    def _require(value: str, env_name: str) -> None:
        if not value:
            raise ValueError(f"{env_name}가 설정되지 않았습니다")

    def get_model_name(self) -> str:
        """사용 중인 모델 이름 반환"""
        return self._model_name

    async def complete(
        self, messages: list[BaseMessage], config: dict | None = None
    ) -> dict[str, Any]:
        """메시지를 보내고 채팅 완성 형태로 결과 반환"""
        result = await self._model.ainvoke(messages, config=config)

        content = result.content if isinstance(result.content, str) else str(result.content)
        usage = dict(getattr(result, "usage_metadata", None) or {})
        return build_completion(self._model_name, content, usage)
