"""Gateway Interfaces (Ports)"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class LanguageModelError(Exception):
    """LLM 呼び出しエラー"""

    pass


@dataclass(frozen=True)
class InferenceConfig:
    """推論パラメータ"""

    max_tokens: int = 4096
    temperature: float = 0.7
    top_p: float = 0.9

    def to_bedrock(self) -> dict:
        return {
            "maxTokens": self.max_tokens,
            "temperature": self.temperature,
            "topP": self.top_p,
        }


class ILanguageModelGateway(ABC):
    """
    Language Model Gateway Interface

    Bedrock などのテキスト生成サービスとの通信を抽象化する。
    """

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        config: InferenceConfig | None = None,
    ) -> str:
        """プロンプトを送信し、生成されたテキスト全体を返す"""
        pass
