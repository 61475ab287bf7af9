"""Bedrock Converse Gateway Implementation"""
from __future__ import annotations

from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from mealplanner.application.ports.gateways import (
    ILanguageModelGateway,
    InferenceConfig,
    LanguageModelError,
)

logger = structlog.get_logger()


class BedrockConverseGateway(ILanguageModelGateway):
    """
    Bedrock Converse Gateway

    Bedrock Runtime の ConverseStream API でテキストを生成する。
    ストリームの contentBlockDelta を連結して全文を返す。
    """

    def __init__(
        self,
        region: str = "us-east-1",
        model_id: str = "anthropic.claude-3-5-sonnet-20241022-v2:0",
        client: Any = None,
    ):
        self.region = region
        self.model_id = model_id
        self._client = client or boto3.client("bedrock-runtime", region_name=region)

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        config: InferenceConfig | None = None,
    ) -> str:
        """
        プロンプトを送信し、生成テキスト全体を返す

        Args:
            system_prompt: システムプロンプト
            user_message: ユーザーメッセージ
            config: 推論パラメータ

        Returns:
            生成されたテキスト
        """
        config = config or InferenceConfig()
        log = logger.bind(model_id=self.model_id, max_tokens=config.max_tokens)
        log.info("bedrock_converse_started")

        try:
            response = self._client.converse_stream(
                modelId=self.model_id,
                system=[{"text": system_prompt}],
                messages=[
                    {
                        "role": "user",
                        "content": [{"text": user_message}],
                    }
                ],
                inferenceConfig=config.to_bedrock(),
            )
            text, stop_reason, usage = self._collect(response.get("stream", []))
        except (ClientError, BotoCoreError) as e:
            log.error("bedrock_converse_failed", error=str(e))
            raise LanguageModelError(f"Bedrock invocation failed: {e}") from e

        log.info(
            "bedrock_converse_completed",
            stop_reason=stop_reason,
            input_tokens=usage.get("inputTokens"),
            output_tokens=usage.get("outputTokens"),
            response_length=len(text),
        )
        if stop_reason == "max_tokens":
            log.warning("bedrock_response_truncated")

        if not text:
            raise LanguageModelError("Bedrock returned an empty response")
        return text

    @staticmethod
    def _collect(stream: Any) -> tuple[str, str | None, dict[str, Any]]:
        """ストリームイベントからテキスト・停止理由・使用量を取り出す"""
        chunks: list[str] = []
        stop_reason = None
        usage: dict[str, Any] = {}

        for event in stream:
            if "contentBlockDelta" in event:
                text = event["contentBlockDelta"].get("delta", {}).get("text")
                if text:
                    chunks.append(text)
            elif "messageStop" in event:
                stop_reason = event["messageStop"].get("stopReason")
            elif "metadata" in event:
                usage = event["metadata"].get("usage", {})
            else:
                for key in (
                    "internalServerException",
                    "modelStreamErrorException",
                    "validationException",
                    "throttlingException",
                    "serviceUnavailableException",
                ):
                    if key in event:
                        message = event[key].get("message", key)
                        raise LanguageModelError(f"Bedrock stream error ({key}): {message}")

        return "".join(chunks), stop_reason, usage
