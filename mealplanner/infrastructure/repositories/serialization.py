"""DynamoDB Item Serialization"""
from __future__ import annotations

import base64
import json
from decimal import Decimal
from typing import Any

from botocore.exceptions import ClientError

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def to_dynamodb(value: Any) -> Any:
    """float を Decimal に変換 (boto3 は float を受け付けない)"""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [to_dynamodb(v) for v in value]
    return value


def from_dynamodb(value: Any) -> Any:
    """Decimal を int / float に戻す"""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamodb(v) for k, v in value.items()}
    if isinstance(value, (list, set)):
        return [from_dynamodb(v) for v in value]
    return value


def is_conditional_check_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


def encode_cursor(last_evaluated_key: dict[str, Any] | None) -> str | None:
    """LastEvaluatedKey を不透明なカーソル文字列に変換"""
    if not last_evaluated_key:
        return None
    raw = json.dumps(from_dynamodb(last_evaluated_key), sort_keys=True)
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str | None) -> dict[str, Any] | None:
    """カーソル文字列を ExclusiveStartKey に戻す"""
    if not cursor:
        return None
    try:
        data = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
    except (ValueError, UnicodeDecodeError) as e:
        raise ValueError("Invalid pagination cursor") from e
    if not isinstance(data, dict):
        raise ValueError("Invalid pagination cursor")
    return to_dynamodb(data)
