"""
Encoding utilities for x402 protocol
"""

import base64
import json
from typing import Any


def encode_base64(data: str | bytes) -> str:
    """Encode data to base64"""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("utf-8")


def decode_base64(data: str) -> str:
    """Decode base64 to string"""
    return base64.b64decode(data).decode("utf-8")


def encode_payment_payload(payload: Any) -> str:
    """Encode payment payload to base64 for the X-PAYMENT header"""
    if hasattr(payload, "model_dump"):
        json_str = json.dumps(payload.model_dump(by_alias=True, exclude_none=True))
    else:
        json_str = json.dumps(payload)
    return encode_base64(json_str)


def decode_payment_payload(encoded: str) -> dict[str, Any]:
    """Decode payment payload from base64 HTTP header"""
    return json.loads(decode_base64(encoded))
