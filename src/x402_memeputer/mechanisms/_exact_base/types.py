"""
Types and EIP-712 definitions for the exact scheme.
"""

import secrets
import time
from typing import Any

from pydantic import BaseModel, Field

SCHEME_EXACT = "exact"

# Default validity period (1 hour)
DEFAULT_VALIDITY_SECONDS = 3600

# Tolerated clock skew between this client and the facilitator
VALID_AFTER_BUFFER_SECONDS = 60


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


class TransferAuthorization(BaseModel):
    """TransferWithAuthorization parameters"""

    from_address: str = Field(alias="from")
    to: str
    value: str
    valid_after: str = Field(alias="validAfter")
    valid_before: str = Field(alias="validBefore")
    nonce: str  # 32-byte hex string (0x...)

    class Config:
        populate_by_name = True


# ---------------------------------------------------------------------------
# EIP-712 type definitions for TransferWithAuthorization
# ---------------------------------------------------------------------------

TRANSFER_AUTH_EIP712_TYPES = {
    "TransferWithAuthorization": [
        {"name": "from", "type": "address"},
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "validAfter", "type": "uint256"},
        {"name": "validBefore", "type": "uint256"},
        {"name": "nonce", "type": "bytes32"},
    ],
}

TRANSFER_AUTH_PRIMARY_TYPE = "TransferWithAuthorization"


def build_eip712_message(
    auth: TransferAuthorization,
) -> dict[str, Any]:
    """Build EIP-712 message dict from authorization."""
    return {
        "from": auth.from_address,
        "to": auth.to,
        "value": int(auth.value),
        "validAfter": int(auth.valid_after),
        "validBefore": int(auth.valid_before),
        "nonce": bytes.fromhex(auth.nonce[2:] if auth.nonce.startswith("0x") else auth.nonce),
    }


def build_eip712_domain(
    token_name: str,
    token_version: str,
    chain_id: int,
    verifying_contract: str,
) -> dict[str, Any]:
    """Build EIP-712 domain dict for exact."""
    return {
        "name": token_name,
        "version": token_version,
        "chainId": chain_id,
        "verifyingContract": verifying_contract,
    }


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------


def create_nonce() -> str:
    """Generate a random 32-byte nonce (0x-prefixed hex)."""
    return "0x" + secrets.token_hex(32)


def create_validity_window(
    duration: int = DEFAULT_VALIDITY_SECONDS,
    now: int | None = None,
) -> tuple[int, int]:
    """Create (validAfter, validBefore) timestamps.

    validAfter is backdated by VALID_AFTER_BUFFER_SECONDS for clock skew.
    """
    if now is None:
        now = int(time.time())
    return now - VALID_AFTER_BUFFER_SECONDS, now + duration
