from x402_memeputer.mechanisms._exact_base.base import ExactBaseClientMechanism
from x402_memeputer.mechanisms._exact_base.types import (
    DEFAULT_VALIDITY_SECONDS,
    SCHEME_EXACT,
    TRANSFER_AUTH_EIP712_TYPES,
    TRANSFER_AUTH_PRIMARY_TYPE,
    VALID_AFTER_BUFFER_SECONDS,
    TransferAuthorization,
    build_eip712_domain,
    build_eip712_message,
    create_nonce,
    create_validity_window,
)

__all__ = [
    "ExactBaseClientMechanism",
    "DEFAULT_VALIDITY_SECONDS",
    "SCHEME_EXACT",
    "TRANSFER_AUTH_EIP712_TYPES",
    "TRANSFER_AUTH_PRIMARY_TYPE",
    "VALID_AFTER_BUFFER_SECONDS",
    "TransferAuthorization",
    "build_eip712_domain",
    "build_eip712_message",
    "create_nonce",
    "create_validity_window",
]
