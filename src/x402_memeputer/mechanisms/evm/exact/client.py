"""
ExactEvmClientMechanism - exact client mechanism for EVM.

Signs an EIP-3009 ``TransferWithAuthorization`` off-chain; the facilitator
submits it. Nothing is broadcast by the client.
"""

import logging
import time
from typing import Callable

from web3 import Web3

from x402_memeputer.config import ChainFamily, NetworkConfig
from x402_memeputer.exceptions import InvalidPaymentError
from x402_memeputer.mechanisms._exact_base.base import ExactBaseClientMechanism
from x402_memeputer.mechanisms._exact_base.types import (
    DEFAULT_VALIDITY_SECONDS,
    TRANSFER_AUTH_EIP712_TYPES,
    TRANSFER_AUTH_PRIMARY_TYPE,
    TransferAuthorization,
    build_eip712_domain,
    build_eip712_message,
    create_nonce,
    create_validity_window,
)
from x402_memeputer.signers.client.evm_signer import EvmClientSigner
from x402_memeputer.tokens import TokenRegistry
from x402_memeputer.types import PaymentProof, Quote

logger = logging.getLogger(__name__)


def _checksum(address: str, what: str) -> str:
    try:
        return Web3.to_checksum_address(address)
    except ValueError as e:
        raise InvalidPaymentError(f"Invalid EVM {what} address {address!r}: {e}") from e


class ExactEvmClientMechanism(ExactBaseClientMechanism):
    """TransferWithAuthorization client mechanism for EVM."""

    chain_family = ChainFamily.EVM

    def __init__(self, signer: EvmClientSigner, clock: Callable[[], float] = time.time) -> None:
        super().__init__(signer)
        self._clock = clock

    def get_signer(self) -> EvmClientSigner:
        return self._signer

    async def create_payment_payload(self, quote: Quote) -> PaymentProof:
        """Create exact payment payload."""
        signer = self.get_signer()
        token = TokenRegistry.resolve_payment_token(quote.network_name, quote.asset)
        chain_id = NetworkConfig.get_chain_id(quote.network_name)

        from_addr = _checksum(signer.get_address(), "payer")
        to_addr = _checksum(quote.recipient, "recipient")
        token_address = _checksum(token.address, "token")

        valid_after, valid_before = create_validity_window(
            quote.max_timeout_seconds or DEFAULT_VALIDITY_SECONDS, now=int(self._clock())
        )
        nonce = create_nonce()

        authorization = TransferAuthorization(
            **{
                "from": from_addr,
                "to": to_addr,
                "value": str(quote.atomic_amount),
                "validAfter": str(valid_after),
                "validBefore": str(valid_before),
                "nonce": nonce,
            }
        )

        domain = build_eip712_domain(token.name, token.version, chain_id, token_address)
        message = build_eip712_message(authorization)

        logger.info(
            "[EXACT] Signing TransferWithAuthorization: from=%s, to=%s, value=%s, token=%s",
            from_addr,
            to_addr,
            quote.atomic_amount,
            token_address,
        )

        signature = await signer.sign_typed_data(
            domain=domain,
            types=TRANSFER_AUTH_EIP712_TYPES,
            message=message,
            primary_type=TRANSFER_AUTH_PRIMARY_TYPE,
        )

        payload = {
            "signature": signature,
            "authorization": authorization.model_dump(by_alias=True),
        }
        return self._build_proof(quote, payload, settlement_reference=nonce)
