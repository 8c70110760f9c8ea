"""
Base class for the exact scheme client mechanisms.
"""

from typing import Any

from x402_memeputer.mechanisms._base.client import ClientMechanism
from x402_memeputer.mechanisms._exact_base.types import SCHEME_EXACT
from x402_memeputer.signers.client.base import ClientSigner
from x402_memeputer.types import X402_VERSION, PaymentProof, Quote


class ExactBaseClientMechanism(ClientMechanism):
    """Shared plumbing for exact-amount transfers"""

    def __init__(self, signer: ClientSigner) -> None:
        self._signer = signer

    def scheme(self) -> str:
        return SCHEME_EXACT

    def get_signer(self) -> ClientSigner:
        return self._signer

    def _build_proof(
        self,
        quote: Quote,
        payload: dict[str, Any],
        settlement_reference: str,
    ) -> PaymentProof:
        return PaymentProof(
            x402_version=X402_VERSION,
            scheme=quote.scheme or self.scheme(),
            network=quote.network_name,
            payload=payload,
            settlement_reference=settlement_reference,
            payer=self._signer.get_address(),
        )
