"""
PaymentProofFactory - builds the chain-specific payment proof for a quote
"""

import logging
import time
from typing import Any, Callable

from x402_memeputer.amounts import to_decimal
from x402_memeputer.config import NetworkConfig
from x402_memeputer.exceptions import InvalidPaymentError
from x402_memeputer.mechanisms import (
    ClientMechanism,
    ExactEvmClientMechanism,
    ExactSvmClientMechanism,
)
from x402_memeputer.mechanisms._exact_base.types import SCHEME_EXACT
from x402_memeputer.signers.client import EvmClientSigner, SolanaClientSigner
from x402_memeputer.types import AmountFormat, NormalizedAmount, PaymentProof, Quote
from x402_memeputer.utils.solana_client import BlockhashProvider, rpc_blockhash_provider
from x402_memeputer.wallets.identity import EvmIdentity, SigningIdentity, SolanaIdentity

logger = logging.getLogger(__name__)


class PaymentProofFactory:
    """Dispatches a quote to the mechanism matching the signing identity.

    Args:
        blockhash_provider: Async callable returning a recent Solana blockhash.
            Defaults to querying the network's RPC endpoint.
        solana_rpc_url: RPC endpoint used by the default blockhash provider
        clock: Time source for EVM validity windows
    """

    def __init__(
        self,
        blockhash_provider: BlockhashProvider | None = None,
        *,
        solana_rpc_url: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._blockhash_provider = blockhash_provider
        self._solana_rpc_url = solana_rpc_url
        self._clock = clock

    async def build(
        self,
        network: str,
        recipient: str,
        atomic_amount: int,
        identity: SigningIdentity | None,
        *,
        scheme: str = SCHEME_EXACT,
        fee_payer: str | None = None,
        max_timeout_seconds: int | None = None,
        asset: str | None = None,
    ) -> PaymentProof:
        """Build a proof from explicit payment arguments."""
        network_name = NetworkConfig.normalize_network(network)
        quote = Quote(
            network=network,
            network_name=network_name,
            chain_family=NetworkConfig.get_chain_family(network_name),
            recipient=recipient or "",
            amount=NormalizedAmount(
                atomic=int(atomic_amount),
                decimal=to_decimal(int(atomic_amount)),
                format=AmountFormat.ATOMIC_NUMBER,
            ),
            max_amount_required=atomic_amount,
            scheme=scheme,
            fee_payer=fee_payer,
            asset=asset,
            max_timeout_seconds=max_timeout_seconds,
        )
        return await self.build_for_quote(quote, identity)

    async def build_for_quote(
        self, quote: Quote, identity: SigningIdentity | None
    ) -> PaymentProof:
        """Build a proof paying *quote* from *identity*.

        Raises:
            InvalidPaymentError: Missing recipient or identity, non-positive amount,
                or an identity from the wrong chain family
            SignatureCreationError: The signer failed
        """
        if identity is None:
            raise InvalidPaymentError("No signing identity supplied")
        if not quote.recipient:
            raise InvalidPaymentError("Payment recipient is missing")
        if quote.atomic_amount <= 0:
            raise InvalidPaymentError(f"Payment amount must be positive, got {quote.atomic_amount}")

        mechanism = self._mechanism_for(identity, quote.network_name)
        if mechanism.chain_family != quote.chain_family:
            raise InvalidPaymentError(
                f"{quote.network_name} requires a {quote.chain_family.value} identity, "
                f"got {mechanism.chain_family.value}"
            )

        proof = await mechanism.create_payment_payload(quote)
        logger.info(
            f"Payment proof built: {quote.atomic_amount} atomic on {proof.network} "
            f"from {proof.payer} (reference {proof.settlement_reference})"
        )
        logger.debug(f"Payment payload: {proof.payload}")
        return proof

    def _mechanism_for(self, identity: Any, network: str) -> ClientMechanism:
        if isinstance(identity, SolanaIdentity):
            provider = self._blockhash_provider or rpc_blockhash_provider(
                network, self._solana_rpc_url
            )
            return ExactSvmClientMechanism(SolanaClientSigner(identity.keypair), provider)
        if isinstance(identity, EvmIdentity):
            signer = EvmClientSigner(identity.private_key, identity.address_hint)
            return ExactEvmClientMechanism(signer, clock=self._clock)
        raise InvalidPaymentError(f"Unsupported signing identity: {type(identity).__name__}")
