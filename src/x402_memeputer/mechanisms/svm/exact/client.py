"""
ExactSvmClientMechanism - exact client mechanism for Solana.

The payment is a versioned SPL ``TransferChecked`` transaction whose fee payer
is the facilitator. The client signs only its own slot and leaves the fee
payer slot empty; the facilitator co-signs and broadcasts on settlement.
"""

import base64
import logging

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    TransferCheckedParams,
    get_associated_token_address,
    transfer_checked,
)

from x402_memeputer.config import ChainFamily, NetworkConfig
from x402_memeputer.exceptions import InvalidPaymentError
from x402_memeputer.mechanisms._exact_base.base import ExactBaseClientMechanism
from x402_memeputer.signers.client.solana_signer import SolanaClientSigner
from x402_memeputer.tokens import TokenRegistry
from x402_memeputer.types import PaymentProof, Quote
from x402_memeputer.utils.solana_client import BlockhashProvider

logger = logging.getLogger(__name__)


def _pubkey(value: str, what: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except ValueError as e:
        raise InvalidPaymentError(f"Invalid Solana {what} address {value!r}: {e}") from e


class ExactSvmClientMechanism(ExactBaseClientMechanism):
    """Fee-sponsored SPL transfer client mechanism for Solana."""

    chain_family = ChainFamily.SOLANA

    def __init__(self, signer: SolanaClientSigner, blockhash_provider: BlockhashProvider) -> None:
        super().__init__(signer)
        self._blockhash_provider = blockhash_provider

    def get_signer(self) -> SolanaClientSigner:
        return self._signer

    async def create_payment_payload(self, quote: Quote) -> PaymentProof:
        """Create a partially signed transfer transaction for *quote*."""
        signer = self.get_signer()
        token = TokenRegistry.resolve_payment_token(quote.network_name, quote.asset)

        owner = signer.pubkey
        mint = _pubkey(token.address, "mint")
        recipient = _pubkey(quote.recipient, "recipient")
        fee_payer = _pubkey(quote.fee_payer or NetworkConfig.DEFAULT_SOLANA_FEE_PAYER, "fee payer")

        source_ata = get_associated_token_address(owner, mint)
        dest_ata = get_associated_token_address(recipient, mint)

        instructions = [
            set_compute_unit_limit(NetworkConfig.SOLANA_COMPUTE_UNIT_LIMIT),
            set_compute_unit_price(NetworkConfig.SOLANA_COMPUTE_UNIT_PRICE_MICRO_LAMPORTS),
            transfer_checked(
                TransferCheckedParams(
                    program_id=TOKEN_PROGRAM_ID,
                    source=source_ata,
                    mint=mint,
                    dest=dest_ata,
                    owner=owner,
                    amount=quote.atomic_amount,
                    decimals=token.decimals,
                )
            ),
        ]

        blockhash = await self._blockhash_provider()
        message = MessageV0.try_compile(
            payer=fee_payer,
            instructions=instructions,
            address_lookup_table_accounts=[],
            recent_blockhash=blockhash,
        )

        logger.info(
            "[EXACT] Signing SPL transfer: from=%s, to=%s, amount=%s, mint=%s, fee_payer=%s",
            source_ata,
            dest_ata,
            quote.atomic_amount,
            mint,
            fee_payer,
        )

        user_signature = signer.sign_transaction_message(message)
        num_signers = message.header.num_required_signatures
        signatures = [
            user_signature if key == owner else Signature.default()
            for key in message.account_keys[:num_signers]
        ]
        transaction = VersionedTransaction.populate(message, signatures)

        payload = {
            "transaction": base64.b64encode(bytes(transaction)).decode("utf-8"),
            "signature": str(user_signature),
        }
        return self._build_proof(quote, payload, settlement_reference=str(user_signature))
