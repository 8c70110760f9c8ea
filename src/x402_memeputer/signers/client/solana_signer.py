"""
SolanaClientSigner - Solana client signer implementation
"""

import logging

from solders.keypair import Keypair
from solders.message import MessageV0, to_bytes_versioned
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.instructions import get_associated_token_address

from x402_memeputer.config import ChainFamily
from x402_memeputer.exceptions import SignatureCreationError
from x402_memeputer.signers.client.base import ClientSigner

logger = logging.getLogger(__name__)


class SolanaClientSigner(ClientSigner):
    """Solana client signer implementation using solders"""

    chain_family = ChainFamily.SOLANA

    def __init__(self, keypair: Keypair) -> None:
        self._keypair = keypair
        self._address = str(keypair.pubkey())
        logger.debug(f"SolanaClientSigner initialized: address={self._address}")

    def get_address(self) -> str:
        return self._address

    @property
    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    def sign_transaction_message(self, message: MessageV0) -> Signature:
        """Sign a versioned transaction message for this signer's slot only"""
        try:
            return self._keypair.sign_message(to_bytes_versioned(message))
        except Exception as e:
            raise SignatureCreationError(
                f"Failed to sign transaction: {e}", chain_family=self.chain_family.value
            ) from e

    def token_account(self, mint: Pubkey) -> Pubkey:
        """Associated token account holding *mint* for this signer"""
        return get_associated_token_address(self.pubkey, mint)

    async def check_balance(self, mint: str, client) -> int:
        """Token balance in atomic units; 0 if the account is missing or RPC fails"""
        ata = self.token_account(Pubkey.from_string(mint))
        try:
            resp = await client.get_token_account_balance(ata)
            return int(resp.value.amount)
        except Exception as e:
            logger.error(f"Failed to check SPL token balance for {ata}: {e}")
            return 0
