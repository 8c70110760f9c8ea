"""
Client Signers
"""

from x402_memeputer.signers.client.base import ClientSigner
from x402_memeputer.signers.client.evm_signer import EvmClientSigner
from x402_memeputer.signers.client.solana_signer import SolanaClientSigner

__all__ = ["ClientSigner", "SolanaClientSigner", "EvmClientSigner"]
