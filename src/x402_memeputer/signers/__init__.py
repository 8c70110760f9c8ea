"""
Signers - key operations behind the payment mechanisms
"""

from x402_memeputer.signers.client import ClientSigner, EvmClientSigner, SolanaClientSigner

__all__ = ["ClientSigner", "EvmClientSigner", "SolanaClientSigner"]
