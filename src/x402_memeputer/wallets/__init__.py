"""
Wallets - signing identities and their resolution
"""

from x402_memeputer.wallets.identity import EvmIdentity, SigningIdentity, SolanaIdentity
from x402_memeputer.wallets.resolver import WalletResolver

__all__ = ["EvmIdentity", "SigningIdentity", "SolanaIdentity", "WalletResolver"]
