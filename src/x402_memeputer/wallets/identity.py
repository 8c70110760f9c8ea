"""
Signing identities - the key material a payment proof is signed with
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Union

from solders.keypair import Keypair

from x402_memeputer.config import ChainFamily


@dataclass(frozen=True)
class SolanaIdentity:
    """Ed25519 keypair paying from its USDC associated token account"""

    keypair: Keypair
    source: str = "explicit"

    chain_family = ChainFamily.SOLANA

    @property
    def address(self) -> str:
        return str(self.keypair.pubkey())

    @classmethod
    def from_secret_key(cls, secret: bytes | list[int], source: str = "explicit") -> "SolanaIdentity":
        """Build from a 64-byte secret key (seed + public key)"""
        return cls(Keypair.from_bytes(bytes(secret)), source=source)


@dataclass(frozen=True)
class EvmIdentity:
    """secp256k1 private key; the address is derived when not supplied"""

    private_key: str
    address_hint: str | None = None
    source: str = "explicit"

    chain_family = ChainFamily.EVM

    def __post_init__(self) -> None:
        if not self.private_key.startswith("0x"):
            object.__setattr__(self, "private_key", "0x" + self.private_key)

    @cached_property
    def address(self) -> str:
        if self.address_hint:
            return self.address_hint
        from eth_account import Account

        return Account.from_key(self.private_key).address

    def __repr__(self) -> str:
        return f"EvmIdentity(address_hint={self.address_hint!r}, source={self.source!r})"


SigningIdentity = Union[SolanaIdentity, EvmIdentity]
