"""
USDC balance helpers for either chain family
"""

import logging

from x402_memeputer.amounts import to_decimal
from x402_memeputer.config import NetworkConfig
from x402_memeputer.exceptions import InvalidPaymentError
from x402_memeputer.signers.client import EvmClientSigner, SolanaClientSigner
from x402_memeputer.tokens import USDC, TokenRegistry
from x402_memeputer.utils.solana_client import create_async_solana_client
from x402_memeputer.wallets.identity import EvmIdentity, SigningIdentity, SolanaIdentity

logger = logging.getLogger(__name__)


async def get_usdc_balance_atomic(
    identity: SigningIdentity,
    network: str,
    rpc_url: str | None = None,
) -> int:
    """USDC balance of *identity* on *network* in atomic units.

    A missing token account or an RPC failure reads as zero.
    """
    network_name = NetworkConfig.normalize_network(network)
    token = TokenRegistry.get_token(network_name, USDC)

    if isinstance(identity, SolanaIdentity):
        signer = SolanaClientSigner(identity.keypair)
        async with create_async_solana_client(network_name, rpc_url) as client:
            return await signer.check_balance(token.address, client)
    if isinstance(identity, EvmIdentity):
        signer = EvmClientSigner(identity.private_key, identity.address_hint)
        return await signer.check_balance(token.address, network_name, rpc_url)
    raise InvalidPaymentError(f"Unsupported signing identity: {type(identity).__name__}")


async def get_usdc_balance(
    identity: SigningIdentity,
    network: str,
    rpc_url: str | None = None,
) -> float:
    """USDC balance of *identity* on *network* in whole USDC"""
    atomic = await get_usdc_balance_atomic(identity, network, rpc_url)
    balance = float(to_decimal(atomic, TokenRegistry.get_token(network, USDC).decimals))
    logger.info(f"USDC balance of {identity.address} on {network}: {balance}")
    return balance
