"""
Shared Solana AsyncClient factory.

Centralizes solana-py AsyncClient initialization and the blockhash lookup the
payment transaction is built against.
"""

import logging
from typing import Awaitable, Callable

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.hash import Hash

from x402_memeputer.config import NetworkConfig

logger = logging.getLogger(__name__)

BlockhashProvider = Callable[[], Awaitable[Hash]]


def create_async_solana_client(network: str, rpc_url: str | None = None) -> AsyncClient:
    """Create an AsyncClient for the given network.

    Args:
        network: Solana network name (e.g. "solana", "solana-devnet")
        rpc_url: Explicit endpoint; defaults to the network's public RPC

    Returns:
        solana.rpc.async_api.AsyncClient instance
    """
    endpoint = rpc_url or NetworkConfig.get_rpc_url(network)
    if not endpoint:
        raise ValueError(f"No Solana RPC endpoint configured for network '{network}'")
    logger.info("Creating Solana AsyncClient for network=%s (%s)", network, endpoint)
    return AsyncClient(endpoint, commitment=Confirmed)


async def fetch_latest_blockhash(client: AsyncClient) -> Hash:
    """Latest blockhash at ``confirmed`` commitment"""
    resp = await client.get_latest_blockhash(commitment=Confirmed)
    return resp.value.blockhash


def rpc_blockhash_provider(network: str, rpc_url: str | None = None) -> BlockhashProvider:
    """Blockhash provider that opens a short-lived RPC connection per call"""

    async def provide() -> Hash:
        async with create_async_solana_client(network, rpc_url) as client:
            return await fetch_latest_blockhash(client)

    return provide
