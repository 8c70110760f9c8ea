from x402_memeputer.utils.solana_client import (
    BlockhashProvider,
    create_async_solana_client,
    fetch_latest_blockhash,
    rpc_blockhash_provider,
)

__all__ = [
    "BlockhashProvider",
    "create_async_solana_client",
    "fetch_latest_blockhash",
    "rpc_blockhash_provider",
]
