"""
EvmClientSigner - EVM client signer implementation
"""

import logging
from typing import Any

from x402_memeputer.abi import ERC20_ABI
from x402_memeputer.config import ChainFamily
from x402_memeputer.exceptions import SignatureCreationError
from x402_memeputer.signers.client.base import ClientSigner
from x402_memeputer.signers.utils import (
    _eip712_domain_type_from_keys,
    ensure_hex_prefix,
    resolve_provider_uri,
)

logger = logging.getLogger(__name__)


class EvmClientSigner(ClientSigner):
    """EVM client signer implementation using eth_account and web3.py"""

    chain_family = ChainFamily.EVM

    def __init__(self, private_key: str, address: str | None = None) -> None:
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        self._private_key = private_key
        self._address = address or self._derive_address(private_key)
        self._async_web3_clients: dict[str, Any] = {}
        logger.debug(f"EvmClientSigner initialized: address={self._address}")

    @staticmethod
    def _derive_address(private_key: str) -> str:
        """Derive EVM address from private key"""
        from eth_account import Account

        try:
            return Account.from_key(private_key).address
        except Exception as e:
            raise SignatureCreationError(
                f"Invalid private key: {e}", chain_family=ChainFamily.EVM.value
            ) from e

    def get_address(self) -> str:
        return self._address

    def _ensure_async_web3_client(self, network: str, rpc_url: str | None = None) -> Any:
        """Lazy initialize async web3 client for the given network."""
        provider_uri = rpc_url or resolve_provider_uri(network)
        if not provider_uri:
            return None

        if provider_uri not in self._async_web3_clients:
            from web3 import AsyncHTTPProvider, AsyncWeb3
            from web3.middleware import ExtraDataToPOAMiddleware

            w3 = AsyncWeb3(AsyncHTTPProvider(provider_uri))
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
            self._async_web3_clients[provider_uri] = w3

        return self._async_web3_clients[provider_uri]

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
        primary_type: str | None = None,
    ) -> str:
        """Sign EIP-712 typed data, returning a 0x-prefixed 65-byte signature."""
        try:
            from eth_account import Account
            from eth_account.messages import encode_typed_data

            full_data = {
                "types": {"EIP712Domain": _eip712_domain_type_from_keys(domain), **types},
                "domain": domain,
                "primaryType": primary_type or list(types.keys())[-1],
                "message": message,
            }

            encoded = encode_typed_data(full_message=full_data)
            signed = Account.sign_message(encoded, private_key=self._private_key)
            return ensure_hex_prefix(signed.signature.hex())
        except Exception as e:
            raise SignatureCreationError(
                f"Failed to sign typed data: {e}", chain_family=self.chain_family.value
            ) from e

    async def check_balance(self, token: str, network: str, rpc_url: str | None = None) -> int:
        """Check ERC20 token balance"""
        w3 = self._ensure_async_web3_client(network, rpc_url)
        if not w3:
            return 0

        try:
            from web3 import Web3

            contract = w3.eth.contract(address=Web3.to_checksum_address(token), abi=ERC20_ABI)
            return await contract.functions.balanceOf(self._address).call()
        except Exception as e:
            logger.error(f"Failed to check ERC20 balance of {token} on {network}: {e}")
            return 0
