"""
Token registry - Centralized management of payment token configurations for all networks
"""

from dataclasses import dataclass

from x402_memeputer.config import NetworkConfig
from x402_memeputer.exceptions import UnknownTokenError

USDC = "USDC"


@dataclass
class TokenInfo:
    """Token information.

    ``name`` and ``version`` are the EIP-712 domain fields of the token contract
    and are only meaningful on EVM networks.
    """

    address: str
    decimals: int
    name: str
    symbol: str
    version: str = "2"


class TokenRegistry:
    """Token registry"""

    _tokens: dict[str, dict[str, TokenInfo]] = {
        # Solana networks
        NetworkConfig.SOLANA_MAINNET: {
            USDC: TokenInfo(
                address="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                decimals=6,
                name="USD Coin",
                symbol=USDC,
            ),
        },
        NetworkConfig.SOLANA_DEVNET: {
            USDC: TokenInfo(
                address="4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU",
                decimals=6,
                name="USD Coin",
                symbol=USDC,
            ),
        },
        # EVM networks
        NetworkConfig.BASE_MAINNET: {
            USDC: TokenInfo(
                address="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
                decimals=6,
                name="USD Coin",
                symbol=USDC,
            ),
        },
        NetworkConfig.BASE_SEPOLIA: {
            USDC: TokenInfo(
                address="0x036CbD53842c5426634e7929541eC2318f3dCF7e",
                decimals=6,
                name="USDC",
                symbol=USDC,
            ),
        },
        NetworkConfig.ETHEREUM_MAINNET: {
            USDC: TokenInfo(
                address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
                decimals=6,
                name="USD Coin",
                symbol=USDC,
            ),
        },
        NetworkConfig.POLYGON_MAINNET: {
            USDC: TokenInfo(
                address="0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359",
                decimals=6,
                name="USD Coin",
                symbol=USDC,
            ),
        },
        NetworkConfig.ARBITRUM_MAINNET: {
            USDC: TokenInfo(
                address="0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
                decimals=6,
                name="USD Coin",
                symbol=USDC,
            ),
        },
    }

    @classmethod
    def register_token(cls, network: str, token: TokenInfo) -> None:
        """Register a custom token for specified network

        Args:
            network: Network identifier (any spelling NetworkConfig understands)
            token: TokenInfo to register
        """
        network = NetworkConfig.normalize_network(network)
        if network not in cls._tokens:
            cls._tokens[network] = {}
        cls._tokens[network][token.symbol.upper()] = token

    @classmethod
    def get_token(cls, network: str, symbol: str = USDC) -> TokenInfo:
        """Get token information for specified network and symbol

        Raises:
            UnknownTokenError: If token does not exist
        """
        tokens = cls._tokens.get(NetworkConfig.normalize_network(network), {})
        token = tokens.get(symbol.upper())
        if token is None:
            raise UnknownTokenError(f"Unknown token {symbol} on network {network}")
        return token

    @classmethod
    def find_by_address(cls, network: str, address: str) -> TokenInfo | None:
        """Find token information by address"""
        tokens = cls._tokens.get(NetworkConfig.normalize_network(network), {})
        # EVM addresses compare case-insensitively, base58 addresses do not
        if address.startswith("0x"):
            lower = address.lower()
            for info in tokens.values():
                if info.address.lower() == lower:
                    return info
            return None
        for info in tokens.values():
            if info.address == address:
                return info
        return None

    @classmethod
    def resolve_payment_token(cls, network: str, asset: str | None = None) -> TokenInfo:
        """Token a quote asks to be paid in.

        Uses the quote's ``asset`` when it names a known token, otherwise USDC.
        """
        if asset:
            token = cls.find_by_address(network, asset)
            if token is not None:
                return token
        return cls.get_token(network, USDC)
