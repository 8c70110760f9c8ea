"""
X402 Network Configuration
Centralized configuration for network names, chain IDs and RPC endpoints
"""

from enum import Enum
from typing import Dict

from x402_memeputer.exceptions import UnsupportedNetworkError


class ChainFamily(str, Enum):
    """Settlement model a network belongs to"""

    SOLANA = "solana"
    EVM = "evm"


class NetworkConfig:
    """Network configuration for chain families, chain IDs and RPC URLs"""

    SOLANA_MAINNET = "solana"
    SOLANA_DEVNET = "solana-devnet"
    BASE_MAINNET = "base"
    BASE_SEPOLIA = "base-sepolia"
    ETHEREUM_MAINNET = "ethereum"
    POLYGON_MAINNET = "polygon"
    ARBITRUM_MAINNET = "arbitrum"

    DEFAULT_NETWORK = SOLANA_MAINNET

    # Servers spell the same network several ways
    NETWORK_ALIASES: Dict[str, str] = {
        "solana": SOLANA_MAINNET,
        "solana-mainnet": SOLANA_MAINNET,
        "solana-mainnet-beta": SOLANA_MAINNET,
        "mainnet-beta": SOLANA_MAINNET,
        "solana:5eykt4usfv8p8njdtrepy1vzqkqzkvdp": SOLANA_MAINNET,
        "solana-devnet": SOLANA_DEVNET,
        "devnet": SOLANA_DEVNET,
        "solana:etwtrabzayq6imfeykouru166vu2xqa1": SOLANA_DEVNET,
        "base": BASE_MAINNET,
        "base-mainnet": BASE_MAINNET,
        "eip155:8453": BASE_MAINNET,
        "base-sepolia": BASE_SEPOLIA,
        "eip155:84532": BASE_SEPOLIA,
        "ethereum": ETHEREUM_MAINNET,
        "ethereum-mainnet": ETHEREUM_MAINNET,
        "eip155:1": ETHEREUM_MAINNET,
        "polygon": POLYGON_MAINNET,
        "polygon-mainnet": POLYGON_MAINNET,
        "eip155:137": POLYGON_MAINNET,
        "arbitrum": ARBITRUM_MAINNET,
        "arbitrum-mainnet": ARBITRUM_MAINNET,
        "eip155:42161": ARBITRUM_MAINNET,
    }

    CHAIN_FAMILIES: Dict[str, ChainFamily] = {
        SOLANA_MAINNET: ChainFamily.SOLANA,
        SOLANA_DEVNET: ChainFamily.SOLANA,
        BASE_MAINNET: ChainFamily.EVM,
        BASE_SEPOLIA: ChainFamily.EVM,
        ETHEREUM_MAINNET: ChainFamily.EVM,
        POLYGON_MAINNET: ChainFamily.EVM,
        ARBITRUM_MAINNET: ChainFamily.EVM,
    }

    # EVM chain IDs
    CHAIN_IDS: Dict[str, int] = {
        BASE_MAINNET: 8453,
        BASE_SEPOLIA: 84532,
        ETHEREUM_MAINNET: 1,
        POLYGON_MAINNET: 137,
        ARBITRUM_MAINNET: 42161,
    }

    RPC_URLS: Dict[str, str] = {
        SOLANA_MAINNET: "https://api.mainnet-beta.solana.com",
        SOLANA_DEVNET: "https://api.devnet.solana.com",
        BASE_MAINNET: "https://mainnet.base.org",
        BASE_SEPOLIA: "https://sepolia.base.org",
        ETHEREUM_MAINNET: "https://eth.llamarpc.com",
        POLYGON_MAINNET: "https://polygon-rpc.com",
        ARBITRUM_MAINNET: "https://arb1.arbitrum.io/rpc",
    }

    # Facilitator that sponsors Solana fees when the quote names none
    DEFAULT_SOLANA_FEE_PAYER = "2wKupLR9q6wXYppw8Gr2NvWxKBUqm4PPJKkQfoxHDBg4"

    # The facilitator rejects transactions without these compute budget directives
    SOLANA_COMPUTE_UNIT_LIMIT = 40_000
    SOLANA_COMPUTE_UNIT_PRICE_MICRO_LAMPORTS = 1

    @classmethod
    def normalize_network(cls, network: str | None) -> str:
        """Map a network spelling from a quote to its canonical name.

        Args:
            network: Network identifier as sent by the server (e.g. "base-mainnet",
                "eip155:8453", "solana-mainnet"). ``None`` means the default network.

        Returns:
            Canonical network name

        Raises:
            UnsupportedNetworkError: If the network cannot be recognised
        """
        if not network:
            return cls.DEFAULT_NETWORK

        key = network.strip().lower()
        if key in cls.NETWORK_ALIASES:
            return cls.NETWORK_ALIASES[key]

        if "base" in key:
            return cls.BASE_SEPOLIA if "sepolia" in key else cls.BASE_MAINNET
        for name in (cls.ETHEREUM_MAINNET, cls.POLYGON_MAINNET, cls.ARBITRUM_MAINNET):
            if name in key:
                return name
        if "solana" in key:
            return cls.SOLANA_DEVNET if "devnet" in key else cls.SOLANA_MAINNET

        raise UnsupportedNetworkError(f"Unsupported network: {network}")

    @classmethod
    def get_chain_family(cls, network: str | None) -> ChainFamily:
        """Get the chain family for a (possibly non-canonical) network identifier"""
        return cls.CHAIN_FAMILIES[cls.normalize_network(network)]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        """Get EVM chain ID for network

        Args:
            network: Network identifier (e.g., "base", "eip155:84532")

        Returns:
            Chain ID as integer

        Raises:
            UnsupportedNetworkError: If network is not an EVM network
        """
        chain_id = cls.CHAIN_IDS.get(cls.normalize_network(network))
        if chain_id is None:
            raise UnsupportedNetworkError(f"No EVM chain ID for network: {network}")
        return chain_id

    @classmethod
    def get_rpc_url(cls, network: str) -> str | None:
        """Get the default RPC URL for a network, or None if not configured"""
        return cls.RPC_URLS.get(cls.normalize_network(network))
