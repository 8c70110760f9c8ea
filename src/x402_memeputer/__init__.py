"""
x402-memeputer - pay-per-call x402 client for Python

Pays for HTTP calls answered with 402 Payment Required, settling in USDC on
Solana (fee-sponsored SPL transfer) or Base/EVM (EIP-3009 authorization).
"""

__version__ = "0.1.0"

from x402_memeputer.agents import AgentsApiClient
from x402_memeputer.amounts import DEFAULT_ATOMIC_AMOUNT, normalize_amount
from x402_memeputer.clients import (
    JobPoller,
    PaymentProofFactory,
    X402HttpClient,
    get_usdc_balance,
)
from x402_memeputer.config import ChainFamily, NetworkConfig
from x402_memeputer.logging_config import set_verbose, setup_logging
from x402_memeputer.exceptions import (
    ConfigurationError,
    InvalidPaymentError,
    InvalidWalletError,
    PaymentRejectedError,
    QuoteError,
    SettlementError,
    SignatureCreationError,
    SignatureError,
    TransportError,
    UnknownTokenError,
    UnsupportedNetworkError,
    ValidationError,
    WalletNotFoundError,
    X402Error,
)
from x402_memeputer.receipts import parse_receipt
from x402_memeputer.sdk import Memeputer
from x402_memeputer.settings import ClientSettings
from x402_memeputer.tokens import TokenInfo, TokenRegistry
from x402_memeputer.types import (
    AgentInfo,
    AmountFormat,
    AmountSource,
    InteractionResult,
    JobHandle,
    JobState,
    JobStatus,
    NormalizedAmount,
    PaymentProof,
    PaymentState,
    Quote,
    QuoteSummary,
    Receipt,
    ReceiptSource,
)
from x402_memeputer.wallets import EvmIdentity, SigningIdentity, SolanaIdentity, WalletResolver

__all__ = [
    "__version__",
    # Clients
    "Memeputer",
    "AgentsApiClient",
    "X402HttpClient",
    "PaymentProofFactory",
    "JobPoller",
    "WalletResolver",
    "get_usdc_balance",
    "normalize_amount",
    "parse_receipt",
    "DEFAULT_ATOMIC_AMOUNT",
    "setup_logging",
    "set_verbose",
    # Configuration
    "ChainFamily",
    "NetworkConfig",
    "ClientSettings",
    "TokenInfo",
    "TokenRegistry",
    # Types
    "AgentInfo",
    "AmountFormat",
    "AmountSource",
    "InteractionResult",
    "JobHandle",
    "JobState",
    "JobStatus",
    "NormalizedAmount",
    "PaymentProof",
    "PaymentState",
    "Quote",
    "QuoteSummary",
    "Receipt",
    "ReceiptSource",
    "SigningIdentity",
    "SolanaIdentity",
    "EvmIdentity",
    # Exceptions
    "X402Error",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "UnknownTokenError",
    "WalletNotFoundError",
    "InvalidWalletError",
    "ValidationError",
    "QuoteError",
    "InvalidPaymentError",
    "SignatureError",
    "SignatureCreationError",
    "TransportError",
    "PaymentRejectedError",
    "SettlementError",
]
