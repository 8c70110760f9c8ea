"""
Pytest configuration and shared fixtures
"""

from unittest.mock import AsyncMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair

from x402_memeputer.wallets import EvmIdentity, SolanaIdentity

# Well-known throwaway key from the web3.py documentation
TEST_EVM_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_EVM_RECIPIENT = "0x2222222222222222222222222222222222222222"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def solana_keypair():
    """Deterministic payer keypair"""
    return Keypair.from_seed(bytes(range(32)))


@pytest.fixture
def solana_identity(solana_keypair):
    return SolanaIdentity(solana_keypair)


@pytest.fixture
def solana_recipient():
    """Merchant address on Solana"""
    return str(Keypair.from_seed(bytes([7] * 32)).pubkey())


@pytest.fixture
def evm_private_key():
    return TEST_EVM_PRIVATE_KEY


@pytest.fixture
def evm_identity(evm_private_key):
    return EvmIdentity(evm_private_key)


@pytest.fixture
def evm_recipient():
    return TEST_EVM_RECIPIENT


@pytest.fixture
def blockhash_provider():
    """Blockhash provider that never touches the network"""
    return AsyncMock(return_value=Hash.default())
