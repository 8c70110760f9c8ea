"""
Tests for USDC balance helpers
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from x402_memeputer.clients import balances
from x402_memeputer.logging_config import PACKAGE_LOGGER, set_verbose
from x402_memeputer.signers import EvmClientSigner, SolanaClientSigner
from x402_memeputer.tokens import TokenRegistry


@pytest.mark.anyio
async def test_evm_balance(monkeypatch, evm_identity):
    check = AsyncMock(return_value=2_500_000)
    monkeypatch.setattr(EvmClientSigner, "check_balance", check)

    balance = await balances.get_usdc_balance(evm_identity, "base", "https://rpc.example")

    assert balance == pytest.approx(2.5)
    check.assert_awaited_once_with(
        TokenRegistry.get_token("base").address, "base", "https://rpc.example"
    )


@pytest.mark.anyio
async def test_solana_balance(monkeypatch, solana_identity):
    check = AsyncMock(return_value=50000)
    monkeypatch.setattr(SolanaClientSigner, "check_balance", check)

    atomic = await balances.get_usdc_balance_atomic(solana_identity, "solana-mainnet")

    assert atomic == 50000
    assert check.await_args.args[0] == TokenRegistry.get_token("solana").address


@pytest.mark.anyio
async def test_signer_reads_missing_account_as_zero(solana_keypair):
    client = MagicMock()
    client.get_token_account_balance = AsyncMock(side_effect=RuntimeError("could not find account"))

    signer = SolanaClientSigner(solana_keypair)

    assert await signer.check_balance(TokenRegistry.get_token("solana").address, client) == 0


def test_set_verbose():
    logger = logging.getLogger(PACKAGE_LOGGER)
    try:
        set_verbose(True)
        assert logger.level == logging.DEBUG
    finally:
        set_verbose(False)
    assert logger.level == logging.NOTSET
