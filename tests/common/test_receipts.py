"""
Tests for receipt parsing and reconstruction.
"""

import logging

import pytest

from x402_memeputer.exceptions import SettlementError
from x402_memeputer.quotes import parse_quote
from x402_memeputer.receipts import parse_receipt
from x402_memeputer.types import AmountSource, PaymentProof, ReceiptSource

EVM_TX_HASH = "0x" + "ab" * 32
EVM_NONCE = "0x" + "cd" * 32


@pytest.fixture
def solana_quote(solana_recipient):
    return parse_quote(
        {"accepts": [{"network": "solana", "payTo": solana_recipient, "maxAmountRequired": "0.05"}]}
    )


@pytest.fixture
def solana_proof():
    return PaymentProof(
        scheme="exact",
        network="solana",
        payload={"transaction": "AAAA", "signature": "UserSig111"},
        settlement_reference="UserSig111",
        payer="Payer111",
    )


@pytest.fixture
def evm_quote(evm_recipient):
    return parse_quote(
        {"accepts": [{"network": "base", "payTo": evm_recipient, "maxAmountRequired": "10000"}]}
    )


@pytest.fixture
def evm_proof():
    return PaymentProof(
        scheme="exact",
        network="base",
        payload={"signature": "0x00", "authorization": {"nonce": EVM_NONCE}},
        settlement_reference=EVM_NONCE,
        payer="0xPayer",
    )


class TestServerReceipt:
    def test_fields_are_taken_from_server(self, solana_quote, solana_proof):
        body = {
            "success": True,
            "x402Receipt": {
                "amountPaidUsdc": 0.05,
                "amountPaidMicroUsdc": 50000,
                "payTo": "Merchant111",
                "transactionSignature": "ServerSig111",
                "payer": "ServerPayer111",
                "merchant": "Merchant111",
                "timestamp": "2025-01-01T00:00:00Z",
            },
        }

        receipt = parse_receipt(body, solana_quote, solana_proof)

        assert receipt.source == ReceiptSource.SERVER
        assert receipt.amount_source == AmountSource.SERVER
        assert receipt.amount_paid_atomic == 50000
        assert receipt.amount_paid_usdc == pytest.approx(0.05)
        assert receipt.pay_to == "Merchant111"
        assert receipt.transaction_signature == "ServerSig111"
        assert receipt.payer == "ServerPayer111"
        assert receipt.timestamp == "2025-01-01T00:00:00Z"

    def test_receipt_key_and_field_variants(self, solana_quote, solana_proof):
        body = {"receipt": {"amountPaidAtomic": "25000", "recipient": "Shop", "txHash": "Tx1"}}

        receipt = parse_receipt(body, solana_quote, solana_proof)

        assert receipt.amount_paid_atomic == 25000
        assert receipt.merchant == "Shop"
        assert receipt.pay_to == "Shop"
        assert receipt.transaction_signature == "Tx1"
        assert receipt.payer == "Payer111"

    def test_decimal_only_amount(self, solana_quote, solana_proof):
        receipt = parse_receipt({"x402Receipt": {"amountPaidUsdc": "0.02"}}, solana_quote, solana_proof)
        assert receipt.amount_paid_atomic == 20000

    def test_missing_amount_falls_back_to_quote(self, solana_quote, solana_proof, caplog):
        with caplog.at_level(logging.WARNING, logger="x402_memeputer.receipts"):
            receipt = parse_receipt(
                {"x402Receipt": {"transactionSignature": "Sig"}}, solana_quote, solana_proof
            )

        assert receipt.amount_paid_atomic == 50000
        assert receipt.amount_source == AmountSource.QUOTE
        assert receipt.source == ReceiptSource.SERVER
        assert "no amount" in caplog.text

    def test_missing_amount_without_quote_fails(self):
        with pytest.raises(SettlementError):
            parse_receipt({"x402Receipt": {"transactionSignature": "Sig"}}, None, None)

    def test_evm_reference_that_is_not_a_hash_is_replaced(self, evm_quote, evm_proof):
        body = {"x402Receipt": {"amountPaidMicroUsdc": 10000, "transactionSignature": "eyJhIjoxfQ=="}}
        receipt = parse_receipt(body, evm_quote, evm_proof)
        assert receipt.transaction_signature == EVM_NONCE

    def test_evm_hash_from_server_is_kept(self, evm_quote, evm_proof):
        body = {"x402Receipt": {"amountPaidMicroUsdc": 10000, "transactionSignature": EVM_TX_HASH}}
        receipt = parse_receipt(body, evm_quote, evm_proof)
        assert receipt.transaction_signature == EVM_TX_HASH


class TestReconstructedReceipt:
    def test_reconstructed_from_quote_and_proof(self, solana_quote, solana_proof, caplog):
        with caplog.at_level(logging.WARNING, logger="x402_memeputer.receipts"):
            receipt = parse_receipt({"success": True, "response": "hi"}, solana_quote, solana_proof)

        assert receipt.source == ReceiptSource.RECONSTRUCTED
        assert receipt.amount_source == AmountSource.QUOTE
        assert receipt.amount_paid_atomic == 50000
        assert receipt.pay_to == solana_quote.recipient
        assert receipt.merchant == solana_quote.recipient
        assert receipt.transaction_signature == "UserSig111"
        assert receipt.payer == "Payer111"
        assert receipt.timestamp
        assert "reconstructing" in caplog.text

    def test_non_object_body_is_reconstructed(self, solana_quote, solana_proof):
        receipt = parse_receipt("plain text", solana_quote, solana_proof)
        assert receipt.source == ReceiptSource.RECONSTRUCTED

    def test_unpaid_call_has_no_receipt(self):
        assert parse_receipt({"success": True}, None, None) is None
