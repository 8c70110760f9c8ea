"""
Tests for ExactEvmClientMechanism.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data
from web3 import Web3

from x402_memeputer.exceptions import InvalidPaymentError
from x402_memeputer.mechanisms._exact_base.types import (
    TRANSFER_AUTH_EIP712_TYPES,
    TransferAuthorization,
    build_eip712_domain,
    build_eip712_message,
    create_validity_window,
)
from x402_memeputer.mechanisms.evm.exact import ExactEvmClientMechanism
from x402_memeputer.quotes import parse_quote
from x402_memeputer.signers import EvmClientSigner
from x402_memeputer.signers.utils import _eip712_domain_type_from_keys
from x402_memeputer.tokens import TokenRegistry

NOW = 1_700_000_000
BASE_USDC = Web3.to_checksum_address(TokenRegistry.get_token("base").address)


@pytest.fixture
def signer(evm_private_key):
    return EvmClientSigner(evm_private_key)


@pytest.fixture
def mechanism(signer):
    return ExactEvmClientMechanism(signer, clock=lambda: NOW)


@pytest.fixture
def mock_signer():
    signer = MagicMock()
    signer.get_address.return_value = "0x1111111111111111111111111111111111111111"
    signer.sign_typed_data = AsyncMock(return_value="0x" + "ab" * 65)
    return signer


def _quote(recipient, network="base", amount="10000", **extra):
    return parse_quote(
        {"accepts": [{"network": network, "payTo": recipient, "maxAmountRequired": amount, **extra}]}
    )


class TestCreatePaymentPayload:
    @pytest.mark.anyio
    async def test_authorization_fields(self, mechanism, signer, evm_recipient):
        proof = await mechanism.create_payment_payload(_quote(evm_recipient))
        auth = proof.payload["authorization"]

        assert proof.scheme == "exact"
        assert proof.network == "base"
        assert auth["from"] == signer.get_address()
        assert auth["to"] == evm_recipient
        assert auth["value"] == "10000"
        assert auth["validAfter"] == str(NOW - 60)
        assert auth["validBefore"] == str(NOW + 3600)

    @pytest.mark.anyio
    async def test_nonce_is_settlement_reference(self, mechanism, evm_recipient):
        proof = await mechanism.create_payment_payload(_quote(evm_recipient))
        nonce = proof.payload["authorization"]["nonce"]

        assert nonce.startswith("0x")
        assert len(nonce) == 66
        assert proof.settlement_reference == nonce

    @pytest.mark.anyio
    async def test_nonces_are_unique(self, mechanism, evm_recipient):
        first = await mechanism.create_payment_payload(_quote(evm_recipient))
        second = await mechanism.create_payment_payload(_quote(evm_recipient))
        assert first.settlement_reference != second.settlement_reference

    @pytest.mark.anyio
    async def test_timeout_from_quote(self, mechanism, evm_recipient):
        proof = await mechanism.create_payment_payload(
            _quote(evm_recipient, maxTimeoutSeconds=120)
        )
        assert proof.payload["authorization"]["validBefore"] == str(NOW + 120)

    @pytest.mark.anyio
    async def test_signature_recovers_payer(self, mechanism, signer, evm_recipient):
        proof = await mechanism.create_payment_payload(_quote(evm_recipient))
        signature = proof.payload["signature"]
        auth = TransferAuthorization.model_validate(proof.payload["authorization"])

        domain = build_eip712_domain("USD Coin", "2", 8453, BASE_USDC)
        encoded = encode_typed_data(
            full_message={
                "types": {
                    "EIP712Domain": _eip712_domain_type_from_keys(domain),
                    **TRANSFER_AUTH_EIP712_TYPES,
                },
                "domain": domain,
                "primaryType": "TransferWithAuthorization",
                "message": build_eip712_message(auth),
            }
        )

        assert signature.startswith("0x")
        assert len(signature) == 2 + 65 * 2
        assert Account.recover_message(encoded, signature=signature) == signer.get_address()

    @pytest.mark.anyio
    async def test_sepolia_domain(self, mock_signer, evm_recipient):
        mechanism = ExactEvmClientMechanism(mock_signer, clock=lambda: NOW)
        await mechanism.create_payment_payload(_quote(evm_recipient, network="eip155:84532"))

        domain = mock_signer.sign_typed_data.call_args.kwargs["domain"]
        token = TokenRegistry.get_token("base-sepolia")
        assert domain == {
            "name": token.name,
            "version": token.version,
            "chainId": 84532,
            "verifyingContract": Web3.to_checksum_address(token.address),
        }

    @pytest.mark.anyio
    async def test_lowercase_recipient_is_checksummed(self, mock_signer):
        mechanism = ExactEvmClientMechanism(mock_signer, clock=lambda: NOW)
        lower = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"

        proof = await mechanism.create_payment_payload(_quote(lower))

        assert proof.payload["authorization"]["to"] == "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

    @pytest.mark.anyio
    async def test_invalid_recipient(self, mock_signer):
        mechanism = ExactEvmClientMechanism(mock_signer, clock=lambda: NOW)
        with pytest.raises(InvalidPaymentError, match="recipient"):
            await mechanism.create_payment_payload(_quote("0xnot-an-address"))


class TestValidityWindow:
    def test_window_is_backdated(self):
        valid_after, valid_before = create_validity_window(600, now=NOW)
        assert valid_after == NOW - 60
        assert valid_before == NOW + 600
