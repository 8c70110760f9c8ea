"""
Tests for network configuration, the token registry and client settings
"""

import json

import pytest

from x402_memeputer.config import ChainFamily, NetworkConfig
from x402_memeputer.exceptions import UnknownTokenError, UnsupportedNetworkError
from x402_memeputer.settings import DEFAULT_API_URL, ClientSettings, load_user_config
from x402_memeputer.tokens import TokenInfo, TokenRegistry


class TestNetworkConfig:
    @pytest.mark.parametrize(
        "spelling,expected",
        [
            ("solana", "solana"),
            ("solana-mainnet", "solana"),
            ("Solana-Mainnet-Beta", "solana"),
            ("devnet", "solana-devnet"),
            ("base", "base"),
            ("base-mainnet", "base"),
            ("eip155:8453", "base"),
            ("eip155:84532", "base-sepolia"),
            ("my-base-sepolia", "base-sepolia"),
            ("ethereum", "ethereum"),
        ],
    )
    def test_normalize_network(self, spelling, expected):
        assert NetworkConfig.normalize_network(spelling) == expected

    def test_missing_network_is_default(self):
        assert NetworkConfig.normalize_network(None) == NetworkConfig.SOLANA_MAINNET
        assert NetworkConfig.normalize_network("") == NetworkConfig.SOLANA_MAINNET

    def test_unknown_network(self):
        with pytest.raises(UnsupportedNetworkError):
            NetworkConfig.normalize_network("tron:nile")

    def test_chain_family(self):
        assert NetworkConfig.get_chain_family("solana-devnet") == ChainFamily.SOLANA
        assert NetworkConfig.get_chain_family("eip155:137") == ChainFamily.EVM

    def test_chain_id(self):
        assert NetworkConfig.get_chain_id("base") == 8453
        assert NetworkConfig.get_chain_id("base-sepolia") == 84532

    def test_solana_has_no_chain_id(self):
        with pytest.raises(UnsupportedNetworkError):
            NetworkConfig.get_chain_id("solana")

    def test_rpc_url(self):
        assert NetworkConfig.get_rpc_url("base-mainnet") == "https://mainnet.base.org"


class TestTokenRegistry:
    def test_usdc_on_solana(self):
        token = TokenRegistry.get_token("solana-mainnet")
        assert token.address == "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
        assert token.decimals == 6

    def test_usdc_on_base(self):
        token = TokenRegistry.get_token("eip155:8453", "usdc")
        assert token.address == "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
        assert token.name == "USD Coin"
        assert token.version == "2"

    def test_unknown_symbol(self):
        with pytest.raises(UnknownTokenError):
            TokenRegistry.get_token("base", "DOGE")

    def test_find_by_address_ignores_case_on_evm(self):
        token = TokenRegistry.find_by_address(
            "base", "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"
        )
        assert token is not None
        assert token.symbol == "USDC"

    def test_resolve_payment_token_falls_back_to_usdc(self):
        token = TokenRegistry.resolve_payment_token("base", "0x" + "99" * 20)
        assert token.symbol == "USDC"

    def test_register_token(self):
        custom = TokenInfo(
            address="0x" + "ab" * 20, decimals=18, name="Test Token", symbol="TST", version="1"
        )
        TokenRegistry.register_token("base-sepolia", custom)
        try:
            assert TokenRegistry.get_token("base-sepolia", "tst") is custom
            assert TokenRegistry.resolve_payment_token("base-sepolia", custom.address) is custom
        finally:
            del TokenRegistry._tokens[NetworkConfig.BASE_SEPOLIA]["TST"]


class TestClientSettings:
    def test_defaults(self, tmp_path):
        settings = ClientSettings.load(environ={}, config_path=tmp_path / "missing")

        assert settings.api_url == DEFAULT_API_URL
        assert settings.chain == "solana"
        assert settings.rpc_url == "https://api.mainnet-beta.solana.com"
        assert settings.base_rpc_url == "https://mainnet.base.org"

    def test_config_file(self, tmp_path):
        path = tmp_path / ".memeputerrc"
        path.write_text(
            json.dumps(
                {
                    "apiUrl": "https://staging.example/x402/",
                    "chain": "base",
                    "rpcUrl": "https://rpc.example",
                    "baseRpcUrl": "https://base-rpc.example",
                }
            )
        )

        settings = ClientSettings.load(environ={}, config_path=path)

        assert settings.api_url == "https://staging.example/x402"
        assert settings.chain == "base"
        assert settings.rpc_url == "https://rpc.example"
        assert settings.base_rpc_url == "https://base-rpc.example"

    def test_environment_wins_over_config(self, tmp_path):
        path = tmp_path / ".memeputerrc"
        path.write_text(json.dumps({"apiUrl": "https://config.example", "chain": "base"}))
        environ = {
            "MEMEPUTER_API_BASE": "https://env.example",
            "MEMEPUTER_CHAIN": "solana",
            "SOLANA_RPC_URL": "https://env-rpc.example",
        }

        settings = ClientSettings.load(environ=environ, config_path=path)

        assert settings.api_url == "https://env.example"
        assert settings.chain == "solana"
        assert settings.rpc_url == "https://env-rpc.example"

    def test_broken_config_is_ignored(self, tmp_path, caplog):
        path = tmp_path / ".memeputerrc"
        path.write_text("{not json")

        assert load_user_config(path) == {}
        assert "Ignoring" in caplog.text

    def test_non_object_config_is_ignored(self, tmp_path):
        path = tmp_path / ".memeputerrc"
        path.write_text("[1, 2]")
        assert load_user_config(path) == {}

    def test_rpc_url_for(self):
        settings = ClientSettings(rpc_url="https://sol.example", base_rpc_url="https://base.example")

        assert settings.rpc_url_for("solana-mainnet") == "https://sol.example"
        assert settings.rpc_url_for("eip155:8453") == "https://base.example"
        assert settings.rpc_url_for("base-sepolia") == "https://sepolia.base.org"
