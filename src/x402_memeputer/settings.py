"""
Client settings resolved from the environment and ~/.memeputerrc
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from x402_memeputer.config import NetworkConfig

logger = logging.getLogger(__name__)

USER_CONFIG_FILENAME = ".memeputerrc"
DEFAULT_API_URL = "https://agents.memeputer.com/x402"
DEFAULT_CHAIN = NetworkConfig.SOLANA_MAINNET


def default_config_path(home: Path | None = None) -> Path:
    return (home or Path.home()) / USER_CONFIG_FILENAME


def load_user_config(path: Path | str | None = None) -> dict[str, Any]:
    """Read the JSON user config file.

    A missing file is an empty config. A file that cannot be parsed is skipped
    with a warning rather than failing the caller.
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.is_file():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {config_path}: expected a JSON object")
        return {}
    return data


def _first(environ: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


@dataclass
class ClientSettings:
    """Endpoint and RPC settings for the agents API"""

    api_url: str = DEFAULT_API_URL
    chain: str = DEFAULT_CHAIN
    rpc_url: str = NetworkConfig.RPC_URLS[NetworkConfig.SOLANA_MAINNET]
    base_rpc_url: str = NetworkConfig.RPC_URLS[NetworkConfig.BASE_MAINNET]

    @classmethod
    def load(
        cls,
        environ: Mapping[str, str] | None = None,
        config_path: Path | str | None = None,
    ) -> "ClientSettings":
        """Resolve each setting from env vars, then the user config, then defaults"""
        env = os.environ if environ is None else environ
        config = load_user_config(config_path)
        defaults = cls()

        return cls(
            api_url=(
                _first(env, ("MEMEPUTER_API_URL", "MEMEPUTER_API_BASE"))
                or config.get("apiUrl")
                or defaults.api_url
            ).rstrip("/"),
            chain=_first(env, ("MEMEPUTER_CHAIN",)) or config.get("chain") or defaults.chain,
            rpc_url=_first(env, ("SOLANA_RPC_URL",)) or config.get("rpcUrl") or defaults.rpc_url,
            base_rpc_url=(
                _first(env, ("BASE_RPC_URL",)) or config.get("baseRpcUrl") or defaults.base_rpc_url
            ),
        )

    def rpc_url_for(self, network: str) -> str | None:
        """RPC endpoint for a network, honouring the configured overrides"""
        name = NetworkConfig.normalize_network(network)
        if name == NetworkConfig.SOLANA_MAINNET:
            return self.rpc_url
        if name == NetworkConfig.BASE_MAINNET:
            return self.base_rpc_url
        return NetworkConfig.get_rpc_url(name)
