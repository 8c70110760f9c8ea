"""
WalletResolver - locate the signing identity for a chain family.

Lookup order per family: explicit identity, environment variables, the
``~/.memeputerrc`` config file, then the conventional default key file.
The resolver only ever reads; it never creates or writes key material.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Mapping

import base58

from x402_memeputer.config import ChainFamily, NetworkConfig
from x402_memeputer.exceptions import InvalidWalletError, WalletNotFoundError
from x402_memeputer.settings import default_config_path, load_user_config
from x402_memeputer.wallets.identity import EvmIdentity, SigningIdentity, SolanaIdentity

logger = logging.getLogger(__name__)

_HEX_KEY = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


class WalletResolver:
    """Resolves and caches one signing identity per chain family"""

    SOLANA_ENV_VARS = ("MEMEPUTER_WALLET", "ORCHESTRATOR_WALLET", "WALLET_SECRET_KEY")
    EVM_ENV_VARS = (
        "MEMEPUTER_BASE_WALLET_PRIVATE_KEY",
        "BASE_WALLET_PRIVATE_KEY",
        "EVM_WALLET_PRIVATE_KEY",
    )
    SOLANA_CONFIG_KEY = "wallet"
    EVM_CONFIG_KEY = "baseWallet"
    SOLANA_DEFAULT_PATH = Path(".config") / "solana" / "id.json"
    EVM_DEFAULT_PATH = Path(".memeputer") / "base-wallet.json"

    def __init__(
        self,
        solana_identity: SolanaIdentity | None = None,
        evm_identity: EvmIdentity | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        config_path: Path | str | None = None,
        home: Path | str | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._home = Path(home) if home is not None else Path.home()
        self._config_path = (
            Path(config_path) if config_path is not None else default_config_path(self._home)
        )
        self._cache: dict[ChainFamily, SigningIdentity] = {}
        if solana_identity is not None:
            self._cache[ChainFamily.SOLANA] = solana_identity
        if evm_identity is not None:
            self._cache[ChainFamily.EVM] = evm_identity

    def resolve(self, chain_family: ChainFamily | str) -> SigningIdentity:
        """Return the identity for a chain family, resolving it on first use.

        Raises:
            WalletNotFoundError: No location yielded an identity
            InvalidWalletError: A located secret could not be decoded
        """
        family = ChainFamily(chain_family)
        identity = self._cache.get(family)
        if identity is None:
            if family == ChainFamily.SOLANA:
                identity = self._resolve_solana()
            else:
                identity = self._resolve_evm()
            logger.info(f"Resolved {family.value} wallet {identity.address} from {identity.source}")
            self._cache[family] = identity
        return identity

    def resolve_for_network(self, network: str) -> SigningIdentity:
        return self.resolve(NetworkConfig.get_chain_family(network))

    # ------------------------------------------------------------------
    # Solana
    # ------------------------------------------------------------------

    def _resolve_solana(self) -> SolanaIdentity:
        checked: list[str] = []

        for name in self.SOLANA_ENV_VARS:
            checked.append(f"env {name}")
            value = self._environ.get(name)
            if not value:
                continue
            source = f"env {name}"
            path = self._expand(value)
            if _is_file(path):
                return self._load_solana_file(path, source=f"{source} ({path})")
            return self._decode_solana_secret(value, source)

        config = load_user_config(self._config_path)
        checked.append(f"config {self._config_path} field '{self.SOLANA_CONFIG_KEY}'")
        configured = config.get(self.SOLANA_CONFIG_KEY)
        if isinstance(configured, str) and configured:
            path = self._expand(configured)
            if _is_file(path):
                return self._load_solana_file(path, source=f"config {self._config_path} ({path})")
            checked[-1] += f" -> {path} (missing)"

        default_path = self._home / self.SOLANA_DEFAULT_PATH
        checked.append(f"default {default_path}")
        if _is_file(default_path):
            return self._load_solana_file(default_path, source=f"default {default_path}")

        raise WalletNotFoundError(ChainFamily.SOLANA.value, checked)

    def _load_solana_file(self, path: Path, source: str) -> SolanaIdentity:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise InvalidWalletError(ChainFamily.SOLANA.value, source, str(e)) from e
        return self._solana_from_json(data, source)

    def _decode_solana_secret(self, value: str, source: str) -> SolanaIdentity:
        text = value.strip()
        if text.startswith("["):
            try:
                data = json.loads(text)
            except ValueError as e:
                raise InvalidWalletError(ChainFamily.SOLANA.value, source, str(e)) from e
            return self._solana_from_json(data, source)
        try:
            secret = base58.b58decode(text)
        except ValueError as e:
            raise InvalidWalletError(
                ChainFamily.SOLANA.value, source, "neither a file, a base58 secret nor a JSON array"
            ) from e
        return self._solana_from_bytes(secret, source)

    def _solana_from_json(self, data: Any, source: str) -> SolanaIdentity:
        if isinstance(data, list):
            try:
                secret = bytes(data)
            except (TypeError, ValueError) as e:
                raise InvalidWalletError(
                    ChainFamily.SOLANA.value, source, f"bad byte array: {e}"
                ) from e
            return self._solana_from_bytes(secret, source)
        if isinstance(data, str):
            return self._decode_solana_secret(data, source)
        raise InvalidWalletError(
            ChainFamily.SOLANA.value, source, "expected a JSON byte array or base58 string"
        )

    @staticmethod
    def _solana_from_bytes(secret: bytes, source: str) -> SolanaIdentity:
        if len(secret) != 64:
            raise InvalidWalletError(
                ChainFamily.SOLANA.value, source, f"secret key must be 64 bytes, got {len(secret)}"
            )
        try:
            return SolanaIdentity.from_secret_key(secret, source=source)
        except Exception as e:
            raise InvalidWalletError(ChainFamily.SOLANA.value, source, str(e)) from e

    # ------------------------------------------------------------------
    # EVM
    # ------------------------------------------------------------------

    def _resolve_evm(self) -> EvmIdentity:
        checked: list[str] = []

        for name in self.EVM_ENV_VARS:
            checked.append(f"env {name}")
            value = self._environ.get(name)
            if not value:
                continue
            source = f"env {name}"
            path = self._expand(value)
            if not _HEX_KEY.match(value.strip()) and _is_file(path):
                return self._load_evm_file(path, source=f"{source} ({path})")
            return self._evm_from_key(value, None, source)

        config = load_user_config(self._config_path)
        checked.append(f"config {self._config_path} field '{self.EVM_CONFIG_KEY}'")
        configured = config.get(self.EVM_CONFIG_KEY)
        source = f"config {self._config_path}"
        if isinstance(configured, dict) and configured.get("privateKey"):
            return self._evm_from_key(configured["privateKey"], configured.get("address"), source)
        if isinstance(configured, str) and configured:
            path = self._expand(configured)
            if _is_file(path):
                return self._load_evm_file(path, source=f"{source} ({path})")
            checked[-1] += f" -> {path} (missing)"

        default_path = self._home / self.EVM_DEFAULT_PATH
        checked.append(f"default {default_path}")
        if _is_file(default_path):
            return self._load_evm_file(default_path, source=f"default {default_path}")

        raise WalletNotFoundError(ChainFamily.EVM.value, checked)

    def _load_evm_file(self, path: Path, source: str) -> EvmIdentity:
        try:
            text = path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise InvalidWalletError(ChainFamily.EVM.value, source, str(e)) from e
        try:
            data = json.loads(text)
        except ValueError:
            # Raw hex key file
            data = text
        if isinstance(data, dict):
            if not data.get("privateKey"):
                raise InvalidWalletError(ChainFamily.EVM.value, source, "missing privateKey")
            return self._evm_from_key(data["privateKey"], data.get("address"), source)
        if isinstance(data, str):
            return self._evm_from_key(data, None, source)
        raise InvalidWalletError(
            ChainFamily.EVM.value, source, "expected a JSON object or hex private key"
        )

    @staticmethod
    def _evm_from_key(private_key: Any, address: Any, source: str) -> EvmIdentity:
        if not isinstance(private_key, str) or not _HEX_KEY.match(private_key.strip()):
            raise InvalidWalletError(
                ChainFamily.EVM.value, source, "private key must be 32 bytes of hex"
            )
        return EvmIdentity(
            private_key=private_key.strip(),
            address_hint=address if isinstance(address, str) and address else None,
            source=source,
        )

    def _expand(self, value: str) -> Path:
        if value == "~":
            return self._home
        if value.startswith("~/"):
            return self._home / value[2:]
        return Path(value)


def _is_file(path: Path) -> bool:
    # Secrets passed where a path is allowed can exceed the OS name limit
    try:
        return path.is_file()
    except OSError:
        return False
