"""
Memeputer - high-level facade for prompting and commanding paid agents
"""

import logging
import re
from typing import Any

import httpx
from solders.keypair import Keypair

from x402_memeputer.agents import AgentsApiClient
from x402_memeputer.clients.balances import get_usdc_balance
from x402_memeputer.clients.job_poller import JobPoller, ProgressCallback
from x402_memeputer.clients.proof_factory import PaymentProofFactory
from x402_memeputer.logging_config import set_verbose
from x402_memeputer.settings import ClientSettings
from x402_memeputer.types import AgentInfo, InteractionResult, JobHandle, JobStatus
from x402_memeputer.wallets.identity import EvmIdentity, SolanaIdentity
from x402_memeputer.wallets.resolver import WalletResolver

logger = logging.getLogger(__name__)

# Commands whose handlers expect a JSON body even for simple params
JSON_PAYLOAD_COMMANDS = frozenset(
    {
        "describe_image",
        "generate_captions",
        "post_telegram",
        "discover_trends",
        "enhance_prompt",
        "keywords",
        "select_best_trend",
    }
)

_PRIMITIVES = (str, int, float, bool)
_CAMEL_HUMP = re.compile(r"[A-Z]")


def has_complex_params(params: dict[str, Any] | None) -> bool:
    """True if any value is neither a primitive nor a list of primitives"""
    if not params:
        return False
    for value in params.values():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            if any(item is not None and not isinstance(item, _PRIMITIVES) for item in value):
                return True
        elif not isinstance(value, _PRIMITIVES):
            return True
    return False


def _cli_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def convert_params_to_cli_args(params: dict[str, Any]) -> list[str]:
    """Render named params as CLI arguments.

    ``_args`` (or ``args``) are emitted first as positional arguments; every
    other key becomes a ``--kebab-case`` flag, with list values spread after it.

    >>> convert_params_to_cli_args({"_args": ["generate"], "refImages": ["a", "b"]})
    ['generate', '--ref-images', 'a', 'b']
    """
    positional: list[str] = []
    if isinstance(params.get("_args"), (list, tuple)):
        positional.extend(_cli_value(v) for v in params["_args"])
    elif isinstance(params.get("args"), (list, tuple)):
        positional.extend(_cli_value(v) for v in params["args"])

    flags: list[str] = []
    for key, value in params.items():
        if key in ("_args", "args"):
            continue
        flag = "--" + _CAMEL_HUMP.sub(lambda m: "-" + m.group(0).lower(), key)
        if isinstance(value, (list, tuple)):
            flags.append(flag)
            flags.extend(_cli_value(v) for v in value)
        else:
            flags.extend([flag, _cli_value(value)])

    return positional + flags


class Memeputer:
    """Prompt and command agents, paying per call.

    Settings not passed explicitly are read from the environment and
    ``~/.memeputerrc`` (see ClientSettings). Wallets are resolved on first use.

    Args:
        api_url: Gateway base URL
        chain: Chain segment of the agent routes
        rpc_url: Solana RPC endpoint
        base_rpc_url: Base RPC endpoint
        wallet: Solana keypair (or identity) to pay with
        base_wallet: EVM private key (or identity) to pay with
        verbose: Log x402 protocol details at DEBUG
    """

    def __init__(
        self,
        api_url: str | None = None,
        chain: str | None = None,
        rpc_url: str | None = None,
        base_rpc_url: str | None = None,
        wallet: Keypair | SolanaIdentity | None = None,
        base_wallet: str | EvmIdentity | None = None,
        verbose: bool = False,
        settings: ClientSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
        wallet_resolver: WalletResolver | None = None,
        proof_factory: PaymentProofFactory | None = None,
        poller: JobPoller | None = None,
    ) -> None:
        self._settings = settings or ClientSettings.load()
        if api_url:
            self._settings.api_url = api_url.rstrip("/")
        if chain:
            self._settings.chain = chain
        if rpc_url:
            self._settings.rpc_url = rpc_url
        if base_rpc_url:
            self._settings.base_rpc_url = base_rpc_url

        if isinstance(wallet, Keypair):
            wallet = SolanaIdentity(wallet)
        if isinstance(base_wallet, str):
            base_wallet = EvmIdentity(base_wallet)
        self._wallet_resolver = wallet_resolver or WalletResolver(wallet, base_wallet)

        self._http_client = http_client
        self._proof_factory = proof_factory
        self._poller = poller
        self._api_client: AgentsApiClient | None = None

        if verbose:
            set_verbose(True)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def api(self) -> AgentsApiClient:
        """Underlying agents API client, created on first use"""
        if self._api_client is None:
            proof_factory = self._proof_factory or PaymentProofFactory(
                solana_rpc_url=self._settings.rpc_url
            )
            self._api_client = AgentsApiClient(
                self._settings.api_url,
                self._settings.chain,
                http_client=self._http_client,
                wallet_resolver=self._wallet_resolver,
                proof_factory=proof_factory,
                poller=self._poller,
            )
        return self._api_client

    def enable_verbose(self) -> None:
        set_verbose(True)

    def disable_verbose(self) -> None:
        set_verbose(False)

    async def prompt(self, agent_id: str, message: str) -> InteractionResult:
        """Send a natural-language message to an agent"""
        return await self.api.interact(agent_id, message or "")

    async def command(
        self,
        agent_id: str,
        command: str,
        params: list[Any] | dict[str, Any] | None = None,
    ) -> InteractionResult:
        """Run an agent command.

        JSON-payload commands and commands with structured params go to the
        command-specific endpoint; everything else is sent as a ``/command``
        message with CLI-style arguments.
        """
        named = params if isinstance(params, dict) else None

        if command in JSON_PAYLOAD_COMMANDS or has_complex_params(named):
            return await self.api.interact(agent_id, "", command=command, params=named)

        if isinstance(params, dict):
            args = convert_params_to_cli_args(params)
        elif params:
            args = [_cli_value(p) for p in params]
        else:
            args = []

        message = f"/{command} {' '.join(args)}" if args else f"/{command}"
        return await self.api.interact(agent_id, message)

    async def check_status(self, status_url: str) -> JobStatus:
        return await self.api.check_status(status_url)

    async def poll_status(
        self,
        status: JobHandle | str,
        max_attempts: int = JobPoller.DEFAULT_MAX_ATTEMPTS,
        interval: float | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> JobStatus:
        return await self.api.poll_status(status, max_attempts, interval, on_progress)

    async def list_agents(self) -> list[AgentInfo]:
        return await self.api.list_agents()

    async def get_balance(self, chain: str | None = None) -> float:
        """USDC balance of the wallet used for *chain* (default: the configured chain)"""
        network = chain or self._settings.chain
        identity = self._wallet_resolver.resolve_for_network(network)
        return await get_usdc_balance(identity, network, self._settings.rpc_url_for(network))

    async def close(self) -> None:
        if self._api_client is not None:
            await self._api_client.close()

    async def __aenter__(self) -> "Memeputer":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
