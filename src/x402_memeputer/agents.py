"""
AgentsApiClient - pay-per-call access to agents behind an x402 gateway
"""

import json
import logging
from typing import Any

import httpx

from x402_memeputer.clients.job_poller import JobPoller, ProgressCallback
from x402_memeputer.clients.proof_factory import PaymentProofFactory
from x402_memeputer.clients.x402_http_client import X402HttpClient
from x402_memeputer.exceptions import TransportError
from x402_memeputer.types import AgentInfo, InteractionResult, JobHandle, JobStatus
from x402_memeputer.wallets.resolver import WalletResolver

logger = logging.getLogger(__name__)

DEFAULT_PRICE_ATOMIC = 10000


def build_request_body(
    message: str,
    command: str | None = None,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Request body for an agent call.

    Command endpoints take the params themselves (plus ``message`` when one is
    given). The base endpoint takes ``{}`` for an empty message, ``{"command": ...}``
    for a bare ``/cmd`` or a JSON ``{"command": ...}`` without other fields, and
    ``{"message": ...}`` otherwise.
    """
    if command and params:
        body = dict(params)
        if message and message.strip():
            body["message"] = message
        return body

    if not message or not message.strip():
        return {}

    try:
        parsed = json.loads(message)
    except ValueError:
        parsed = None

    if isinstance(parsed, dict):
        if parsed.get("command") and not any(k != "command" for k in parsed):
            return {"command": parsed["command"]}
        return {"message": message}

    if message.startswith("/"):
        parts = message[1:].split()
        if len(parts) == 1:
            return {"command": parts[0]}
    return {"message": message}


def _agent_from_option(option: dict[str, Any]) -> AgentInfo:
    extra = option.get("extra") if isinstance(option.get("extra"), dict) else {}
    pricing = extra.get("pricing") if isinstance(extra.get("pricing"), dict) else {}

    price = pricing.get("amount")
    if price is None:
        raw = option.get("maxAmountRequired") or DEFAULT_PRICE_ATOMIC
        try:
            price = float(raw) / 1_000_000
        except (TypeError, ValueError):
            price = DEFAULT_PRICE_ATOMIC / 1_000_000

    return AgentInfo(
        id=extra.get("agentId") or option.get("agentId") or "unknown",
        name=extra.get("agentName") or option.get("name") or "Unknown Agent",
        description=option.get("description") or "AI agent",
        price=float(price),
        category=extra.get("category") or "General AI",
        example_prompts=list(extra.get("examplePrompts") or []),
        pay_to=option.get("payTo") or "",
    )


class AgentsApiClient:
    """Lists agents and calls them, paying per call.

    Args:
        api_url: Gateway base URL (e.g. https://agents.memeputer.com/x402)
        chain: Chain segment of the agent routes (``solana`` or ``base``)
        http_client: Shared httpx client; one is created (and owned) if omitted
        wallet_resolver: Identity source for paid calls
        proof_factory: Payment proof builder
        poller: Job poller for asynchronous calls
    """

    def __init__(
        self,
        api_url: str,
        chain: str = "solana",
        http_client: httpx.AsyncClient | None = None,
        wallet_resolver: WalletResolver | None = None,
        proof_factory: PaymentProofFactory | None = None,
        poller: JobPoller | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._chain = chain
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=120.0)
        self._x402 = X402HttpClient(
            self._http_client,
            wallet_resolver or WalletResolver(),
            proof_factory,
        )
        self._poller = poller or JobPoller(self._http_client)

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def chain(self) -> str:
        return self._chain

    def agent_url(self, agent_id: str, command: str | None = None) -> str:
        url = f"{self._api_url}/{self._chain}/{agent_id}"
        return f"{url}/{command}" if command else url

    async def list_agents(self) -> list[AgentInfo]:
        """Agents advertised by the resources endpoint"""
        url = f"{self._api_url}/{self._chain}/resources"
        try:
            response = await self._http_client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to list agents from {url}: {e}") from e
        if not response.is_success:
            raise TransportError(
                f"Failed to list agents: HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                "Agent listing is not JSON", status_code=response.status_code, body=response.text
            ) from e
        options = (data.get("accepts") or []) if isinstance(data, dict) else []
        return [_agent_from_option(option) for option in options if isinstance(option, dict)]

    async def interact(
        self,
        agent_id: str,
        message: str,
        command: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> InteractionResult:
        """Call an agent, paying for it if the gateway asks.

        With *command* and non-empty *params* the command-specific endpoint is
        used and the paid retry is pinned to it.
        """
        use_command_endpoint = bool(command and params)
        url = self.agent_url(agent_id, command if use_command_endpoint else None)
        body = build_request_body(message, command, params)
        logger.debug(f"Agent request to {url}: {body}")

        try:
            result = await self._x402.send(url, body, follow_resource=not use_command_endpoint)
        except TransportError as e:
            if e.status_code == 404:
                raise TransportError(
                    f"Agent '{agent_id}' not found at {url}: {e}",
                    status_code=404,
                    body=e.body,
                ) from e
            raise

        if result.agent_id is None:
            result.agent_id = agent_id
        return result

    async def check_status(self, status_url: str) -> JobStatus:
        return await self._poller.check_status(status_url)

    async def poll_status(
        self,
        status: JobHandle | str,
        max_attempts: int = JobPoller.DEFAULT_MAX_ATTEMPTS,
        interval: float | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> JobStatus:
        return await self._poller.poll(status, max_attempts, interval, on_progress)

    async def close(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "AgentsApiClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
