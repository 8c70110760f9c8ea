"""
X402HttpClient - HTTP client adapter with automatic 402 payment handling
"""

import logging
from typing import Any

import httpx

from x402_memeputer.clients.proof_factory import PaymentProofFactory
from x402_memeputer.encoding import decode_payment_payload
from x402_memeputer.exceptions import PaymentRejectedError, QuoteError, TransportError
from x402_memeputer.quotes import (
    parse_payment_required,
    resolve_resource_url,
    select_quote,
    summarize_quote,
)
from x402_memeputer.receipts import parse_receipt
from x402_memeputer.types import (
    PAYMENT_HEADER,
    InteractionResult,
    JobHandle,
    PaymentProof,
    PaymentRequired,
    PaymentState,
    Quote,
)
from x402_memeputer.wallets.resolver import WalletResolver

logger = logging.getLogger(__name__)

PAYMENT_REQUIRED_HEADER = "PAYMENT-REQUIRED"
DEFAULT_USER_AGENT = "x402-memeputer-python"

STATUS_URL_KEYS = ("statusUrl", "status_url", "statusHandle")


def _pick(body: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = body.get(key)
        if value is not None and value != "":
            return value
    return None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(body, dict):
        return str(_pick(body, "error", "message") or body)
    return str(body)


class X402HttpClient:
    """
    HTTP client adapter with automatic 402 payment handling.

    Wraps httpx.AsyncClient: an unpaid request that is answered with
    402 Payment Required is retried exactly once, carrying a payment proof
    built from the server's quote.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        wallet_resolver: WalletResolver,
        proof_factory: PaymentProofFactory | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """
        Initialize HTTP client adapter.

        Args:
            http_client: httpx.AsyncClient instance
            wallet_resolver: Resolves the signing identity for the quote's chain family
            proof_factory: Builds payment proofs (optional)
            user_agent: User-Agent header sent with every request
        """
        self._http_client = http_client
        self._wallet_resolver = wallet_resolver
        self._proof_factory = proof_factory or PaymentProofFactory()
        self._user_agent = user_agent

    async def send(
        self,
        url: str,
        payload: Any = None,
        *,
        follow_resource: bool = True,
        headers: dict[str, str] | None = None,
    ) -> InteractionResult:
        """
        POST *payload* to *url*, paying if the server asks for it.

        Args:
            url: Request URL
            payload: JSON body; the same object is sent on the paid retry
            follow_resource: Retry against the quote's resource URL (True) or
                pin the retry to *url* (False)
            headers: Extra request headers

        Returns:
            InteractionResult, carrying a job handle when the call was accepted
            asynchronously

        Flow:
            1. Send unpaid request
            2. If 402, parse the quote and resolve the wallet for its chain
            3. Build one payment proof
            4. Retry with X-PAYMENT header, parse receipt
        """
        body = {} if payload is None else payload
        state = PaymentState.UNPAID
        quote: Quote | None = None
        proof: PaymentProof | None = None

        logger.info(f"Making POST request to {url}")
        response = await self._post(url, body, headers)
        logger.info(f"Received response: status={response.status_code}")

        if response.status_code == 402:
            state = PaymentState.QUOTE_RECEIVED
            logger.info("Received 402 Payment Required, processing payment...")
            logger.debug(f"Response body: {response.text[:500]}")

            quote = select_quote(self._parse_payment_required(response))
            identity = self._wallet_resolver.resolve(quote.chain_family)
            proof = await self._proof_factory.build_for_quote(quote, identity)
            state = PaymentState.PROOF_ATTACHED

            retry_url = resolve_resource_url(quote.resource, url) if follow_resource else url
            response = await self._retry_with_payment(retry_url, body, proof, headers)

            if response.status_code == 402:
                raise PaymentRejectedError(
                    f"Payment rejected: {_error_message(response)}",
                    status_code=402,
                    body=response.text,
                )
            if not response.is_success:
                raise TransportError(
                    f"Paid request failed with HTTP {response.status_code}: "
                    f"{_error_message(response)}",
                    status_code=response.status_code,
                    body=response.text,
                )
        elif not response.is_success:
            raise TransportError(
                f"Request failed with HTTP {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
                body=response.text,
            )

        result = self._to_result(response, quote, proof)
        state = PaymentState.SETTLED if result.success else PaymentState.FAILED
        result.state = state
        logger.info(f"Request settled: state={state.value}, job={result.job is not None}")
        return result

    def _parse_payment_required(self, response: httpx.Response) -> PaymentRequired:
        """Parse PaymentRequired from 402 response (header first, then body)"""
        header_value = response.headers.get(PAYMENT_REQUIRED_HEADER)
        if header_value:
            logger.debug(f"Found {PAYMENT_REQUIRED_HEADER} header, attempting to decode")
            try:
                return parse_payment_required(decode_payment_payload(header_value))
            except (ValueError, QuoteError) as e:
                logger.warning(f"Failed to decode PaymentRequired from header: {e}")

        try:
            body = response.json()
        except ValueError as e:
            raise QuoteError(f"402 response body is not JSON: {response.text[:200]!r}") from e
        return parse_payment_required(body)

    async def _post(
        self,
        url: str,
        body: Any,
        headers: dict[str, str] | None,
        extra_headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        request_headers = {"User-Agent": self._user_agent, **(headers or {}), **(extra_headers or {})}
        try:
            return await self._http_client.post(url, json=body, headers=request_headers)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

    async def _retry_with_payment(
        self,
        url: str,
        body: Any,
        proof: PaymentProof,
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        """Retry request with payment proof"""
        logger.info(f"Retrying request with payment to {url}")
        encoded = proof.header
        logger.debug(f"Encoded payment header length: {len(encoded)} chars")

        response = await self._post(url, body, headers, {PAYMENT_HEADER: encoded})
        logger.info(f"Payment retry response: status={response.status_code}")

        if response.status_code >= 400:
            logger.error(f"Payment retry failed with body: {response.text[:500]}")
        return response

    def _to_result(
        self,
        response: httpx.Response,
        quote: Quote | None,
        proof: PaymentProof | None,
    ) -> InteractionResult:
        """Normalize a success response"""
        if not response.content or not response.content.strip():
            raise TransportError(
                f"Empty response body (HTTP {response.status_code}) from {response.request.url}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        summary = summarize_quote(quote) if quote is not None else None

        if not isinstance(data, dict):
            # Plain text, or JSON that is not an object
            receipt = parse_receipt(None, quote, proof) if proof else None
            return InteractionResult(
                success=True,
                response=response.text if data is None else data,
                format="text" if data is None else "json",
                transaction_signature=proof.settlement_reference if proof else None,
                receipt=receipt,
                quote=summary,
                status_code=response.status_code,
            )

        receipt = parse_receipt(data, quote, proof) if proof else None

        status_url = _pick(data, *STATUS_URL_KEYS)
        eta = _pick(data, "etaSeconds", "eta_seconds")
        if response.status_code == 202 and not status_url:
            status_url = response.headers.get("Location")
            if status_url:
                status_url = str(response.request.url.join(status_url))
            else:
                logger.warning("Request accepted asynchronously without a status URL")

        job = None
        if status_url:
            job = JobHandle(
                status_url=status_url,
                poll_interval_seconds=_pick(data, "pollIntervalSeconds", "poll_interval_seconds"),
                eta_seconds=eta,
            )
            logger.info(f"Request accepted asynchronously, status at {status_url}")

        error = data.get("error")
        return InteractionResult(
            success=data.get("success") is not False,
            response=data["response"] if "response" in data else data.get("message", ""),
            format=data.get("format") or "text",
            media_url=_pick(data, "mediaUrl", "media_url"),
            image_url=_pick(data, "imageUrl", "image_url"),
            status_url=status_url,
            eta_seconds=eta,
            transaction_signature=(
                data.get("transactionSignature")
                or (receipt.transaction_signature if receipt else None)
                or (proof.settlement_reference if proof else None)
            ),
            agent_id=data.get("agentId"),
            error=error if error is None or isinstance(error, str) else str(error),
            receipt=receipt,
            quote=summary,
            job=job,
            status_code=response.status_code,
        )
