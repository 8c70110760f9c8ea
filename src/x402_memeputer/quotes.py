"""
Quote parsing for 402 Payment Required responses
"""

import logging
from typing import Any
from urllib.parse import urljoin

from pydantic import ValidationError as PydanticValidationError

from x402_memeputer.amounts import normalize_amount
from x402_memeputer.config import NetworkConfig
from x402_memeputer.exceptions import QuoteError
from x402_memeputer.types import PaymentRequired, PaymentRequirements, Quote, QuoteSummary

logger = logging.getLogger(__name__)

_DUPLICATE_PREFIX = "/x402/x402/"


def parse_payment_required(body: Any) -> PaymentRequired:
    """Parse a 402 response body.

    Raises:
        QuoteError: If the body is not a JSON object with a list of priced options
    """
    if not isinstance(body, dict):
        raise QuoteError(f"402 response body is not a JSON object: {body!r}")
    try:
        return PaymentRequired.model_validate(body)
    except PydanticValidationError as e:
        raise QuoteError(f"Malformed 402 response: {e}") from e


def _resource_url(requirements: PaymentRequirements) -> str | None:
    resource = requirements.resource
    # x402 v2 servers send {"url": ...}
    if isinstance(resource, dict):
        resource = resource.get("url")
    if isinstance(resource, str) and resource.strip():
        return resource.strip()
    return None


def select_quote(payment_required: PaymentRequired) -> Quote:
    """Turn the first priced option into a Quote.

    The network always comes from the option itself; a missing network means
    the protocol default (Solana mainnet).

    Raises:
        QuoteError: If there is no option or the option names no recipient
        UnsupportedNetworkError: If the option's network is unknown
    """
    if not payment_required.accepts:
        raise QuoteError("No priced options in 402 response")

    requirements = payment_required.accepts[0]
    if not requirements.pay_to:
        raise QuoteError("No recipient (payTo) in 402 response")

    network_name = NetworkConfig.normalize_network(requirements.network)
    fee_payer = requirements.extra.fee_payer if requirements.extra else None

    quote = Quote(
        network=requirements.network,
        network_name=network_name,
        chain_family=NetworkConfig.get_chain_family(network_name),
        recipient=requirements.pay_to,
        amount=normalize_amount(requirements.max_amount_required),
        max_amount_required=requirements.max_amount_required,
        scheme=requirements.scheme or "exact",
        fee_payer=fee_payer or requirements.sponsor,
        resource=_resource_url(requirements),
        asset=requirements.asset,
        max_timeout_seconds=requirements.max_timeout_seconds,
    )
    logger.info(
        f"Quote received: {quote.amount.atomic} atomic ({quote.amount.decimal} USDC) "
        f"to {quote.recipient} on {quote.network_name} ({quote.amount.format.value})"
    )
    return quote


def parse_quote(body: Any) -> Quote:
    """Parse a 402 body and select its first priced option"""
    return select_quote(parse_payment_required(body))


def summarize_quote(quote: Quote) -> QuoteSummary:
    """Quote details reported back on a result"""
    return QuoteSummary(
        amount_quoted_usdc=float(quote.amount.decimal),
        amount_quoted_micro_usdc=quote.amount.atomic,
        max_amount_required=(
            quote.max_amount_required
            if quote.max_amount_required is not None
            else float(quote.amount.decimal)
        ),
    )


def resolve_resource_url(resource: str | None, request_url: str) -> str:
    """URL the paid retry goes to.

    Absolute resources are used as given, relative ones are joined to the
    origin of the original request. A duplicated ``/x402/x402/`` segment is
    collapsed. Without a resource the original request URL is reused.
    """
    if not resource:
        return request_url

    if resource.startswith(("http://", "https://")):
        url = resource
    else:
        path = resource if resource.startswith("/") else "/" + resource
        url = urljoin(request_url, path)

    while _DUPLICATE_PREFIX in url:
        url = url.replace(_DUPLICATE_PREFIX, "/x402/")
    return url
