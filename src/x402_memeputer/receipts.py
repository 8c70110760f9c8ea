"""
Receipt parsing for settled calls.

Servers are inconsistent about receipts: some send none, some omit the amount,
and field names vary. A receipt is always produced for a paid call; how much
of it came from the server is recorded on ``Receipt.source`` and
``Receipt.amount_source``.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from x402_memeputer.amounts import normalize_amount, to_atomic, to_decimal
from x402_memeputer.config import ChainFamily
from x402_memeputer.exceptions import SettlementError
from x402_memeputer.types import (
    AmountFormat,
    AmountSource,
    PaymentProof,
    Quote,
    Receipt,
    ReceiptSource,
)

logger = logging.getLogger(__name__)

RECEIPT_KEYS = ("x402Receipt", "receipt")
ATOMIC_AMOUNT_KEYS = ("amountPaidMicroUsdc", "amountPaidAtomic", "amountPaid")
DECIMAL_AMOUNT_KEYS = ("amountPaidUsdc",)
RECIPIENT_KEYS = ("merchant", "payTo", "recipient")
REFERENCE_KEYS = ("transactionSignature", "transaction", "txHash")

_EVM_TX_HASH = re.compile(r"^0x[0-9a-fA-F]{64}$")


def _first(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def find_server_receipt(body: Any) -> dict[str, Any] | None:
    """Receipt object embedded in a success body, if any"""
    if not isinstance(body, dict):
        return None
    for key in RECEIPT_KEYS:
        receipt = body.get(key)
        if isinstance(receipt, dict):
            return receipt
    return None


def _server_amount(data: dict[str, Any]) -> int | None:
    raw = _first(data, ATOMIC_AMOUNT_KEYS)
    if raw is not None:
        amount = normalize_amount(raw)
        if amount.format != AmountFormat.INVALID:
            return amount.atomic
    usdc = _first(data, DECIMAL_AMOUNT_KEYS)
    if usdc is not None:
        try:
            return to_atomic(usdc)
        except ArithmeticError:
            logger.warning(f"Ignoring unparsable receipt amount {usdc!r}")
    return None


def parse_receipt(
    body: Any,
    quote: Quote | None,
    proof: PaymentProof | None,
    payer: str | None = None,
) -> Receipt | None:
    """Build the receipt for a call.

    Args:
        body: Decoded success body
        quote: Quote that was paid, or None for an unpaid call
        proof: Proof that was attached, or None for an unpaid call
        payer: Paying address (defaults to the proof's payer)

    Returns:
        Receipt, or None when the call was not paid and the server sent no receipt

    Raises:
        SettlementError: The server receipt has no amount and there is no quote
    """
    payer = payer or (proof.payer if proof else None)
    reference = proof.settlement_reference if proof else None
    server = find_server_receipt(body)

    if server is None:
        if proof is None or quote is None:
            return None
        logger.warning(
            "Server sent no receipt; reconstructing from quote "
            f"({quote.atomic_amount} atomic to {quote.recipient})"
        )
        return Receipt(
            amount_paid_atomic=quote.atomic_amount,
            amount_paid_usdc=float(quote.amount.decimal),
            pay_to=quote.recipient,
            payer=payer,
            merchant=quote.recipient,
            transaction_signature=reference,
            timestamp=_now(),
            source=ReceiptSource.RECONSTRUCTED,
            amount_source=AmountSource.QUOTE,
        )

    atomic = _server_amount(server)
    amount_source = AmountSource.SERVER
    if atomic is None:
        if quote is None:
            raise SettlementError("Server receipt carries no amount and no quote is available")
        logger.warning(
            f"Server receipt carries no amount; using quoted {quote.atomic_amount} atomic"
        )
        atomic = quote.atomic_amount
        amount_source = AmountSource.QUOTE

    recipient = _first(server, RECIPIENT_KEYS) or (quote.recipient if quote else None)
    tx_reference = _first(server, REFERENCE_KEYS)
    if (
        quote is not None
        and quote.chain_family == ChainFamily.EVM
        and reference
        and not (isinstance(tx_reference, str) and _EVM_TX_HASH.match(tx_reference))
    ):
        tx_reference = reference

    return Receipt(
        amount_paid_atomic=atomic,
        amount_paid_usdc=float(to_decimal(atomic)),
        pay_to=server.get("payTo") or recipient,
        payer=server.get("payer") or payer,
        merchant=server.get("merchant") or recipient,
        transaction_signature=str(tx_reference) if tx_reference else reference,
        timestamp=str(server.get("timestamp") or _now()),
        source=ReceiptSource.SERVER,
        amount_source=amount_source,
    )
