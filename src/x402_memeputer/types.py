"""
Type definitions for the x402 pay-per-call client
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field

from x402_memeputer.config import ChainFamily
from x402_memeputer.encoding import encode_payment_payload

X402_VERSION = 1
PAYMENT_HEADER = "X-PAYMENT"


class PaymentState(str, Enum):
    """Protocol client states for a single ``send``"""

    UNPAID = "unpaid"
    QUOTE_RECEIVED = "quote_received"
    PROOF_ATTACHED = "proof_attached"
    SETTLED = "settled"
    FAILED = "failed"


class AmountFormat(str, Enum):
    """How a raw quoted amount was interpreted"""

    ABSENT = "absent"
    DECIMAL_STRING = "decimal_string"
    ATOMIC_STRING = "atomic_string"
    DECIMAL_NUMBER = "decimal_number"
    ATOMIC_NUMBER = "atomic_number"
    INVALID = "invalid"


class NormalizedAmount(BaseModel):
    """Quoted amount in atomic units (1 USDC = 10^6)"""

    atomic: int
    decimal: Decimal
    format: AmountFormat

    class Config:
        frozen = True


# ---------------------------------------------------------------------------
# 402 wire format
# ---------------------------------------------------------------------------


class PaymentRequirementsExtra(BaseModel):
    """Extra information in payment requirements"""

    fee_payer: Optional[str] = Field(
        None, validation_alias=AliasChoices("feePayer", "fee_payer")
    )
    name: Optional[str] = None
    version: Optional[str] = None
    pricing: Optional[dict[str, Any]] = None

    class Config:
        populate_by_name = True
        extra = "allow"


class PaymentRequirements(BaseModel):
    """One priced option from a 402 response"""

    scheme: str = "exact"
    network: Optional[str] = Field(None, validation_alias=AliasChoices("network", "chain"))
    max_amount_required: Any = Field(
        None,
        validation_alias=AliasChoices(
            "maxAmountRequired", "atomicAmountRequired", "amount", "max_amount_required"
        ),
    )
    pay_to: Optional[str] = Field(
        None, validation_alias=AliasChoices("payTo", "recipient", "pay_to")
    )
    resource: Any = None
    description: Optional[str] = None
    asset: Optional[str] = None
    max_timeout_seconds: Optional[int] = Field(
        None, validation_alias=AliasChoices("maxTimeoutSeconds", "max_timeout_seconds")
    )
    sponsor: Optional[str] = Field(None, validation_alias=AliasChoices("sponsor", "feePayer"))
    extra: Optional[PaymentRequirementsExtra] = None

    class Config:
        populate_by_name = True
        extra = "allow"


class PaymentRequired(BaseModel):
    """Payment required response (402)"""

    x402_version: Optional[int] = Field(
        None, validation_alias=AliasChoices("x402Version", "x402_version")
    )
    error: Optional[str] = None
    accepts: list[PaymentRequirements] = Field(
        default_factory=list, validation_alias=AliasChoices("accepts", "priceOptions")
    )

    class Config:
        populate_by_name = True
        extra = "allow"


# ---------------------------------------------------------------------------
# Client-side values
# ---------------------------------------------------------------------------


class Quote(BaseModel):
    """Priced option accepted for one ``send``"""

    network: Optional[str]
    network_name: str
    chain_family: ChainFamily
    recipient: str
    amount: NormalizedAmount
    max_amount_required: Any = None
    scheme: str = "exact"
    fee_payer: Optional[str] = None
    resource: Optional[str] = None
    asset: Optional[str] = None
    max_timeout_seconds: Optional[int] = None

    class Config:
        frozen = True

    @property
    def atomic_amount(self) -> int:
        return self.amount.atomic


class QuoteSummary(BaseModel):
    """What the server asked for, as reported back to the caller"""

    amount_quoted_usdc: float = Field(alias="amountQuotedUsdc")
    amount_quoted_micro_usdc: int = Field(alias="amountQuotedMicroUsdc")
    max_amount_required: Any = Field(None, alias="maxAmountRequired")

    class Config:
        populate_by_name = True


class PaymentProof(BaseModel):
    """Signed, chain-specific payment attached to the paid retry"""

    x402_version: int = Field(X402_VERSION, alias="x402Version")
    scheme: str
    network: str
    payload: dict[str, Any]
    settlement_reference: Optional[str] = Field(None, exclude=True)
    payer: Optional[str] = Field(None, exclude=True)

    class Config:
        populate_by_name = True

    def envelope(self) -> dict[str, Any]:
        """JSON envelope carried (base64-encoded) in the X-PAYMENT header"""
        return {
            "x402Version": self.x402_version,
            "scheme": self.scheme,
            "network": self.network,
            "payload": self.payload,
        }

    @property
    def header(self) -> str:
        return encode_payment_payload(self.envelope())


class ReceiptSource(str, Enum):
    SERVER = "server"
    RECONSTRUCTED = "reconstructed"


class AmountSource(str, Enum):
    SERVER = "server"
    QUOTE = "quote"


class Receipt(BaseModel):
    """Settlement receipt for a paid call"""

    amount_paid_atomic: int = Field(alias="amountPaidMicroUsdc")
    amount_paid_usdc: float = Field(alias="amountPaidUsdc")
    pay_to: Optional[str] = Field(None, alias="payTo")
    payer: Optional[str] = None
    merchant: Optional[str] = None
    transaction_signature: Optional[str] = Field(None, alias="transactionSignature")
    timestamp: Optional[str] = None
    source: ReceiptSource = ReceiptSource.SERVER
    amount_source: AmountSource = Field(AmountSource.SERVER, alias="amountSource")

    class Config:
        populate_by_name = True


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


class JobHandle(BaseModel):
    """Status resource for an asynchronously accepted call"""

    status_url: str = Field(alias="statusUrl")
    poll_interval_seconds: Optional[float] = Field(None, alias="pollIntervalSeconds")
    eta_seconds: Optional[float] = Field(None, alias="etaSeconds")

    class Config:
        populate_by_name = True


class JobState(str, Enum):
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class JobStatus(BaseModel):
    """One observation of a job's status resource"""

    state: JobState
    raw_status: Optional[str] = Field(None, alias="status")
    message: Optional[str] = None
    result: Any = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    media_url: Optional[str] = Field(None, alias="mediaUrl")
    error: Optional[str] = None
    code: Optional[str] = None
    data: Optional[dict[str, Any]] = None

    class Config:
        populate_by_name = True

    @property
    def is_terminal(self) -> bool:
        return self.state != JobState.PROCESSING


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class InteractionResult(BaseModel):
    """Normalized outcome of a (possibly paid) call"""

    success: bool
    response: Any = None
    format: Optional[str] = None
    media_url: Optional[str] = Field(None, alias="mediaUrl")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    status_url: Optional[str] = Field(None, alias="statusUrl")
    eta_seconds: Optional[float] = Field(None, alias="etaSeconds")
    transaction_signature: Optional[str] = Field(None, alias="transactionSignature")
    agent_id: Optional[str] = Field(None, alias="agentId")
    error: Optional[str] = None
    receipt: Optional[Receipt] = Field(None, alias="x402Receipt")
    quote: Optional[QuoteSummary] = Field(None, alias="x402Quote")
    job: Optional[JobHandle] = None
    status_code: Optional[int] = Field(None, alias="statusCode")
    state: PaymentState = PaymentState.SETTLED

    class Config:
        populate_by_name = True


class AgentInfo(BaseModel):
    """Agent listed by the resources endpoint"""

    id: str
    name: str
    description: str = ""
    price: float = 0.0
    category: str = "general"
    example_prompts: list[str] = Field(default_factory=list, alias="examplePrompts")
    pay_to: Optional[str] = Field(None, alias="payTo")

    class Config:
        populate_by_name = True
