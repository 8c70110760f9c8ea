"""
Clients - the paying HTTP client and its collaborators
"""

from x402_memeputer.clients.balances import get_usdc_balance, get_usdc_balance_atomic
from x402_memeputer.clients.job_poller import JobPoller, classify_status
from x402_memeputer.clients.proof_factory import PaymentProofFactory
from x402_memeputer.clients.x402_http_client import X402HttpClient

__all__ = [
    "JobPoller",
    "PaymentProofFactory",
    "X402HttpClient",
    "classify_status",
    "get_usdc_balance",
    "get_usdc_balance_atomic",
]
