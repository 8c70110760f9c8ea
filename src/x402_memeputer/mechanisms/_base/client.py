"""
Client mechanism base interface
"""

from abc import ABC, abstractmethod

from x402_memeputer.config import ChainFamily
from x402_memeputer.signers.client.base import ClientSigner
from x402_memeputer.types import PaymentProof, Quote


class ClientMechanism(ABC):
    """
    Abstract base class for client payment mechanisms.

    Responsible for creating payment proofs for a specific chain family/scheme.
    """

    chain_family: ChainFamily

    @abstractmethod
    def scheme(self) -> str:
        """Get the payment scheme name"""
        pass

    @abstractmethod
    def get_signer(self) -> ClientSigner:
        """Return the signer used by this mechanism"""
        pass

    @abstractmethod
    async def create_payment_payload(self, quote: Quote) -> PaymentProof:
        """
        Create a payment proof for the given quote.

        Args:
            quote: Priced option from the server's 402 response

        Returns:
            PaymentProof carrying the chain-specific signed payload
        """
        pass
