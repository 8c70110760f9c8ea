"""
ClientSigner - common interface of the client-side signers
"""

from abc import ABC, abstractmethod

from x402_memeputer.config import ChainFamily


class ClientSigner(ABC):
    """Signs payment proofs for one chain family"""

    chain_family: ChainFamily

    @abstractmethod
    def get_address(self) -> str:
        """Address the payment is made from"""
        pass
